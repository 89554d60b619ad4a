import pathlib

import mido
import pytest

import gitrewind.composer
import gitrewind.midi_export
import gitrewind.parameters


@pytest.fixture
def composition (make_model) -> gitrewind.composer.Composition:

	return gitrewind.composer.compose(gitrewind.parameters.compute_parameters(make_model()))


def _tiny (bpm: int = 120, **note_overrides) -> gitrewind.composer.Composition:

	fields = dict(time=0.5, note="C4", duration=0.25, velocity=0.5, instrument="piano")
	fields.update(note_overrides)

	note = gitrewind.composer.ScheduledNote(**fields)
	section = gitrewind.composer.MusicSection(name="intro", start_time=0.0, duration=2.0, notes=(note,))

	return gitrewind.composer.Composition(sections=(section,), total_duration=2.0, bpm=bpm)


def test_midi_velocity () -> None:

	"""Velocities map to 1-127 and never hit zero."""

	assert gitrewind.midi_export.midi_velocity(0.0) == 1
	assert gitrewind.midi_export.midi_velocity(1.0) == 127
	assert gitrewind.midi_export.midi_velocity(0.5) == 64
	assert gitrewind.midi_export.midi_velocity(3.0) == 127


def test_instrument_channel () -> None:

	"""Channels follow the instrument list; unknown tags use the synth channel."""

	assert gitrewind.midi_export.instrument_channel("synth") == 0
	assert gitrewind.midi_export.instrument_channel("piano") == 1
	assert gitrewind.midi_export.instrument_channel("guitar") == 7
	assert gitrewind.midi_export.instrument_channel("theremin") == 0


def test_tempo_track () -> None:

	"""Track 0 carries the composition's tempo and a 4/4 time signature."""

	mid = gitrewind.midi_export.composition_to_midi(_tiny(bpm=120))
	tempo_track = mid.tracks[0]

	assert mid.type == 1
	assert mid.ticks_per_beat == 480
	assert tempo_track[0].type == "set_tempo"
	assert tempo_track[0].tempo == mido.bpm2tempo(120)
	assert tempo_track[1].type == "time_signature"


def test_single_note_timing () -> None:

	"""At 120 BPM and 480 ticks per beat, one second is 960 ticks."""

	mid = gitrewind.midi_export.composition_to_midi(_tiny(bpm=120))
	track = mid.tracks[1]

	assert track[0].type == "track_name" and track[0].name == "piano"
	assert track[1].type == "program_change" and track[1].program == 0 and track[1].channel == 1

	note_on, note_off = track[2], track[3]

	assert note_on.type == "note_on"
	assert note_on.note == 60
	assert note_on.velocity == 64
	assert note_on.time == 480
	assert note_off.type == "note_off"
	assert note_off.time == 240


def test_custom_resolution () -> None:

	"""ticks_per_beat scales the delta times."""

	mid = gitrewind.midi_export.composition_to_midi(_tiny(bpm=120), ticks_per_beat=96)

	assert mid.ticks_per_beat == 96
	assert mid.tracks[1][2].time == 96


def test_out_of_range_note_skipped () -> None:

	"""Notes outside 0-127 are dropped rather than failing the export."""

	mid = gitrewind.midi_export.composition_to_midi(_tiny(note="C10"))

	assert len(mid.tracks) == 1


def test_every_note_exported (composition) -> None:

	"""One note_on per scheduled note, each matched by a note_off."""

	mid = gitrewind.midi_export.composition_to_midi(composition)
	messages = [msg for track in mid.tracks[1:] for msg in track]

	note_ons = sum(1 for msg in messages if msg.type == "note_on")
	note_offs = sum(1 for msg in messages if msg.type == "note_off")

	assert note_ons == note_offs == len(composition.notes())


def test_one_track_per_instrument (composition) -> None:

	"""Instrument tracks are named and ordered by channel."""

	mid = gitrewind.midi_export.composition_to_midi(composition)
	names = [track[0].name for track in mid.tracks[1:]]
	used = {note.instrument for note in composition.notes()}

	assert set(names) == used
	assert names == sorted(names, key=gitrewind.midi_export.instrument_channel)


def test_delta_times_non_negative (composition) -> None:

	"""Events within each track are in time order."""

	mid = gitrewind.midi_export.composition_to_midi(composition)

	for track in mid.tracks:
		assert all(msg.time >= 0 for msg in track)


def test_save_midi (composition, tmp_path: pathlib.Path) -> None:

	"""The saved file reads back with the same tracks."""

	path = tmp_path / "rewind.mid"

	gitrewind.midi_export.save_midi(composition, str(path))

	loaded = mido.MidiFile(str(path))

	assert len(loaded.tracks) == len(gitrewind.midi_export.composition_to_midi(composition).tracks)
	assert loaded.length == pytest.approx(90.0, abs=1.0)
