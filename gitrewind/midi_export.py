"""Render a composition to a Standard MIDI File.

Each instrument tag gets its own track and channel with a General MIDI
program, so the file opens in any DAW or GM synth as a rough preview of the
arrangement.  Times are converted from seconds to ticks at the
composition's tempo.
"""

import logging
import typing

import mido

import gitrewind.composer
import gitrewind.math_utils
import gitrewind.parameters
import gitrewind.theory


logger = logging.getLogger(__name__)


DEFAULT_TICKS_PER_BEAT = 480

# General MIDI program numbers (0-based).
INSTRUMENT_PROGRAMS: typing.Dict[str, int] = {
	"synth": 81,          # Lead 2 (sawtooth)
	"piano": 0,           # Acoustic Grand Piano
	"electricPiano": 4,   # Electric Piano 1
	"pad": 89,            # Pad 2 (warm)
	"bass": 33,           # Electric Bass (finger)
	"strings": 48,        # String Ensemble 1
	"bells": 9,           # Glockenspiel
	"guitar": 24,         # Acoustic Guitar (nylon)
}


def instrument_channel (instrument: str) -> int:

	"""One channel per known instrument; unknown tags share the synth channel."""

	instruments = gitrewind.parameters.INSTRUMENTS

	if instrument not in instruments:
		instrument = "synth"

	return instruments.index(instrument)


def midi_velocity (velocity: float) -> int:

	"""Map 0.0–1.0 to 1–127 (0 would read as a note-off)."""

	return int(gitrewind.math_utils.clamp(gitrewind.math_utils.round_half_up(velocity * 127), 1, 127))


def composition_to_midi (
	composition: gitrewind.composer.Composition,
	ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT
) -> mido.MidiFile:

	"""
	Build a type 1 :class:`mido.MidiFile` from a composition.

	Track 0 carries the tempo; every instrument used gets a following track,
	ordered as in :data:`gitrewind.parameters.INSTRUMENTS`.
	"""

	ticks_per_second = composition.bpm / 60.0 * ticks_per_beat

	def to_ticks (seconds: float) -> int:
		return max(0, gitrewind.math_utils.round_half_up(seconds * ticks_per_second))

	# (tick, order, message): note-offs sort before note-ons at the same tick.
	events: typing.Dict[str, typing.List[typing.Tuple[int, int, mido.Message]]] = {}

	for note in composition.notes():

		channel = instrument_channel(note.instrument)
		pitch = gitrewind.theory.note_name_to_midi(note.note)

		if not 0 <= pitch <= 127:
			logger.warning(f"Skipping out-of-range note {note.note} at {note.time:.2f}s")
			continue

		start = to_ticks(note.time)
		end = max(start + 1, to_ticks(note.time + note.duration))

		track_events = events.setdefault(note.instrument, [])
		track_events.append((start, 1, mido.Message("note_on", channel=channel, note=pitch, velocity=midi_velocity(note.velocity))))
		track_events.append((end, 0, mido.Message("note_off", channel=channel, note=pitch, velocity=0)))

	mid = mido.MidiFile(type=1)
	mid.ticks_per_beat = ticks_per_beat

	tempo_track = mido.MidiTrack()
	tempo_track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(composition.bpm), time=0))
	tempo_track.append(mido.MetaMessage("time_signature", numerator=4, denominator=4, time=0))
	tempo_track.append(mido.MetaMessage("end_of_track", time=to_ticks(composition.total_duration)))
	mid.tracks.append(tempo_track)

	ordered = sorted(events, key=lambda name: instrument_channel(name))

	for instrument in ordered:

		track = mido.MidiTrack()
		channel = instrument_channel(instrument)
		program = INSTRUMENT_PROGRAMS.get(instrument, INSTRUMENT_PROGRAMS["synth"])

		track.append(mido.MetaMessage("track_name", name=instrument, time=0))
		track.append(mido.Message("program_change", channel=channel, program=program, time=0))

		last_tick = 0

		for tick, _, message in sorted(events[instrument], key=lambda event: (event[0], event[1])):
			track.append(message.copy(time=tick - last_tick))
			last_tick = tick

		mid.tracks.append(track)

	return mid


def save_midi (
	composition: gitrewind.composer.Composition,
	filename: str,
	ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT
) -> None:

	"""Write a composition to ``filename`` as a Standard MIDI File."""

	mid = composition_to_midi(composition, ticks_per_beat=ticks_per_beat)

	logger.info(f"Saving MIDI ({sum(len(s.notes) for s in composition.sections)} notes) to {filename}...")

	mid.save(filename)

	logger.info(f"Saved {filename}")
