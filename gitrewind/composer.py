"""Section-based composition.

:func:`compose` turns a :class:`~gitrewind.parameters.UnifiedParameters`
record into a :class:`Composition`: five contiguous sections (intro, verse,
chorus, bridge, outro) lasting 90 seconds in total, each holding
:class:`ScheduledNote` events with absolute times in seconds.

Section lengths are fixed; only note density and velocity depend on the
parameters.  The verse walks the year month by month, so busy months are
audibly busier.

All sections draw from one :class:`~gitrewind.seeded_random.SeededRandom`
seeded with ``params.seed``, in section order, so a parameter record always
yields the same composition.
"""

import dataclasses
import logging
import math
import random
import typing

import gitrewind.parameters
import gitrewind.seeded_random
import gitrewind.theory


logger = logging.getLogger(__name__)


SECTION_DURATIONS: typing.Dict[str, float] = {
	"intro": 15.0,
	"verse": 30.0,
	"chorus": 20.0,
	"bridge": 15.0,
	"outro": 10.0,
}

MELODY_OCTAVE = 4
BASS_OCTAVE = 2
PAD_OCTAVE = 3

BRIDGE_PATTERN: typing.List[int] = [0, 2, 4, 2]


@dataclasses.dataclass(frozen=True)
class ScheduledNote:

	"""
	A single note event.

	Attributes:
		time: Seconds from the start of the composition.
		note: Scientific pitch name, e.g. ``"C4"``.
		duration: Seconds.
		velocity: 0.0–1.0.
		instrument: Instrument tag (see :data:`gitrewind.parameters.INSTRUMENTS`).
	"""

	time: float
	note: str
	duration: float
	velocity: float
	instrument: str


@dataclasses.dataclass(frozen=True)
class MusicSection:

	name: str
	start_time: float
	duration: float
	notes: typing.Tuple[ScheduledNote, ...]

	@property
	def end_time (self) -> float:

		return self.start_time + self.duration


@dataclasses.dataclass(frozen=True)
class Composition:

	sections: typing.Tuple[MusicSection, ...]
	total_duration: float
	bpm: float


	def notes (self) -> typing.List[ScheduledNote]:

		"""Every note across all sections, ordered by time (stable within equal times)."""

		return sorted(
			(note for section in self.sections for note in section.notes),
			key=lambda note: note.time,
		)


	def section (self, name: str) -> MusicSection:

		"""Return the section called ``name``."""

		for section in self.sections:
			if section.name == name:
				return section

		raise ValueError(f"Unknown section: {name}")


class _SectionContext:

	"""Inputs shared by every section builder."""

	def __init__ (
		self,
		params: gitrewind.parameters.UnifiedParameters,
		rng: random.Random,
	) -> None:

		key = params.music.key

		self.params = params
		self.rng = rng
		self.beat = 60.0 / params.tempo.bpm
		self.scale = gitrewind.theory.scale_notes(key.root, key.mode, MELODY_OCTAVE)
		self.bass_scale = gitrewind.theory.scale_notes(key.root, key.mode, BASS_OCTAVE)
		self.lead = params.music.lead_instrument


def _note (time: float, midi: int, duration: float, velocity: float, instrument: str) -> ScheduledNote:

	return ScheduledNote(
		time=time,
		note=gitrewind.theory.midi_to_note_name(midi),
		duration=duration,
		velocity=velocity,
		instrument=instrument,
	)


def compose_intro (start: float, duration: float, ctx: _SectionContext) -> MusicSection:

	"""A quiet major-seventh pad with sparse, slightly late bells an octave up."""

	notes: typing.List[ScheduledNote] = []
	key = ctx.params.music.key

	for midi in gitrewind.theory.chord_notes(key.root, "maj7", PAD_OCTAVE):
		notes.append(_note(start, midi, duration * 0.8, 0.3, "pad"))

	num_bells = int(duration // 2)

	for i in range(num_bells):
		time = start + i * 2 + ctx.rng.random() * 0.5
		midi = ctx.scale[int(ctx.rng.random() * len(ctx.scale))] + 12
		notes.append(_note(time, midi, 1.5, 0.2 + ctx.rng.random() * 0.2, "bells"))

	return MusicSection(name="intro", start_time=start, duration=duration, notes=tuple(notes))


def compose_verse (start: float, duration: float, ctx: _SectionContext) -> MusicSection:

	"""Twelve slices, one per month; the melody gets busier and louder with that month's activity."""

	notes: typing.List[ScheduledNote] = []
	monthly = ctx.params.time_series.monthly
	month_duration = duration / 12

	for month in range(12):

		activity = monthly[month].normalized_activity if month < len(monthly) else 0.0
		month_start = start + month * month_duration

		note_count = int(math.floor(2 + activity * 6))
		melody = gitrewind.theory.generate_melody(ctx.scale, note_count, ctx.rng, "wave")

		for i, midi in enumerate(melody):
			time = month_start + (i / len(melody)) * month_duration
			notes.append(_note(time, midi, ctx.beat * 0.8, 0.4 + activity * 0.3, ctx.lead))

		bass = ctx.bass_scale[month % len(ctx.bass_scale)]
		notes.append(_note(month_start, bass, month_duration * 0.9, 0.5, "bass"))

	return MusicSection(name="verse", start_time=start, duration=duration, notes=tuple(notes))


def compose_chorus (start: float, duration: float, ctx: _SectionContext) -> MusicSection:

	"""The full progression: pad, four-step arpeggio and bass per chord, with a melody on every beat."""

	notes: typing.List[ScheduledNote] = []
	progression = ctx.params.music.chord_progression
	chord_duration = duration / len(progression)

	for i, chord in enumerate(progression):

		chord_start = start + i * chord_duration
		tones = chord.notes(MELODY_OCTAVE)

		for midi in tones:
			notes.append(_note(chord_start, midi, chord_duration * 0.95, 0.5, "pad"))

		for step in range(4):
			time = chord_start + step * (chord_duration / 4)
			notes.append(_note(time, tones[step % len(tones)] + 12, ctx.beat * 0.5, 0.4, "bells"))

		bass = ctx.bass_scale[i % len(ctx.bass_scale)]
		notes.append(_note(chord_start, bass, chord_duration * 0.9, 0.6, "bass"))

	beats = int(duration // ctx.beat)
	melody = gitrewind.theory.generate_melody(ctx.scale, beats, ctx.rng, "wave")

	for i, midi in enumerate(melody):
		notes.append(_note(start + i * ctx.beat, midi, ctx.beat * 0.6, 0.5, ctx.lead))

	return MusicSection(name="chorus", start_time=start, duration=duration, notes=tuple(notes))


def compose_bridge (start: float, duration: float, ctx: _SectionContext) -> MusicSection:

	"""A rising arpeggio; past 70% of the build an octave-up bell doubles it."""

	notes: typing.List[ScheduledNote] = []
	bar = ctx.beat * 4
	repetitions = int(duration // bar)
	scale_length = len(ctx.scale)

	for i in range(repetitions):

		base_index = i % scale_length
		intensity = i / repetitions

		for j, offset in enumerate(BRIDGE_PATTERN):

			midi = ctx.scale[(base_index + offset) % scale_length]
			time = start + i * bar + j * ctx.beat

			notes.append(_note(time, midi, ctx.beat * 0.7, 0.3 + intensity * 0.4, "synth"))

			if intensity > 0.7:
				notes.append(_note(time, midi + 12, ctx.beat * 0.5, 0.2 + intensity * 0.3, "bells"))

	return MusicSection(name="bridge", start_time=start, duration=duration, notes=tuple(notes))


def compose_outro (start: float, duration: float, ctx: _SectionContext) -> MusicSection:

	"""Back to the tonic, with bells fading to silence."""

	notes: typing.List[ScheduledNote] = []
	key = ctx.params.music.key

	for midi in gitrewind.theory.chord_notes(key.root, "maj", PAD_OCTAVE):
		notes.append(_note(start, midi, duration * 0.9, 0.4, "pad"))

	num_bells = int(duration // 1.5)

	for i in range(num_bells):
		fade = 1 - i / num_bells
		midi = ctx.scale[int(ctx.rng.random() * len(ctx.scale))] + 12
		notes.append(_note(start + i * 1.5, midi, 2.0, 0.3 * fade, "bells"))

	return MusicSection(name="outro", start_time=start, duration=duration, notes=tuple(notes))


SectionBuilder = typing.Callable[[float, float, _SectionContext], MusicSection]

SECTION_BUILDERS: typing.List[typing.Tuple[str, SectionBuilder]] = [
	("intro", compose_intro),
	("verse", compose_verse),
	("chorus", compose_chorus),
	("bridge", compose_bridge),
	("outro", compose_outro),
]


def compose (params: gitrewind.parameters.UnifiedParameters) -> Composition:

	"""Compose the 90-second arrangement for a parameter record.

	Sections are built in order, each starting where the previous one ended.

	Example:
		```python
		composition = gitrewind.composer.compose(params)
		for note in composition.notes():
			synth.trigger_attack_release(note.note, note.duration, note.time)
		```
	"""

	ctx = _SectionContext(params, gitrewind.seeded_random.SeededRandom(params.seed))

	sections: typing.List[MusicSection] = []
	current_time = 0.0

	for name, builder in SECTION_BUILDERS:
		section = builder(current_time, SECTION_DURATIONS[name], ctx)
		sections.append(section)
		current_time += section.duration

	logger.debug(
		f"Composed {len(sections)} sections, {sum(len(s.notes) for s in sections)} notes, "
		f"{current_time:.0f}s at {params.tempo.bpm} BPM"
	)

	return Composition(sections=tuple(sections), total_duration=current_time, bpm=params.tempo.bpm)
