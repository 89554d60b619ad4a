"""Scales, chords and pitch conversions.

Pure lookup tables plus the conversions the composer needs.  Pitches are MIDI
note numbers with **C4 = 60** and A4 = 440 Hz.

Module-level constants:
- `NOTES`: The twelve pitch-class names, sharps only
- `SCALES`: Maps mode names to interval lists (semitones from the root)
- `CHORD_INTERVALS`: Maps chord types to interval lists

Modes: `"major"`, `"minor"`, `"dorian"`, `"mixolydian"`, `"pentatonic"`

Chord types: `"maj"`, `"min"`, `"dim"`, `"maj7"`, `"min7"`, `"dom7"`
"""

import math
import random
import re
import typing


NOTES: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]

SCALES: typing.Dict[str, typing.List[int]] = {
	"major": [0, 2, 4, 5, 7, 9, 11],
	"minor": [0, 2, 3, 5, 7, 8, 10],
	"dorian": [0, 2, 3, 5, 7, 9, 10],
	"mixolydian": [0, 2, 4, 5, 7, 9, 10],
	"pentatonic": [0, 2, 4, 7, 9],
}

CHORD_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"maj": [0, 4, 7],
	"min": [0, 3, 7],
	"dim": [0, 3, 6],
	"maj7": [0, 4, 7, 11],
	"min7": [0, 3, 7, 10],
	"dom7": [0, 4, 7, 10],
}

CHORD_SUFFIX: typing.Dict[str, str] = {
	"maj": "",
	"min": "m",
	"dim": "dim",
	"maj7": "maj7",
	"min7": "m7",
	"dom7": "7",
}

CONTOURS: typing.Tuple[str, ...] = ("ascending", "descending", "wave")

A4_MIDI = 69
A4_FREQUENCY = 440.0

_NOTE_NAME_PATTERN = re.compile(r"([A-G]#?)(-?\d+)")


def note_to_midi (note: str, octave: int = 4) -> int:

	"""Return the MIDI number of a pitch-class name in an octave.

	Raises:
		ValueError: If the note name is not one of :data:`NOTES`.

	Example:
		```python
		note_to_midi("C")      # → 60
		note_to_midi("A", 2)   # → 45
		```
	"""

	if note not in NOTES:
		raise ValueError(f"Unknown note name: {note!r}. Expected one of {NOTES}")

	return NOTES.index(note) + (octave + 1) * 12


def midi_to_note (midi: int) -> typing.Tuple[str, int]:

	"""Split a MIDI number into ``(note name, octave)``."""

	return NOTES[midi % 12], midi // 12 - 1


def midi_to_note_name (midi: int) -> str:

	"""Return scientific pitch notation, e.g. ``61`` → ``"C#4"``."""

	note, octave = midi_to_note(midi)

	return f"{note}{octave}"


def note_name_to_midi (name: str) -> int:

	"""Parse scientific pitch notation, e.g. ``"C#4"`` → ``61``, ``"A-1"`` → ``9``."""

	match = _NOTE_NAME_PATTERN.fullmatch(name)

	if match is None:
		raise ValueError(f"Invalid note name: {name!r}")

	return note_to_midi(match.group(1), int(match.group(2)))


def midi_to_frequency (midi: float) -> float:

	"""Equal-tempered frequency in Hz."""

	return A4_FREQUENCY * math.pow(2.0, (midi - A4_MIDI) / 12.0)


def get_scale (mode: str) -> typing.List[int]:

	"""
	Return the interval list for a mode.
	"""

	if mode not in SCALES:
		raise ValueError(f"Unknown mode: {mode}")

	return list(SCALES[mode])


def get_chord_intervals (chord_type: str) -> typing.List[int]:

	"""
	Return the interval list for a chord type.
	"""

	if chord_type not in CHORD_INTERVALS:
		raise ValueError(f"Unknown chord type: {chord_type}")

	return list(CHORD_INTERVALS[chord_type])


def scale_notes (root: str, mode: str, octave: int = 4) -> typing.List[int]:

	"""MIDI numbers of one octave of a scale, starting on the root.

	Example:
		```python
		scale_notes("C", "major")        # → [60, 62, 64, 65, 67, 69, 71]
		scale_notes("A", "pentatonic", 2) # → [45, 47, 49, 52, 54]
		```
	"""

	root_midi = note_to_midi(root, octave)

	return [root_midi + interval for interval in get_scale(mode)]


def chord_notes (root: str, chord_type: str, octave: int = 4) -> typing.List[int]:

	"""MIDI numbers of a root-position chord."""

	root_midi = note_to_midi(root, octave)

	return [root_midi + interval for interval in get_chord_intervals(chord_type)]


def chord_name (root: str, chord_type: str) -> str:

	"""Human-friendly chord symbol, e.g. ``("A", "min7")`` → ``"Am7"``."""

	return f"{root}{CHORD_SUFFIX.get(chord_type, '')}"


def quantize_to_scale (midi: int, scale: typing.Sequence[int]) -> int:

	"""
	Snap a MIDI pitch to the nearest pitch class of a scale.

	Distance is measured around the pitch-class circle, but the result stays
	in the input's octave (so B snapping to C gives the C at the bottom of
	that octave).  When two scale tones are equally close, the one that
	appears first in ``scale`` wins.

	Parameters:
		midi: MIDI note number to quantize.
		scale: MIDI numbers (any octave) whose pitch classes are accepted.
		       Typically the output of :func:`scale_notes`.

	Example:
		```python
		c_major = scale_notes("C", "major")
		quantize_to_scale(61, c_major)  # → 60 (C# ties between C and D; C comes first)
		```
	"""

	octave_base = (midi // 12) * 12
	pitch_class = midi % 12

	closest = scale[0] % 12
	min_distance = 12

	for pc in (note % 12 for note in scale):

		distance = min(
			abs(pitch_class - pc),
			abs(pitch_class - pc + 12),
			abs(pitch_class - pc - 12),
		)

		if distance < min_distance:
			min_distance = distance
			closest = pc

	return octave_base + closest


def generate_melody (
	scale: typing.Sequence[int],
	length: int,
	rng: random.Random,
	contour: str = "wave"
) -> typing.List[int]:

	"""Walk a scale to produce a melody of exactly ``length`` notes.

	The walk starts on the middle scale tone.  After each note the index
	moves by one step (70%) or a skip of two (30%), in a direction chosen by
	the contour, and is clamped to the ends of the scale.

	Parameters:
		scale: Candidate MIDI notes in ascending order.  Every returned note
		       is an element of this sequence.
		length: Number of notes to produce.
		rng: Random number generator instance.
		contour: ``"ascending"`` (up 70% of the time), ``"descending"``
		         (down 70% of the time) or ``"wave"`` (follows one sine
		         period across the phrase, reversed 30% of the time).

	Example:
		```python
		rng = gitrewind.seeded_random.SeededRandom(7)
		generate_melody(scale_notes("D", "dorian"), 8, rng)
		```
	"""

	if contour not in CONTOURS:
		raise ValueError(f"Unknown contour: {contour}")

	if length <= 0 or not scale:
		return []

	melody: typing.List[int] = []
	index = len(scale) // 2

	for i in range(length):

		melody.append(scale[index])

		if contour == "ascending":
			direction = 1 if rng.random() < 0.7 else -1

		elif contour == "descending":
			direction = -1 if rng.random() < 0.7 else 1

		else:
			phase = (i / length) * math.pi * 2
			direction = 1 if math.sin(phase) > 0 else -1
			if rng.random() < 0.3:
				direction = -direction

		interval = 1 if rng.random() < 0.7 else 2
		index = max(0, min(len(scale) - 1, index + direction * interval))

	return melody
