"""Unified parameter synthesis.

:func:`compute_parameters` turns an :class:`~gitrewind.activity.ActivityModel`
into a :class:`UnifiedParameters` record: the single cross-modal bundle that
drives the music, the colors, the art style and the collaboration graph.

Every sub-computation is a small module-level function so it can be tested
on its own, and every one of them has a fallback for empty input (no
languages, no collaborators, no active days).  The only randomness is the
art-style pick, drawn from a :class:`~gitrewind.seeded_random.SeededRandom`
seeded by ``(username, year)``, so the whole record is a pure function of
the model.
"""

import dataclasses
import logging
import math
import typing

import gitrewind.activity
import gitrewind.color
import gitrewind.math_utils
import gitrewind.seeded_random
import gitrewind.theory


logger = logging.getLogger(__name__)


MOODS: typing.Tuple[str, ...] = ("uplifting", "contemplative", "dramatic", "dreamy")

ART_STYLES: typing.Tuple[str, ...] = ("constellation", "flowField", "circuit", "nebula")

INSTRUMENTS: typing.Tuple[str, ...] = ("synth", "piano", "electricPiano", "pad", "bass", "strings", "bells", "guitar")

DEFAULT_PRIMARY_COLOR = "#3178c6"

# Languages not listed play the "synth".
LANGUAGE_INSTRUMENTS: typing.Dict[str, str] = {
	"TypeScript": "synth",
	"JavaScript": "electricPiano",
	"Python": "piano",
	"Rust": "strings",
	"Go": "bass",
	"Java": "pad",
	"C++": "synth",
	"C": "synth",
	"C#": "pad",
	"Ruby": "guitar",
	"Swift": "bells",
	"Kotlin": "bells",
	"PHP": "electricPiano",
	"Shell": "bass",
}

# Four chords per mood, as (root, chord type).
MOOD_PROGRESSIONS: typing.Dict[str, typing.List[typing.Tuple[str, str]]] = {
	"uplifting":     [("C", "maj"),  ("G", "maj"),  ("A", "min"),  ("F", "maj")],
	"contemplative": [("A", "min"),  ("F", "maj"),  ("C", "maj"),  ("G", "maj")],
	"dramatic":      [("A", "min"),  ("D", "min"),  ("E", "maj"),  ("A", "min")],
	"dreamy":        [("C", "maj7"), ("A", "min7"), ("F", "maj7"), ("G", "dom7")],
}

BEATS_PER_CHORD = 2
PEAK_THRESHOLD = 0.7
MAX_GRAPH_NODES = 100


@dataclasses.dataclass(frozen=True)
class Tempo:

	bpm: int
	swing: float
	signature: typing.Tuple[int, int] = (4, 4)


@dataclasses.dataclass(frozen=True)
class ColorPalette:

	primary: gitrewind.color.HSL
	secondary: gitrewind.color.HSL
	accent: gitrewind.color.HSL
	background: gitrewind.color.HSL
	gradient: typing.Tuple[gitrewind.color.HSL, ...]


@dataclasses.dataclass(frozen=True)
class Key:

	root: str
	mode: str


@dataclasses.dataclass(frozen=True)
class Chord:

	"""A chord in the progression; ``duration`` is in beats."""

	root: str
	type: str
	duration: int = BEATS_PER_CHORD

	def notes (self, octave: int = 4) -> typing.List[int]:

		return gitrewind.theory.chord_notes(self.root, self.type, octave)

	def name (self) -> str:

		return gitrewind.theory.chord_name(self.root, self.type)


@dataclasses.dataclass(frozen=True)
class InstrumentAssignment:

	"""
	One language's voice in the arrangement.

	Attributes:
		language: Language name, or ``"default"`` for the fallback voice.
		instrument: One of :data:`INSTRUMENTS`.
		volume: 0.3–1.0 (0.8 for the fallback voice).
		pan: Stereo position, -1.0 (left) to 1.0 (right).
	"""

	language: str
	instrument: str
	volume: float
	pan: float


@dataclasses.dataclass(frozen=True)
class MusicParameters:

	key: Key
	scale: typing.Tuple[int, ...]
	chord_progression: typing.Tuple[Chord, ...]
	instruments: typing.Tuple[InstrumentAssignment, ...]
	mood: str

	@property
	def lead_instrument (self) -> str:

		"""The first assigned instrument, used for melody lines."""

		return self.instruments[0].instrument if self.instruments else "synth"


@dataclasses.dataclass(frozen=True)
class ArtParameters:

	style: str
	particle_count: int
	noise_scale: float
	glow_intensity: float


@dataclasses.dataclass(frozen=True)
class GraphSizing:

	node_count: int
	edge_count: int
	cluster_count: int


@dataclasses.dataclass(frozen=True)
class MonthlyData:

	month: int
	commits: int
	normalized_activity: float


@dataclasses.dataclass(frozen=True)
class Peak:

	"""A peak month, dated to the 15th (``YYYY-MM-15``)."""

	date: str
	commits: int
	significance: float


@dataclasses.dataclass(frozen=True)
class TimeSeries:

	monthly: typing.Tuple[MonthlyData, ...]
	peaks: typing.Tuple[Peak, ...]


@dataclasses.dataclass(frozen=True)
class DisplayStats:

	total_commits: int
	total_prs: int
	active_days: int
	longest_streak: int
	top_language: str
	top_collaborator: typing.Optional[str]


@dataclasses.dataclass(frozen=True)
class UnifiedParameters:

	"""
	The cross-modal parameter record.

	Computed once per (user, year, activity snapshot) and treated as
	immutable afterwards; use :func:`apply_overrides` to derive a variant.

	Ranges:
		- ``tempo.bpm`` in [60, 180], ``tempo.swing`` in [0, 0.3]
		- ``intensity``, ``complexity``, ``density``, ``momentum`` in [0, 1]
	"""

	seed: int
	username: str
	year: int
	avatar_url: str

	tempo: Tempo

	intensity: float
	complexity: float
	density: float
	momentum: float

	colors: ColorPalette
	graph: GraphSizing
	music: MusicParameters
	art: ArtParameters
	time_series: TimeSeries
	stats: DisplayStats


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Return a nested plain-data copy (suitable for JSON or YAML)."""

		return dataclasses.asdict(self)


# ---------------------------------------------------------------------------
# Temporal
# ---------------------------------------------------------------------------

def compute_tempo (model: gitrewind.activity.ActivityModel) -> Tempo:

	"""Map average commits per day to BPM on a logarithmic curve.

	Roughly 0.1 commits/day gives 70 BPM, 1/day 90, 5/day 120 and 20/day 160,
	so tempo differences stay audible across orders of magnitude of activity.
	Swing grows with consistency.
	"""

	avg_commits_per_day = model.totals.commits / 365.0
	bpm = 70 + 90 * math.log10(1 + avg_commits_per_day * 2) / math.log10(50)

	swing = model.patterns.consistency_score * 0.2

	return Tempo(
		bpm=int(gitrewind.math_utils.clamp(gitrewind.math_utils.round_half_up(bpm), 60, 180)),
		swing=gitrewind.math_utils.clamp(swing, 0.0, 0.3),
		signature=(4, 4),
	)


def compute_key (model: gitrewind.activity.ActivityModel) -> Key:

	"""Busy, consistent years get a bright major key; quiet years a minor one."""

	activity = model.totals.commits
	consistency = model.patterns.consistency_score

	if activity > 500 and consistency > 0.5:
		return Key(root="C", mode="major")

	elif activity > 300 and consistency > 0.3:
		return Key(root="G", mode="mixolydian")

	elif activity > 100:
		return Key(root="D", mode="dorian")

	return Key(root="A", mode="minor")


# ---------------------------------------------------------------------------
# Visual
# ---------------------------------------------------------------------------

def _language_hsl (language: gitrewind.activity.LanguageStats) -> gitrewind.color.HSL:

	return gitrewind.color.hex_to_hsl(gitrewind.color.get_language_color(language.name, language.color))


def compute_colors (model: gitrewind.activity.ActivityModel) -> ColorPalette:

	"""Build the palette from the top languages' colors."""

	languages = model.languages

	if languages:
		primary = _language_hsl(languages[0])
	else:
		primary = gitrewind.color.hex_to_hsl(DEFAULT_PRIMARY_COLOR)

	if len(languages) > 1:
		secondary = _language_hsl(languages[1])
	else:
		secondary = gitrewind.color.rotate_hue(primary, 60)

	accent = gitrewind.color.rotate_hue(primary, 180)
	background = gitrewind.color.HSL(h=primary.h, s=15, l=8)

	gradient = tuple(_language_hsl(language) for language in languages[:5]) or (primary,)

	return ColorPalette(
		primary=primary,
		secondary=secondary,
		accent=accent,
		background=background,
		gradient=gradient,
	)


# ---------------------------------------------------------------------------
# Magnitudes
# ---------------------------------------------------------------------------

def compute_intensity (model: gitrewind.activity.ActivityModel) -> float:

	"""Logarithmic commit volume; saturates at about 5000 commits a year."""

	return gitrewind.math_utils.scale_clamp(math.log10(model.totals.commits + 1), 0.0, math.log10(5000))


def compute_complexity (model: gitrewind.activity.ActivityModel) -> float:

	"""Normalised Shannon entropy of the language mix (0 for one language or none)."""

	return gitrewind.math_utils.normalized_entropy([language.percentage for language in model.languages])


def compute_density (model: gitrewind.activity.ActivityModel) -> float:

	"""Commits per active day; ten or more a day is 1.0."""

	if model.totals.active_days == 0:
		return 0.0

	return gitrewind.math_utils.scale_clamp(model.totals.commits / model.totals.active_days, 0.0, 10.0)


def compute_momentum (model: gitrewind.activity.ActivityModel) -> float:

	"""Share of the year's commits made in July–December (0.5 when unknown)."""

	monthly = model.monthly_activity

	if len(monthly) < 12:
		return 0.5

	first_half = sum(month.commits for month in monthly[:6])
	second_half = sum(month.commits for month in monthly[6:12])

	if first_half + second_half == 0:
		return 0.5

	return gitrewind.math_utils.clamp(second_half / (first_half + second_half), 0.0, 1.0)


# ---------------------------------------------------------------------------
# Musical
# ---------------------------------------------------------------------------

def compute_mood (intensity: float, complexity: float, momentum: float) -> str:

	"""Classify the year; the first matching rule wins."""

	if intensity > 0.7 and momentum > 0.6:
		return "uplifting"

	if intensity < 0.3 or momentum < 0.3:
		return "contemplative"

	if complexity > 0.7:
		return "dramatic"

	return "dreamy"


def compute_chord_progression (mood: str) -> typing.Tuple[Chord, ...]:

	"""Return the four-chord progression for a mood."""

	progression = MOOD_PROGRESSIONS.get(mood, MOOD_PROGRESSIONS["dreamy"])

	return tuple(Chord(root=root, type=chord_type, duration=BEATS_PER_CHORD) for root, chord_type in progression)


def compute_instruments (model: gitrewind.activity.ActivityModel) -> typing.Tuple[InstrumentAssignment, ...]:

	"""Give each of the top four languages a voice, quieter and wider with rank."""

	instruments = [
		InstrumentAssignment(
			language=language.name,
			instrument=LANGUAGE_INSTRUMENTS.get(language.name, "synth"),
			volume=max(0.3, 1.0 - rank * 0.2),
			pan=(-1 if rank % 2 == 0 else 1) * (0.2 + rank * 0.1),
		)
		for rank, language in enumerate(model.languages[:4])
	]

	if not instruments:
		instruments.append(InstrumentAssignment(language="default", instrument="synth", volume=0.8, pan=0.0))

	return tuple(instruments)


def compute_music_parameters (
	model: gitrewind.activity.ActivityModel,
	intensity: float,
	complexity: float,
	momentum: float
) -> MusicParameters:

	key = compute_key(model)
	mood = compute_mood(intensity, complexity, momentum)

	return MusicParameters(
		key=key,
		scale=tuple(gitrewind.theory.get_scale(key.mode)),
		chord_progression=compute_chord_progression(mood),
		instruments=compute_instruments(model),
		mood=mood,
	)


# ---------------------------------------------------------------------------
# Art, graph, time series
# ---------------------------------------------------------------------------

def compute_art_parameters (intensity: float, complexity: float, seed: int) -> ArtParameters:

	"""Pick a style at random (seeded) and scale the rest with intensity and complexity."""

	rng = gitrewind.seeded_random.SeededRandom(seed)
	style = ART_STYLES[int(rng.random() * len(ART_STYLES))]

	return ArtParameters(
		style=style,
		particle_count=gitrewind.math_utils.round_half_up(500 + intensity * 1500),
		noise_scale=0.5 + complexity * 0.5,
		glow_intensity=0.3 + intensity * 0.4,
	)


def compute_graph_sizing (model: gitrewind.activity.ActivityModel) -> GraphSizing:

	return GraphSizing(
		node_count=min(len(model.collaborators) + 1, MAX_GRAPH_NODES),
		edge_count=sum(collaborator.interactions for collaborator in model.collaborators),
		cluster_count=math.ceil(len(model.languages) / 2),
	)


def compute_time_series (model: gitrewind.activity.ActivityModel) -> TimeSeries:

	"""Echo the monthly series and mark months above 70% of the peak."""

	monthly = tuple(
		MonthlyData(month=m.month, commits=m.commits, normalized_activity=m.normalized_activity)
		for m in model.monthly_activity
	)

	peaks = tuple(
		Peak(
			date=f"{model.year}-{m.month + 1:02d}-15",
			commits=m.commits,
			significance=m.normalized_activity,
		)
		for m in model.monthly_activity
		if m.normalized_activity > PEAK_THRESHOLD
	)

	return TimeSeries(monthly=monthly, peaks=peaks)


def compute_stats (model: gitrewind.activity.ActivityModel) -> DisplayStats:

	return DisplayStats(
		total_commits=model.totals.commits,
		total_prs=model.totals.pull_requests,
		active_days=model.totals.active_days,
		longest_streak=model.totals.longest_streak,
		top_language=model.languages[0].name if model.languages else "Unknown",
		top_collaborator=model.collaborators[0].login if model.collaborators else None,
	)


def compute_parameters (model: gitrewind.activity.ActivityModel) -> UnifiedParameters:

	"""Compute the full parameter record for an activity model.

	Pure: no I/O and ``model`` is not modified.  Two calls on equal models
	return equal records.

	Example:
		```python
		model = gitrewind.activity.load_activity("octocat-2024.yaml")
		params = gitrewind.parameters.compute_parameters(model)
		params.tempo.bpm, params.music.key, params.music.mood
		```
	"""

	seed = gitrewind.seeded_random.seed_from_user_year(model.user.login, model.year)

	intensity = compute_intensity(model)
	complexity = compute_complexity(model)
	density = compute_density(model)
	momentum = compute_momentum(model)

	params = UnifiedParameters(
		seed=seed,
		username=model.user.login,
		year=model.year,
		avatar_url=model.user.avatar_url,
		tempo=compute_tempo(model),
		intensity=intensity,
		complexity=complexity,
		density=density,
		momentum=momentum,
		colors=compute_colors(model),
		graph=compute_graph_sizing(model),
		music=compute_music_parameters(model, intensity, complexity, momentum),
		art=compute_art_parameters(intensity, complexity, seed),
		time_series=compute_time_series(model),
		stats=compute_stats(model),
	)

	logger.debug(
		f"Parameters for {params.username} ({params.year}): seed={seed} bpm={params.tempo.bpm} "
		f"key={params.music.key.root} {params.music.key.mode} mood={params.music.mood} art={params.art.style}"
	)

	return params


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------

def apply_overrides (params: UnifiedParameters, **overrides: typing.Any) -> UnifiedParameters:

	"""
	Return a copy of ``params`` with top-level fields replaced.

	The merge is shallow: overriding ``tempo`` replaces the whole
	:class:`Tempo`.  The original record is untouched.

	Raises:
		ValueError: If an override names a field that does not exist.

	Example:
		```python
		slower = apply_overrides(params, tempo=dataclasses.replace(params.tempo, bpm=80))
		```
	"""

	known = {field.name for field in dataclasses.fields(UnifiedParameters)}
	unknown = sorted(set(overrides) - known)

	if unknown:
		raise ValueError(f"Unknown parameter field(s): {unknown}")

	return dataclasses.replace(params, **overrides)


def share_data (params: UnifiedParameters) -> typing.Dict[str, typing.Any]:

	"""
	Return the compact, lossy summary used for share links.

	Keys are deliberately terse.  The gradient, instruments and time series
	are dropped.
	"""

	primary = params.colors.primary

	return {
		"u": params.username,
		"y": params.year,
		"s": params.seed,
		"t": params.tempo.bpm,
		"i": gitrewind.math_utils.round_half_up(params.intensity * 100),
		"c": gitrewind.math_utils.round_half_up(params.complexity * 100),
		"p": f"{primary.h},{primary.s},{primary.l}",
		"k": f"{params.music.key.root}{params.music.key.mode}",
		"a": params.art.style,
		"tc": params.stats.total_commits,
		"ad": params.stats.active_days,
		"ls": params.stats.longest_streak,
		"tl": params.stats.top_language,
	}
