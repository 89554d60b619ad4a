import dataclasses
import math

import pytest

import gitrewind.activity
import gitrewind.color
import gitrewind.parameters
import gitrewind.seeded_random


# --- Temporal ---


def test_tempo_idle_year (empty_model) -> None:

	"""No commits gives the 70 BPM floor of the curve and no swing."""

	tempo = gitrewind.parameters.compute_tempo(empty_model)

	assert tempo.bpm == 70
	assert tempo.swing == 0.0
	assert tempo.signature == (4, 4)


def test_tempo_rises_with_commits (make_model) -> None:

	"""More commits never slow the tempo."""

	bpms = [gitrewind.parameters.compute_tempo(make_model(commits=c)).bpm for c in (10, 100, 1000, 5000)]

	assert bpms == sorted(bpms)
	assert bpms[0] < bpms[-1]


def test_tempo_clamped (make_model) -> None:

	"""Huge years clamp at 180 BPM."""

	assert gitrewind.parameters.compute_tempo(make_model(commits=1_000_000)).bpm == 180


def test_swing_follows_consistency (make_model) -> None:

	"""Swing is a fifth of the consistency score."""

	assert gitrewind.parameters.compute_tempo(make_model(consistency=0.5)).swing == pytest.approx(0.1)


@pytest.mark.parametrize("commits, consistency, root, mode", [
	(600, 0.6, "C", "major"),
	(400, 0.4, "G", "mixolydian"),
	(400, 0.2, "D", "dorian"),
	(600, 0.1, "D", "dorian"),
	(50, 0.9, "A", "minor"),
])
def test_key_selection (make_model, commits: int, consistency: float, root: str, mode: str) -> None:

	"""Activity and consistency pick the key."""

	key = gitrewind.parameters.compute_key(make_model(commits=commits, consistency=consistency))

	assert (key.root, key.mode) == (root, mode)


# --- Magnitudes ---


def test_intensity_busy_year (busy_model) -> None:

	"""2000 commits is high but not saturated on the log scale."""

	intensity = gitrewind.parameters.compute_intensity(busy_model)

	assert intensity == pytest.approx(math.log10(2001) / math.log10(5000))
	assert 0.85 < intensity < 1.0


def test_intensity_bounds (make_model, empty_model) -> None:

	"""Zero commits is 0 and anything past 5000 saturates at 1."""

	assert gitrewind.parameters.compute_intensity(empty_model) == 0.0
	assert gitrewind.parameters.compute_intensity(make_model(commits=20000)) == 1.0


def test_complexity (make_model) -> None:

	"""One language is simple; an even split is maximally complex."""

	assert gitrewind.parameters.compute_complexity(make_model(languages=(("Go", 100.0),))) == 0.0
	assert gitrewind.parameters.compute_complexity(make_model(languages=(("Go", 50.0), ("Rust", 50.0)))) == pytest.approx(1.0)


def test_density (make_model, empty_model) -> None:

	"""Commits per active day over ten, clamped."""

	assert gitrewind.parameters.compute_density(make_model(commits=1200, active_days=200)) == pytest.approx(0.6)
	assert gitrewind.parameters.compute_density(make_model(commits=5000, active_days=100)) == 1.0
	assert gitrewind.parameters.compute_density(empty_model) == 0.0


def test_momentum (make_model, empty_model) -> None:

	"""Share of commits in the second half of the year."""

	assert gitrewind.parameters.compute_momentum(make_model()) == pytest.approx(690 / 1200)
	assert gitrewind.parameters.compute_momentum(make_model(monthly=[0] * 6 + [10] * 6)) == 1.0
	assert gitrewind.parameters.compute_momentum(empty_model) == 0.5


# --- Musical ---


@pytest.mark.parametrize("intensity, complexity, momentum, mood", [
	(0.8, 0.9, 0.7, "uplifting"),
	(0.2, 0.9, 0.9, "contemplative"),
	(0.8, 0.9, 0.2, "contemplative"),
	(0.5, 0.9, 0.5, "dramatic"),
	(0.5, 0.5, 0.5, "dreamy"),
])
def test_mood_rules (intensity: float, complexity: float, momentum: float, mood: str) -> None:

	"""The first matching rule decides the mood."""

	assert gitrewind.parameters.compute_mood(intensity, complexity, momentum) == mood


def test_chord_progressions () -> None:

	"""Each mood has four two-beat chords; unknown moods fall back to dreamy."""

	dreamy = gitrewind.parameters.compute_chord_progression("dreamy")

	assert [chord.name() for chord in dreamy] == ["Cmaj7", "Am7", "Fmaj7", "G7"]
	assert all(chord.duration == 2 for chord in dreamy)
	assert [chord.name() for chord in gitrewind.parameters.compute_chord_progression("dramatic")] == ["Am", "Dm", "E", "Am"]
	assert gitrewind.parameters.compute_chord_progression("anxious") == dreamy


def test_chord_notes () -> None:

	"""Chords resolve to MIDI notes through the theory tables."""

	assert gitrewind.parameters.Chord("A", "min").notes(4) == [69, 72, 76]


def test_instruments_by_rank (make_model) -> None:

	"""Top four languages get instruments, quieter and wider with rank."""

	model = make_model(languages=(
		("TypeScript", 40.0), ("Python", 25.0), ("Rust", 15.0), ("Go", 12.0), ("Java", 8.0),
	))

	instruments = gitrewind.parameters.compute_instruments(model)

	assert [i.instrument for i in instruments] == ["synth", "piano", "strings", "bass"]
	assert [i.volume for i in instruments] == pytest.approx([1.0, 0.8, 0.6, 0.4])
	assert [i.pan for i in instruments] == pytest.approx([-0.2, 0.3, -0.4, 0.5])


def test_unknown_language_plays_synth (make_model) -> None:

	"""Languages without a mapping use the synth."""

	model = make_model(languages=(("Zig", 100.0),))

	assert gitrewind.parameters.compute_instruments(model)[0].instrument == "synth"


def test_default_instrument (empty_model) -> None:

	"""No languages still gives one centred voice."""

	instruments = gitrewind.parameters.compute_instruments(empty_model)

	assert instruments == (gitrewind.parameters.InstrumentAssignment("default", "synth", 0.8, 0.0),)


# --- Visual ---


def test_colors_from_languages (make_model) -> None:

	"""Primary and secondary come from the top two languages."""

	colors = gitrewind.parameters.compute_colors(make_model())

	assert colors.primary == gitrewind.color.HSL(211, 60, 48)
	assert colors.secondary == gitrewind.color.hex_to_hsl("#3572A5")
	assert colors.accent == gitrewind.color.HSL(31, 60, 48)
	assert colors.background == gitrewind.color.HSL(211, 15, 8)
	assert len(colors.gradient) == 3


def test_colors_fallback (empty_model) -> None:

	"""No languages falls back to the default blue and a rotated secondary."""

	colors = gitrewind.parameters.compute_colors(empty_model)

	assert colors.primary == gitrewind.color.hex_to_hsl(gitrewind.parameters.DEFAULT_PRIMARY_COLOR)
	assert colors.secondary.h == (colors.primary.h + 60) % 360
	assert colors.gradient == (colors.primary,)


def test_gradient_capped_at_five (make_model) -> None:

	"""At most five languages feed the gradient."""

	languages = tuple((name, 100.0 - i) for i, name in enumerate(["Go", "Rust", "C", "Java", "Ruby", "PHP", "Lua"]))

	assert len(gitrewind.parameters.compute_colors(make_model(languages=languages)).gradient) == 5


# --- Art, graph, time series ---


def test_art_parameters () -> None:

	"""Art scalars follow intensity and complexity; the style is seeded."""

	art = gitrewind.parameters.compute_art_parameters(0.5, 0.4, seed=1234)

	assert art.style in gitrewind.parameters.ART_STYLES
	assert art.particle_count == 1250
	assert art.noise_scale == pytest.approx(0.7)
	assert art.glow_intensity == pytest.approx(0.5)
	assert gitrewind.parameters.compute_art_parameters(0.1, 0.1, seed=1234).style == art.style


def test_graph_sizing (make_model) -> None:

	"""Node count includes the user; edges sum the interactions."""

	sizing = gitrewind.parameters.compute_graph_sizing(make_model())

	assert sizing == gitrewind.parameters.GraphSizing(node_count=4, edge_count=51, cluster_count=2)


def test_time_series_peaks (make_model) -> None:

	"""Months above 70% of the peak are marked, dated to the 15th."""

	series = gitrewind.parameters.compute_time_series(make_model())

	assert len(series.monthly) == 12
	assert [peak.date for peak in series.peaks] == [
		"2024-06-15", "2024-07-15", "2024-08-15", "2024-09-15", "2024-10-15",
	]
	assert series.peaks[-1].significance == 1.0


def test_stats_fallbacks (empty_model) -> None:

	"""Empty years report an unknown language and no collaborator."""

	stats = gitrewind.parameters.compute_stats(empty_model)

	assert stats.top_language == "Unknown"
	assert stats.top_collaborator is None
	assert stats.total_commits == 0


# --- Full record ---


def test_compute_parameters_is_deterministic (make_model) -> None:

	"""Equal models produce equal records."""

	assert gitrewind.parameters.compute_parameters(make_model()) == gitrewind.parameters.compute_parameters(make_model())


def test_compute_parameters_ranges (busy_model) -> None:

	"""Every scalar stays inside its documented range."""

	params = gitrewind.parameters.compute_parameters(busy_model)

	assert 60 <= params.tempo.bpm <= 180
	assert 0.0 <= params.tempo.swing <= 0.3

	for value in (params.intensity, params.complexity, params.density, params.momentum):
		assert 0.0 <= value <= 1.0

	assert params.seed == gitrewind.seeded_random.seed_from_user_year("octocat", 2024)
	assert params.music.scale == (0, 2, 4, 5, 7, 9, 11)
	assert params.music.lead_instrument == "synth"


def test_empty_year_parameters (empty_model) -> None:

	"""The empty year is quiet, minor and contemplative."""

	params = gitrewind.parameters.compute_parameters(empty_model)

	assert params.intensity == 0.0
	assert params.density == 0.0
	assert params.momentum == 0.5
	assert params.music.key == gitrewind.parameters.Key("A", "minor")
	assert params.music.mood == "contemplative"
	assert params.graph.node_count == 1
	assert params.time_series.peaks == ()


def test_different_users_get_different_seeds (make_model) -> None:

	"""The seed depends on the login."""

	a = gitrewind.parameters.compute_parameters(make_model(login="octocat"))
	b = gitrewind.parameters.compute_parameters(make_model(login="hubot"))

	assert a.seed != b.seed


def test_to_dict_is_plain_data (make_model) -> None:

	"""to_dict produces nested dictionaries."""

	data = gitrewind.parameters.compute_parameters(make_model()).to_dict()

	assert data["username"] == "octocat"
	assert data["tempo"]["signature"] == (4, 4)
	assert data["music"]["key"] == {"root": "C", "mode": "major"}
	assert isinstance(data["music"]["chord_progression"][0], dict)


class TestApplyOverrides:

	def test_replaces_field (self, make_model) -> None:
		"""Overrides produce a new record and leave the original alone."""
		params = gitrewind.parameters.compute_parameters(make_model())
		slower = gitrewind.parameters.apply_overrides(params, tempo=dataclasses.replace(params.tempo, bpm=80))
		assert slower.tempo.bpm == 80
		assert params.tempo.bpm != 80
		assert slower.music == params.music

	def test_no_overrides_is_equal (self, make_model) -> None:
		"""With nothing to apply the copy equals the original."""
		params = gitrewind.parameters.compute_parameters(make_model())
		assert gitrewind.parameters.apply_overrides(params) == params

	def test_unknown_field_raises (self, make_model) -> None:
		"""Misspelt fields raise instead of being ignored."""
		params = gitrewind.parameters.compute_parameters(make_model())
		with pytest.raises(ValueError, match="tempoo"):
			gitrewind.parameters.apply_overrides(params, tempoo=None)


def test_share_data (make_model) -> None:

	"""The share summary carries the terse keys."""

	params = gitrewind.parameters.compute_parameters(make_model())
	data = gitrewind.parameters.share_data(params)

	assert set(data) == {"u", "y", "s", "t", "i", "c", "p", "k", "a", "tc", "ad", "ls", "tl"}
	assert data["u"] == "octocat"
	assert data["k"] == "Cmajor"
	assert data["p"] == "211,60,48"
	assert data["tl"] == "TypeScript"
	assert 0 <= data["i"] <= 100


def test_unparseable_language_color_does_not_raise () -> None:

	"""A model that validates always yields parameters, whatever its language colors."""

	model = gitrewind.activity.ActivityModel.from_dict({
		"user": {"login": "octocat"},
		"year": 2024,
		"languages": [{"name": "Zig", "color": "orange", "percentage": 100}],
	})

	params = gitrewind.parameters.compute_parameters(model)

	assert params.colors.primary == gitrewind.color.hex_to_hsl(gitrewind.color.DEFAULT_COLOR)


def test_data_color_used_for_unknown_language () -> None:

	"""A valid data color is used when the language is not in the table."""

	model = gitrewind.activity.ActivityModel.from_dict({
		"user": {"login": "octocat"},
		"year": 2024,
		"languages": [{"name": "Zig", "color": "#ec915c", "percentage": 100}],
	})

	assert gitrewind.parameters.compute_colors(model).primary == gitrewind.color.hex_to_hsl("#ec915c")
