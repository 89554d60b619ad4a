import typing

import pytest

import gitrewind.activity


ModelFactory = typing.Callable[..., gitrewind.activity.ActivityModel]


def _monthly (commits: typing.Sequence[int]) -> typing.Tuple[gitrewind.activity.MonthlyActivity, ...]:

	"""Build twelve months, normalising activity to the busiest month."""

	peak = max(commits) if commits and max(commits) > 0 else 0

	return tuple(
		gitrewind.activity.MonthlyActivity(
			month=month,
			commits=count,
			normalized_activity=(count / peak) if peak else 0.0,
		)
		for month, count in enumerate(commits)
	)


def build_model (
	login: str = "octocat",
	year: int = 2024,
	commits: int = 1200,
	active_days: int = 200,
	consistency: float = 0.6,
	languages: typing.Sequence[typing.Tuple[str, float]] = (("TypeScript", 50.0), ("Python", 30.0), ("Rust", 20.0)),
	collaborators: typing.Sequence[typing.Tuple[str, int]] = (("hubot", 34), ("monalisa", 12), ("defunkt", 5)),
	monthly: typing.Optional[typing.Sequence[int]] = None,
) -> gitrewind.activity.ActivityModel:

	"""Create a valid activity model with sensible test defaults."""

	if monthly is None:
		monthly = [60, 70, 80, 90, 100, 110, 120, 130, 140, 150, 80, 70]

	return gitrewind.activity.ActivityModel(
		user=gitrewind.activity.UserInfo(login=login, avatar_url=f"https://example.com/{login}.png"),
		year=year,
		totals=gitrewind.activity.Totals(
			commits=commits,
			pull_requests=40,
			reviews=25,
			active_days=active_days,
			longest_streak=14,
			repositories=9,
		),
		patterns=gitrewind.activity.Patterns(consistency_score=consistency, busiest_month=9),
		languages=tuple(
			gitrewind.activity.LanguageStats(name=name, percentage=percentage, commits=int(percentage * 10))
			for name, percentage in languages
		),
		collaborators=tuple(
			gitrewind.activity.CollaboratorStats(login=name, interactions=interactions)
			for name, interactions in collaborators
		),
		monthly_activity=_monthly(monthly),
	).validate()


@pytest.fixture
def make_model () -> ModelFactory:

	"""Factory for activity models; keyword arguments override the defaults."""

	return build_model


@pytest.fixture
def busy_model () -> gitrewind.activity.ActivityModel:

	"""A high-activity, consistent year."""

	return build_model(commits=2000, active_days=250, consistency=0.8)


@pytest.fixture
def empty_model () -> gitrewind.activity.ActivityModel:

	"""A year with no languages, no collaborators and no activity."""

	return build_model(
		login="newcomer",
		commits=0,
		active_days=0,
		consistency=0.0,
		languages=(),
		collaborators=(),
		monthly=[0] * 12,
	)
