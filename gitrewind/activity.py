"""The yearly activity summary that drives every generator.

An :class:`ActivityModel` is produced upstream (API fetch plus aggregation)
and is read-only from here on.  This module only describes its shape,
validates the structural contract, and loads serialised models from disk.

Mappings may use either ``snake_case`` keys or the ``camelCase`` keys of the
web client's JSON, e.g. ``consistency_score`` or ``consistencyScore``.
"""

import dataclasses
import logging
import typing

import yaml


logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


@dataclasses.dataclass(frozen=True)
class UserInfo:

	login: str
	name: typing.Optional[str] = None
	avatar_url: str = ""


@dataclasses.dataclass(frozen=True)
class Totals:

	commits: int = 0
	pull_requests: int = 0
	reviews: int = 0
	additions: int = 0
	deletions: int = 0
	active_days: int = 0
	longest_streak: int = 0
	repositories: int = 0


@dataclasses.dataclass(frozen=True)
class Patterns:

	"""Behavioural patterns across the year.

	Attributes:
		busiest_day_of_week: 0 = Sunday … 6 = Saturday.
		busiest_hour: 0–23.
		busiest_month: 0 = January … 11 = December.
		consistency_score: 0.0–1.0, how evenly activity is spread.
		weekday_vs_weekend: Ratio of weekday to weekend commits.
	"""

	busiest_day_of_week: int = 0
	busiest_hour: int = 0
	busiest_month: int = 0
	consistency_score: float = 0.0
	weekday_vs_weekend: float = 1.0


@dataclasses.dataclass(frozen=True)
class LanguageStats:

	name: str
	color: str = ""
	percentage: float = 0.0
	commits: int = 0


@dataclasses.dataclass(frozen=True)
class CollaboratorStats:

	login: str
	avatar_url: str = ""
	interactions: int = 0
	shared_repos: typing.Tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class MonthlyActivity:

	"""Commits in one month, plus activity normalised to the year's peak month (0.0–1.0)."""

	month: int
	commits: int = 0
	normalized_activity: float = 0.0


@dataclasses.dataclass(frozen=True)
class DayActivity:

	date: str
	commits: int = 0
	level: int = 0


def empty_months () -> typing.Tuple[MonthlyActivity, ...]:

	"""Twelve zero-activity months."""

	return tuple(MonthlyActivity(month=m) for m in range(MONTHS_PER_YEAR))


@dataclasses.dataclass(frozen=True)
class ActivityModel:

	"""
	A user's yearly code-activity summary.

	Invariants (checked by :meth:`validate`):
		- ``monthly_activity`` has exactly 12 entries, entry *i* describing month *i*.
		- ``languages`` is sorted by descending percentage.
		- ``patterns.consistency_score`` lies in [0, 1].
	"""

	user: UserInfo
	year: int
	totals: Totals = dataclasses.field(default_factory=Totals)
	patterns: Patterns = dataclasses.field(default_factory=Patterns)
	languages: typing.Tuple[LanguageStats, ...] = ()
	collaborators: typing.Tuple[CollaboratorStats, ...] = ()
	monthly_activity: typing.Tuple[MonthlyActivity, ...] = dataclasses.field(default_factory=empty_months)
	daily_activity: typing.Mapping[str, DayActivity] = dataclasses.field(default_factory=dict)


	def validate (self) -> "ActivityModel":

		"""Raise ``ValueError`` if the model breaks its structural contract; return self otherwise."""

		if len(self.monthly_activity) != MONTHS_PER_YEAR:
			raise ValueError(
				f"monthly_activity must have {MONTHS_PER_YEAR} entries, got {len(self.monthly_activity)}"
			)

		for index, month in enumerate(self.monthly_activity):

			if month.month != index:
				raise ValueError(f"monthly_activity[{index}] describes month {month.month}")

			if not 0.0 <= month.normalized_activity <= 1.0:
				raise ValueError(
					f"monthly_activity[{index}].normalized_activity must be in [0, 1], got {month.normalized_activity}"
				)

		percentages = [language.percentage for language in self.languages]

		if percentages != sorted(percentages, reverse=True):
			raise ValueError("languages must be sorted by descending percentage")

		if not 0.0 <= self.patterns.consistency_score <= 1.0:
			raise ValueError(
				f"consistency_score must be in [0, 1], got {self.patterns.consistency_score}"
			)

		if self.totals.commits < 0 or self.totals.active_days < 0:
			raise ValueError("commit and active-day totals cannot be negative")

		return self


	@classmethod
	def from_dict (cls, data: typing.Mapping[str, typing.Any]) -> "ActivityModel":

		"""Build and validate a model from a plain mapping (e.g. parsed JSON or YAML)."""

		if "user" not in data or "year" not in data:
			raise ValueError("activity data requires 'user' and 'year'")

		try:
			model = cls._from_mapping(data)
		except KeyError as e:
			raise ValueError(f"activity data is missing required key {e}") from None
		except (TypeError, AttributeError) as e:
			raise ValueError(f"activity data has an unexpected shape: {e}") from None

		return model.validate()


	@classmethod
	def _from_mapping (cls, data: typing.Mapping[str, typing.Any]) -> "ActivityModel":

		user_data = data["user"]

		if isinstance(user_data, str):
			user = UserInfo(login=user_data)
		else:
			user = UserInfo(
				login=str(user_data["login"]),
				name=user_data.get("name"),
				avatar_url=_get(user_data, "avatar_url", "") or "",
			)

		totals_data = data.get("totals") or {}
		totals = Totals(**{
			field.name: int(_get(totals_data, field.name, 0))
			for field in dataclasses.fields(Totals)
		})

		patterns_data = data.get("patterns") or {}
		patterns = Patterns(
			busiest_day_of_week=int(_get(patterns_data, "busiest_day_of_week", 0)),
			busiest_hour=int(_get(patterns_data, "busiest_hour", 0)),
			busiest_month=int(_get(patterns_data, "busiest_month", 0)),
			consistency_score=float(_get(patterns_data, "consistency_score", 0.0)),
			weekday_vs_weekend=float(_get(patterns_data, "weekday_vs_weekend", 1.0)),
		)

		languages = tuple(
			LanguageStats(
				name=str(item["name"]),
				color=str(item.get("color") or ""),
				percentage=float(item.get("percentage", 0.0)),
				commits=int(item.get("commits", 0)),
			)
			for item in data.get("languages") or []
		)

		collaborators = tuple(
			CollaboratorStats(
				login=str(item["login"]),
				avatar_url=_get(item, "avatar_url", "") or "",
				interactions=int(item.get("interactions", 0)),
				shared_repos=tuple(_get(item, "shared_repos", None) or ()),
			)
			for item in data.get("collaborators") or []
		)

		monthly_data = _get(data, "monthly_activity", None)

		if monthly_data is None:
			monthly = empty_months()
		else:
			monthly = tuple(
				MonthlyActivity(
					month=int(item.get("month", index)),
					commits=int(item.get("commits", 0)),
					normalized_activity=float(_get(item, "normalized_activity", 0.0)),
				)
				for index, item in enumerate(monthly_data)
			)

		daily_data = _get(data, "daily_activity", None) or {}

		if isinstance(daily_data, typing.Mapping):
			daily_items = [
				dict(value, date=key) if isinstance(value, typing.Mapping) else {"date": key, "commits": value}
				for key, value in daily_data.items()
			]
		else:
			daily_items = list(daily_data)

		daily = {
			str(item["date"]): DayActivity(
				date=str(item["date"]),
				commits=int(item.get("commits", 0)),
				level=int(item.get("level", 0)),
			)
			for item in daily_items
		}

		return cls(
			user=user,
			year=int(data["year"]),
			totals=totals,
			patterns=patterns,
			languages=languages,
			collaborators=collaborators,
			monthly_activity=monthly,
			daily_activity=daily,
		)


def _camel (name: str) -> str:

	"""``consistency_score`` → ``consistencyScore``."""

	head, *rest = name.split("_")
	return head + "".join(part.capitalize() for part in rest)


def _get (data: typing.Mapping[str, typing.Any], name: str, default: typing.Any) -> typing.Any:

	"""Look up a snake_case key, falling back to its camelCase spelling."""

	if name in data:
		return data[name]

	return data.get(_camel(name), default)


def load_activity (path: str) -> ActivityModel:

	"""
	Load an activity model from a JSON or YAML file.

	JSON is a subset of YAML, so both formats go through ``yaml.safe_load``.
	"""

	with open(path, "r", encoding="utf-8") as f:
		data = yaml.safe_load(f)

	if not isinstance(data, dict):
		raise ValueError(f"{path}: expected a mapping at the top level")

	model = ActivityModel.from_dict(data)

	logger.info(f"Loaded activity for {model.user.login} ({model.year}) from {path}")

	return model
