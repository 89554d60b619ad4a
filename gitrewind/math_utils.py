"""Small numeric helpers shared by the parameter, color and layout code."""

import math
import typing


def clamp (value: float, low: float, high: float) -> float:

	"""Constrain ``value`` to ``[low, high]``."""

	return max(low, min(high, value))


def lerp (start: float, end: float, t: float) -> float:

	"""Linearly interpolate between ``start`` and ``end``."""

	return start + (end - start) * t


def scale_clamp (value: float, in_min: float, in_max: float, out_min: float = 0.0, out_max: float = 1.0) -> float:

	"""Scale a value from an input range to an output range and clamp the result.

	Maps a value from [in_min, in_max] to [out_min, out_max]. If the result
	falls outside the output range, it is clamped to the nearest bound.
	Correctly handles reversed ranges (where min > max).

	Example:
		```python
		# Twenty commits a day and above saturates at 1.0
		scale_clamp(commits_per_day, 0, 20)
		```
	"""

	if in_min == in_max:
		raise ValueError(f"Input range cannot be zero-width ({in_min} == {in_max})")

	percentage = (value - in_min) / (in_max - in_min)
	scaled = lerp(out_min, out_max, percentage)

	if out_min < out_max:
		return clamp(scaled, out_min, out_max)
	else:
		return clamp(scaled, out_max, out_min)


def round_half_up (value: float) -> int:

	"""Round to the nearest integer with halves going up (``round()`` uses banker's rounding)."""

	return int(math.floor(value + 0.5))


def normalized_entropy (weights: typing.Sequence[float]) -> float:

	"""
	Shannon entropy of a weight distribution divided by its maximum.

	Returns 0.0 for fewer than two weights or a zero total.
	"""

	total = sum(weights)

	if len(weights) <= 1 or total <= 0:
		return 0.0

	entropy = 0.0

	for weight in weights:
		p = weight / total
		if p > 0:
			entropy -= p * math.log2(p)

	return clamp(entropy / math.log2(len(weights)), 0.0, 1.0)
