"""Color conversion helpers and language colors.

Colors travel through the parameter record as :class:`HSL` triples (hue in
degrees 0–360, saturation and lightness in percent 0–100), rounded to whole
numbers so the record serialises identically everywhere.  Renderers that
need hex strings use :func:`hsl_to_hex`.
"""

import dataclasses
import typing

import gitrewind.math_utils


DEFAULT_COLOR = "#858585"


# GitHub linguist colors for the languages most commonly seen in activity summaries.
LANGUAGE_COLORS: typing.Dict[str, str] = {
	"TypeScript": "#3178c6",
	"JavaScript": "#f1e05a",
	"Python": "#3572A5",
	"Rust": "#dea584",
	"Go": "#00ADD8",
	"Java": "#b07219",
	"C++": "#f34b7d",
	"C": "#555555",
	"C#": "#178600",
	"Ruby": "#701516",
	"Swift": "#F05138",
	"Kotlin": "#A97BFF",
	"PHP": "#4F5D95",
	"Shell": "#89e051",
	"HTML": "#e34c26",
	"CSS": "#563d7c",
	"Dart": "#00B4AB",
	"Scala": "#c22d40",
	"Haskell": "#5e5086",
	"Elixir": "#6e4a7e",
	"Lua": "#000080",
	"Vue": "#41b883",
	"Jupyter Notebook": "#DA5B0B",
}


@dataclasses.dataclass(frozen=True)
class HSL:

	"""A color as hue (degrees), saturation and lightness (percent)."""

	h: int
	s: int
	l: int


def _parse_hex (hex_color: str) -> typing.Tuple[int, int, int]:

	"""Split ``#rrggbb`` or ``#rgb`` into 0–255 channels."""

	digits = hex_color.lstrip("#")

	if len(digits) == 3:
		digits = "".join(ch * 2 for ch in digits)

	if len(digits) != 6:
		raise ValueError(f"Invalid hex color: {hex_color!r}")

	try:
		return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
	except ValueError:
		raise ValueError(f"Invalid hex color: {hex_color!r}") from None


def hex_to_hsl (hex_color: str) -> HSL:

	"""Convert a hex color string to :class:`HSL`.

	Example:
		```python
		hex_to_hsl("#3178c6")  # → HSL(h=211, s=60, l=48)
		```
	"""

	r, g, b = (channel / 255.0 for channel in _parse_hex(hex_color))

	high = max(r, g, b)
	low = min(r, g, b)
	lightness = (high + low) / 2.0

	if high == low:
		hue = 0.0
		saturation = 0.0

	else:
		delta = high - low
		saturation = delta / (2.0 - high - low) if lightness > 0.5 else delta / (high + low)

		if high == r:
			hue = (g - b) / delta + (6.0 if g < b else 0.0)
		elif high == g:
			hue = (b - r) / delta + 2.0
		else:
			hue = (r - g) / delta + 4.0

		hue /= 6.0

	round_half_up = gitrewind.math_utils.round_half_up

	return HSL(
		h=round_half_up(hue * 360) % 360,
		s=round_half_up(saturation * 100),
		l=round_half_up(lightness * 100),
	)


def hsl_to_hex (color: HSL) -> str:

	"""Convert :class:`HSL` to a lowercase ``#rrggbb`` string."""

	hue = (color.h % 360) / 360.0
	saturation = gitrewind.math_utils.clamp(color.s, 0, 100) / 100.0
	lightness = gitrewind.math_utils.clamp(color.l, 0, 100) / 100.0

	def channel (offset: float) -> int:
		k = (offset + hue * 12) % 12
		a = saturation * min(lightness, 1 - lightness)
		value = lightness - a * max(-1.0, min(k - 3, 9 - k, 1.0))
		return gitrewind.math_utils.round_half_up(value * 255)

	return "#{:02x}{:02x}{:02x}".format(channel(0), channel(8), channel(4))


def rotate_hue (color: HSL, degrees: float) -> HSL:

	"""Return ``color`` with its hue rotated, wrapping at 360."""

	return dataclasses.replace(color, h=gitrewind.math_utils.round_half_up(color.h + degrees) % 360)


def is_hex_color (value: str) -> bool:

	"""True when ``value`` parses as ``#rrggbb`` or ``#rgb``."""

	try:
		_parse_hex(value)
	except ValueError:
		return False

	return True


def get_language_color (name: str, fallback: typing.Optional[str] = None) -> str:

	"""
	Return the canonical color for a language.

	Unknown languages use ``fallback`` (typically the color carried by the
	activity data) when it is a valid hex color, and :data:`DEFAULT_COLOR`
	otherwise.
	"""

	if name in LANGUAGE_COLORS:
		return LANGUAGE_COLORS[name]

	if fallback and is_hex_color(fallback):
		return fallback

	return DEFAULT_COLOR
