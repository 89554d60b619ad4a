"""Deterministic pseudo-random streams.

Every "random" decision in gitrewind (art style, melody steps, placeholder
collaborators, initial graph positions, cross-links) draws from a
:class:`SeededRandom` so that identical ``(username, year)`` input always
produces identical output.

The generator is mulberry32: a 32-bit state advanced with wrapping integer
arithmetic.  It is fast and reproducible, not cryptographic.
"""

import random
import typing


_MASK_32 = 0xFFFFFFFF
_MULBERRY_INCREMENT = 0x6D2B79F5


def _imul (a: int, b: int) -> int:

	"""Multiply two 32-bit integers, keeping the low 32 bits."""

	return (a * b) & _MASK_32


class SeededRandom (random.Random):

	"""
	A ``random.Random`` whose core stream is mulberry32.

	:meth:`random` and :meth:`getrandbits` are both built on the mulberry32
	output, so ``choice()``, ``uniform()``, ``randint()``, ``randbytes()`` and
	the other inherited helpers draw from the same deterministic stream.

	Example:
		```python
		rng = SeededRandom(42)
		rng.random()   # same value on every run and every platform
		```
	"""

	def __init__ (self, seed: typing.Optional[int] = 0) -> None:

		self._state = 0
		super().__init__(seed)


	def seed (self, a: typing.Any = None, version: int = 2) -> None:

		"""Reset the stream.  ``None`` means seed 0; there is no OS entropy."""

		if a is None:
			a = 0

		self._state = int(a) & _MASK_32
		self.gauss_next = None


	def _next_uint32 (self) -> int:

		"""Advance the state and return the next raw 32-bit output."""

		self._state = (self._state + _MULBERRY_INCREMENT) & _MASK_32

		t = self._state
		t = _imul(t ^ (t >> 15), t | 1)
		t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK_32)) & _MASK_32

		return (t ^ (t >> 14)) & _MASK_32


	def random (self) -> float:

		"""Return the next float in [0, 1)."""

		return self._next_uint32() / 4294967296.0


	def getrandbits (self, k: int) -> int:

		"""Return a non-negative integer with ``k`` random bits, built from 32-bit outputs."""

		if k < 0:
			raise ValueError("number of bits must be non-negative")

		if k == 0:
			return 0

		words = (k + 31) // 32
		value = 0

		for i in range(words):
			value |= self._next_uint32() << (32 * i)

		return value >> (words * 32 - k)


	def getstate (self) -> typing.Tuple[int, typing.Optional[float]]:

		return self._state, self.gauss_next


	def setstate (self, state: typing.Tuple[int, typing.Optional[float]]) -> None:

		self._state, self.gauss_next = state


def create_seeded_random (seed: int) -> typing.Callable[[], float]:

	"""Return a bare generator function yielding floats in [0, 1) for ``seed``."""

	return SeededRandom(seed).random


def hash_string (text: str) -> int:

	"""Hash a string to an unsigned 32-bit integer (``h * 31 + ord(c)``, wrapping)."""

	h = 0

	for ch in text:
		h = ((h << 5) - h + ord(ch)) & _MASK_32

	return h


def seed_from_user_year (username: str, year: int) -> int:

	"""
	Derive the session seed for a user and year.

	The username is case-folded so ``"Octocat"`` and ``"octocat"`` share a
	seed, matching GitHub's case-insensitive logins.
	"""

	return hash_string(f"{username.lower()}-{year}")
