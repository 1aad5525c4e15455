"""Replayable source of random bits.

Every chance decision of the engine (which dependency to measure, how a
measurement collapses) is drawn from a :class:`BitSource`.  Filling the source
with a recorded bitstream replays a game exactly.
"""

from __future__ import annotations

import secrets
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from fractions import Fraction
from typing import TypeVar

from qchess.core.arithmetic import fraction_sum, lcm_of
from qchess.core.errors import InsufficientEntropyError, InvalidValueError

T = TypeVar("T")


class BitSource:
    """FIFO queue of pre-drawn bits consumed by weighted random choices.

    Not thread-safe: one source belongs to one game session.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits: Iterable[int] = ()) -> None:
        self._bits: deque[int] = deque()
        self.add_custom(bits)

    # ── Filling ──────────────────────────────────────────────────────────

    def add_random(self, count: int) -> None:
        """Append *count* cryptographically random bits."""
        if count < 0:
            raise InvalidValueError(f"Bit count must be non-negative: {count}")
        value = secrets.randbits(count) if count else 0
        self._bits.extend((value >> shift) & 1 for shift in range(count - 1, -1, -1))

    def add_custom(self, bits: Iterable[int]) -> None:
        """Append fixed bits, e.g. a recorded stream or a test script."""
        checked = list(bits)
        if any(bit not in (0, 1) for bit in checked):
            raise InvalidValueError("Bits must be 0 or 1")
        self._bits.extend(checked)

    def clear(self) -> None:
        self._bits.clear()

    # ── Drawing ──────────────────────────────────────────────────────────

    def remaining(self) -> int:
        return len(self._bits)

    def draw_bits(self, count: int) -> list[int]:
        """Consume *count* bits from the front of the queue."""
        if count > len(self._bits):
            raise InsufficientEntropyError(
                f"Need {count} bits but only {len(self._bits)} remain"
            )
        return [self._bits.popleft() for _ in range(count)]

    def random(self, limit: int) -> int:
        """Uniform integer in ``[0, limit)`` by rejection sampling.

        Each attempt reads ``ceil(log2(limit))`` bits as a big-endian integer
        and is repeated while the value falls outside the range.
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidValueError(f"Invalid random limit: {limit!r}")
        width = (limit - 1).bit_length()
        while True:
            value = 0
            for bit in self.draw_bits(width):
                value = (value << 1) | bit
            if value < limit:
                return value

    def coin(self, probability: Fraction) -> bool:
        """True with exactly *probability*."""
        return self.random(probability.denominator) < probability.numerator

    def choose(self, items: Sequence[T]) -> T:
        """Uniformly chosen element of a non-empty sequence."""
        if not items:
            raise InvalidValueError("Cannot choose from an empty sequence")
        return items[self.random(len(items))]

    def choose_weighted(self, items: Sequence[T], weight: Callable[[T], Fraction]) -> T:
        """Element chosen proportionally to its exact *weight*.

        When the weights sum to less than one the leftover mass triggers a
        redraw, so the choice is conditioned on the listed items.
        """
        if not items:
            raise InvalidValueError("Cannot choose from an empty sequence")
        weights = [weight(item) for item in items]
        if fraction_sum(weights) <= 0:
            raise InvalidValueError("Weights must have a positive sum")
        common = lcm_of(*(w.denominator for w in weights))
        while True:
            current = self.random(common)
            for item, w in zip(items, weights):
                current -= w.numerator * (common // w.denominator)
                if current < 0:
                    return item

    def __repr__(self) -> str:
        return f"BitSource(remaining={len(self._bits)})"
