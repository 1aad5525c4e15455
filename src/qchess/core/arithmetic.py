"""Exact rational helpers for probability bookkeeping.

Probabilities are :class:`fractions.Fraction` values: always reduced, with a
positive denominator, and immutable, so they are never aliased across units.
Floating point is only used by callers for presentation and qubit weighting.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from fractions import Fraction
from typing import Final

from qchess.core.errors import InvalidValueError

ZERO: Final = Fraction(0)
ONE: Final = Fraction(1)


def _is_integer(candidate: object) -> bool:
    return isinstance(candidate, int) and not isinstance(candidate, bool)


def make_fraction(numerator: int, denominator: int = 1) -> Fraction:
    """Build a reduced fraction, rejecting non-integers and zero denominators."""
    if not (_is_integer(numerator) and _is_integer(denominator)):
        raise InvalidValueError(
            f"Fraction parts must be integers: {numerator!r}/{denominator!r}"
        )
    if denominator == 0:
        raise InvalidValueError("Fraction denominator must be non-zero")
    return Fraction(numerator, denominator)


def reciprocal(value: Fraction) -> Fraction:
    """``1 / value``; raises :class:`ZeroDivisionError` for zero."""
    if value == 0:
        raise ZeroDivisionError("Reciprocal of zero")
    return Fraction(value.denominator, value.numerator)


def lcm_of(*numbers: int) -> int:
    """Least common multiple of any amount of positive integers."""
    result = 1
    for number in numbers:
        result = result * number // math.gcd(result, number)
    return result


def fraction_sum(values: Iterable[Fraction]) -> Fraction:
    """Exact sum over a common denominator (0 for an empty iterable)."""
    terms = list(values)
    if not terms:
        return ZERO
    common = lcm_of(*(term.denominator for term in terms))
    return Fraction(
        sum(term.numerator * (common // term.denominator) for term in terms), common
    )


def fraction_product(values: Iterable[Fraction]) -> Fraction:
    """Exact product (1 for an empty iterable)."""
    result = ONE
    for value in values:
        result *= value
    return result


def serialize_fraction(value: Fraction) -> str:
    """``'n/d'`` form, e.g. ``Fraction(1, 2)`` -> ``'1/2'``."""
    return f"{value.numerator}/{value.denominator}"


def parse_fraction(text: str) -> Fraction:
    """Parse the ``'n/d'`` form produced by :func:`serialize_fraction`."""
    numerator, sep, denominator = text.partition("/")
    if not sep:
        raise InvalidValueError(f"Invalid fraction: {text!r}")
    try:
        parts = int(numerator), int(denominator)
    except ValueError:
        raise InvalidValueError(f"Invalid fraction: {text!r}") from None
    return make_fraction(*parts)
