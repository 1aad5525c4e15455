"""Tests for exact fraction helpers."""

from fractions import Fraction

import pytest

from qchess.core.arithmetic import (
    ONE,
    ZERO,
    fraction_product,
    fraction_sum,
    lcm_of,
    make_fraction,
    parse_fraction,
    reciprocal,
    serialize_fraction,
)
from qchess.core.errors import InvalidValueError


class TestMakeFraction:
    def test_reduces(self) -> None:
        assert make_fraction(2, 4) == Fraction(1, 2)

    def test_default_denominator(self) -> None:
        assert make_fraction(3) == Fraction(3)

    def test_negative_denominator_normalised(self) -> None:
        value = make_fraction(1, -2)
        assert value.numerator == -1
        assert value.denominator == 2

    @pytest.mark.parametrize("parts", [(1.5, 2), (1, 2.0), (True, 2), ("1", 2)])
    def test_rejects_non_integers(self, parts: tuple[object, object]) -> None:
        with pytest.raises(InvalidValueError):
            make_fraction(*parts)  # type: ignore[arg-type]

    def test_rejects_zero_denominator(self) -> None:
        with pytest.raises(InvalidValueError):
            make_fraction(1, 0)


class TestOperations:
    def test_reciprocal(self) -> None:
        assert reciprocal(Fraction(2, 3)) == Fraction(3, 2)
        assert reciprocal(Fraction(-1, 4)) == Fraction(-4)

    def test_reciprocal_of_zero(self) -> None:
        with pytest.raises(ZeroDivisionError):
            reciprocal(ZERO)

    def test_lcm(self) -> None:
        assert lcm_of(4, 6) == 12
        assert lcm_of(3, 5, 7) == 105
        assert lcm_of() == 1

    def test_sum(self) -> None:
        assert fraction_sum([Fraction(1, 2), Fraction(1, 3)]) == Fraction(5, 6)
        assert fraction_sum([Fraction(1, 4)] * 4) == ONE
        assert fraction_sum([]) == ZERO

    def test_product(self) -> None:
        assert fraction_product([Fraction(1, 2), Fraction(2, 3)]) == Fraction(1, 3)
        assert fraction_product([]) == ONE

    def test_division_stays_exact(self) -> None:
        assert Fraction(1, 3) / 2 + Fraction(1, 6) == Fraction(1, 3)


class TestSerialisation:
    def test_serialize(self) -> None:
        assert serialize_fraction(Fraction(1, 2)) == "1/2"
        assert serialize_fraction(ONE) == "1/1"

    def test_parse(self) -> None:
        assert parse_fraction("3/4") == Fraction(3, 4)
        assert parse_fraction("2/4") == Fraction(1, 2)

    @pytest.mark.parametrize("text", ["abc", "1", "1/x", "1/0"])
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(InvalidValueError):
            parse_fraction(text)
