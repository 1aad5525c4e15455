"""Tests for the replayable bit source."""

from fractions import Fraction

import pytest

from qchess.core.arithmetic import ONE, ZERO
from qchess.core.errors import InsufficientEntropyError, InvalidValueError
from qchess.core.random_source import BitSource


class TestFilling:
    def test_custom_bits_are_fifo(self) -> None:
        bits = BitSource([1, 0, 1])
        assert bits.draw_bits(2) == [1, 0]
        assert bits.remaining() == 1

    def test_add_random(self) -> None:
        bits = BitSource()
        bits.add_random(16)
        assert bits.remaining() == 16
        assert set(bits.draw_bits(16)) <= {0, 1}

    def test_rejects_non_bits(self) -> None:
        with pytest.raises(InvalidValueError):
            BitSource([0, 2])

    def test_clear(self) -> None:
        bits = BitSource([1, 1])
        bits.clear()
        assert bits.remaining() == 0

    def test_running_dry(self) -> None:
        with pytest.raises(InsufficientEntropyError):
            BitSource([1]).draw_bits(2)


class TestRandom:
    def test_big_endian(self) -> None:
        assert BitSource([1, 0]).random(4) == 2

    def test_rejection_sampling(self) -> None:
        bits = BitSource([1, 1, 0, 1])
        assert bits.random(3) == 1
        assert bits.remaining() == 0

    def test_limit_one_needs_no_bits(self) -> None:
        assert BitSource().random(1) == 0

    @pytest.mark.parametrize("limit", [0, -3, True])
    def test_invalid_limit(self, limit: int) -> None:
        with pytest.raises(InvalidValueError):
            BitSource([0]).random(limit)


class TestChoices:
    def test_coin(self) -> None:
        assert BitSource([0]).coin(Fraction(1, 2))
        assert not BitSource([1]).coin(Fraction(1, 2))

    def test_certain_coins_draw_nothing(self) -> None:
        bits = BitSource()
        assert bits.coin(ONE)
        assert not bits.coin(ZERO)

    def test_choose(self) -> None:
        assert BitSource([1, 0]).choose(["a", "b", "c"]) == "c"

    def test_choose_empty(self) -> None:
        with pytest.raises(InvalidValueError):
            BitSource().choose([])

    def test_choose_weighted(self) -> None:
        weights = {"a": Fraction(1, 4), "b": Fraction(3, 4)}
        assert BitSource([0, 0]).choose_weighted(["a", "b"], weights.__getitem__) == "a"
        assert BitSource([0, 1]).choose_weighted(["a", "b"], weights.__getitem__) == "b"
        assert BitSource([1, 1]).choose_weighted(["a", "b"], weights.__getitem__) == "b"

    def test_choose_weighted_redraws_leftover_mass(self) -> None:
        bits = BitSource([1, 1, 0, 1])
        quarter = Fraction(1, 4)
        assert bits.choose_weighted(["a", "b"], lambda _: quarter) == "b"
        assert bits.remaining() == 0

    def test_choose_weighted_needs_positive_total(self) -> None:
        with pytest.raises(InvalidValueError):
            BitSource([0]).choose_weighted(["a"], lambda _: ZERO)
