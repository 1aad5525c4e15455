"""Tests for dependency discovery and the measurement operator."""

from fractions import Fraction

import pytest

from qchess.core.arithmetic import ONE
from qchess.core.enums import Declaration, MeasurementType, Side
from qchess.core.errors import InvalidValueError
from qchess.core.move import DeclaredMove, StandardMove
from qchess.core.notation import decode_position
from qchess.core.position import QuantumPosition
from qchess.core.random_source import BitSource
from qchess.core.types import parse_square as sq
from qchess.quantum.measurement import (
    checking_dependencies,
    generate_dependencies,
    make_measurement,
    random_dependency,
)

META = (
    "turn: white, castling: wl false wr false bl false br false, "
    "enpassant: false, qubits: w 0 b 0"
)
HALF = Fraction(1, 2)


def _position(*objects: str) -> QuantumPosition:
    return decode_position("|".join((META, *objects)))


def _split_blocker() -> QuantumPosition:
    return _position(
        "kingW: (e1,1/1)", "rookW: (a1,1/1)", "knightW: (a2,1/2), (c1,1/2)", "kingB: (e8,1/1)"
    )


def _entangled() -> QuantumPosition:
    return _position(
        "kingW: (e1,1/1)",
        "knightW: (a2,1/4), (b4,1/4), (c1,1/2), <0-1>, <1-0>",
        "kingB: (e8,1/1)",
    )


class TestDependencies:
    def test_blocker_of_slider(self) -> None:
        rook_up = DeclaredMove(StandardMove(sq("a1"), sq("a4")), Declaration.NON_LEAPING)
        position = _split_blocker()
        assert generate_dependencies(rook_up, position) == [sq("a2")]
        assert random_dependency(rook_up, position, BitSource()) == sq("a2")

    def test_certain_board_has_none(self, start: QuantumPosition) -> None:
        knight = DeclaredMove(StandardMove(sq("b1"), sq("c3")))
        assert generate_dependencies(knight, start) == []

    def test_checking_dependencies(self) -> None:
        position = _position(
            "kingW: (e1,1/1)",
            "kingB: (a8,1/1)",
            "rookB: (e8,1/1)",
            "knightW: (e4,1/2), (g5,1/2)",
        )
        found = checking_dependencies([sq("e1")], position, Side.WHITE)
        assert found == [sq("e4"), sq("e1"), sq("e8")]

    def test_settled_check_has_no_dependencies(self) -> None:
        position = _position("kingW: (e1,1/1)", "kingB: (a8,1/1)", "rookB: (e8,1/1)")
        assert checking_dependencies([sq("e1")], position, Side.WHITE) == []


class TestBinaryMeasurement:
    def test_present(self) -> None:
        position = _split_blocker()
        bits = BitSource([0, 0])
        assert make_measurement(position, sq("a2"), bits)
        knight = position.objects[2]
        assert [(u.coord, u.probability) for u in knight.units] == [(sq("a2"), ONE)]
        assert bits.remaining() == 0

    def test_absent_renormalises(self) -> None:
        position = _split_blocker()
        assert not make_measurement(position, sq("a2"), BitSource([1]))
        knight = position.objects[2]
        assert [(u.coord, u.probability) for u in knight.units] == [(sq("c1"), ONE)]

    def test_absent_takes_entangled_units(self) -> None:
        position = _entangled()
        assert not make_measurement(position, sq("b4"), BitSource([1]))
        knight = position.objects[1]
        assert [(u.coord, u.probability) for u in knight.units] == [(sq("c1"), ONE)]
        assert knight.units[0].entangled_to == []

    def test_absent_removes_empty_object(self) -> None:
        position = _position("kingW: (e1,1/1)", "knightB: (c6,1/2)", "kingB: (e8,1/1)")
        assert not make_measurement(position, sq("c6"), BitSource([1]))
        assert position.find_object(sq("c6")) is None
        assert len(position.objects) == 2

    def test_certain_unit_needs_no_bits(self, start: QuantumPosition) -> None:
        assert make_measurement(start, sq("e2"), BitSource())

    def test_empty_square(self, start: QuantumPosition) -> None:
        with pytest.raises(InvalidValueError):
            make_measurement(start, sq("e4"), BitSource([0]))

    def test_excluded_side(self, start: QuantumPosition) -> None:
        with pytest.raises(InvalidValueError):
            make_measurement(start, sq("e2"), BitSource(), exclude_side=Side.WHITE)


class TestProportionalMeasurement:
    def test_partner_chosen(self) -> None:
        position = _entangled()
        bits = BitSource([0, 1])
        assert not make_measurement(position, sq("a2"), bits, MeasurementType.PROPORTIONAL)
        knight = position.objects[1]
        assert [(u.coord, u.probability) for u in knight.units] == [
            (sq("b4"), HALF),
            (sq("c1"), HALF),
        ]
        assert all(not u.entangled_to for u in knight.units)
        assert bits.remaining() == 0

    def test_target_chosen_then_collapsed(self) -> None:
        position = _entangled()
        assert make_measurement(
            position, sq("a2"), BitSource([0, 0, 0]), MeasurementType.PROPORTIONAL
        )
        knight = position.objects[1]
        assert [(u.coord, u.probability) for u in knight.units] == [(sq("a2"), ONE)]

    def test_target_chosen_then_lost(self) -> None:
        position = _entangled()
        assert not make_measurement(
            position, sq("a2"), BitSource([0, 0, 1]), MeasurementType.PROPORTIONAL
        )
        knight = position.objects[1]
        assert [(u.coord, u.probability) for u in knight.units] == [(sq("c1"), ONE)]
