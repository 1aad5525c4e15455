"""Tests for candidate move generation and checkmate detection."""

from qchess.core.enums import Declaration, MoveKind, Side
from qchess.core.geometry import move_end
from qchess.core.notation import decode_position
from qchess.core.position import QuantumPosition, Unit
from qchess.core.types import parse_square as sq
from qchess.game.checkmate import candidate_moves, detect_checkmate

META = (
    "turn: black, castling: wl false wr false bl false br false, "
    "enpassant: false, qubits: w 0 b 0"
)


def _position(*objects: str, meta: str = META) -> QuantumPosition:
    return decode_position("|".join((meta, *objects)))


def _unit(position: QuantumPosition, square: str) -> Unit:
    unit = position.find_unit(sq(square))
    assert unit is not None
    return unit


class TestCandidateMoves:
    def test_knight(self, start: QuantumPosition) -> None:
        moves = candidate_moves(_unit(start, "b1"), start)
        assert {move_end(m.move) for m in moves} == {sq("a3"), sq("c3"), sq("d2")}
        assert all(m.declarations == Declaration.NONE for m in moves)

    def test_pawn_includes_double(self, start: QuantumPosition) -> None:
        moves = candidate_moves(_unit(start, "e2"), start)
        kinds = sorted(m.move.kind for m in moves)
        assert kinds == [MoveKind.STANDARD] * 3 + [MoveKind.PAWN_DOUBLE]
        straight = next(m for m in moves if move_end(m.move) == sq("e3"))
        assert straight.declarations == Declaration.NO_CAPTURE | Declaration.NON_LEAPING

    def test_king_castles(self, start: QuantumPosition) -> None:
        moves = candidate_moves(_unit(start, "e1"), start)
        assert len(moves) == 7
        assert sum(m.move.kind == MoveKind.CASTLE for m in moves) == 2

    def test_promotion_to_queen(self) -> None:
        position = _position("kingW: (e1,1/1)", "kingB: (a8,1/1)", "pawnB: (d2,1/1)")
        moves = candidate_moves(_unit(position, "d2"), position)
        ends = [m.move.end for m in moves]  # type: ignore[union-attr]
        assert all(end.y == 1 and end.promotion is not None for end in ends)
        assert len(ends) == 3

    def test_en_passant_replaces_step(self) -> None:
        meta = META.replace("turn: black", "turn: white").replace(
            "enpassant: false", "enpassant: d6"
        )
        position = _position(
            "kingW: (e1,1/1)", "pawnW: (e5,1/1)", "kingB: (e8,1/1)", "pawnB: (d5,1/1)", meta=meta
        )
        moves = candidate_moves(_unit(position, "e5"), position)
        kinds = {move_end(m.move): m.move.kind for m in moves}
        assert kinds[sq("d6")] == MoveKind.EN_PASSANT
        assert kinds[sq("e6")] == MoveKind.STANDARD
        assert len(moves) == 3


class TestDetectCheckmate:
    def test_start_is_not_mate(self, start: QuantumPosition) -> None:
        assert not detect_checkmate(start)
        assert not detect_checkmate(start, Side.BLACK)

    def test_back_rank_mate(self) -> None:
        position = _position(
            "kingW: (e1,1/1)",
            "rookW: (a8,1/1)",
            "kingB: (h8,1/1)",
            "pawnB: (g7,1/1)",
            "pawnB: (h7,1/1)",
        )
        assert detect_checkmate(position)

    def test_check_with_escape(self) -> None:
        position = _position(
            "kingW: (e1,1/1)",
            "rookW: (a8,1/1)",
            "kingB: (h8,1/1)",
            "pawnB: (g7,1/1)",
        )
        assert not detect_checkmate(position)

    def test_superposed_attacker(self) -> None:
        position = _position(
            "kingW: (e1,1/1)",
            "rookW: (a8,1/2), (a1,1/2)",
            "kingB: (h8,1/1)",
            "pawnB: (g7,1/1)",
            "pawnB: (h7,1/1)",
        )
        assert detect_checkmate(position)
