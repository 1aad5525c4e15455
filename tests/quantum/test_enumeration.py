"""Tests for enumerating the classical realisations of a quantum position."""

from qchess.core.enums import Declaration
from qchess.core.move import DeclaredMove, StandardMove
from qchess.core.notation import decode_position
from qchess.core.position import QuantumPosition
from qchess.core.types import parse_square as sq
from qchess.quantum.enumeration import (
    first_possible_position,
    is_move_always_legal,
    is_move_possible,
    legality_varies,
    possible_positions,
)

META = (
    "turn: white, castling: wl false wr false bl false br false, "
    "enpassant: false, qubits: w 0 b 0"
)

# Rook on a1 whose file is blocked only when the split knight stands on a2.
SPLIT_BLOCKER = "|".join(
    (
        META,
        "kingW: (e1,1/1)",
        "rookW: (a1,1/1)",
        "knightW: (a2,1/2), (c1,1/2)",
        "kingB: (e8,1/1)",
    )
)

ROOK_UP = DeclaredMove(StandardMove(sq("a1"), sq("a4")), Declaration.NON_LEAPING)


class TestPossiblePositions:
    def test_classical_position_has_one(self, start: QuantumPosition) -> None:
        boards = list(possible_positions(start))
        assert len(boards) == 1
        assert len(boards[0]) == 32

    def test_one_board_per_unit(self) -> None:
        boards = list(possible_positions(decode_position(SPLIT_BLOCKER)))
        assert len(boards) == 2
        assert [sq("a2") in b.occupied() for b in boards] == [True, False]

    def test_missing_mass_adds_absent_choice(self) -> None:
        position = decode_position("|".join((META, "kingW: (e1,1/1)", "knightB: (c6,1/2)")))
        boards = list(possible_positions(position))
        assert [len(b) for b in boards] == [2, 1]

    def test_pinned_unit(self) -> None:
        position = decode_position(SPLIT_BLOCKER)
        boards = list(possible_positions(position, fixed_object=2, fixed_unit=1))
        assert len(boards) == 1
        assert sq("c1") in boards[0].occupied()
        assert sq("a2") not in first_possible_position(position, 2, 1).occupied()

    def test_boards_carry_metadata(self) -> None:
        board = first_possible_position(decode_position(SPLIT_BLOCKER))
        assert board.data is not None
        assert board.data.en_passant is None


class TestLegalityQueries:
    def test_varies(self) -> None:
        position = decode_position(SPLIT_BLOCKER)
        assert legality_varies(ROOK_UP, position)
        assert is_move_possible(ROOK_UP, position)
        assert not is_move_always_legal(ROOK_UP, position)

    def test_pinning_settles_legality(self) -> None:
        position = decode_position(SPLIT_BLOCKER)
        assert not legality_varies(ROOK_UP, position, fixed_object=2, fixed_unit=0)

    def test_unrelated_move_always_legal(self) -> None:
        position = decode_position(SPLIT_BLOCKER)
        step = DeclaredMove(StandardMove(sq("e1"), sq("d1")), Declaration.NON_LEAPING)
        assert is_move_always_legal(step, position)
        assert not legality_varies(step, position)

    def test_impossible(self, start: QuantumPosition) -> None:
        blocked = DeclaredMove(StandardMove(sq("a1"), sq("a4")), Declaration.NON_LEAPING)
        assert not is_move_possible(blocked, start)
