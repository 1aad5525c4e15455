"""Candidate move generation and checkmate detection over superposed boards."""

from __future__ import annotations

from qchess.core.enums import PieceKind, Side
from qchess.core.errors import InvalidValueError
from qchess.core.geometry import is_in_range, required_declarations
from qchess.core.move import (
    CastleMove,
    DeclaredMove,
    EnPassantMove,
    Move,
    PawnDoubleMove,
    StandardMove,
)
from qchess.core.position import QuantumObject, QuantumPosition, Unit
from qchess.core.rules import Rules
from qchess.core.types import ALL_SQUARES, pawn_rank, promotion_rank
from qchess.quantum.enumeration import is_move_always_legal, possible_positions


def _owner(unit: Unit, position: QuantumPosition) -> QuantumObject:
    for obj in position.objects:
        if any(candidate is unit for candidate in obj.units):
            return obj
    raise InvalidValueError(f"Unit on {unit.coord} is not part of this position")


def candidate_moves(
    unit: Unit, position: QuantumPosition, side: Side | None = None
) -> list[DeclaredMove]:
    """Every move shape worth trying from *unit*, with its required declarations.

    Pawns reaching the last rank promote to a queen.  An empty en passant
    target replaces the ordinary step onto it.
    """
    obj = _owner(unit, position)
    kind = obj.kind_of(unit)
    side = obj.side if side is None else side
    start = unit.coord.without_promotion()

    moves: list[Move] = []
    for square in ALL_SQUARES:
        end = square
        if kind == PieceKind.PAWN and square.y == promotion_rank(side):
            end = square.with_promotion(PieceKind.QUEEN)
        if is_in_range(start, end, kind, side):
            moves.append(StandardMove(start, end))

    target = position.data.en_passant
    if (
        kind == PieceKind.PAWN
        and target is not None
        and position.find_unit(target, exclude_side=side) is None
    ):
        for index, move in enumerate(moves):
            if isinstance(move, StandardMove) and move.end == target:
                del moves[index]
                moves.append(EnPassantMove(start, target))
                break

    if kind == PieceKind.PAWN and start.y == pawn_rank(side):
        moves.append(PawnDoubleMove(start))

    if kind == PieceKind.KING:
        moves.extend(
            CastleMove(side, direction)
            for direction in (-1, 1)
            if position.data.can_castle(side, direction)
        )

    return [DeclaredMove(move, required_declarations(move, kind)) for move in moves]


def detect_checkmate(position: QuantumPosition, side: Side | None = None) -> bool:
    """Whether *side* (default: to move) is checkmated.

    The side must be in check in some realisation, and no object may have
    every unit holding a move that is legal in every realisation.
    """
    side = position.data.whose_turn if side is None else side
    if not any(Rules.is_in_check(board, side) for board in possible_positions(position)):
        return False
    for obj in position.side_objects(side):
        if all(
            any(
                is_move_always_legal(candidate, position, True)
                for candidate in candidate_moves(unit, position, side)
            )
            for unit in obj.units
        ):
            return False
    return True
