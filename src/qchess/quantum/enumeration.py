"""Classical realisations of a quantum position."""

from __future__ import annotations

import itertools
from collections.abc import Iterator

from qchess.core.arithmetic import ONE
from qchess.core.move import DeclaredMove
from qchess.core.position import ClassicalPosition, PlacedPiece, QuantumPosition
from qchess.core.rules import Rules


def possible_positions(
    position: QuantumPosition,
    fixed_object: int | None = None,
    fixed_unit: int | None = None,
) -> Iterator[ClassicalPosition]:
    """Yield every classical board consistent with *position*.

    Each object contributes one of its units, or nothing when its total
    probability is below one.  The last object varies fastest.  Passing both
    *fixed_object* and *fixed_unit* pins that object to that unit.
    """
    digits: list[range] = []
    for index, obj in enumerate(position.objects):
        if fixed_unit is not None and index == fixed_object:
            digits.append(range(fixed_unit, fixed_unit + 1))
            continue
        absent = 1 if obj.total_probability() < ONE else 0
        digits.append(range(len(obj.units) + absent))

    for choice in itertools.product(*digits):
        pieces = [
            PlacedPiece(obj.piece, obj.units[digit].coord)
            for obj, digit in zip(position.objects, choice)
            if digit < len(obj.units)
        ]
        yield ClassicalPosition(pieces, position.data.copy())


def first_possible_position(
    position: QuantumPosition,
    fixed_object: int | None = None,
    fixed_unit: int | None = None,
) -> ClassicalPosition:
    return next(possible_positions(position, fixed_object, fixed_unit))


def legality_varies(
    declared: DeclaredMove,
    position: QuantumPosition,
    win_by_checkmate: bool = False,
    fixed_object: int | None = None,
    fixed_unit: int | None = None,
) -> bool:
    """Whether *declared* is legal in some realisations and illegal in others."""
    seen_legal = seen_illegal = False
    for board in possible_positions(position, fixed_object, fixed_unit):
        if Rules.is_move_legal(declared, board, win_by_checkmate):
            seen_legal = True
        else:
            seen_illegal = True
        if seen_legal and seen_illegal:
            return True
    return False


def is_move_possible(
    declared: DeclaredMove, position: QuantumPosition, win_by_checkmate: bool = False
) -> bool:
    """Legal in at least one realisation."""
    return any(
        Rules.is_move_legal(declared, board, win_by_checkmate)
        for board in possible_positions(position)
    )


def is_move_always_legal(
    declared: DeclaredMove, position: QuantumPosition, win_by_checkmate: bool = False
) -> bool:
    """Legal in every realisation."""
    return all(
        Rules.is_move_legal(declared, board, win_by_checkmate)
        for board in possible_positions(position)
    )
