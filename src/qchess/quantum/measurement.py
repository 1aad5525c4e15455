"""Dependencies of a move's legality and the measurement (collapse) operator.

A dependency is a square whose occupancy is uncertain and decides whether a
declared move is legal.  Measuring it collapses the owning object, either to
yes/no (binary) or by folding the entangled placements into one
(proportional).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from qchess.core.arithmetic import ONE, fraction_sum
from qchess.core.enums import Declaration, MeasurementType, MoveKind, PieceKind, Side
from qchess.core.errors import InvalidValueError
from qchess.core.geometry import captured_square, start_middle_end
from qchess.core.move import DeclaredMove, Move, StandardMove
from qchess.core.position import ClassicalPosition, QuantumObject, QuantumPosition
from qchess.core.random_source import BitSource
from qchess.core.rules import Rules
from qchess.core.types import Coord
from qchess.quantum.enumeration import possible_positions

_LOGGER = logging.getLogger(__name__)


# ── Dependencies ────────────────────────────────────────────────────────────


def _line_is_open(board: ClassicalPosition, checker: Coord, target: Coord, knight: bool) -> bool:
    if board.piece_at(target) is None or board.piece_at(checker) is None:
        return False
    return knight or not Rules.is_blocked(StandardMove(checker, target), board)


def checking_dependencies(
    checked_coords: Sequence[Coord],
    position: QuantumPosition,
    side: Side,
    first_move: Move | None = None,
    played_object: QuantumObject | None = None,
) -> list[Coord]:
    """Squares whose collapse settles whether *side* is in check on *checked_coords*.

    Only attackers whose open line to a checked square varies across the
    realisations contribute: their blockers (other objects only), the checked
    square itself and the attacker's own square.  When *first_move* is given
    it is applied to every board before looking.
    """
    filled = position.filled_position()
    first_end: Coord | None = None
    fixed_object: int | None = None
    fixed_unit: int | None = None
    if first_move is not None:
        start, _, first_end = start_middle_end(first_move)
        Rules.result_of_move(first_move, filled, copy=False)
        if played_object is not None:
            fixed_object = position.index_of(played_object)
            fixed_unit = played_object.unit_index_at(start)

    boards = list(possible_positions(position, fixed_object, fixed_unit))
    if first_move is not None:
        for board in boards:
            Rules.result_of_move(first_move, board, copy=False)

    dependencies: list[Coord] = []
    for checked in checked_coords:
        for checker in Rules.leap_checking_pieces(filled, side, checked):
            origin = checker.coord.without_promotion()
            knight = checker.kind == PieceKind.KNIGHT
            outcomes = {_line_is_open(board, origin, checked, knight) for board in boards}
            if len(outcomes) < 2:
                continue
            if not knight:
                for blocker in Rules.blocking_pieces(StandardMove(origin, checked), filled):
                    coord = blocker.coord.without_promotion()
                    if not position.are_different_objects(coord, checked_coords[0]):
                        continue
                    if first_end is not None and coord == first_end:
                        continue
                    dependencies.append(coord)
            dependencies.append(checked)
            dependencies.append(origin)
    return dependencies


def generate_dependencies(
    declared: DeclaredMove, position: QuantumPosition, win_by_checkmate: bool = False
) -> list[Coord]:
    """Unique squares (of objects other than the mover) that decide *declared*."""
    move = declared.move
    flags = declared.declarations
    start, middle, end = start_middle_end(move)
    played = position.find_object(start)
    turn = position.data.whose_turn

    filled = position.filled_position()
    filled.pieces = [
        placed
        for placed in filled.pieces
        if placed.coord == start or position.are_different_objects(placed.coord, start)
    ]

    candidates: list[Coord] = []
    if (
        Declaration.CAPTURE_ONLY in flags
        or Declaration.NO_CAPTURE in flags
        or Rules.is_endpoint_blocked(move, filled)
    ):
        candidates.append(captured_square(move))
    if Declaration.NON_LEAPING in flags:
        candidates.extend(c for c in middle if position.are_different_objects(c, start))
    if win_by_checkmate:
        king = position.king_object(turn)
        if king is not None:
            checked = [
                end if unit.coord == start else unit.coord.without_promotion()
                for unit in king.units
            ]
            candidates.extend(checking_dependencies(checked, position, turn, move, played))
        if move.kind == MoveKind.CASTLE:
            candidates.extend(
                checking_dependencies([start, middle[0]], position, turn, move, played)
            )
    if Declaration.CHECK_ONLY in flags or Declaration.NO_CHECK in flags:
        enemy_king = position.king_object(turn.opposite)
        if enemy_king is not None:
            checked = [unit.coord.without_promotion() for unit in enemy_king.units]
            candidates.extend(
                checking_dependencies(checked, position, turn.opposite, move, played)
            )

    dependencies: list[Coord] = []
    for coord in candidates:
        if position.are_different_objects(start, coord) and coord not in dependencies:
            dependencies.append(coord)
    return dependencies


def random_dependency(
    declared: DeclaredMove,
    position: QuantumPosition,
    bits: BitSource,
    win_by_checkmate: bool = False,
) -> Coord:
    """Uniformly chosen dependency of *declared*."""
    return bits.choose(generate_dependencies(declared, position, win_by_checkmate))


# ── Measurement ─────────────────────────────────────────────────────────────


def make_measurement(
    position: QuantumPosition,
    coord: Coord,
    bits: BitSource,
    measurement_type: MeasurementType = MeasurementType.BINARY,
    exclude_side: Side | None = None,
) -> bool:
    """Collapse the unit on *coord* together with its entangled units, in place.

    Returns whether the measured object still occupies *coord* afterwards.
    Units of *exclude_side* are ignored when locating the target.
    """
    found = position.locate(coord, exclude_side)
    if found is None:
        raise InvalidValueError(f"No unit to measure on {coord}")
    object_index, unit_index = found
    obj = position.objects[object_index]
    target = obj.units[unit_index]
    group = obj.entangled_group(unit_index)
    inner = fraction_sum(obj.units[index].probability for index in group)

    if measurement_type == MeasurementType.BINARY:
        if bits.coin(inner):
            chosen = bits.choose_weighted(group, lambda index: obj.units[index].probability)
            obj.collapse_to(chosen)
        else:
            obj.remove_units(group)
            remaining = ONE - inner
            for unit in obj.units:
                unit.probability /= remaining
            if not obj.units:
                position.remove_object(obj)
    else:
        chosen = bits.choose_weighted(group, lambda index: obj.units[index].probability)
        kept = obj.units[chosen]
        kept.probability = inner
        obj.remove_units(index for index in group if index != chosen)
        if kept is target:
            if bits.coin(obj.total_probability()):
                survivor = bits.choose_weighted(
                    range(len(obj.units)), lambda index: obj.units[index].probability
                )
                obj.collapse_to(survivor)
            else:
                position.remove_object(obj)

    obj.clean_entanglements()
    present = any(candidate is obj for candidate in position.objects) and (
        obj.unit_index_at(coord) is not None
    )
    _LOGGER.debug(
        "Measured %s (%s, %s): %s",
        coord,
        obj.piece.token,
        measurement_type.name.lower(),
        "present" if present else "absent",
    )
    return present
