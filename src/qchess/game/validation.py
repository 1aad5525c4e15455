"""Play pre-flight checks, qubit costs and board values."""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterable

from qchess.core.enums import Declaration, MoveKind, PieceKind, Side
from qchess.core.errors import InvalidValueError
from qchess.core.geometry import move_end, move_start, required_declarations
from qchess.core.move import DeclaredMove, Play, StandardMove
from qchess.core.position import QuantumObject, QuantumPosition
from qchess.core.rules import Rules
from qchess.core.types import Coord
from qchess.game.settings import GameSettings
from qchess.quantum.enumeration import is_move_possible, possible_positions

# Tolerance for float qubit arithmetic.
EPSILON = 1e-10

# ── Violation reasons ───────────────────────────────────────────────────────

ONLY_DEFAULT_MOVES = "Cannot have only default moves"
NULL_PLAYS_DISALLOWED = "Null plays are not allowed in settings"
DECLARATIONS_DISALLOWED = "One or more external declarations are not allowed in settings"
DEFAULT_EQUALS_PRIMARY = "A default move cannot be equal to a primary move"
MULTIPLE_DOUBLE_MOVES = "Only one pawn double move per play"
UNMERGEABLE_PROMOTIONS = "Units with different promotion values are not mergeable"
IMPOSSIBLE_PRIMARY = "One or more primary moves are impossible"
IMPOSSIBLE_DEFAULT = "One or more default moves are impossible"
NOT_ENOUGH_QUBITS = "Not enough qubits for play"
MULTIPLE_DEFAULTS = "Only one default move per unit"
DEFAULT_WITHOUT_PRIMARY = "Cannot have a default move without a corresponding primary move"
CASTLING_DISALLOWED = "Castling is not allowed in settings"
CASTLE_SPLIT_DISALLOWED = "Making a split move while castling is not allowed in settings"
DOUBLE_MOVE_SPLIT_DISALLOWED = (
    "Making a split move while making a pawn double move is not allowed in settings"
)
CHECK_NOT_RESOLVED = "Not all possible outcomes resolve check"


def local_moves(moves: Iterable[DeclaredMove], coord: Coord) -> list[DeclaredMove]:
    """Moves of *moves* that start on *coord*."""
    return [declared for declared in moves if move_start(declared.move) == coord]


# ── Qubit economy ───────────────────────────────────────────────────────────


def calculate_qubit_cost(
    play: Play, obj: QuantumObject, advanced_qubit_mode: bool = False
) -> float:
    """Qubits spent by *play* on *obj*.

    A unit with ``n > 1`` local moves costs ``n - 1`` (or
    ``sqrt(p) * (sqrt(n) - 1)`` in advanced mode), scaled by the piece's
    cost multiplier.
    """
    cost = 0.0
    for unit in obj.units:
        total = len(local_moves(play.all_moves, unit.coord))
        if total > 1:
            if advanced_qubit_mode:
                cost += math.sqrt(float(unit.probability)) * (math.sqrt(total) - 1)
            else:
                cost += total - 1
    return cost * obj.piece.cost


def calculate_board_value(
    position: QuantumPosition,
    partial_qubit_rewards: bool = False,
    side: Side | None = None,
) -> float:
    """Material of *side* (default: the side not to move).

    Each object is worth its piece value times its surviving probability, or
    times one while any probability survives when partial rewards are off.
    """
    side = position.data.whose_turn.opposite if side is None else side
    value = 0.0
    for obj in position.side_objects(side):
        total = obj.total_probability()
        weight = float(total) if partial_qubit_rewards else math.ceil(total)
        value += obj.piece.value * weight
    return value


# ── Play validity ───────────────────────────────────────────────────────────


def _landing_kind(declared: DeclaredMove, position: QuantumPosition) -> PieceKind | None:
    """Kind the mover has on arrival, counting a promotion."""
    move = declared.move
    if isinstance(move, StandardMove) and move.promotion is not None:
        return move.promotion
    return position.coord_kind(move_start(move))


def _extra_declarations(declared: DeclaredMove, position: QuantumPosition) -> Declaration:
    kind = position.coord_kind(move_start(declared.move))
    if kind is None:
        return declared.declarations
    return declared.declarations & ~required_declarations(declared.move, kind)


def check_play_validity(
    play: Play, position: QuantumPosition, settings: GameSettings | None = None
) -> set[str]:
    """Reasons *play* may not be made; an empty set means it is legal.

    Raises :class:`InvalidValueError` when a non-null play names an object
    that does not exist or does not belong to the side to move.
    """
    settings = settings or GameSettings()
    if not play.primary_moves:
        if play.default_moves:
            return {ONLY_DEFAULT_MOVES}
        return set() if settings.null_plays else {NULL_PLAYS_DISALLOWED}

    if not 0 <= play.object_index < len(position.objects):
        raise InvalidValueError(f"No object at index {play.object_index}")
    played = position.objects[play.object_index]
    if played.side != position.data.whose_turn:
        raise InvalidValueError(f"Object {play.object_index} does not belong to the side to move")

    problems: set[str] = set()
    every_move = play.all_moves
    allowed = settings.allowed_declarations()

    if any((_extra_declarations(d, position) | allowed) != allowed for d in every_move):
        problems.add(DECLARATIONS_DISALLOWED)

    if any(
        move_start(default.move) == move_start(primary.move)
        and move_end(default.move) == move_end(primary.move)
        for default in play.default_moves
        for primary in play.primary_moves
    ):
        problems.add(DEFAULT_EQUALS_PRIMARY)

    doubles = sum(1 for d in play.primary_moves if d.move.kind == MoveKind.PAWN_DOUBLE)
    if doubles > 1:
        problems.add(MULTIPLE_DOUBLE_MOVES)

    for first, second in itertools.combinations(every_move, 2):
        if move_end(first.move) == move_end(second.move) and _landing_kind(
            first, position
        ) != _landing_kind(second, position):
            problems.add(UNMERGEABLE_PROMOTIONS)
            break

    squares = {unit.coord for unit in played.units}

    def impossible(declared: DeclaredMove) -> bool:
        return move_start(declared.move) not in squares or not is_move_possible(
            declared, position, settings.win_by_checkmate
        )

    if any(impossible(d) for d in play.primary_moves):
        problems.add(IMPOSSIBLE_PRIMARY)
    if any(impossible(d) for d in play.default_moves):
        problems.add(IMPOSSIBLE_DEFAULT)

    cost = calculate_qubit_cost(play, played, settings.advanced_qubit_mode)
    if position.data.qubits() - cost < -EPSILON:
        problems.add(NOT_ENOUGH_QUBITS)

    for unit_index, unit in enumerate(played.units):
        primaries = local_moves(play.primary_moves, unit.coord)
        defaults = local_moves(play.default_moves, unit.coord)
        kinds = {d.move.kind for d in primaries + defaults}
        if len(defaults) > 1:
            problems.add(MULTIPLE_DEFAULTS)
        if defaults and not primaries:
            problems.add(DEFAULT_WITHOUT_PRIMARY)
        if not settings.allow_castling and MoveKind.CASTLE in kinds:
            problems.add(CASTLING_DISALLOWED)
        if len(primaries) > 1:
            if not settings.castle_splitting and MoveKind.CASTLE in kinds:
                problems.add(CASTLE_SPLIT_DISALLOWED)
            if not settings.pawn_double_move_splitting and MoveKind.PAWN_DOUBLE in kinds:
                problems.add(DOUBLE_MOVE_SPLIT_DISALLOWED)
        if settings.win_by_checkmate and _leaves_check_unresolved(
            position, play.object_index, unit_index, primaries, defaults
        ):
            problems.add(CHECK_NOT_RESOLVED)

    return problems


def _leaves_check_unresolved(
    position: QuantumPosition,
    object_index: int,
    unit_index: int,
    primaries: list[DeclaredMove],
    defaults: list[DeclaredMove],
) -> bool:
    """Some realisation with this unit is in check and a branch fails to escape it."""
    for board in possible_positions(position, object_index, unit_index):
        if not Rules.is_in_check(board):
            continue
        if defaults and Rules.is_move_legal(defaults[0], board, True):
            continue
        if not primaries or any(not Rules.is_move_legal(p, board, True) for p in primaries):
            return True
    return False


def is_play_legal(
    play: Play, position: QuantumPosition, settings: GameSettings | None = None
) -> bool:
    return not check_play_validity(play, position, settings)
