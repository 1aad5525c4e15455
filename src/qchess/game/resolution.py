"""Play resolution: measure until legality is decided, then move every branch.

:func:`generate_play_results` is the one entry point that mutates its input:
it consumes the caller's :class:`QuantumPosition` and hands the same object
back, advanced by one turn, inside the :class:`PlayResult`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from qchess.core.arithmetic import ZERO
from qchess.core.enums import MeasurementType, MoveKind, Outcome, Side
from qchess.core.geometry import captured_square, make_move, move_end, move_start
from qchess.core.move import DeclaredMove, Play, StandardMove
from qchess.core.position import QuantumObject, QuantumPosition, Unit
from qchess.core.random_source import BitSource
from qchess.core.rules import Rules
from qchess.core.types import Coord
from qchess.game.checkmate import detect_checkmate
from qchess.game.settings import GameSettings
from qchess.game.validation import (
    EPSILON,
    calculate_board_value,
    calculate_qubit_cost,
    local_moves,
)
from qchess.quantum.enumeration import first_possible_position, legality_varies
from qchess.quantum.measurement import checking_dependencies, make_measurement, random_dependency

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlayResult:
    """Position after a play, its headline outcome and whether the game ended."""

    position: QuantumPosition
    outcome: Outcome
    game_over: bool


# ── Single move ─────────────────────────────────────────────────────────────


def generate_move_results(
    declared: DeclaredMove,
    position: QuantumPosition,
    bits: BitSource,
    win_by_checkmate: bool = False,
    measurement_type: MeasurementType = MeasurementType.BINARY,
) -> bool:
    """Measure dependencies of *declared* until its legality is certain.

    The moving unit stays pinned while the rest of the board is enumerated.
    Returns whether the move turned out legal; *position* is collapsed in
    place by every measurement taken on the way.
    """
    start = move_start(declared.move)
    while True:
        found = position.locate(start)
        if found is None:
            return False
        object_index, unit_index = found
        if not legality_varies(declared, position, win_by_checkmate, object_index, unit_index):
            break
        dependency = random_dependency(declared, position, bits, win_by_checkmate)
        _LOGGER.debug("Measuring %s to decide %s", dependency, declared)
        make_measurement(position, dependency, bits, measurement_type)

    board = first_possible_position(position, object_index, unit_index)
    return Rules.is_move_legal(declared, board, win_by_checkmate)


# ── Whole play ──────────────────────────────────────────────────────────────


@dataclass(slots=True)
class _Tally:
    moved: bool = False
    castled: bool = False
    promoted: bool = False
    split: bool = False
    double_move: bool = False

    def record(self, declared: DeclaredMove, split: bool = False) -> None:
        move = declared.move
        self.moved = True
        self.castled |= move.kind == MoveKind.CASTLE
        self.promoted |= isinstance(move, StandardMove) and move.promotion is not None
        self.split |= split
        self.double_move |= move.kind == MoveKind.PAWN_DOUBLE

    def outcome(self) -> Outcome:
        if self.split:
            return Outcome.SPLIT
        if self.promoted:
            return Outcome.PROMOTE
        if self.castled:
            return Outcome.CASTLE
        if self.moved:
            return Outcome.MOVE
        return Outcome.INVALIDATED


def _note_capture(
    declared: DeclaredMove, position: QuantumPosition, captures: list[tuple[Coord, Coord]]
) -> None:
    move = declared.move
    if not Rules.is_capture(move, position.filled_position()):
        return
    end = move_end(move)
    if all(destination != end for destination, _ in captures):
        captures.append((end, captured_square(move)))


def _resolve_capture(
    position: QuantumPosition,
    destination: Coord,
    victim_square: Coord,
    mover_side: Side,
    bits: BitSource,
    settings: GameSettings,
) -> None:
    """Take the enemy on *victim_square* if both it and the capturer turn out real."""
    if position.find_unit(destination, exclude_side=mover_side.opposite) is None:
        return
    victim = position.find_object(victim_square, exclude_side=mover_side)
    if victim is None:
        return
    if settings.measures_partial_capture(victim.piece.kind) and not make_measurement(
        position, victim_square, bits, settings.measurement_type, exclude_side=mover_side
    ):
        return
    if not make_measurement(
        position, destination, bits, settings.measurement_type, exclude_side=mover_side.opposite
    ):
        return
    found = position.locate(victim_square, exclude_side=mover_side)
    if found is None:
        return
    victim = position.objects[found[0]]
    victim.remove_units([found[1]])
    if not victim.units:
        position.remove_object(victim)
    _LOGGER.debug("Captured %s on %s", victim.piece.token, victim_square)


def _force_king_resolution(
    position: QuantumPosition, bits: BitSource, settings: GameSettings
) -> None:
    """Measure until no king unit of the side to move is in check in only some realisations."""
    side = position.data.whose_turn
    king = position.king_object(side)
    if king is None:
        return
    for unit in list(king.units):
        while True:
            current = position.king_object(side)
            if current is None or not any(candidate is unit for candidate in current.units):
                break
            dependencies = checking_dependencies([unit.coord], position, side)
            if not dependencies:
                break
            make_measurement(position, bits.choose(dependencies), bits, settings.measurement_type)


def _remove_unit(obj: QuantumObject, unit: Unit) -> None:
    for index, candidate in enumerate(obj.units):
        if candidate is unit:
            obj.remove_units([index])
            return


def generate_play_results(
    play: Play,
    position: QuantumPosition,
    bits: BitSource,
    settings: GameSettings | None = None,
) -> PlayResult:
    """Resolve *play* against *position*, consuming it.

    The play is assumed valid (see :func:`check_play_validity`).  Every
    unit's primary moves each receive an equal share of its probability;
    whatever share fails falls through to the unit's default move, if any.
    Captures are then confirmed by measurement, qubits are charged and
    rewarded, and the turn passes.
    """
    settings = settings or GameSettings()
    original = position.copy()
    turn = position.data.whose_turn

    if play.is_null:
        position.data.en_passant = None
        position.data.whose_turn = turn.opposite
        return PlayResult(position, Outcome.INVALIDATED, False)

    played = position.objects[play.object_index]
    cost = calculate_qubit_cost(play, played, settings.advanced_qubit_mode)
    position.data.adjust_qubits(turn, -cost)

    wbc = settings.win_by_checkmate
    tally = _Tally()
    captures: list[tuple[Coord, Coord]] = []

    for unit in list(played.units):
        primaries = local_moves(play.primary_moves, unit.coord)
        defaults = local_moves(play.default_moves, unit.coord)
        buildup = ZERO

        for primary in primaries:
            share = unit.probability / len(primaries)
            if generate_move_results(primary, position, bits, wbc, settings.measurement_type):
                tally.record(primary, split=len(primaries) > 1)
                _note_capture(primary, position, captures)
                branch = Unit(unit.coord, share)
                make_move(primary.move, position, mover=branch)
                played.units.append(branch)
            else:
                buildup += share

        if defaults and buildup > 0:
            default = defaults[0]
            if generate_move_results(default, position, bits, wbc, settings.measurement_type):
                tally.record(default)
                _note_capture(default, position, captures)
                make_move(default.move, position, mover=unit)

        if primaries:
            unit.probability = buildup
            if buildup == 0:
                _remove_unit(played, unit)

    played.merge_coincident()

    for destination, victim_square in captures:
        _resolve_capture(position, destination, victim_square, turn, bits, settings)

    reward = calculate_board_value(
        original, settings.partial_qubit_rewards
    ) - calculate_board_value(position, settings.partial_qubit_rewards)
    position.data.adjust_qubits(turn, reward)
    _LOGGER.debug("%s qubits: cost %s, reward %s", turn, cost, reward)
    balance = position.data.qubits(turn)
    if math.isfinite(balance) and abs(balance - round(balance)) < EPSILON:
        position.data.set_qubits(turn, round(balance))

    if not tally.double_move:
        position.data.en_passant = None
    position.data.castling &= position.castle_values()
    position.data.whose_turn = turn.opposite
    if wbc:
        _force_king_resolution(position, bits, settings)

    outcome = tally.outcome()
    opponent = turn.opposite
    if calculate_board_value(original, True) - calculate_board_value(
        position, True, opponent
    ) > EPSILON or len(original.side_objects(opponent)) > len(position.side_objects(opponent)):
        outcome = Outcome.CAPTURE
    if wbc and Rules.is_in_check(position.filled_position(), opponent):
        outcome = Outcome.CHECK

    if wbc:
        game_over = detect_checkmate(position)
    else:
        game_over = position.king_object(opponent) is None

    _LOGGER.debug("Play on object %d resolved: %s", play.object_index, outcome.name.lower())
    return PlayResult(position, outcome, game_over)
