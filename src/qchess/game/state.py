"""Mutable state of one game session: position, history and phase."""

from __future__ import annotations

from dataclasses import dataclass, field

from qchess.core.enums import Outcome, Side
from qchess.core.move import Play
from qchess.core.errors import InvalidValueError
from qchess.core.notation import (
    STARTING_POSITION,
    UNLIMITED_STARTING_POSITION,
    are_valid_starting_objects,
    encode_position,
    position_from_string,
)
from qchess.core.position import QuantumPosition
from qchess.core.random_source import BitSource
from qchess.game.interfaces import GamePhase
from qchess.game.resolution import PlayResult, generate_play_results
from qchess.game.settings import GameSettings


@dataclass(frozen=True, slots=True)
class PlayRecord:
    """A resolved play with the encoded position it produced."""

    side: Side
    play: Play
    outcome: Outcome
    position_after: str
    game_over: bool


@dataclass(slots=True)
class GameState:
    """Everything that changes over a game.

    ``bits`` feeds every measurement; by default it refills itself from the
    system's secure generator as needed (see :meth:`apply_play`).
    """

    settings: GameSettings = field(default_factory=GameSettings)
    bits: BitSource = field(default_factory=BitSource)
    position: QuantumPosition = field(default_factory=QuantumPosition)
    phase: GamePhase = GamePhase.NOT_STARTED
    history: list[PlayRecord] = field(default_factory=list)
    winner: Side | None = None
    start_position: str = ""
    refill_bits: int = 4096

    def setup(self, start: str | QuantumPosition | None = None) -> None:
        """Reset to the standard start, an encoded string or a position object.

        A position object is copied and must encode to a valid position
        string; otherwise :class:`InvalidValueError` is raised.
        """
        if start is None:
            unlimited = self.settings.unlimited_qubits
            start = UNLIMITED_STARTING_POSITION if unlimited else STARTING_POSITION
        if isinstance(start, QuantumPosition):
            if not are_valid_starting_objects(start):
                raise InvalidValueError("Starting objects do not form a valid position")
            self.position = start.copy()
        else:
            self.position = position_from_string(start)
        self.start_position = encode_position(self.position)
        self.history = []
        self.winner = None
        self.phase = GamePhase.AWAITING_PLAY

    @property
    def side_to_move(self) -> Side:
        return self.position.data.whose_turn

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def apply_play(self, play: Play) -> PlayRecord:
        """Resolve an already validated *play* and record it."""
        if self.refill_bits and self.bits.remaining() < self.refill_bits:
            self.bits.add_random(self.refill_bits)
        side = self.side_to_move
        result: PlayResult = generate_play_results(play, self.position, self.bits, self.settings)
        self.position = result.position
        record = PlayRecord(
            side, play, result.outcome, encode_position(result.position), result.game_over
        )
        self.history.append(record)
        if result.game_over:
            self.winner = side
            self.phase = GamePhase.GAME_OVER
        return record
