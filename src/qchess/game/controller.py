"""GameController — the move-input boundary of a quantum chess game.

Validates plays, resolves them against the session state and emits events via
simple callbacks so a front end or test can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from qchess.core.enums import Side
from qchess.core.errors import InvalidValueError
from qchess.core.move import Play
from qchess.core.random_source import BitSource
from qchess.game.interfaces import GamePhase, IGameController
from qchess.game.settings import GameSettings
from qchess.game.state import GameState, PlayRecord
from qchess.game.validation import check_play_validity

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

PlayCallback = Callable[[PlayRecord, GameState], None]
GameOverCallback = Callable[[Side | None], None]  # winner
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_play: list[PlayCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Orchestrates a full game: validates plays, resolves them, notifies listeners.

    Pass a pre-loaded :class:`BitSource` with ``refill_bits=0`` to make a game
    reproducible.
    """

    __slots__ = ("_state", "_settings", "_bits", "_refill_bits", "events")

    def __init__(
        self,
        settings: GameSettings | None = None,
        bits: BitSource | None = None,
        refill_bits: int = 4096,
    ) -> None:
        self._settings = settings or GameSettings()
        self._bits = bits if bits is not None else BitSource()
        self._refill_bits = refill_bits
        self._state = self._fresh_state()
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def settings(self) -> GameSettings:
        return self._settings

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(self, position_string: str | None = None) -> None:
        self._state = self._fresh_state()
        self._state.setup(position_string)
        self._emit_phase(GamePhase.AWAITING_PLAY)

    def validate(self, play: Play) -> set[str]:
        try:
            return check_play_validity(play, self._state.position, self._settings)
        except InvalidValueError as exc:
            return {str(exc)}

    def submit_play(self, play: Play) -> PlayRecord | None:
        if self._state.phase != GamePhase.AWAITING_PLAY:
            return None

        problems = self.validate(play)
        if problems:
            _LOGGER.warning("Rejected play on object %d: %s", play.object_index, sorted(problems))
            return None

        record = self._state.apply_play(play)
        _LOGGER.info(
            "%s played object %d: %s%s",
            record.side,
            play.object_index,
            record.outcome.name.lower(),
            " (game over)" if record.game_over else "",
        )
        self._emit_play(record)

        if record.game_over:
            self._emit_game_over(self._state.winner)
        return record

    # ── Internal helpers ─────────────────────────────────────────────────

    def _fresh_state(self) -> GameState:
        return GameState(
            settings=self._settings, bits=self._bits, refill_bits=self._refill_bits
        )

    def _emit_play(self, record: PlayRecord) -> None:
        for cb in self.events.on_play:
            cb(record, self._state)

    def _emit_game_over(self, winner: Side | None) -> None:
        self._emit_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(winner)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
