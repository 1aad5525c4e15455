"""Abstract interfaces for the game layer.

Front ends depend on :class:`IGameController`, not on the concrete session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from qchess.core.move import Play
    from qchess.game.state import PlayRecord


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a quantum chess game."""

    NOT_STARTED = auto()
    AWAITING_PLAY = auto()
    GAME_OVER = auto()


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @abstractmethod
    def new_game(self, position_string: str | None = None) -> None:
        """Set up a new game, optionally from an encoded position."""

    @abstractmethod
    def validate(self, play: Play) -> set[str]:
        """Reasons *play* would be rejected; empty when it is legal."""

    @abstractmethod
    def submit_play(self, play: Play) -> PlayRecord | None:
        """Resolve *play*. Returns its record, or ``None`` if it was rejected."""
