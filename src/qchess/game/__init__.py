"""Game layer — settings, play validation and resolution, checkmate, session control.

Quick start::

    from qchess.core import Coord, DeclaredMove, Declaration, Play, StandardMove
    from qchess.game import GameController, GameSettings

    ctrl = GameController(GameSettings(win_by_checkmate=True))
    ctrl.new_game()
    knight = ctrl.state.position.locate(Coord(2, 1))[0]
    ctrl.submit_play(Play(knight, (DeclaredMove(StandardMove(Coord(2, 1), Coord(3, 3))),)))
"""

from qchess.game.checkmate import candidate_moves, detect_checkmate
from qchess.game.controller import GameController, GameEvents
from qchess.game.interfaces import GamePhase, IGameController
from qchess.game.resolution import PlayResult, generate_move_results, generate_play_results
from qchess.game.settings import GameSettings
from qchess.game.state import GameState, PlayRecord
from qchess.game.validation import (
    EPSILON,
    calculate_board_value,
    calculate_qubit_cost,
    check_play_validity,
    is_play_legal,
    local_moves,
)

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    # Configuration
    "GameSettings",
    # Rules of play
    "EPSILON",
    "calculate_board_value",
    "calculate_qubit_cost",
    "check_play_validity",
    "is_play_legal",
    "local_moves",
    "candidate_moves",
    "detect_checkmate",
    "PlayResult",
    "generate_move_results",
    "generate_play_results",
    # Session
    "GameController",
    "GameEvents",
    "GameState",
    "PlayRecord",
]
