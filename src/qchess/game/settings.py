"""Game settings (rule variants and the measurement policy)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from qchess.core.enums import Declaration, MeasurementType, PieceKind


@dataclass(frozen=True, slots=True)
class GameSettings:
    """Immutable rule configuration for one game.

    Args:
        win_by_checkmate: Enforce check and end on checkmate; otherwise the
            game ends once a king object is captured.
        null_plays: Allow passing the turn with an empty play.
        allow_castling: Allow castle moves at all.
        castle_splitting: Allow a castle inside a split play.
        pawn_double_move_splitting: Allow a pawn double move inside a split play.
        measure_piece_captures: Measure a non-king victim before capturing it.
        measure_king_captures: Measure a king before capturing it.
        partial_qubit_rewards: Reward captured probability, not whole pieces.
        advanced_qubit_mode: Weight split costs by ``sqrt(probability)``.
        unlimited_qubits: Start both balances at infinity.
        allowed_move_declarations: Optional flags a player may add to a move.
        measurement_type: Collapse policy.
    """

    win_by_checkmate: bool = False
    null_plays: bool = False
    allow_castling: bool = True
    castle_splitting: bool = False
    pawn_double_move_splitting: bool = False
    measure_piece_captures: bool = False
    measure_king_captures: bool = True
    partial_qubit_rewards: bool = False
    advanced_qubit_mode: bool = False
    unlimited_qubits: bool = False
    allowed_move_declarations: Declaration = Declaration.NONE
    measurement_type: MeasurementType = MeasurementType.BINARY

    def allowed_declarations(self) -> Declaration:
        """Declaration flags a player may add beyond the required ones."""
        return self.allowed_move_declarations & Declaration.ALL

    def measures_partial_capture(self, kind: PieceKind) -> bool:
        """Whether capturing a superposed *kind* first measures the victim."""
        if kind == PieceKind.KING:
            return self.measure_king_captures
        return self.measure_piece_captures

    def with_changes(self, **changes: Any) -> GameSettings:
        return replace(self, **changes)
