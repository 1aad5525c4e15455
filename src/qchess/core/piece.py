"""Piece value object plus material values and qubit costs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from qchess.core.enums import PieceKind, Side
from qchess.core.errors import InvalidValueError

# Material value used for qubit rewards.
PIECE_VALUES: Final[dict[PieceKind, int]] = {
    PieceKind.PAWN: 1,
    PieceKind.KNIGHT: 3,
    PieceKind.BISHOP: 3,
    PieceKind.ROOK: 5,
    PieceKind.QUEEN: 9,
    PieceKind.KING: 0,
}

# Multiplier applied to the qubit cost of splitting a piece.
PIECE_COSTS: Final[dict[PieceKind, int]] = {
    PieceKind.PAWN: 0,
    PieceKind.KNIGHT: 1,
    PieceKind.BISHOP: 1,
    PieceKind.ROOK: 2,
    PieceKind.QUEEN: 3,
    PieceKind.KING: 3,
}

_KIND_NAMES: Final = {str(kind): kind for kind in PieceKind}
_SIDE_INITIALS: Final = {side.initial: side for side in Side}


def parse_piece_kind(name: str) -> PieceKind:
    """``'queen'`` -> ``PieceKind.QUEEN``."""
    try:
        return _KIND_NAMES[name]
    except KeyError:
        raise InvalidValueError(f"Invalid piece kind: {name!r}") from None


@dataclass(frozen=True, slots=True)
class ColoredPiece:
    """Immutable kind + side, shared by every unit of one object."""

    kind: PieceKind
    side: Side

    # ── Serialisation ────────────────────────────────────────────────────

    @property
    def token(self) -> str:
        """Encoding token, e.g. ``'knightW'``."""
        return f"{self.kind}{self.side.initial}"

    @classmethod
    def from_token(cls, token: str) -> ColoredPiece:
        """Inverse of :attr:`token`."""
        side = _SIDE_INITIALS.get(token[-1:])
        if side is None:
            raise InvalidValueError(f"Invalid piece token: {token!r}")
        return cls(parse_piece_kind(token[:-1]), side)

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.kind]

    @property
    def cost(self) -> int:
        return PIECE_COSTS[self.kind]

    def __str__(self) -> str:
        return f"{self.side} {self.kind}"
