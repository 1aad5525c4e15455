"""Move value objects: a tagged union of the four move shapes.

Every member carries a ``kind`` tag so callers dispatch on
:class:`~qchess.core.enums.MoveKind` instead of probing attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias

from qchess.core.enums import Declaration, MoveKind, PieceKind, Side
from qchess.core.errors import InvalidMoveError
from qchess.core.types import Coord

_PROMO_CHARS: dict[PieceKind, str] = {
    PieceKind.KNIGHT: "n",
    PieceKind.BISHOP: "b",
    PieceKind.ROOK: "r",
    PieceKind.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class StandardMove:
    """Piece travels from ``start`` to ``end`` (``end`` may carry a promotion)."""

    kind: ClassVar[MoveKind] = MoveKind.STANDARD

    start: Coord
    end: Coord

    @property
    def promotion(self) -> PieceKind | None:
        return self.end.promotion

    def __str__(self) -> str:
        base = f"{self.start}{self.end}"
        if self.promotion is not None:
            base += _PROMO_CHARS[self.promotion]
        return base


@dataclass(frozen=True, slots=True)
class CastleMove:
    """King of ``side`` castles towards ``direction`` (+1 kingside, -1 queenside)."""

    kind: ClassVar[MoveKind] = MoveKind.CASTLE

    side: Side
    direction: int

    def __post_init__(self) -> None:
        if self.direction not in (-1, 1):
            raise InvalidMoveError(f"Castle direction must be -1 or 1: {self.direction!r}")

    def __str__(self) -> str:
        return "O-O" if self.direction == 1 else "O-O-O"


@dataclass(frozen=True, slots=True)
class EnPassantMove:
    """Pawn on ``attacking_pawn`` moves to ``capture_square`` (the en passant target)."""

    kind: ClassVar[MoveKind] = MoveKind.EN_PASSANT

    attacking_pawn: Coord
    capture_square: Coord

    def __str__(self) -> str:
        return f"{self.attacking_pawn}{self.capture_square}ep"


@dataclass(frozen=True, slots=True)
class PawnDoubleMove:
    """Pawn on its home rank advances two squares."""

    kind: ClassVar[MoveKind] = MoveKind.PAWN_DOUBLE

    pushed_pawn: Coord

    def __str__(self) -> str:
        return f"{self.pushed_pawn}^^"


Move: TypeAlias = StandardMove | CastleMove | EnPassantMove | PawnDoubleMove


@dataclass(frozen=True, slots=True)
class DeclaredMove:
    """A move plus the modifier flags its player declared for it."""

    move: Move
    declarations: Declaration = Declaration.NONE

    def __str__(self) -> str:
        if not self.declarations:
            return str(self.move)
        flags = ",".join(flag.name.lower() for flag in self.declarations)
        return f"{self.move}[{flags}]"


@dataclass(frozen=True, slots=True)
class Play:
    """One turn of input for the object at ``object_index``.

    ``primary_moves`` may hold several moves per unit (a split);
    ``default_moves`` holds at most one fallback per unit, taken by whatever
    probability mass the unit's primaries failed to move.
    """

    object_index: int
    primary_moves: tuple[DeclaredMove, ...] = ()
    default_moves: tuple[DeclaredMove, ...] = ()

    @property
    def is_null(self) -> bool:
        return not self.primary_moves

    @property
    def all_moves(self) -> tuple[DeclaredMove, ...]:
        return self.primary_moves + self.default_moves
