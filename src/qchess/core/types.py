"""Board coordinates and side-dependent rank helpers.

Coordinates are 1-based: ``Coord(1, 1)`` is a1, ``Coord(8, 8)`` is h8.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from qchess.core.enums import PieceKind, Side
from qchess.core.errors import InvalidValueError

BOARD_FILES: Final = "abcdefgh"

VALID_PROMOTIONS: Final = frozenset(
    {PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN}
)


def is_partial_coord(candidate: object) -> bool:
    """Whether *candidate* is a valid file or rank number (1–8)."""
    return (
        isinstance(candidate, int)
        and not isinstance(candidate, bool)
        and 1 <= candidate <= 8
    )


@dataclass(frozen=True, slots=True)
class Coord:
    """A square, optionally tagged with the piece a pawn promotes to.

    Equality and hashing ignore ``promotion``: two coords naming the same
    square are the same square.
    """

    x: int
    y: int
    promotion: PieceKind | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not (is_partial_coord(self.x) and is_partial_coord(self.y)):
            raise InvalidValueError(f"Coordinate out of range: ({self.x!r}, {self.y!r})")
        if self.promotion is not None and self.promotion not in VALID_PROMOTIONS:
            raise InvalidValueError(f"Invalid promotion: {self.promotion!r}")

    def translate(self, dx: int = 0, dy: int = 0) -> Coord:
        """Square offset by (*dx*, *dy*); the promotion tag is dropped."""
        return Coord(self.x + dx, self.y + dy)

    def without_promotion(self) -> Coord:
        if self.promotion is None:
            return self
        return Coord(self.x, self.y)

    def with_promotion(self, promotion: PieceKind | None) -> Coord:
        return Coord(self.x, self.y, promotion)

    @property
    def index(self) -> int:
        """Dense 0–63 index, a1=0 … h8=63."""
        return (self.y - 1) * 8 + (self.x - 1)

    @property
    def name(self) -> str:
        return square_name(self)

    def __str__(self) -> str:
        return self.name


def square_name(coord: Coord) -> str:
    """Human-readable name, e.g. ``Coord(5, 4)`` -> ``'e4'``."""
    return BOARD_FILES[coord.x - 1] + str(coord.y)


def parse_square(name: str) -> Coord:
    """Parse a square name, e.g. ``'e4'`` -> ``Coord(5, 4)``."""
    if len(name) != 2 or name[0] not in BOARD_FILES or name[1] not in "12345678":
        raise InvalidValueError(f"Invalid square name: {name!r}")
    return Coord(BOARD_FILES.index(name[0]) + 1, int(name[1]))


ALL_SQUARES: Final = tuple(Coord(x, y) for y in range(1, 9) for x in range(1, 9))


# ── Side-dependent ranks ────────────────────────────────────────────────────


def home_rank(side: Side) -> int:
    """Back rank where *side*'s king and rooks start."""
    return 1 if side == Side.WHITE else 8


def pawn_rank(side: Side) -> int:
    """Rank *side*'s pawns start on (and double-move from)."""
    return 2 if side == Side.WHITE else 7


def promotion_rank(side: Side) -> int:
    return 8 if side == Side.WHITE else 1


def forward(side: Side) -> int:
    """Rank direction *side*'s pawns advance in."""
    return 1 if side == Side.WHITE else -1
