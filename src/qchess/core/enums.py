"""Core enumerations and flags for the quantum chess domain."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Side(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Side:
        return Side(1 - self.value)

    @property
    def initial(self) -> str:
        """Upper-case initial used by the position encoding ('W' / 'B')."""
        return self.name[0]

    def __str__(self) -> str:
        return self.name.lower()


class PieceKind(IntEnum):
    """Piece kinds ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()


class MoveKind(IntEnum):
    """Tag discriminating the move union."""

    STANDARD = 0
    CASTLE = 1
    EN_PASSANT = 2
    PAWN_DOUBLE = 3


class Declaration(IntFlag):
    """Modifier flags a player attaches to a declared move."""

    NONE = 0
    CAPTURE_ONLY = auto()
    NO_CAPTURE = auto()
    CHECK_ONLY = auto()
    NO_CHECK = auto()
    NON_LEAPING = auto()

    ALL = CAPTURE_ONLY | NO_CAPTURE | CHECK_ONLY | NO_CHECK | NON_LEAPING


class CastlingRights(IntFlag):
    """Bitmask for castling availability.

    Queenside is the "left" direction (towards the a-file), kingside the
    "right" one.
    """

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_castle(cls, side: Side, direction: int) -> CastlingRights:
        """The single right consumed by castling *side* towards *direction*."""
        if side == Side.WHITE:
            return cls.WHITE_KINGSIDE if direction == 1 else cls.WHITE_QUEENSIDE
        return cls.BLACK_KINGSIDE if direction == 1 else cls.BLACK_QUEENSIDE


class Outcome(IntEnum):
    """Presentation signal produced by resolving a play.

    Ordered by priority: a later member overrides an earlier one.
    """

    INVALIDATED = 0
    MOVE = 1
    CASTLE = 2
    PROMOTE = 3
    SPLIT = 4
    CAPTURE = 5
    CHECK = 6

    def __str__(self) -> str:
        return self.name.lower()


class MeasurementType(IntEnum):
    """Collapse policy used when a superposed square is measured."""

    BINARY = auto()  # collapse the whole object to yes/no
    PROPORTIONAL = auto()
