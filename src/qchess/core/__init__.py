"""Core domain layer — quantum chess value types and classical rules, zero external dependencies.

Quick start::

    from qchess.core import Coord, Declaration, DeclaredMove, PawnDoubleMove, QuantumPosition, Rules

    pos = QuantumPosition.initial()
    board = pos.filled_position()
    flags = Declaration.NO_CAPTURE | Declaration.NON_LEAPING
    push = DeclaredMove(PawnDoubleMove(Coord(5, 2)), flags)
    Rules.is_move_legal(push, board, win_by_checkmate=True)
"""

from qchess.core.arithmetic import (
    ONE,
    ZERO,
    fraction_product,
    fraction_sum,
    lcm_of,
    make_fraction,
    parse_fraction,
    reciprocal,
    serialize_fraction,
)
from qchess.core.enums import (
    CastlingRights,
    Declaration,
    MeasurementType,
    MoveKind,
    Outcome,
    PieceKind,
    Side,
)
from qchess.core.errors import (
    InsufficientEntropyError,
    InvalidMoveError,
    InvalidValueError,
    QuantumChessError,
    StructuralViolationError,
)
from qchess.core.geometry import (
    captured_square,
    is_in_range,
    make_move,
    required_declarations,
    start_middle_end,
)
from qchess.core.move import (
    CastleMove,
    DeclaredMove,
    EnPassantMove,
    Move,
    PawnDoubleMove,
    Play,
    StandardMove,
)
from qchess.core.notation import (
    STARTING_POSITION,
    decode_position,
    encode_position,
    is_valid_position_string,
    validate_structure,
)
from qchess.core.piece import PIECE_COSTS, PIECE_VALUES, ColoredPiece
from qchess.core.position import (
    ClassicalPosition,
    GameData,
    PlacedPiece,
    QuantumObject,
    QuantumPosition,
    Unit,
)
from qchess.core.random_source import BitSource
from qchess.core.rules import Rules
from qchess.core.types import Coord, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Declaration",
    "MeasurementType",
    "MoveKind",
    "Outcome",
    "PieceKind",
    "Side",
    # Errors
    "QuantumChessError",
    "InvalidValueError",
    "InvalidMoveError",
    "StructuralViolationError",
    "InsufficientEntropyError",
    # Arithmetic / randomness
    "ONE",
    "ZERO",
    "make_fraction",
    "reciprocal",
    "lcm_of",
    "fraction_sum",
    "fraction_product",
    "serialize_fraction",
    "parse_fraction",
    "BitSource",
    # Types / helpers
    "Coord",
    "parse_square",
    "square_name",
    "ColoredPiece",
    "PIECE_VALUES",
    "PIECE_COSTS",
    # Moves
    "Move",
    "StandardMove",
    "CastleMove",
    "EnPassantMove",
    "PawnDoubleMove",
    "DeclaredMove",
    "Play",
    # Positions
    "GameData",
    "PlacedPiece",
    "ClassicalPosition",
    "Unit",
    "QuantumObject",
    "QuantumPosition",
    # Rules / geometry
    "Rules",
    "is_in_range",
    "start_middle_end",
    "captured_square",
    "required_declarations",
    "make_move",
    # Notation
    "STARTING_POSITION",
    "encode_position",
    "decode_position",
    "validate_structure",
    "is_valid_position_string",
]
