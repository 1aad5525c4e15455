"""Notation package: textual quantum position encoding and validation."""

from qchess.core.notation.position_string import (
    STARTING_POSITION,
    UNLIMITED_STARTING_POSITION,
    are_valid_starting_objects,
    decode_data,
    decode_position,
    encode_data,
    encode_position,
    is_valid_position_string,
    position_from_string,
    validate_structure,
)

__all__ = [
    "STARTING_POSITION",
    "UNLIMITED_STARTING_POSITION",
    "encode_data",
    "decode_data",
    "encode_position",
    "decode_position",
    "validate_structure",
    "is_valid_position_string",
    "are_valid_starting_objects",
    "position_from_string",
]
