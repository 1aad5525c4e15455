"""Quantum layer: classical realisations, legality dependencies and measurement."""

from qchess.quantum.enumeration import (
    first_possible_position,
    is_move_always_legal,
    is_move_possible,
    legality_varies,
    possible_positions,
)
from qchess.quantum.measurement import (
    checking_dependencies,
    generate_dependencies,
    make_measurement,
    random_dependency,
)

__all__ = [
    "possible_positions",
    "first_possible_position",
    "legality_varies",
    "is_move_possible",
    "is_move_always_legal",
    "checking_dependencies",
    "generate_dependencies",
    "random_dependency",
    "make_measurement",
]
