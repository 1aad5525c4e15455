"""Exception taxonomy for the rules engine."""

from __future__ import annotations


class QuantumChessError(Exception):
    """Base class for every error raised by :mod:`qchess`."""


class InvalidValueError(QuantumChessError, ValueError):
    """Malformed fraction, out-of-range coordinate or bad argument."""


class InvalidMoveError(QuantumChessError, ValueError):
    """Unrecognised move shape or a null move."""


class StructuralViolationError(QuantumChessError, ValueError):
    """A quantum position breaks a construction invariant."""


class InsufficientEntropyError(QuantumChessError, RuntimeError):
    """The bit source ran out of bits in the middle of a draw."""
