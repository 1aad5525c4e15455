"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from qchess.core.position import QuantumPosition
from qchess.core.random_source import BitSource


@pytest.fixture
def start() -> QuantumPosition:
    """Fresh standard starting position with zero qubit balances."""
    return QuantumPosition.initial()


@pytest.fixture
def no_bits() -> BitSource:
    """Empty bit source; any draw that needs entropy fails loudly."""
    return BitSource()
