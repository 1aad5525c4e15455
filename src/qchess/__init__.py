"""qchess — rules engine for quantum chess."""

__version__ = "0.1.0"
