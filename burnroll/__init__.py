"""Burning Wheel dice tests and advancement tracking."""

__version__ = "0.1.0"
