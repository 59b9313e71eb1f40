"""Gong → Velaris call activity sync service."""

__version__ = "0.1.0"
