"""Tatum wallet portfolio lookup."""

__version__ = "0.1.0"
