"""Adapters package exports."""

from .mock_tatum import MockTatumClient
from .tatum_api import TatumAPIClient

__all__ = ["TatumAPIClient", "MockTatumClient"]
