"""
Command-line interface for fee-ledger.

Provides commands for inspecting, indexing and validating
treasury event logs.
"""

from .main import app, main

__all__ = ["main", "app"]
