"""Interface contracts for times_drill.

This module exports all Protocol-based interfaces for dependency injection.
"""

from times_drill.interfaces.storage import StateStoreInterface

__all__ = [
    "StateStoreInterface",
]
