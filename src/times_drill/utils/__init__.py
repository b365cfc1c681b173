"""Utility functions for times_drill.

This module contains internal utility functions.
"""

from times_drill.utils.lazy_import import lazy_import

__all__ = [
    "lazy_import",
]
