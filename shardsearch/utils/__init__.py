"""
Utilities package for shardsearch.

Exports shared helpers for logging and profiling. Keep this package
lightweight and free of protocol logic.
"""

from shardsearch.utils.logging import configure_logging, get_logger
from shardsearch.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
