"""
Utilities package for wireprobe.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of wire-format logic.
"""

from wireprobe.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
