"""
Internal utilities for corrpower - not part of the public API.
"""

from . import formatters, validators, visualization

__all__ = [
    "formatters",
    "validators",
    "visualization",
]
