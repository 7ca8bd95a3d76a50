"""Top-level package for the E-Ink month calendar generator."""

from __future__ import annotations

from .scheduler import Scheduler, next_hour_boundary

__all__ = [
    "__version__",
    "Scheduler",
    "next_hour_boundary",
]

__version__ = "0.1.0"
