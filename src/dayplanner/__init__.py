"""DayPlanner: recurring task materialization and habit streak tracking."""

from __future__ import annotations

from .config import BaseConfig, DevConfig

__version__ = "0.1.0"

__all__ = ["BaseConfig", "DevConfig", "__version__"]
