"""Utility functions for the blocks game."""
from .config import Settings, default_path
from .logger import Logger, MetricsTracker

__all__ = [
    "Settings",
    "default_path",
    "Logger",
    "MetricsTracker",
]
