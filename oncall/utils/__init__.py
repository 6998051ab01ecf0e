"""Utility functions."""

from .logging import setup_logging
from .metrics import MetricsCollector, Timer, metrics

__all__ = ["setup_logging", "MetricsCollector", "Timer", "metrics"]
