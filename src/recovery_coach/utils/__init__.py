"""Utility helpers."""

from .dates import to_naive_utc, utc_now
from .logging import configure_logging

__all__ = ["configure_logging", "to_naive_utc", "utc_now"]
