"""Data sources feeding the recovery pipeline."""

from .json_snapshot import JsonSnapshotSource, SnapshotBundle

__all__ = ["JsonSnapshotSource", "SnapshotBundle"]
