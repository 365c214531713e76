"""
Data models for the capture engine.

Snapshot Models:
- SelectionCriterion, ProcessSnapshot and ExtraInfo values

Configuration Models:
- CaptureConfig and its bounds
"""

from .config import CaptureConfig, MAX_WINDOWS_BATCH_SIZE, MIN_SAMPLE_MILLIS
from .snapshot import ExtraInfo, ProcessSnapshot, SelectionCriterion
from .units import bytes_to_mb, round2

__all__ = [
    "CaptureConfig",
    "MAX_WINDOWS_BATCH_SIZE",
    "MIN_SAMPLE_MILLIS",
    "ExtraInfo",
    "ProcessSnapshot",
    "SelectionCriterion",
    "bytes_to_mb",
    "round2",
]
