"""
Platform information provider for unrecognised platforms.
"""

from typing import Dict, Iterable

from ..models.snapshot import ExtraInfo
from .base import AbstractPlatformInfoProvider


class NoOpPlatformInfoProvider(AbstractPlatformInfoProvider):
    """Provider that never has extra information."""

    def fetch(self, pids: Iterable[int]) -> Dict[int, ExtraInfo]:
        return {}
