"""
Configuration data models.
"""

from dataclasses import dataclass

# Floor applied to the configured sampling window.
MIN_SAMPLE_MILLIS = 50

# Upper bound of pids per external process-listing invocation.
MAX_WINDOWS_BATCH_SIZE = 40


@dataclass
class CaptureConfig:
    """
    Capture settings, loaded from the ``[capture]`` table of ``config.toml``.
    """

    # Length of the sampling window between baseline and resample, in ms.
    sample_millis: int = 300
    # Number of threads used to read baselines during enumeration.
    enumeration_workers: int = 4
    # Number of pids requested per PowerShell invocation on Windows.
    windows_batch_size: int = MAX_WINDOWS_BATCH_SIZE
    # Upper bound on a single PowerShell invocation, in seconds.
    windows_query_timeout: float = 10.0

    @property
    def sample_duration(self) -> float:
        """Sampling window in seconds."""
        return self.sample_millis / 1000.0
