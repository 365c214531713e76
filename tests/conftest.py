"""
Pytest configuration and shared fixtures for the proccapture test suite.

This module provides common fixtures, fake psutil processes and configuration
helpers shared by all test modules.
"""

import contextlib
import shutil
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence

import psutil
import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_capture_data():
    """Sample [capture] table for testing."""
    return {
        "sample_millis": 120,
        "enumeration_workers": 2,
        "windows_batch_size": 40,
        "windows_query_timeout_seconds": 5.0,
    }


@pytest.fixture
def config_file(temp_dir, sample_capture_data):
    """Write a config.toml with the sample capture table."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump({"capture": sample_capture_data}, f)
    return path


@pytest.fixture
def proc_root(temp_dir):
    """An empty directory standing in for /proc."""
    root = temp_dir / "proc"
    root.mkdir()
    return root


# ============================================================================
# Fake processes
# ============================================================================


class FakeProcess:
    """
    Minimal stand-in for psutil.Process.

    ``cpu_seconds`` lists successive cumulative CPU times; each call to
    ``cpu_times`` consumes the next value. An exception instance in the list
    is raised instead.
    """

    def __init__(
        self,
        pid: int,
        name: str,
        cpu_seconds: Sequence[Any] = (0.0, 0.0),
        username: Optional[str] = "alice",
        exe: str = "",
        cmdline: Optional[List[str]] = None,
        running: bool = True,
    ):
        self.pid = pid
        self._name = name
        self._cpu_seconds = list(cpu_seconds)
        self._username = username
        self._exe = exe
        self._cmdline = cmdline or [name]
        self.running = running

    def oneshot(self):
        return contextlib.nullcontext()

    def cpu_times(self):
        value = self._cpu_seconds.pop(0) if len(self._cpu_seconds) > 1 else self._cpu_seconds[0]
        if isinstance(value, BaseException):
            raise value
        return SimpleNamespace(user=value, system=0.0)

    def exe(self):
        return self._exe

    def name(self):
        return self._name

    def cmdline(self):
        return self._cmdline

    def username(self):
        if isinstance(self._username, BaseException):
            raise self._username
        return self._username

    def is_running(self):
        return self.running


class StaticMemoryReader:
    """MemoryReader double returning fixed values per pid."""

    def __init__(self, values: Optional[Dict[int, Any]] = None):
        self.values = values or {}
        self.calls: List[int] = []

    def read_memory_mb(self, pid):
        self.calls.append(pid)
        return self.values.get(pid)


@pytest.fixture
def fake_process_factory():
    """Provide the FakeProcess class."""
    return FakeProcess


@pytest.fixture
def memory_reader_factory():
    """Provide the StaticMemoryReader class."""
    return StaticMemoryReader


@pytest.fixture
def no_such_process():
    """Build psutil.NoSuchProcess errors."""
    return lambda pid: psutil.NoSuchProcess(pid)


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from proccapture.config import DEFAULT_CONFIG_PATH, clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(DEFAULT_CONFIG_PATH)
