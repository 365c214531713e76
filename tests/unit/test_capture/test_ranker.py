"""
Unit tests for ranking and truncation.
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from proccapture.capture import rank_snapshots, validate_top_n
from proccapture.models import ProcessSnapshot, SelectionCriterion
from proccapture.validation import InvalidArgumentError


def snap(pid, cpu=None, mem=None):
    return ProcessSnapshot(
        pid=pid,
        name=f"p{pid}",
        owner="alice",
        cpu_percent=Decimal(cpu) if cpu is not None else None,
        memory_mb=Decimal(mem) if mem is not None else None,
        priority=None,
        is_system_process=False,
    )


@pytest.mark.unit
class TestRankSnapshots:
    """Test cases for rank_snapshots."""

    def test_sorted_descending_and_truncated(self):
        items = [snap(1, cpu="10"), snap(2, cpu="80"), snap(3, cpu="5"), snap(4, cpu="40")]

        result = rank_snapshots(items, SelectionCriterion.CPU, 3)

        assert [s.pid for s in result] == [2, 4, 1]

    def test_ties_broken_by_pid(self):
        items = [snap(9, mem="5"), snap(2, mem="5"), snap(4, mem="7")]

        result = rank_snapshots(items, SelectionCriterion.MEMORY, 10)

        assert [s.pid for s in result] == [4, 2, 9]

    def test_missing_metric_ranks_as_zero(self):
        items = [snap(1, cpu=None), snap(2, cpu="0.01"), snap(0, cpu="0")]

        result = rank_snapshots(items, SelectionCriterion.CPU, 3)

        assert [s.pid for s in result] == [2, 0, 1]

    def test_fallback_used_only_when_empty(self):
        fallback = Mock(return_value=snap(42))

        assert rank_snapshots([], SelectionCriterion.CPU, 5, fallback=fallback) == [snap(42)]
        fallback.reset_mock()
        rank_snapshots([snap(1)], SelectionCriterion.CPU, 5, fallback=fallback)
        fallback.assert_not_called()

    def test_empty_without_fallback(self):
        assert rank_snapshots([], SelectionCriterion.CPU, 5) == []


@pytest.mark.unit
@pytest.mark.parametrize("n", [0, -3, True, 1.0, None])
def test_validate_top_n_rejects(n):
    with pytest.raises(InvalidArgumentError, match="n must be greater than 0"):
        validate_top_n(n)


@pytest.mark.unit
def test_validate_top_n_accepts():
    assert validate_top_n(1) == 1
