"""
Ordering and truncation of captured snapshots.
"""

import logging
from typing import Any, Callable, Iterable, List, Optional

from ..models.snapshot import ProcessSnapshot, SelectionCriterion
from ..validation import InvalidArgumentError

logger = logging.getLogger(__name__)


def validate_top_n(n: Any) -> int:
    """
    Check the requested result size.

    Raises:
        InvalidArgumentError: If ``n`` is not an integer greater than 0.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise InvalidArgumentError("n must be greater than 0", field_name="n", value=n)
    return n


def rank_snapshots(
    snapshots: Iterable[ProcessSnapshot],
    criterion: SelectionCriterion,
    n: int,
    fallback: Optional[Callable[[], ProcessSnapshot]] = None,
) -> List[ProcessSnapshot]:
    """
    Sort by the criterion's metric descending and keep the first ``n``.

    Missing metric values count as zero and ties go to the lower pid. When
    there is nothing to rank and ``fallback`` is given, its snapshot is
    ranked alone instead of returning an empty list.

    Raises:
        InvalidArgumentError: If ``n`` is not an integer greater than 0.
    """
    validate_top_n(n)
    candidates = list(snapshots)
    if not candidates and fallback is not None:
        logger.warning("No processes left after sampling, using the current process as fallback")
        candidates = [fallback()]

    ordered = sorted(candidates, key=lambda s: (-s.metric(criterion), s.pid))
    return ordered[:n]
