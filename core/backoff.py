"""
Processing Poll Backoff

Schedule for asking the video host whether a video finished processing:
wait for check n is min(base * 2**n, cap) seconds after the previous check
(5, 10, 20, 40, 60, 60, ... with the defaults).
"""

from datetime import datetime, timedelta
from typing import Optional

from config.settings import PROCESSING_BACKOFF_BASE, PROCESSING_BACKOFF_CAP


def processing_wait_seconds(
    check_count: int,
    base: float = PROCESSING_BACKOFF_BASE,
    cap: float = PROCESSING_BACKOFF_CAP,
) -> float:
    """
    Seconds to wait before the next processing check.

    Args:
        check_count: Checks already performed for this job
        base: Wait before the first check
        cap: Upper bound for any wait

    Example:
        >>> [processing_wait_seconds(n) for n in range(6)]
        [5.0, 10.0, 20.0, 40.0, 60.0, 60.0]
    """
    if check_count < 0:
        raise ValueError("check_count cannot be negative")

    # Exponent clamped so long-running jobs can't overflow the float
    return float(min(base * 2 ** min(check_count, 62), cap))


def next_check_due(
    last_check_at: datetime,
    check_count: int,
    base: float = PROCESSING_BACKOFF_BASE,
    cap: float = PROCESSING_BACKOFF_CAP,
) -> datetime:
    """Time at which the next processing check may run"""
    wait = processing_wait_seconds(check_count, base, cap)
    return last_check_at + timedelta(seconds=wait)


def is_check_due(
    now: datetime,
    last_check_at: Optional[datetime],
    check_count: int,
    base: float = PROCESSING_BACKOFF_BASE,
    cap: float = PROCESSING_BACKOFF_CAP,
) -> bool:
    """
    Check whether enough time has passed since the last processing check.

    A job without a last-check timestamp is never due; the caller has to
    start its processing clock first.
    """
    if last_check_at is None:
        return False
    return now >= next_check_due(last_check_at, check_count, base, cap)
