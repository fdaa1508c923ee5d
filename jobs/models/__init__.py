"""
Models Package

Job data structures.
"""

from jobs.models.job_record import InvalidTransitionError, JobRecord, utc_now

__all__ = [
    "InvalidTransitionError",
    "JobRecord",
    "utc_now",
]
