"""
Jobs Module

Upload job records, the ledger that stores them, and the intake that creates them.

Public API:
    - JobRecord: One upload-to-publish job
    - JobStatus: Job status enum
    - InMemoryJobLedger: Thread-safe in-process ledger
    - JobIntake: Saves uploaded files and queues jobs

Usage:
    from jobs import InMemoryJobLedger, JobIntake

    ledger = InMemoryJobLedger()
    intake = JobIntake(ledger)
"""

from jobs.constants import PENDING_STATUSES, TERMINAL_STATUSES, JobStatus
from jobs.implementations.memory_ledger import InMemoryJobLedger
from jobs.intake import IntakeError, JobIntake
from jobs.interfaces.ledger_interface import JobLedgerInterface, LedgerError
from jobs.models.job_record import InvalidTransitionError, JobRecord, utc_now

# Public API
__all__ = [
    "PENDING_STATUSES",
    "TERMINAL_STATUSES",
    "InMemoryJobLedger",
    "IntakeError",
    "InvalidTransitionError",
    "JobIntake",
    "JobLedgerInterface",
    "JobRecord",
    "JobStatus",
    "LedgerError",
    "utc_now",
]
