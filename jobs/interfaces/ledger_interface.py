"""
Job Ledger Interface

Abstract interface for job ledger implementations.
The ledger is the single synchronization point between the intake side
(adding jobs) and the upload worker (reading and updating them).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from jobs.models.job_record import JobRecord


class JobLedgerInterface(ABC):
    """
    Abstract base class for job ledgers.

    Implementations must make add/get/update atomic per job id and safe to
    call from several threads without external locking.
    """

    @abstractmethod
    def add(self, job: JobRecord) -> None:
        """
        Store a new job.

        Raises:
            LedgerError: If a job with the same id already exists
        """

    @abstractmethod
    def get(self, job_id: str) -> Optional[JobRecord]:
        """
        Get a job by id.

        Returns:
            A working copy of the job, or None if unknown
        """

    @abstractmethod
    def update(self, job: JobRecord) -> None:
        """
        Replace the stored job with this copy (last writer wins).

        Raises:
            LedgerError: If the job id is unknown
        """

    @abstractmethod
    def list_pending(self) -> List[JobRecord]:
        """
        List jobs the worker still has to drive (queued, uploading, processing).

        Returns:
            Working copies, oldest first
        """

    @abstractmethod
    def list_jobs(self) -> List[JobRecord]:
        """List every job, oldest first"""

    @abstractmethod
    def evict_finished(self, older_than: datetime) -> int:
        """
        Drop terminal jobs completed before older_than.

        Returns:
            Number of jobs removed
        """


class LedgerError(Exception):
    """
    Exception raised for ledger misuse.

    Examples:
    - Adding a job id twice
    - Updating a job that was never added
    """
