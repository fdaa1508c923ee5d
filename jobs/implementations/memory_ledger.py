"""
In-Memory Job Ledger

Process-local ledger backed by a dict and a lock.
Jobs are lost on restart; that is accepted for this service.
"""

import copy
import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from jobs.interfaces.ledger_interface import JobLedgerInterface, LedgerError
from jobs.models.job_record import JobRecord


class InMemoryJobLedger(JobLedgerInterface):
    """
    Thread-safe in-memory job ledger.

    Thread Safety:
    - Every operation holds a single lock for the duration of a dict access
    - Stored records are private copies: callers get copies from get/list and
      hand copies back through update, so a half-edited working copy is never
      visible to other threads
    - Updates are last-writer-wins per job id; different ids never interfere
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._jobs: Dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def add(self, job: JobRecord) -> None:
        with self._lock:
            if job.job_id in self._jobs:
                raise LedgerError(f"Job already exists: {job.job_id}")
            self._jobs[job.job_id] = copy.deepcopy(job)
        self.logger.debug(f"Job added: {job.job_id}")

    def get(self, job_id: str) -> Optional[JobRecord]:
        with self._lock:
            job = self._jobs.get(job_id)
            return copy.deepcopy(job) if job else None

    def update(self, job: JobRecord) -> None:
        with self._lock:
            if job.job_id not in self._jobs:
                raise LedgerError(f"Job not found: {job.job_id}")
            self._jobs[job.job_id] = copy.deepcopy(job)

    def list_pending(self) -> List[JobRecord]:
        return [job for job in self.list_jobs() if job.is_pending]

    def list_jobs(self) -> List[JobRecord]:
        with self._lock:
            jobs = [copy.deepcopy(job) for job in self._jobs.values()]
        jobs.sort(key=lambda j: j.created_at)
        return jobs

    def evict_finished(self, older_than: datetime) -> int:
        with self._lock:
            stale = [
                job_id
                for job_id, job in self._jobs.items()
                if job.is_terminal and job.completed_at and job.completed_at < older_than
            ]
            for job_id in stale:
                del self._jobs[job_id]

        if stale:
            self.logger.info(f"Evicted {len(stale)} finished jobs")
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
