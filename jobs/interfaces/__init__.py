"""
Interfaces Package

Abstract interfaces for job ledgers.
"""

from jobs.interfaces.ledger_interface import JobLedgerInterface, LedgerError

__all__ = [
    "JobLedgerInterface",
    "LedgerError",
]
