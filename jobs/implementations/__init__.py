"""
Implementations Package

Concrete job ledger implementations.
"""

from jobs.implementations.memory_ledger import InMemoryJobLedger

__all__ = [
    "InMemoryJobLedger",
]
