"""
Restore execution.

- RestoreExecutor / run_restore: drive a restore through its phases
- RestoreSession: scoped ownership of remote staging and scratch files
- RestoreOutcome / SubsetOutcome: what each phase and subset ended with
"""

from .executor import RestoreExecutor, run_restore
from .outcome import RestoreOutcome, RestoreState, SubsetOutcome, SubsetStatus
from .session import RestoreSession

__all__ = [
    'RestoreExecutor',
    'run_restore',
    'RestoreSession',
    'RestoreOutcome',
    'RestoreState',
    'SubsetOutcome',
    'SubsetStatus',
]
