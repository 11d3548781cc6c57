"""
Keep Keeping Core Module

Data model, errors and the orchestrator driving a synchronization run.

Author: Keep Keeping Project
License: MIT
"""

from .models import (
    Action,
    Decision,
    ErrorKind,
    ErrorPolicy,
    Kind,
    Side,
    SyncOutcome,
    SyncReport,
)
from .exceptions import (
    CopyError,
    RaceError,
    ReadError,
    RootNotFoundError,
    RootOverlapError,
    RootPermissionError,
    SyncError,
)
from .orchestrator import OrchestratorState, SyncOrchestrator, synchronize

__all__ = [
    'Action', 'Decision', 'ErrorKind', 'ErrorPolicy', 'Kind', 'Side',
    'SyncOutcome', 'SyncReport',
    'CopyError', 'RaceError', 'ReadError', 'RootNotFoundError',
    'RootOverlapError', 'RootPermissionError', 'SyncError',
    'OrchestratorState', 'SyncOrchestrator', 'synchronize',
]
