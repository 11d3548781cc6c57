"""
Sync Exceptions

Author: Keep Keeping Project
License: MIT
"""

from typing import Optional

from .models import ErrorKind


class SyncError(Exception):
    """Base class for synchronization errors."""
    
    kind: ErrorKind = ErrorKind.COPY_ERROR
    
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class RootNotFoundError(SyncError):
    """A root path does not exist."""
    kind = ErrorKind.NOT_FOUND


class RootPermissionError(SyncError):
    """A root path cannot be read."""
    kind = ErrorKind.PERMISSION_DENIED


class RootOverlapError(SyncError):
    """The two roots are the same path or one contains the other."""
    kind = ErrorKind.INVALID_ROOTS


class ReadError(SyncError):
    """A directory could not be listed."""
    kind = ErrorKind.READ_ERROR


class CopyError(SyncError):
    """Content or metadata could not be copied."""
    kind = ErrorKind.COPY_ERROR


class RaceError(SyncError):
    """The destination changed kind between classification and action."""
    kind = ErrorKind.RACE_ERROR
