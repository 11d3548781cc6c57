"""
Keep Keeping

Bidirectional synchronization of two files or directory trees: the newer
side of every entry wins and overwrites the other in place.

Author: Keep Keeping Project
License: MIT
"""

from .core import SyncOrchestrator, SyncReport, synchronize

__version__ = "0.1.0"
__all__ = ['SyncOrchestrator', 'SyncReport', 'synchronize']
