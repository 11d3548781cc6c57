"""
Sync Engine Module

Entry classification, directory listing, comparison and execution.

Author: Keep Keeping Project
License: MIT
"""

from .classifier import EntryClassifier, bundle_predicate, classify
from .comparator import decide
from .executor import SyncExecutor
from .walker import DirectoryListing, TreeWalker, aligned_names, list_names

__all__ = [
    'EntryClassifier', 'bundle_predicate', 'classify', 'decide',
    'SyncExecutor', 'DirectoryListing', 'TreeWalker', 'aligned_names',
    'list_names',
]
