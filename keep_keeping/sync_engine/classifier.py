"""
Entry Classifier

Classifies filesystem paths as regular files, directories, atomic-unit
directories (application bundles), missing, or unsupported objects.
Only metadata is read; nothing is modified.

Author: Keep Keeping Project
License: MIT
"""

import os
import stat
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..core.models import Kind
from ..utils.file_ops import get_mtime_ns, get_tree_mtime_ns
from ..utils.logger import get_logger

logger = get_logger(__name__)

AtomicUnitPredicate = Callable[[Path], bool]

DEFAULT_BUNDLE_SUFFIXES = (".app",)
DEFAULT_BUNDLE_MARKER = "Contents"


def bundle_predicate(
    suffixes: Iterable[str] = DEFAULT_BUNDLE_SUFFIXES,
    marker: Optional[str] = DEFAULT_BUNDLE_MARKER
) -> AtomicUnitPredicate:
    """
    Build a predicate recognising bundle-style directories.
    
    A directory is a bundle when its name ends with one of ``suffixes``
    (case-insensitive) and, if ``marker`` is set, it contains a
    sub-directory of that name (``Foo.app/Contents/`` on macOS).
    
    Args:
        suffixes: Directory name suffixes, with leading dot
        marker: Required inner directory name, or None
        
    Returns:
        Predicate taking a directory path
    """
    normalized = tuple(s.lower() for s in suffixes)
    
    def is_bundle(path: Path) -> bool:
        if not path.name.lower().endswith(normalized):
            return False
        if marker is None:
            return True
        return (path / marker).is_dir()
    
    return is_bundle


class EntryClassifier:
    """
    Classifies paths into ``Kind`` values.
    
    Atomic units are recognised by a list of pluggable predicates; the
    default recognises macOS application bundles.
    """
    
    def __init__(self, predicates: Optional[List[AtomicUnitPredicate]] = None):
        """
        Initialize classifier.
        
        Args:
            predicates: Atomic-unit predicates, tried in order. None uses
                the macOS bundle predicate; an empty list disables
                atomic units entirely.
        """
        if predicates is None:
            predicates = [bundle_predicate()]
        self.predicates = list(predicates)
    
    def is_atomic_unit(self, path: Path) -> bool:
        """Check whether a directory must be synchronized as one unit."""
        return any(predicate(path) for predicate in self.predicates)
    
    def classify(self, path) -> Kind:
        """
        Classify a path.
        
        Symbolic links are followed; a dangling link is ABSENT.
        
        Args:
            path: Path to inspect
            
        Returns:
            Kind of the entry
            
        Raises:
            PermissionError: If the metadata cannot be read
        """
        path = Path(path)
        
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return Kind.ABSENT
        
        if stat.S_ISREG(st.st_mode):
            return Kind.REGULAR_FILE
        
        if stat.S_ISDIR(st.st_mode):
            if self.is_atomic_unit(path):
                return Kind.SPECIAL_DIRECTORY
            return Kind.DIRECTORY
        
        logger.debug(f"Unsupported file type at {path} (mode {oct(st.st_mode)})")
        return Kind.UNSUPPORTED
    
    def entry_mtime(self, path, kind: Kind) -> Optional[int]:
        """
        Modification time used to compare an entry, in nanoseconds.
        
        Bundles use the newest mtime found anywhere inside them.
        
        Args:
            path: Path of the entry
            kind: Kind previously returned by ``classify``
            
        Returns:
            mtime in nanoseconds, or None for absent entries
        """
        if kind in (Kind.ABSENT, Kind.UNSUPPORTED):
            return None
        if kind is Kind.SPECIAL_DIRECTORY:
            return get_tree_mtime_ns(path)
        return get_mtime_ns(path)


_default_classifier = EntryClassifier()


def classify(path) -> Kind:
    """Classify a path with the default bundle rules."""
    return _default_classifier.classify(path)
