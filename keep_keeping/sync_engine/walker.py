"""
Tree Walker

Lists directory children in a deterministic byte-wise order so that two
trees can be walked side by side.

Author: Keep Keeping Project
License: MIT
"""

import os
from pathlib import Path
from typing import Iterator, List

from ..core.exceptions import ReadError


def _sort_key(name: str) -> bytes:
    return os.fsencode(name)


def list_names(directory) -> List[str]:
    """
    List the immediate children of a directory, sorted byte-wise.
    
    Args:
        directory: Directory path
        
    Returns:
        Sorted child names
        
    Raises:
        ReadError: If the directory cannot be listed
    """
    try:
        with os.scandir(directory) as entries:
            names = [entry.name for entry in entries]
    except OSError as e:
        raise ReadError(f"Cannot list directory {directory}: {e}", path=str(directory)) from e
    
    return sorted(names, key=_sort_key)


def aligned_names(directory_a, directory_b, lister=list_names) -> List[str]:
    """
    Sorted union of the children of two directories.
    
    Args:
        directory_a: Directory on side A
        directory_b: Directory on side B
        lister: Callable returning the child names of one directory
    
    Raises:
        ReadError: If either directory cannot be listed
    """
    names = set(lister(directory_a))
    names.update(lister(directory_b))
    return sorted(names, key=_sort_key)


class DirectoryListing:
    """
    Lazy, restartable listing of a directory.
    
    Each iteration lists the directory again, so a second pass sees the
    current state of the filesystem.
    """
    
    def __init__(self, directory):
        self.directory = Path(directory)
    
    def __iter__(self) -> Iterator[str]:
        return iter(list_names(self.directory))
    
    def __repr__(self) -> str:
        return f"DirectoryListing({self.directory})"


class TreeWalker:
    """Directory listing seam used by the orchestrator."""
    
    def list(self, directory) -> List[str]:
        return list(DirectoryListing(directory))
    
    def aligned(self, directory_a, directory_b) -> List[str]:
        return aligned_names(directory_a, directory_b, lister=self.list)
