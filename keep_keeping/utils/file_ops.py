"""
File Operation Utilities

Low-level filesystem helpers used by the sync engine: modification
times, metadata-preserving copies and removal of whole subtrees.

These helpers raise ``OSError`` on failure; callers decide how an error
is reported.

Author: Keep Keeping Project
License: MIT
"""

import os
import shutil
from pathlib import Path
from typing import Union

from .logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def get_mtime_ns(path: PathLike) -> int:
    """
    Get the modification time of a path in nanoseconds.
    
    Args:
        path: File or directory path
        
    Returns:
        ``st_mtime_ns`` of the path (symlinks followed)
    """
    return os.stat(path).st_mtime_ns


def get_tree_mtime_ns(path: PathLike) -> int:
    """
    Get the newest modification time found anywhere under a directory.
    
    The directory itself is included, so an empty directory reports its
    own mtime.
    
    Args:
        path: Directory path
        
    Returns:
        Largest ``st_mtime_ns`` in the tree
    """
    newest = get_mtime_ns(path)
    
    def _raise(error: OSError):
        raise error
    
    for dirpath, dirnames, filenames in os.walk(path, onerror=_raise):
        for name in dirnames + filenames:
            try:
                mtime = get_mtime_ns(os.path.join(dirpath, name))
            except FileNotFoundError:
                # Dangling link inside the tree
                continue
            if mtime > newest:
                newest = mtime
    
    return newest


def copy_file(source: PathLike, destination: PathLike) -> Path:
    """
    Copy a file with its metadata, overwriting the destination in place.
    
    Args:
        source: Source file path
        destination: Destination file path
        
    Returns:
        Destination path
    """
    dest_path = Path(destination)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    
    shutil.copy2(str(source), str(dest_path))
    logger.debug(f"Copied file: {source} -> {dest_path}")
    
    return dest_path


def copy_tree(source: PathLike, destination: PathLike) -> Path:
    """
    Recursively copy a directory, preserving file and directory metadata.
    
    The destination must not exist.
    
    Args:
        source: Source directory path
        destination: Destination directory path
        
    Returns:
        Destination path
    """
    dest_path = Path(destination)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    
    shutil.copytree(str(source), str(dest_path), copy_function=shutil.copy2)
    logger.debug(f"Copied tree: {source} -> {dest_path}")
    
    return dest_path


def remove_path(path: PathLike) -> bool:
    """
    Remove a file, link or directory tree.
    
    Args:
        path: Path to remove
        
    Returns:
        True if something was removed, False if nothing existed
    """
    target = Path(path)
    
    if target.is_symlink() or target.is_file():
        target.unlink()
    elif target.is_dir():
        shutil.rmtree(str(target))
    elif os.path.lexists(target):
        target.unlink()
    else:
        return False
    
    logger.debug(f"Removed: {target}")
    return True

