"""
Shared fixtures for the Keep Keeping test suite.

Author: Keep Keeping Project
License: MIT
"""

import logging
import os
from pathlib import Path

import pytest

# Fixed timestamps (ns) far from "now" so freshly created entries never tie
T1 = 1_600_000_000_000_000_000
T2 = T1 + 60 * 1_000_000_000
T3 = T2 + 60 * 1_000_000_000


def set_mtime(path, mtime_ns: int):
    os.utime(path, ns=(mtime_ns, mtime_ns))


def set_tree_mtime(root, mtime_ns: int):
    """Set the mtime of every entry under root, deepest first."""
    for dirpath, dirnames, filenames in os.walk(root, topdown=False):
        for name in filenames + dirnames:
            set_mtime(os.path.join(dirpath, name), mtime_ns)
    set_mtime(root, mtime_ns)


def relative_paths(root: Path) -> set:
    return {p.relative_to(root).as_posix() for p in root.rglob("*")}


@pytest.fixture
def make_file():
    """Create a file with content and an exact mtime."""
    def _make(path: Path, content: str = "", mtime_ns: int = T1) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        set_mtime(path, mtime_ns)
        return path
    return _make


@pytest.fixture
def roots(tmp_path):
    """Two empty root directories, A and B."""
    root_a = tmp_path / "a"
    root_b = tmp_path / "b"
    root_a.mkdir()
    root_b.mkdir()
    return root_a, root_b


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging (the CLI calls it)."""
    yield
    logging.getLogger("keep_keeping").handlers.clear()
