"""
Unit Tests for the Sync Executor

Tests copies, type replacement, race handling and error capture.

Author: Keep Keeping Project
License: MIT
"""

import pytest

from keep_keeping.core.models import Action, Decision, ErrorKind, Kind
from keep_keeping.sync_engine.classifier import EntryClassifier
from keep_keeping.sync_engine.comparator import decide
from keep_keeping.sync_engine.executor import SyncExecutor
from keep_keeping.utils import file_ops

from conftest import T1, T2, set_tree_mtime


class FlakyClassifier(EntryClassifier):
    """Reports a wrong kind for the first ``lies`` calls."""
    
    def __init__(self, lies: int):
        super().__init__()
        self.lies = lies
    
    def classify(self, path):
        if self.lies > 0:
            self.lies -= 1
            return Kind.UNSUPPORTED
        return super().classify(path)


class TestCopies:
    """Test suite for successful copies."""
    
    def test_copy_to_missing_side(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "hello", T1)
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        
        outcome = SyncExecutor().apply(decision, root_a / "f.txt", root_b / "f.txt", "f.txt")
        
        assert outcome.ok
        assert (root_b / "f.txt").read_text() == "hello"
        assert (root_b / "f.txt").stat().st_mtime_ns == T1
    
    def test_newer_b_overwrites_a_in_place(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "old", T1)
        make_file(root_b / "f.txt", "new", T2)
        inode = (root_a / "f.txt").stat().st_ino
        decision = decide(Kind.REGULAR_FILE, T1, Kind.REGULAR_FILE, T2)
        
        outcome = SyncExecutor().apply(decision, root_a / "f.txt", root_b / "f.txt")
        
        assert outcome.ok
        assert (root_a / "f.txt").read_text() == "new"
        assert (root_a / "f.txt").stat().st_mtime_ns == T2
        assert (root_a / "f.txt").stat().st_ino == inode
    
    def test_directory_copied_as_unit(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "d" / "x.txt", "x")
        make_file(root_a / "d" / "sub" / "y.txt", "y")
        decision = decide(Kind.DIRECTORY, T1, Kind.ABSENT, None)
        
        outcome = SyncExecutor().apply(decision, root_a / "d", root_b / "d", "d")
        
        assert outcome.ok
        assert (root_b / "d" / "sub" / "y.txt").read_text() == "y"
    
    def test_directory_replaces_file(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "d" / "x.txt", "x")
        make_file(root_b / "d", "i was a file", T1)
        set_tree_mtime(root_a / "d", T2)
        decision = decide(Kind.DIRECTORY, T2, Kind.REGULAR_FILE, T1)
        
        outcome = SyncExecutor().apply(decision, root_a / "d", root_b / "d", "d")
        
        assert outcome.ok
        assert decision.action is Action.CONFLICT
        assert (root_b / "d").is_dir()
        assert (root_b / "d" / "x.txt").read_text() == "x"
        assert (root_b / "d").stat().st_mtime_ns == T2
    
    def test_file_replaces_directory(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "d" / "x.txt", "x")
        set_tree_mtime(root_a / "d", T1)
        make_file(root_b / "d", "file wins", T2)
        decision = decide(Kind.DIRECTORY, T1, Kind.REGULAR_FILE, T2)
        
        outcome = SyncExecutor().apply(decision, root_a / "d", root_b / "d", "d")
        
        assert outcome.ok
        assert (root_a / "d").is_file()
        assert (root_a / "d").read_text() == "file wins"
    
    def test_skip_and_recurse_do_nothing(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "a", T1)
        
        for decision in (Decision(Action.SKIP, "identical mtime"), Decision(Action.RECURSE)):
            outcome = SyncExecutor().apply(decision, root_a / "f.txt", root_b / "f.txt")
            assert outcome.ok
        
        assert not (root_b / "f.txt").exists()
    
    def test_dry_run_writes_nothing(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "a", T1)
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        
        outcome = SyncExecutor(dry_run=True).apply(decision, root_a / "f.txt", root_b / "f.txt")
        
        assert outcome.ok
        assert outcome.dry_run is True
        assert not (root_b / "f.txt").exists()


class TestFailures:
    """Test suite for captured errors."""
    
    def test_persistent_race_is_reported(self, roots, make_file):
        """Destination turned into a directory after the decision was taken."""
        root_a, root_b = roots
        make_file(root_a / "f.txt", "a", T1)
        (root_b / "f.txt").mkdir()
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        
        outcome = SyncExecutor().apply(decision, root_a / "f.txt", root_b / "f.txt", "f.txt")
        
        assert outcome.error_kind is ErrorKind.RACE_ERROR
        assert "directory" in outcome.error_message
        assert (root_b / "f.txt").is_dir()
    
    def test_transient_race_is_retried_once(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "a", T1)
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        executor = SyncExecutor(classifier=FlakyClassifier(lies=1))
        
        outcome = executor.apply(decision, root_a / "f.txt", root_b / "f.txt")
        
        assert outcome.ok
        assert (root_b / "f.txt").read_text() == "a"
    
    def test_race_without_retries_fails_immediately(self, roots, make_file):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "a", T1)
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        executor = SyncExecutor(classifier=FlakyClassifier(lies=1), race_retries=0)
        
        outcome = executor.apply(decision, root_a / "f.txt", root_b / "f.txt")
        
        assert outcome.error_kind is ErrorKind.RACE_ERROR
    
    def test_permission_error_is_captured(self, roots, make_file, monkeypatch):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "a", T1)
        
        def denied(src, dst, **kwargs):
            raise PermissionError(13, "Permission denied", str(dst))
        
        monkeypatch.setattr(file_ops.shutil, "copy2", denied)
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        
        outcome = SyncExecutor().apply(decision, root_a / "f.txt", root_b / "f.txt", "f.txt")
        
        assert outcome.error_kind is ErrorKind.PERMISSION_DENIED
        assert not outcome.ok
    
    def test_os_error_becomes_copy_error(self, roots, make_file, monkeypatch):
        root_a, root_b = roots
        make_file(root_a / "f.txt", "a", T1)
        
        def disk_full(src, dst, **kwargs):
            raise OSError(28, "No space left on device")
        
        monkeypatch.setattr(file_ops.shutil, "copy2", disk_full)
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        
        outcome = SyncExecutor().apply(decision, root_a / "f.txt", root_b / "f.txt", "f.txt")
        
        assert outcome.error_kind is ErrorKind.COPY_ERROR
        assert "No space left" in outcome.error_message
    
    def test_vanished_source_is_copy_error(self, roots):
        root_a, root_b = roots
        decision = decide(Kind.REGULAR_FILE, T1, Kind.ABSENT, None)
        
        outcome = SyncExecutor().apply(decision, root_a / "gone.txt", root_b / "gone.txt")
        
        assert outcome.error_kind is ErrorKind.COPY_ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
