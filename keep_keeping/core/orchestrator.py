"""
Orchestrator

Drives classification, comparison and execution over a pair of roots
and collects every per-entry outcome into a SyncReport.

Author: Keep Keeping Project
License: MIT
"""

import os
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePosixPath
from threading import Event, Lock
from typing import Callable, List, Optional, Tuple

from ..config.schema import SyncSettings
from ..sync_engine.classifier import EntryClassifier, bundle_predicate
from ..sync_engine.comparator import decide
from ..sync_engine.executor import SyncExecutor
from ..sync_engine.walker import TreeWalker
from ..utils.logger import get_logger
from .exceptions import (
    ReadError,
    RootNotFoundError,
    RootOverlapError,
    RootPermissionError,
)
from .models import (
    Action,
    Decision,
    ErrorKind,
    ErrorPolicy,
    Kind,
    SyncOutcome,
    SyncReport,
)

logger = get_logger(__name__)

ROOT_ENTRY = "."

OutcomeCallback = Callable[[SyncOutcome], None]
ErrorCallback = Callable[[SyncOutcome], Optional[ErrorPolicy]]


class OrchestratorState(Enum):
    """
    Lifecycle of one synchronization run.
    
    Coarse phases, set only from the thread that called synchronize():
    WALKING_PAIR while the roots are listed, RECURSING while their
    children are being synchronized.
    """
    INIT = "init"
    COMPARING_ROOTS = "comparing_roots"
    WALKING_PAIR = "walking_pair"
    RECURSING = "recursing"
    DONE = "done"
    FAILED = "failed"


class _SyncRun:
    """State shared by the workers of a single run."""
    
    def __init__(
        self,
        root_a: Path,
        root_b: Path,
        cancel_event: Event,
        on_outcome: Optional[OutcomeCallback],
        on_error: Optional[ErrorCallback]
    ):
        self.root_a = root_a
        self.root_b = root_b
        self.cancel_event = cancel_event
        self.on_outcome = on_outcome
        self.on_error = on_error
        self.report = SyncReport(str(root_a), str(root_b))
        self._abort = Event()
        self._lock = Lock()
    
    def paths(self, relative: PurePosixPath) -> Tuple[Path, Path]:
        if str(relative) == ROOT_ENTRY:
            return self.root_a, self.root_b
        return self.root_a.joinpath(*relative.parts), self.root_b.joinpath(*relative.parts)
    
    def should_stop(self) -> bool:
        return self.cancel_event.is_set() or self._abort.is_set()
    
    def emit(self, outcome: SyncOutcome):
        """Hand an outcome to the callbacks as soon as it exists."""
        with self._lock:
            if self.on_outcome:
                self.on_outcome(outcome)
            if not outcome.ok and self.on_error:
                if self.on_error(outcome) is ErrorPolicy.FAIL:
                    logger.warning(f"Aborting after error on {outcome.relative_path}")
                    self._abort.set()
    
    def finish(self):
        self.report.cancelled = self.cancel_event.is_set()
        self.report.aborted = self._abort.is_set()


class SyncOrchestrator:
    """
    Bidirectional synchronization of two paths.
    
    Both roots are classified first. A file, a bundle, a missing root or
    mismatched root kinds are handled as a single entry. Two plain
    directories are walked side by side with an explicit stack; every
    entry is compared and applied independently so that an error on one
    entry never stops its siblings.
    
    With ``max_workers > 1`` the top-level children of the roots are
    synchronized on a thread pool. Each child's subtree belongs to a
    single worker.
    """
    
    def __init__(
        self,
        settings: Optional[SyncSettings] = None,
        classifier: Optional[EntryClassifier] = None,
        walker: Optional[TreeWalker] = None,
        executor: Optional[SyncExecutor] = None
    ):
        """
        Initialize orchestrator.
        
        Args:
            settings: Sync settings (defaults if None)
            classifier: Entry classifier (built from settings if None)
            walker: Directory lister
            executor: Executor applying decisions (built from settings if None)
        """
        self.settings = settings or SyncSettings()
        self.classifier = classifier or EntryClassifier(
            [bundle_predicate(self.settings.bundle_suffixes, self.settings.bundle_marker)]
        )
        self.walker = walker or TreeWalker()
        self.executor = executor or SyncExecutor(
            classifier=self.classifier,
            race_retries=self.settings.race_retries,
            dry_run=self.settings.dry_run
        )
        self.state = OrchestratorState.INIT
        self._cancel_event = Event()
    
    def cancel(self):
        """Request cancellation; takes effect before the next entry."""
        logger.info("Cancellation requested")
        self._cancel_event.set()
    
    def synchronize(
        self,
        path_a,
        path_b,
        on_outcome: Optional[OutcomeCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        cancel_event: Optional[Event] = None
    ) -> SyncReport:
        """
        Synchronize two paths in both directions.
        
        Args:
            path_a: First root (side A, wins ties on type mismatches)
            path_b: Second root (side B)
            on_outcome: Called with each outcome as it is produced
            on_error: Called with each failed outcome; returning
                ErrorPolicy.FAIL stops the run
            cancel_event: External cancellation signal
        
        Returns:
            SyncReport with one outcome per visited entry
        
        Raises:
            RootNotFoundError: If a root does not exist
            RootPermissionError: If a root cannot be read
            RootOverlapError: If the roots are the same or nested
        """
        self.state = OrchestratorState.INIT
        self._cancel_event = cancel_event or Event()
        
        root_a = Path(os.path.abspath(os.fspath(path_a)))
        root_b = Path(os.path.abspath(os.fspath(path_b)))
        run = _SyncRun(root_a, root_b, self._cancel_event, on_outcome, on_error)
        
        logger.info(f"Synchronizing {root_a} <-> {root_b}")
        
        try:
            self.state = OrchestratorState.COMPARING_ROOTS
            kind_a, kind_b = self._check_roots(root_a, root_b)
            
            if kind_a is Kind.DIRECTORY and kind_b is Kind.DIRECTORY:
                self.state = OrchestratorState.WALKING_PAIR
                self._walk_roots(run)
            else:
                self._sync_single(run, kind_a, kind_b)
        except Exception:
            self.state = OrchestratorState.FAILED
            raise
        
        run.finish()
        run.report.finished_at = datetime.now()
        self.state = OrchestratorState.DONE
        
        stats = run.report.get_stats()
        logger.info(
            f"Synchronization finished: {stats['total']} entries, "
            f"{stats['errors']} errors"
            + (" (cancelled)" if run.report.cancelled else "")
            + (" (aborted)" if run.report.aborted else "")
        )
        return run.report
    
    def _check_roots(self, root_a: Path, root_b: Path) -> Tuple[Kind, Kind]:
        """Validate both roots before anything is written."""
        # Symlinks resolved, so a link into the other root is caught
        real_a = Path(os.path.realpath(root_a))
        real_b = Path(os.path.realpath(root_b))
        if real_a == real_b or real_a in real_b.parents or real_b in real_a.parents:
            raise RootOverlapError(f"Roots overlap: {root_a} and {root_b}")
        
        kinds = []
        for root in (root_a, root_b):
            try:
                kind = self.classifier.classify(root)
            except PermissionError as e:
                raise RootPermissionError(f"Permission denied: {root}", path=str(root)) from e
            
            if kind.is_directory and not os.access(root, os.R_OK | os.X_OK):
                raise RootPermissionError(f"Permission denied: {root}", path=str(root))
            kinds.append(kind)
        
        kind_a, kind_b = kinds
        missing = [str(r) for r, k in ((root_a, kind_a), (root_b, kind_b)) if k is Kind.ABSENT]
        if len(missing) == 2 or (missing and not self.settings.create_missing_root):
            raise RootNotFoundError(
                "Path does not exist: " + ", ".join(f"'{m}'" for m in missing),
                path=missing[0]
            )
        
        logger.debug(f"Root kinds: A={kind_a.value}, B={kind_b.value}")
        return kind_a, kind_b
    
    def _sync_single(self, run: _SyncRun, kind_a: Kind, kind_b: Kind):
        """Synchronize the roots as one entry."""
        if run.should_stop():
            return
        decision = decide(
            kind_a, self.classifier.entry_mtime(run.root_a, kind_a),
            kind_b, self.classifier.entry_mtime(run.root_b, kind_b)
        )
        outcome = self.executor.apply(decision, run.root_a, run.root_b, relative_path=ROOT_ENTRY)
        run.report.add(outcome)
        run.emit(outcome)
    
    def _walk_roots(self, run: _SyncRun):
        """Walk two root directories, one task per top-level child."""
        try:
            names = self.walker.aligned(run.root_a, run.root_b)
        except ReadError as e:
            if isinstance(e.__cause__, PermissionError):
                raise RootPermissionError(e.message, path=e.path) from e
            raise
        
        self.state = OrchestratorState.RECURSING
        max_workers = self.settings.max_workers
        if max_workers <= 1 or len(names) <= 1:
            for name in names:
                if run.should_stop():
                    break
                run.report.extend(self._sync_subtree(run, PurePosixPath(name)))
            return
        
        logger.debug(f"Synchronizing {len(names)} top-level entries with {max_workers} workers")
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="keep-keeping") as pool:
            futures = [
                pool.submit(self._sync_subtree, run, PurePosixPath(name))
                for name in names
            ]
            # Collected in submission order, not completion order
            for future in futures:
                run.report.extend(future.result())
    
    def _sync_subtree(self, run: _SyncRun, top: PurePosixPath) -> List[SyncOutcome]:
        """
        Synchronize one top-level entry and everything below it.
        
        Pending directories are kept on an explicit stack and visited
        depth-first in sorted order.
        """
        outcomes: List[SyncOutcome] = []
        stack = [top]
        
        while stack:
            if run.should_stop():
                break
            
            relative = stack.pop()
            outcome, children = self._sync_entry(run, relative)
            outcomes.append(outcome)
            run.emit(outcome)
            
            if children:
                stack.extend(relative / name for name in reversed(children))
        
        return outcomes
    
    def _sync_entry(
        self,
        run: _SyncRun,
        relative: PurePosixPath
    ) -> Tuple[SyncOutcome, List[str]]:
        """
        Compare and apply one entry.
        
        Returns:
            The outcome and, for directories to descend into, their
            aligned child names
        """
        path_a, path_b = run.paths(relative)
        rel = relative.as_posix()
        
        try:
            kind_a = self.classifier.classify(path_a)
            kind_b = self.classifier.classify(path_b)
            decision = decide(
                kind_a, self.classifier.entry_mtime(path_a, kind_a),
                kind_b, self.classifier.entry_mtime(path_b, kind_b)
            )
        except PermissionError as e:
            return self._entry_error(rel, ErrorKind.PERMISSION_DENIED, str(e)), []
        except OSError as e:
            return self._entry_error(rel, ErrorKind.READ_ERROR, str(e)), []
        
        logger.debug(f"{rel}: {decision.describe()}")
        
        if decision.action is not Action.RECURSE:
            return self.executor.apply(decision, path_a, path_b, relative_path=rel), []
        
        try:
            children = self.walker.aligned(path_a, path_b)
        except ReadError as e:
            logger.error(f"{rel}: skipping unreadable directory: {e.message}")
            skip = Decision(
                Action.SKIP, "unreadable directory",
                kind_a=decision.kind_a, kind_b=decision.kind_b
            )
            return SyncOutcome(
                relative_path=rel,
                decision=skip,
                error_kind=ErrorKind.READ_ERROR,
                error_message=e.message
            ), []
        
        return SyncOutcome(relative_path=rel, decision=decision), children
    
    def _entry_error(self, rel: str, kind: ErrorKind, message: str) -> SyncOutcome:
        logger.error(f"{rel}: {message}")
        return SyncOutcome(
            relative_path=rel,
            decision=Decision(Action.SKIP, "cannot inspect entry", kind_a=Kind.ABSENT, kind_b=Kind.ABSENT),
            error_kind=kind,
            error_message=message
        )


def synchronize(
    path_a,
    path_b,
    settings: Optional[SyncSettings] = None,
    **kwargs
) -> SyncReport:
    """
    Convenience function to synchronize two paths.
    
    Args:
        path_a: First root
        path_b: Second root
        settings: Optional sync settings
        **kwargs: Passed to ``SyncOrchestrator.synchronize``
        
    Returns:
        SyncReport
    """
    return SyncOrchestrator(settings).synchronize(path_a, path_b, **kwargs)
