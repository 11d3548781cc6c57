"""
Sync Executor

Applies comparator decisions to the filesystem and turns failures into
per-entry outcomes.

Author: Keep Keeping Project
License: MIT
"""

from pathlib import Path
from typing import Optional

from ..core.exceptions import CopyError, RaceError, SyncError
from ..core.models import Decision, ErrorKind, Kind, Side, SyncOutcome
from ..utils.file_ops import copy_file, copy_tree, remove_path
from ..utils.logger import get_logger
from .classifier import EntryClassifier

logger = get_logger(__name__)

# Raised by the OS when the destination is not of the kind we expected
_RACE_ERRORS = (IsADirectoryError, NotADirectoryError, FileExistsError)


class SyncExecutor:
    """
    Performs the filesystem side of a decision.
    
    Copies overwrite the destination in place and are not reversible:
    files are copied with their metadata, directories and bundles are
    removed and copied again as a whole. Errors are captured in the
    returned outcome, never raised.
    """
    
    def __init__(
        self,
        classifier: Optional[EntryClassifier] = None,
        race_retries: int = 1,
        dry_run: bool = False
    ):
        """
        Initialize executor.
        
        Args:
            classifier: Classifier used to re-check the destination
            race_retries: Extra attempts when the destination changed kind
            dry_run: Report decisions without touching the filesystem
        """
        self.classifier = classifier or EntryClassifier()
        self.race_retries = race_retries
        self.dry_run = dry_run
    
    def apply(
        self,
        decision: Decision,
        path_a,
        path_b,
        relative_path: str = "."
    ) -> SyncOutcome:
        """
        Apply a decision to one entry pair.
        
        Args:
            decision: Comparator decision
            path_a: Entry path on side A
            path_b: Entry path on side B
            relative_path: Path reported in the outcome
        
        Returns:
            SyncOutcome with the error, if any
        """
        if not decision.is_copy:
            return SyncOutcome(relative_path=relative_path, decision=decision)
        
        if self.dry_run:
            logger.info(f"[dry-run] {relative_path}: {decision.describe()}")
            return SyncOutcome(relative_path=relative_path, decision=decision, dry_run=True)
        
        paths = {Side.A: Path(path_a), Side.B: Path(path_b)}
        source = paths[decision.source]
        destination = paths[decision.destination]
        
        attempts = 1 + max(self.race_retries, 0)
        for attempt in range(1, attempts + 1):
            try:
                self._replace(decision, source, destination)
                logger.info(f"{relative_path}: {decision.describe()}")
                return SyncOutcome(relative_path=relative_path, decision=decision)
            
            except RaceError as e:
                if attempt < attempts:
                    logger.warning(f"{relative_path}: {e.message}, retrying (attempt {attempt + 1})")
                    continue
                return self._failed(relative_path, decision, e)
            
            except PermissionError as e:
                return self._failed(relative_path, decision, e, kind=ErrorKind.PERMISSION_DENIED)
            
            except OSError as e:
                error = CopyError(f"Copy failed: {e}", path=str(destination))
                return self._failed(relative_path, decision, error)
    
    def _replace(self, decision: Decision, source: Path, destination: Path):
        """
        Replace destination with source.
        
        Raises:
            RaceError: If the destination is no longer of the expected kind
            OSError: On any other filesystem failure
        """
        expected = decision.kind_of(decision.destination)
        current = self.classifier.classify(destination)
        if current is not expected:
            raise RaceError(
                f"destination changed from {expected.value} to {current.value}",
                path=str(destination)
            )
        
        source_kind = decision.kind_of(decision.source)
        try:
            if source_kind is Kind.REGULAR_FILE:
                if current.is_directory:
                    remove_path(destination)
                copy_file(source, destination)
            else:
                if current is not Kind.ABSENT:
                    remove_path(destination)
                copy_tree(source, destination)
        except _RACE_ERRORS as e:
            raise RaceError(f"destination changed during copy: {e}", path=str(destination)) from e
    
    def _failed(
        self,
        relative_path: str,
        decision: Decision,
        error: Exception,
        kind: Optional[ErrorKind] = None
    ) -> SyncOutcome:
        if isinstance(error, SyncError):
            kind = kind or error.kind
            message = error.message
        else:
            message = str(error)
        
        logger.error(f"{relative_path}: {decision.describe()} failed: {message}")
        return SyncOutcome(
            relative_path=relative_path,
            decision=decision,
            error_kind=kind,
            error_message=message
        )
