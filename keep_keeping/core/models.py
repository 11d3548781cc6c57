"""
Sync Data Model

Entry kinds, comparator decisions and the per-entry outcomes collected
into a SyncReport.

Author: Keep Keeping Project
License: MIT
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class Kind(Enum):
    """Classification of a filesystem entry."""
    REGULAR_FILE = "file"
    DIRECTORY = "directory"
    SPECIAL_DIRECTORY = "special_directory"
    ABSENT = "absent"
    UNSUPPORTED = "unsupported"
    
    @property
    def is_directory(self) -> bool:
        return self in (Kind.DIRECTORY, Kind.SPECIAL_DIRECTORY)


class Side(Enum):
    """One of the two synchronized endpoints."""
    A = "a"
    B = "b"
    
    @property
    def other(self) -> "Side":
        return Side.B if self is Side.A else Side.A


class Action(Enum):
    """What the comparator decided to do with an entry."""
    COPY_A_TO_B = "copy_a_to_b"
    COPY_B_TO_A = "copy_b_to_a"
    RECURSE = "recurse"
    SKIP = "skip"
    CONFLICT = "conflict"


class ErrorKind(str, Enum):
    """Error categories reported per entry or raised for the roots."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    READ_ERROR = "read_error"
    COPY_ERROR = "copy_error"
    RACE_ERROR = "race_error"
    INVALID_ROOTS = "invalid_roots"


class ErrorPolicy(Enum):
    """Answer of an ``on_error`` callback."""
    CONTINUE = "continue"
    FAIL = "fail"


@dataclass(frozen=True)
class Decision:
    """
    Comparator verdict for one entry.
    
    ``source`` names the authoritative side for copies and for resolved
    conflicts; it is None for RECURSE and SKIP.
    """
    action: Action
    reason: str = ""
    source: Optional[Side] = None
    kind_a: Kind = Kind.ABSENT
    kind_b: Kind = Kind.ABSENT
    
    @property
    def is_copy(self) -> bool:
        """True if applying this decision writes to the filesystem."""
        return self.action in (Action.COPY_A_TO_B, Action.COPY_B_TO_A, Action.CONFLICT)
    
    @property
    def destination(self) -> Optional[Side]:
        return self.source.other if self.source else None
    
    def kind_of(self, side: Side) -> Kind:
        return self.kind_a if side is Side.A else self.kind_b
    
    def describe(self) -> str:
        if self.action is Action.CONFLICT:
            label = f"conflict -> {self.source.value.upper()} wins"
        else:
            label = self.action.value.replace("_", " ")
        return f"{label} ({self.reason})" if self.reason else label


@dataclass
class SyncOutcome:
    """Result of handling one entry."""
    relative_path: str
    decision: Decision
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    dry_run: bool = False
    timestamp: datetime = field(default_factory=datetime.now)
    
    @property
    def ok(self) -> bool:
        return self.error_kind is None
    
    def __str__(self) -> str:
        if self.ok:
            return f"{self.relative_path}: {self.decision.describe()}"
        return (
            f"{self.relative_path}: {self.decision.describe()} "
            f"[{self.error_kind.value}] {self.error_message}"
        )


class SyncReport:
    """
    Ordered collection of per-entry outcomes for one synchronization run.
    
    The presentation layer renders it and derives the process exit status
    from ``exit_code``.
    """
    
    def __init__(self, root_a: str, root_b: str):
        self.root_a = root_a
        self.root_b = root_b
        self.outcomes: List[SyncOutcome] = []
        self.cancelled = False
        self.aborted = False
        self.started_at = datetime.now()
        self.finished_at: Optional[datetime] = None
    
    def add(self, outcome: SyncOutcome):
        self.outcomes.append(outcome)
    
    def extend(self, outcomes: List[SyncOutcome]):
        self.outcomes.extend(outcomes)
    
    @property
    def errors(self) -> List[SyncOutcome]:
        return [o for o in self.outcomes if not o.ok]
    
    @property
    def has_errors(self) -> bool:
        return any(not o.ok for o in self.outcomes)
    
    @property
    def exit_code(self) -> int:
        return 1 if self.has_errors else 0
    
    def get(self, relative_path: str) -> Optional[SyncOutcome]:
        """Look up the outcome recorded for a relative path."""
        for outcome in self.outcomes:
            if outcome.relative_path == relative_path:
                return outcome
        return None
    
    def get_stats(self) -> Dict[str, int]:
        """Count outcomes per action, plus errors."""
        stats = {action.value: 0 for action in Action}
        for outcome in self.outcomes:
            stats[outcome.decision.action.value] += 1
        stats["errors"] = len(self.errors)
        stats["total"] = len(self.outcomes)
        return stats
    
    def __len__(self) -> int:
        return len(self.outcomes)
    
    def __iter__(self):
        return iter(self.outcomes)
    
    def __repr__(self) -> str:
        return (
            f"SyncReport(a={self.root_a}, b={self.root_b}, "
            f"entries={len(self.outcomes)}, errors={len(self.errors)})"
        )
