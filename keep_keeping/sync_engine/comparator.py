"""
Comparator

Decides which side of an entry pair is authoritative from the kinds and
modification times of both sides.

Author: Keep Keeping Project
License: MIT
"""

from typing import Optional

from ..core.models import Action, Decision, Kind, Side


def _copy_from(source: Side, reason: str, kind_a: Kind, kind_b: Kind) -> Decision:
    action = Action.COPY_A_TO_B if source is Side.A else Action.COPY_B_TO_A
    return Decision(action=action, reason=reason, source=source, kind_a=kind_a, kind_b=kind_b)


def decide(
    kind_a: Kind,
    mtime_a: Optional[int],
    kind_b: Kind,
    mtime_b: Optional[int]
) -> Decision:
    """
    Decide what to do with one entry.
    
    Rules, first match wins:
    
    - either side unsupported: skip
    - both absent: skip
    - one side absent: copy the existing side over
    - kinds differ: conflict, the strictly newer side replaces the other
      wholesale; equal mtimes go to side A
    - both directories: recurse
    - both bundles or both files: the strictly newer side wins, equal
      mtimes are skipped
    
    Modification times are compared for exact equality.
    
    Args:
        kind_a: Kind of the entry on side A
        mtime_a: mtime (ns) on side A, None if absent
        kind_b: Kind of the entry on side B
        mtime_b: mtime (ns) on side B, None if absent
        
    Returns:
        Decision for the entry
    """
    if Kind.UNSUPPORTED in (kind_a, kind_b):
        return Decision(Action.SKIP, "unsupported file type", kind_a=kind_a, kind_b=kind_b)
    
    if kind_a is Kind.ABSENT and kind_b is Kind.ABSENT:
        return Decision(Action.SKIP, "both missing", kind_a=kind_a, kind_b=kind_b)
    
    if kind_a is Kind.ABSENT:
        return _copy_from(Side.B, "missing on A", kind_a, kind_b)
    
    if kind_b is Kind.ABSENT:
        return _copy_from(Side.A, "missing on B", kind_a, kind_b)
    
    if kind_a is not kind_b:
        source = Side.B if mtime_b > mtime_a else Side.A
        reason = f"type mismatch: {kind_a.value} vs {kind_b.value}"
        if mtime_a == mtime_b:
            reason += ", equal mtime"
        return Decision(Action.CONFLICT, reason, source=source, kind_a=kind_a, kind_b=kind_b)
    
    if kind_a is Kind.DIRECTORY:
        return Decision(Action.RECURSE, kind_a=kind_a, kind_b=kind_b)
    
    if mtime_a > mtime_b:
        return _copy_from(Side.A, "newer on A", kind_a, kind_b)
    if mtime_b > mtime_a:
        return _copy_from(Side.B, "newer on B", kind_a, kind_b)
    
    return Decision(Action.SKIP, "identical mtime", kind_a=kind_a, kind_b=kind_b)
