"""
Dependency Comparison

Decides whether a cached value is stale by comparing the dependency list
seen at the last evaluation with the one supplied now.

The comparison is SHALLOW: each position is checked on its own, by identity
first and then by value. Nested structures are never inspected, so state
must be replaced wholesale (new tuple) rather than mutated in place for a
change to be noticed.
"""

from typing import Any, Optional, Sequence


Deps = Optional[Sequence[Any]]


def _differs(previous: Any, current: Any) -> bool:
    """True when two dependency entries are neither the same object nor equal."""
    if previous is current:
        return False
    try:
        return bool(previous != current)
    except (TypeError, ValueError):
        # Array-likes refuse a truth value; identity already failed above
        return True


def are_stale(prev: Deps, next: Deps) -> bool:
    """
    Compare two dependency lists.
    
    Policy:
    - next is None  -> stale (no dependency list: always recompute)
    - prev is None  -> stale (first run)
    - lengths differ -> stale
    - any positional pair differs -> stale
    
    Returns:
        True if the dependent computation must run again
    """
    if next is None or prev is None:
        return True
    
    if len(prev) != len(next):
        return True
    
    return any(_differs(a, b) for a, b in zip(prev, next))


def snapshot_deps(deps: Deps) -> Optional[tuple]:
    """Freeze a dependency list so later mutation of the caller's list is not seen."""
    if deps is None:
        return None
    return tuple(deps)
