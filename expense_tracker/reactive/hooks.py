"""
Memo Cells, Effect Runners and Refs

Each instance IS one call site: it owns exactly one cache slot. Sharing a
MemoCell between two logically different computations makes the second one
return the first one's result whenever the dependencies happen to match, so
every memoized computation gets its own instance.

Dependency semantics (see expense_tracker.reactive.deps):
- deps=None -> recompute / re-fire on every call
- deps=()   -> compute / fire once, never again
- otherwise -> recompute / re-fire when any entry changed
"""

from typing import Any, Callable, Generic, Optional, TypeVar

from expense_tracker.reactive.deps import Deps, are_stale, snapshot_deps


T = TypeVar("T")

_UNSET = object()


class MemoCell(Generic[T]):
    """Caches the result of a factory until its dependencies change."""

    def __init__(self, name: str = ""):
        self._name = name
        self._value: Any = _UNSET
        self._deps: Optional[tuple] = None
        self._evaluations = 0

    @property
    def evaluations(self) -> int:
        """How many times the factory has actually run."""
        return self._evaluations

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    def evaluate(self, factory: Callable[[], T], deps: Deps = None) -> T:
        """Return the cached value, re-running `factory` first if stale."""
        if self._value is _UNSET or are_stale(self._deps, deps):
            self._value = factory()
            self._deps = snapshot_deps(deps)
            self._evaluations += 1
        return self._value

    def reset(self) -> None:
        """Forget the cached value (owning scope torn down)."""
        self._value = _UNSET
        self._deps = None

    def __repr__(self) -> str:
        state = "empty" if self._value is _UNSET else f"cached={self._value!r}"
        return f"MemoCell({self._name or '?'}, {state})"


class EffectRunner:
    """
    Runs a side-effecting callback on first use, then only on staleness.

    If the callback returns a callable it is kept as a cleanup: it runs
    before the callback fires again and when the runner is disposed.
    """

    def __init__(self, name: str = ""):
        self._name = name
        self._has_run = False
        self._deps: Optional[tuple] = None
        self._cleanup: Optional[Callable[[], None]] = None
        self._runs = 0
        self._disposed = False

    @property
    def runs(self) -> int:
        return self._runs

    def run(self, callback: Callable[[], Any], deps: Deps = None) -> bool:
        """
        Fire `callback` if this is the first call or `deps` changed.

        Returns:
            True if the callback fired
        """
        if self._disposed:
            return False

        if self._has_run and not are_stale(self._deps, deps):
            return False

        self._run_cleanup()
        result = callback()
        if callable(result):
            self._cleanup = result

        self._has_run = True
        self._deps = snapshot_deps(deps)
        self._runs += 1
        return True

    def dispose(self) -> None:
        """Run any pending cleanup; the runner never fires again."""
        self._run_cleanup()
        self._disposed = True

    def _run_cleanup(self) -> None:
        cleanup, self._cleanup = self._cleanup, None
        if cleanup is not None:
            cleanup()


class Ref(Generic[T]):
    """A mutable box whose changes never trigger a render."""

    __slots__ = ("current",)

    def __init__(self, initial: Optional[T] = None):
        self.current = initial

    def __repr__(self) -> str:
        return f"Ref({self.current!r})"
