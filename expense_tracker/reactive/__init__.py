"""Reactive state runtime: state cells, memoization, effects and rendering."""

from expense_tracker.reactive.deps import are_stale
from expense_tracker.reactive.hooks import EffectRunner, MemoCell, Ref
from expense_tracker.reactive.render import RenderDriver, RenderLoopError
from expense_tracker.reactive.state import StateCell, create_state

__all__ = [
    "EffectRunner",
    "MemoCell",
    "Ref",
    "RenderDriver",
    "RenderLoopError",
    "StateCell",
    "are_stale",
    "create_state",
]
