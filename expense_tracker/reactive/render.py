"""
Render Driver

Every state write ends in a full render pass: the bound render function
rebuilds the view snapshot from scratch and every registered listener is
notified with it. The driver knows nothing about presentation; the view
layer registers one listener and redraws itself from the snapshot.

DESIGN DECISION: Writes never recurse into a render.
A write issued while a pass is running (from a selector, from the render
function or from a listener) is queued. When the pass finishes the queued
writes are applied in order and one more pass runs. A chain of passes longer
than `max_passes` is treated as a render loop and aborted.
"""

from collections import deque
from typing import Any, Callable, Deque, Generic, Optional, TypeVar

import structlog


T = TypeVar("T")

Listener = Callable[[Any], None]

logger = structlog.get_logger(__name__)


class RenderLoopError(RuntimeError):
    """Queued writes kept re-triggering renders past the pass limit."""

    def __init__(self, passes: int):
        self.passes = passes
        super().__init__(
            f"Render did not settle after {passes} passes; "
            "a listener or selector keeps writing state during render"
        )


class RenderDriver(Generic[T]):
    """
    Synchronous, single-threaded render loop with listener fan-out.

    Usage:
        driver = RenderDriver(max_passes=16)
        driver.bind(build_snapshot)
        unsubscribe = driver.subscribe(view.redraw)
        driver.commit(lambda: ...)   # apply a change and render
    """

    def __init__(
        self,
        render_fn: Optional[Callable[[], T]] = None,
        max_passes: int = 16,
    ):
        if max_passes < 1:
            raise ValueError("max_passes must be at least 1")
        self._render_fn = render_fn
        self._max_passes = max_passes
        self._listeners: list[Listener] = []
        self._queued: Deque[Callable[[], None]] = deque()
        self._rendering = False
        self._disposed = False
        self._render_count = 0
        self._last_snapshot: Optional[T] = None

    def bind(self, render_fn: Callable[[], T]) -> None:
        """Attach the function that builds a snapshot on every pass."""
        self._render_fn = render_fn

    @property
    def is_rendering(self) -> bool:
        return self._rendering

    @property
    def render_count(self) -> int:
        """Number of completed render passes."""
        return self._render_count

    @property
    def last_snapshot(self) -> Optional[T]:
        return self._last_snapshot

    @property
    def pending_writes(self) -> int:
        return len(self._queued)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the snapshot after every pass.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def commit(self, apply: Callable[[], None]) -> None:
        """
        Apply a state change, then render before returning.

        While a pass is running the change is queued instead and applied
        once the pass completes.
        """
        if self._rendering:
            self._queued.append(apply)
            logger.debug("render_write_queued", pending=len(self._queued))
            return

        apply()
        self.request_render()

    def request_render(self) -> None:
        """Run render passes until no queued writes remain."""
        if self._disposed or self._rendering:
            return

        self._rendering = True
        passes = 0
        try:
            while True:
                passes += 1
                if passes > self._max_passes:
                    raise RenderLoopError(self._max_passes)

                self._run_pass()

                if not self._queued:
                    break
                while self._queued:
                    self._queued.popleft()()
        except Exception:
            if self._queued:
                logger.error("render_queue_discarded", dropped=len(self._queued))
                self._queued.clear()
            raise
        finally:
            self._rendering = False

    def _run_pass(self) -> None:
        snapshot = self._render_fn() if self._render_fn is not None else None
        self._last_snapshot = snapshot
        self._render_count += 1

        # Copy: listeners may unsubscribe themselves while being notified
        for listener in list(self._listeners):
            listener(snapshot)

    def dispose(self) -> None:
        """Drop all listeners; later render requests are ignored."""
        self._listeners.clear()
        self._queued.clear()
        self._disposed = True

    @property
    def disposed(self) -> bool:
        return self._disposed
