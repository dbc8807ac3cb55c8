"""
State Cells

A state cell holds one value. Reading has no side effects; writing replaces
the value UNCONDITIONALLY (no equality check, writing the same value again
still renders) and hands control to the render driver, which renders before
the write returns.
"""

from typing import Callable, Generic, TypeVar

from expense_tracker.reactive.render import RenderDriver


T = TypeVar("T")


class StateCell(Generic[T]):
    """A single mutable value wired to a render driver."""

    def __init__(self, initial: T, driver: RenderDriver, name: str = ""):
        self._value = initial
        self._driver = driver
        self._name = name
        self._writes = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def writes(self) -> int:
        """How many writes have been applied to this cell."""
        return self._writes

    def read(self) -> T:
        return self._value

    def write(self, next_value: T) -> None:
        """Replace the value and render (queued if a render is in progress)."""

        def apply() -> None:
            self._value = next_value
            self._writes += 1

        self._driver.commit(apply)

    def __repr__(self) -> str:
        return f"StateCell({self._name or '?'}={self._value!r})"


def create_state(
    initial: T,
    driver: RenderDriver,
    name: str = "",
) -> tuple[Callable[[], T], Callable[[T], None]]:
    """
    Create a state cell and return its (read, write) pair.

    Usage:
        get_sort, set_sort = create_state(SortMode.DATE_DESC, driver)
    """
    cell = StateCell(initial, driver, name=name)
    return cell.read, cell.write
