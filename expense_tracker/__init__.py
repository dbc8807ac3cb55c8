"""
Expense Tracker - Source Package

A small expense tracker built on a minimal reactive-state runtime:
state cells, memoized selectors and a one-shot bootstrap effect drive a
full re-render on every write.

DESIGN PRINCIPLES:
1. State changes only by replacement, never in-place mutation
2. Every write renders synchronously before it returns
3. Writes during a render are queued, never recursive
4. Fail visibly: bad input is reported, loading can end in failure
5. The core is render-agnostic; views subscribe to snapshots
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
