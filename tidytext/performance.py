"""
Progress and timing helpers for tidytext.

Pair counting is the one operation whose cost can surprise a caller: it
grows with the square of group size. This module estimates that cost up
front, reports progress while groups are merged, and times slow calls.

Classes:
    ProgressTracker: Prints progress while many groups are merged
    PerformanceMonitor: Times a block and reports it if it was slow

Functions:
    estimate_pair_work: Number of row pairs a pairwise count will visit

Example:
    Time a tokenizing run::

        from tidytext.performance import PerformanceMonitor

        with PerformanceMonitor("Tokenizing", report_after=0.5) as monitor:
            words = tt.unnest_tokens(corpus, 'word', 'text')

        print(f"Took {monitor.elapsed_time:.2f}s")

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

import time
from typing import Iterable, Optional

from .config import CONFIG


class ProgressTracker:
    """
    Prints progress in tenths for jobs above ``CONFIG.PROGRESS_THRESHOLD``.

    Smaller jobs stay silent.
    """

    def __init__(self, total: int, description: str = "Processing", unit: str = "groups"):
        self.total = total
        self.description = description
        self.unit = unit
        self.done = 0
        self.started = time.perf_counter()
        self.enabled = total > CONFIG.PROGRESS_THRESHOLD
        self._step = max(1, total // 10)
        self._next_report = self._step

        if self.enabled:
            print(f"Starting {description} ({total:,} {unit})...")

    def update(self, increment: int = 1):
        self.done += increment
        if not self.enabled or self.done < self._next_report:
            return

        while self._next_report <= self.done:
            self._next_report += self._step
        elapsed = time.perf_counter() - self.started
        rate = self.done / elapsed if elapsed > 0 else 0
        print(
            f"{self.description}: {self.done / self.total:.0%} "
            f"({self.done:,}/{self.total:,} {self.unit}, {rate:,.0f}/s)"
        )

    def finish(self):
        if self.enabled:
            print(
                f"{self.description} completed in "
                f"{time.perf_counter() - self.started:.2f}s"
            )


class PerformanceMonitor:
    """
    Context manager that times a block.

    The time is printed only when the block finished normally and took
    longer than ``report_after`` seconds (default
    ``CONFIG.PERFORMANCE_REPORT_SECONDS``).
    """

    def __init__(self, operation: str, report_after: Optional[float] = None):
        self.operation = operation
        self.report_after = (
            CONFIG.PERFORMANCE_REPORT_SECONDS if report_after is None else report_after
        )
        self.start_time = None
        self.end_time = None

    @property
    def elapsed_time(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        if exc_type is None and self.elapsed_time > self.report_after:
            print(f"Performance: {self.operation} completed in {self.elapsed_time:.2f}s")


def estimate_pair_work(group_sizes: Iterable[int]) -> int:
    """
    Count the row pairs a pairwise count visits.

    :param group_sizes: Row counts per group.
    :return: The sum of k * (k - 1) / 2 over all groups.
    """
    return sum(k * (k - 1) // 2 for k in group_sizes)
