"""
Pairwise co-occurrence counting within groups.

:class:`PairCounter` counts, for every unordered pair of distinct values,
how often the two values occur together in the same group. Every pair of
rows within a group contributes one occurrence of the pair of their values;
row pairs holding the same value are skipped, so self-pairs never appear.
Pairs are reported once, canonically ordered (``item1 < item2``), with
counts summed over all groups.

Cost is quadratic in group size. Within a group the count for values ``a``
and ``b`` is ``count(a) * count(b)``, so the work per group is quadratic in
the number of *distinct* values rather than rows. Very large groups trigger
a :class:`~tidytext.validation.PerformanceWarning`, and a hard cap can be
set with ``max_group_size``. Groups are independent, so they can be
counted in a process pool (``n_jobs``) and merged by summation.

Example:
    Count words that appear in the same section::

        import polars as pl
        from tidytext.pairs import PairCounter

        words = pl.DataFrame({
            'section': [1, 1, 1, 2, 2],
            'word': ['a', 'b', 'c', 'a', 'b']
        })

        PairCounter().pairwise_count(words, 'section', 'word', sort=True)
        # item1 | item2 | n
        # a     | b     | 2
        # a     | c     | 1
        # b     | c     | 1

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

import os
import warnings
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, Hashable, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import polars as pl

from .config import CONFIG
from .performance import PerformanceMonitor, ProgressTracker, estimate_pair_work
from .validation import (
    ParameterValidationError,
    PerformanceWarning,
    ensure_dataframe,
    validate_group_sizes,
    validate_table_columns,
)

PairKey = Tuple[Hashable, Hashable]


class CooccurrencePair(NamedTuple):
    """An unordered pair of distinct values with its co-occurrence count."""

    item1: Any
    item2: Any
    n: int


def count_group_pairs(values: Sequence[Hashable]) -> Dict[PairKey, int]:
    """
    Count canonical value pairs for the rows of one group.

    Keys are ordered by first appearance of their values in the group.

    :param values: The value of each row in the group.
    :return: A dict mapping (item1, item2) with item1 < item2 to counts.
    """
    distinct = list(Counter(values).items())
    counts = {}
    for i, (a, count_a) in enumerate(distinct):
        for b, count_b in distinct[i + 1:]:
            key = (a, b) if a < b else (b, a)
            counts[key] = count_a * count_b
    return counts


class PairCounter:
    """
    Counts co-occurring value pairs within groups of a table.

    Args:
        max_group_size: Raise GroupSizeError if any group has more rows.
            None disables the cap.
        n_jobs: Number of worker processes. 1 counts in-process; -1 uses
            every available CPU.
    """

    def __init__(self, max_group_size: Optional[int] = None, n_jobs: int = 1):
        if isinstance(n_jobs, bool) or not isinstance(n_jobs, int) or (
            n_jobs < 1 and n_jobs != -1
        ):
            raise ParameterValidationError(
                f"n_jobs must be a positive integer or -1 in PairCounter, got {n_jobs!r}"
            )
        self.max_group_size = max_group_size
        self.n_jobs = (os.cpu_count() or 1) if n_jobs == -1 else n_jobs

    @staticmethod
    def _group_values(
        table: pl.DataFrame, group: str, value: str
    ) -> List[List[Hashable]]:
        """Values per group, groups in order of first appearance."""
        keep = pl.col(group).is_not_null() & pl.col(value).is_not_null()
        if table.schema[value].is_float():
            keep = keep & pl.col(value).is_not_nan()
        return (
            table.select(group, value)
            .filter(keep)
            .group_by(group, maintain_order=True)
            .agg(pl.col(value))
            .get_column(value)
            .to_list()
        )

    def _count_groups(self, group_values: List[List[Hashable]]) -> Iterable[Dict[PairKey, int]]:
        if self.n_jobs > 1 and len(group_values) > 1:
            chunksize = max(1, len(group_values) // (self.n_jobs * 4))
            with ProcessPoolExecutor(max_workers=self.n_jobs) as executor:
                # map yields in group order, so merging stays deterministic
                yield from executor.map(count_group_pairs, group_values, chunksize=chunksize)
        else:
            for values in group_values:
                yield count_group_pairs(values)

    def _accumulate(self, group_values: List[List[Hashable]]) -> Dict[PairKey, int]:
        totals: Dict[PairKey, int] = {}
        warned = False
        progress = ProgressTracker(len(group_values), "Counting pairs")

        for group_counts in self._count_groups(group_values):
            for key, count in group_counts.items():
                totals[key] = totals.get(key, 0) + count
            progress.update()

            if not warned and len(totals) > CONFIG.MAX_DISTINCT_PAIRS_WARN:
                warnings.warn(
                    f"More than {CONFIG.MAX_DISTINCT_PAIRS_WARN:,} distinct pairs "
                    "in pairwise_count. Memory use grows with every new pair; "
                    "consider filtering rare values first.",
                    PerformanceWarning,
                )
                warned = True

        progress.finish()
        return totals

    def count_pairs(
        self, table: pl.DataFrame, group: str, value: str, sort: bool = False
    ) -> List[CooccurrencePair]:
        """
        Count co-occurring value pairs.

        Args:
            table: A polars DataFrame, typically a tidy token table.
            group: Column whose values define the groups (e.g. a document
                or section id).
            value: Column whose values are paired (e.g. a word column).
            sort: Order by descending count, ties broken by (item1, item2).
                Otherwise pairs come in first-seen order: groups in order of
                first appearance, then values in order of first appearance
                within the group.

        Returns:
            A list of CooccurrencePair with item1 < item2, one entry per
            unordered pair. Rows with a null group or value (or a NaN value) are
            ignored.

        Raises:
            MissingColumnError: If either column is absent.
            GroupSizeError: If a group is larger than ``max_group_size``.
        """
        table = ensure_dataframe(table, "in pairwise_count")
        if group == value:
            raise ParameterValidationError(
                f"group and value must be different columns in pairwise_count, "
                f"both are '{group}'."
            )
        validate_table_columns(
            table, {group: "any", value: "any"}, "in pairwise_count"
        )

        with PerformanceMonitor("Pairwise counting"):
            group_values = self._group_values(table, group, value)
            sizes = [len(values) for values in group_values]
            validate_group_sizes(sizes, self.max_group_size, "in pairwise_count")

            if estimate_pair_work(sizes) == 0:
                return []

            totals = self._accumulate(group_values)

        items = totals.items()
        if sort:
            items = sorted(items, key=lambda kv: (-kv[1], kv[0]))
        return [CooccurrencePair(a, b, n) for (a, b), n in items]

    def pairwise_count(
        self, table: pl.DataFrame, group: str, value: str, sort: bool = False
    ) -> pl.DataFrame:
        """
        Count co-occurring value pairs into a DataFrame.

        Same as :meth:`count_pairs` but returns a polars DataFrame with
        columns item1, item2 (the dtype of ``value``) and n (UInt64).
        """
        table = ensure_dataframe(table, "in pairwise_count")
        pairs = self.count_pairs(table, group, value, sort=sort)
        return self.pairs_to_frame(pairs, table.schema[value])

    @staticmethod
    def pairs_to_frame(
        pairs: Sequence[CooccurrencePair], value_dtype: pl.DataType = pl.String
    ) -> pl.DataFrame:
        """Build the item1/item2/n DataFrame for a list of pairs."""
        item1_col, item2_col, n_col = CONFIG.PAIR_COLUMNS
        return pl.DataFrame(
            [
                pl.Series(item1_col, [p.item1 for p in pairs], dtype=value_dtype),
                pl.Series(item2_col, [p.item2 for p in pairs], dtype=value_dtype),
                pl.Series(n_col, [p.n for p in pairs], dtype=pl.UInt64),
            ]
        )
