"""
Functions for turning text into tidy tables and back.

This module provides the main API functions, thin wrappers around the
tokenizer, reshaper, pair counter, sparse bridge and weighting classes.
Every function takes a polars DataFrame (or a matrix) and returns a new
one; nothing is cached between calls.

Main Functions:
    unnest_tokens: Split a text column into one token per row
    pairwise_count: Count co-occurring value pairs within groups
    tidy_sparse: Convert a sparse matrix into a tidy count table
    cast_sparse: Convert a tidy table into a labeled sparse matrix
    cast_dtm: Convert a tidy table into a wide document-term DataFrame
    dtm_to_sparse: Convert a wide document-term DataFrame into a sparse matrix
    bind_tf_idf: Add tf, idf and tf-idf columns to a count table

Example:
    Basic workflow::

        import polars as pl
        import tidytext as tt

        corpus = pl.DataFrame({
            'doc_id': ['doc1', 'doc2'],
            'text': ['The cat sat on the mat.', 'The dog sat.']
        })

        words = tt.unnest_tokens(corpus, 'word', 'text')

        counts = words.group_by(['doc_id', 'word'], maintain_order=True).len()
        weighted = tt.bind_tf_idf(counts, 'word', 'doc_id', 'len')

        pairs = tt.pairwise_count(words, 'doc_id', 'word', sort=True)

        matrix = tt.cast_sparse(counts, 'doc_id', 'word', 'len')
        back = tt.tidy_sparse(matrix)

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

from typing import Any, Dict, Hashable, Optional, Sequence, Union

import polars as pl

from .config import CONFIG
from .pairs import PairCounter
from .reshapers import TableReshaper
from .sparse import LabeledSparseMatrix, SparseMatrixBridge
from .tokenizers import TokenSpec
from .weighting import TermWeighter

# Stateless instances shared by the wrapper functions
_reshaper = TableReshaper()
_bridge = SparseMatrixBridge()
_weighter = TermWeighter()


def unnest_tokens(
    table: pl.DataFrame,
    output: str,
    input: str,
    spec: Union[TokenSpec, Dict[str, Any], str, None] = None,
    drop: bool = True,
    position_column: Optional[str] = None,
    collapse: Optional[Sequence[str]] = None,
    **options,
) -> pl.DataFrame:
    """
    Split a text column into tokens, one token per row.

    Every other column is carried forward unchanged. Rows whose text yields
    no tokens are dropped, and output rows follow input row order and then
    token order.

    Args:
        table: A polars DataFrame with a text column.
        output: Name of the token column to create.
        input: Name of the text column to split.
        spec: A TokenSpec, a dict of spec options, or a strategy name
            ('word', 'character', 'sentence', 'line', 'paragraph', 'regex',
            'ngrams', 'character_shingles'). Defaults to words.
        drop: Drop the text column from the output.
        position_column: Optional column for each token's start offset.
        collapse: Columns whose rows are joined before tokenizing.
        **options: Spec options when ``spec`` is omitted, e.g.
            ``token='regex', pattern=r'\\s*;\\s*', to_lower=False``.

    Returns:
        A polars DataFrame with one row per token.

    Example:
        >>> corpus = pl.DataFrame({'doc_id': ['d1'], 'text': ['Hello world. Bye.']})
        >>> unnest_tokens(corpus, 'sentence', 'text', token='sentences')
        shape: (2, 2)
    """
    return _reshaper.unnest_tokens(
        table,
        output,
        input,
        spec=spec,
        drop=drop,
        position_column=position_column,
        collapse=collapse,
        **options,
    )


def pairwise_count(
    table: pl.DataFrame,
    group: str,
    value: str,
    sort: bool = False,
    max_group_size: Optional[int] = None,
    n_jobs: int = 1,
) -> pl.DataFrame:
    """
    Count how often pairs of distinct values occur in the same group.

    Each pair of rows in a group contributes one count to the pair of their
    values; pairs of rows with equal values are skipped. Each unordered pair
    appears once with item1 < item2.

    Args:
        table: A polars DataFrame, typically from unnest_tokens.
        group: Column defining the groups (document, section, ...).
        value: Column whose values are paired.
        sort: Order by descending count, ties by (item1, item2). Otherwise
            pairs are in first-seen order.
        max_group_size: Raise GroupSizeError if a group has more rows.
        n_jobs: Worker processes for counting groups; -1 for all CPUs.

    Returns:
        A polars DataFrame with columns item1, item2 and n.
    """
    counter = PairCounter(max_group_size=max_group_size, n_jobs=n_jobs)
    return counter.pairwise_count(table, group, value, sort=sort)


def tidy_sparse(
    matrix: Any,
    row_labels: Optional[Sequence[Hashable]] = None,
    col_labels: Optional[Sequence[Hashable]] = None,
    document: str = CONFIG.DOCUMENT_COLUMN,
    term: str = CONFIG.TERM_COLUMN,
    value: str = CONFIG.VALUE_COLUMN,
) -> pl.DataFrame:
    """
    Convert a sparse matrix into a tidy table with one row per non-zero entry.

    :param matrix: A LabeledSparseMatrix, scipy sparse matrix or 2-d array.
    :param row_labels: Row labels for an unlabeled matrix.
    :param col_labels: Column labels for an unlabeled matrix.
    :param document: Output column for row labels.
    :param term: Output column for column labels.
    :param value: Output column for weights.
    :return: A polars DataFrame ordered by row index, then column index.
    """
    return _bridge.tidy_sparse(
        matrix, row_labels, col_labels, document=document, term=term, value=value
    )


def cast_sparse(
    table: pl.DataFrame,
    document: str,
    term: str,
    value: Optional[str] = None,
    duplicates: str = CONFIG.DEFAULT_DUPLICATE_POLICY,
) -> LabeledSparseMatrix:
    """
    Convert a tidy table into a labeled sparse matrix.

    :param table: A polars DataFrame in long format.
    :param document: Column holding row labels.
    :param term: Column holding column labels.
    :param value: Numeric weight column; each row counts 1 when None.
    :param duplicates: 'sum' or 'reject' repeated (document, term) rows.
    :return: A LabeledSparseMatrix with labels in first-appearance order.
    """
    return _bridge.cast_sparse(table, document, term, value, duplicates=duplicates)


def cast_dtm(
    table: pl.DataFrame, document: str, term: str, value: Optional[str] = None
) -> pl.DataFrame:
    """Convert a tidy table into a wide document-term DataFrame."""
    return _bridge.cast_dtm(table, document, term, value)


def dtm_to_sparse(dtm: pl.DataFrame, document: str = "doc_id") -> LabeledSparseMatrix:
    """Convert a wide document-term DataFrame into a labeled sparse matrix."""
    return _bridge.dtm_to_sparse(dtm, document)


def bind_tf_idf(
    table: pl.DataFrame, term: str, document: str, n: str
) -> pl.DataFrame:
    """
    Add tf, idf and tf_idf columns to a tidy count table.

    :param table: A polars DataFrame with one row per (document, term).
    :param term: Column holding terms.
    :param document: Column holding document ids.
    :param n: Column holding counts.
    :return: The table with 'tf', 'idf' and 'tf_idf' appended.
    """
    return _weighter.bind_tf_idf(table, term, document, n)
