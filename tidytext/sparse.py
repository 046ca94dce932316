"""
Conversion between sparse document-term matrices and tidy tables.

A sparse matrix here is anything exposing ``row_labels``, ``col_labels``
and a ``triplets()`` iterator over its non-zero ``(row, column, weight)``
entries. :class:`LabeledSparseMatrix` is the concrete implementation,
backed by a ``scipy.sparse`` matrix, and bare scipy matrices or numpy
arrays are accepted wherever a labeled matrix is.

Conversions:
    tidy_sparse: matrix -> (document, term, count) table, one row per
        non-zero entry, ordered by row index then column index
    cast_sparse: (document, term[, value]) table -> labeled sparse matrix,
        labels in first-appearance order, duplicate rows summed
    cast_dtm: tidy table -> wide document-term DataFrame
    dtm_to_sparse: wide document-term DataFrame -> labeled sparse matrix

Zero-weight entries are never emitted in either direction.

Example:
    Round trip a tidy count table::

        import polars as pl
        from tidytext.sparse import SparseMatrixBridge

        counts = pl.DataFrame({
            'doc_id': ['d1', 'd1', 'd2'],
            'word': ['cat', 'dog', 'cat'],
            'n': [2, 1, 4]
        })

        bridge = SparseMatrixBridge()
        matrix = bridge.cast_sparse(counts, 'doc_id', 'word', 'n')
        matrix.shape          # (2, 2)
        matrix.row_labels     # ['d1', 'd2']
        bridge.tidy_sparse(matrix)

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

import warnings
from typing import Any, Dict, Hashable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import polars as pl
from scipy import sparse

from .config import CONFIG
from .validation import (
    DataFormatError,
    DuplicateEntryError,
    ParameterValidationError,
    ValidationWarning,
    ensure_dataframe,
    validate_choice_parameter,
    validate_table_columns,
)

Triplet = Tuple[int, int, Any]


def _check_labels(labels: Optional[Sequence[Hashable]], size: int, axis: str) -> List:
    if labels is None:
        return list(range(size))
    labels = list(labels)
    if len(labels) != size:
        raise DataFormatError(
            f"Got {len(labels)} {axis} labels for a matrix with {size} {axis}s."
        )
    if len(set(labels)) != len(labels):
        raise DataFormatError(
            f"{axis.capitalize()} labels must be unique; found duplicates."
        )
    return labels


class LabeledSparseMatrix:
    """
    A scipy sparse matrix with row and column labels.

    Attributes:
        matrix: The underlying ``scipy.sparse`` matrix.
        row_labels: One label per row (documents); defaults to 0..n-1.
        col_labels: One label per column (terms); defaults to 0..m-1.
        row_index: Mapping of row label to row index.
        col_index: Mapping of column label to column index.
    """

    def __init__(
        self,
        matrix: Any,
        row_labels: Optional[Sequence[Hashable]] = None,
        col_labels: Optional[Sequence[Hashable]] = None,
    ):
        if not sparse.issparse(matrix):
            array = np.asarray(matrix)
            if array.ndim != 2:
                raise DataFormatError(
                    f"Expected a 2-dimensional matrix, got {array.ndim} dimensions."
                )
            matrix = sparse.csr_matrix(array)

        n_rows, n_cols = matrix.shape
        self.matrix = matrix
        self.row_labels = _check_labels(row_labels, n_rows, "row")
        self.col_labels = _check_labels(col_labels, n_cols, "column")
        self.row_index: Dict[Hashable, int] = {
            label: i for i, label in enumerate(self.row_labels)
        }
        self.col_index: Dict[Hashable, int] = {
            label: j for j, label in enumerate(self.col_labels)
        }

    def __repr__(self):
        return (
            f"LabeledSparseMatrix(shape={self.shape}, nnz={self.nnz}, "
            f"format='{self.matrix.format}')"
        )

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    @property
    def nnz(self) -> int:
        """Number of non-zero entries after summing duplicate coordinates."""
        return len(self.triplet_arrays()[2])

    def triplet_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Non-zero entries as (rows, cols, data) arrays.

        Duplicate stored coordinates are summed and entries that are (or
        sum to) zero are dropped. Entries are ordered by row index, then
        column index, whatever the storage format.
        """
        coo = self.matrix.tocoo(copy=True)
        coo.sum_duplicates()
        nonzero = coo.data != 0
        rows, cols, data = coo.row[nonzero], coo.col[nonzero], coo.data[nonzero]
        order = np.lexsort((cols, rows))
        return rows[order], cols[order], data[order]

    def triplets(self) -> Iterator[Triplet]:
        """Iterate over non-zero (row index, column index, weight) entries."""
        rows, cols, data = self.triplet_arrays()
        for i, j, weight in zip(rows.tolist(), cols.tolist(), data.tolist()):
            yield i, j, weight

    def to_coo(self) -> Tuple[sparse.coo_matrix, List, List]:
        """Return a COOrdinate matrix with its row and column labels."""
        return sparse.coo_matrix(self.matrix), self.row_labels, self.col_labels


def _is_labeled(matrix: Any) -> bool:
    return all(
        hasattr(matrix, attr) for attr in ("row_labels", "col_labels", "triplets")
    )


class SparseMatrixBridge:
    """Converts between sparse matrices and tidy long-format tables."""

    @staticmethod
    def _labeled_triplets(
        matrix: Any,
        row_labels: Optional[Sequence[Hashable]],
        col_labels: Optional[Sequence[Hashable]],
    ) -> Tuple[List, List, np.ndarray, np.ndarray, np.ndarray]:
        if isinstance(matrix, LabeledSparseMatrix) or (
            _is_labeled(matrix) and not sparse.issparse(matrix)
        ):
            if row_labels is not None or col_labels is not None:
                raise ParameterValidationError(
                    "Labels were passed for a matrix that already has labels "
                    "in tidy_sparse."
                )
            if isinstance(matrix, LabeledSparseMatrix):
                rows, cols, data = matrix.triplet_arrays()
                return matrix.row_labels, matrix.col_labels, rows, cols, data

            # any other labeled matrix: trust only the triplet iterator
            triplets = sorted(
                (t for t in matrix.triplets() if t[2] != 0), key=lambda t: (t[0], t[1])
            )
            return (
                list(matrix.row_labels),
                list(matrix.col_labels),
                np.array([t[0] for t in triplets], dtype=np.int64),
                np.array([t[1] for t in triplets], dtype=np.int64),
                np.array([t[2] for t in triplets]),
            )

        labeled = LabeledSparseMatrix(matrix, row_labels, col_labels)
        rows, cols, data = labeled.triplet_arrays()
        return labeled.row_labels, labeled.col_labels, rows, cols, data

    def tidy_sparse(
        self,
        matrix: Any,
        row_labels: Optional[Sequence[Hashable]] = None,
        col_labels: Optional[Sequence[Hashable]] = None,
        document: str = CONFIG.DOCUMENT_COLUMN,
        term: str = CONFIG.TERM_COLUMN,
        value: str = CONFIG.VALUE_COLUMN,
    ) -> pl.DataFrame:
        """
        Convert a sparse matrix into a tidy (document, term, count) table.

        Args:
            matrix: A LabeledSparseMatrix, any object with row_labels,
                col_labels and triplets(), a scipy sparse matrix, or a
                2-d array.
            row_labels: Labels for the rows of an unlabeled matrix.
            col_labels: Labels for the columns of an unlabeled matrix.
            document: Name of the row label column.
            term: Name of the column label column.
            value: Name of the weight column.

        Returns:
            A polars DataFrame with one row per non-zero entry, ordered by
            row index and then column index.

        Example:
            >>> from scipy.sparse import coo_matrix
            >>> m = coo_matrix(([2, 5], ([0, 1], [1, 0])), shape=(2, 2))
            >>> SparseMatrixBridge().tidy_sparse(m, ['a', 'b'], ['x', 'y'])
        """
        if len({document, term, value}) != 3:
            raise ParameterValidationError(
                "document, term and value column names must differ in tidy_sparse, "
                f"got {document!r}, {term!r}, {value!r}"
            )

        doc_labels, term_labels, rows, cols, data = self._labeled_triplets(
            matrix, row_labels, col_labels
        )

        return pl.DataFrame(
            [
                pl.Series(document, doc_labels).gather(rows),
                pl.Series(term, term_labels).gather(cols),
                pl.Series(value, data),
            ]
        )

    def cast_sparse(
        self,
        table: pl.DataFrame,
        document: str,
        term: str,
        value: Optional[str] = None,
        duplicates: str = CONFIG.DEFAULT_DUPLICATE_POLICY,
    ) -> LabeledSparseMatrix:
        """
        Convert a tidy table into a labeled sparse matrix.

        Args:
            table: A polars DataFrame in long format.
            document: Column holding the row (document) labels.
            term: Column holding the column (term) labels.
            value: Numeric column holding weights. If None each row counts 1.
            duplicates: 'sum' adds up repeated (document, term) rows;
                'reject' raises DuplicateEntryError on any repeat.

        Returns:
            A LabeledSparseMatrix in CSR format whose shape is
            (distinct documents, distinct terms), labels in order of first
            appearance. Entries summing to zero are removed.

        Raises:
            MissingColumnError: If a referenced column is absent.
            DuplicateEntryError: If duplicates='reject' and a
                (document, term) pair repeats.
        """
        table = ensure_dataframe(table, "in cast_sparse")
        validate_choice_parameter(
            duplicates, CONFIG.DUPLICATE_POLICIES, "duplicates", "in cast_sparse"
        )
        if document == term:
            raise ParameterValidationError(
                f"document and term must be different columns in cast_sparse, "
                f"both are '{document}'."
            )
        required = {document: "any", term: "any"}
        if value is not None:
            required[value] = "numeric"
        validate_table_columns(table, required, "in cast_sparse")

        frame = table.select(list(required))
        missing = frame.height - frame.drop_nulls().height
        if missing > 0:
            warnings.warn(
                f"Dropping {missing} rows with null values in cast_sparse.",
                ValidationWarning,
            )
            frame = frame.drop_nulls()

        if duplicates == "reject":
            repeated = frame.select(document, term).is_duplicated()
            if repeated.any():
                examples = (
                    frame.filter(repeated)
                    .select(document, term)
                    .unique(maintain_order=True)
                    .head(5)
                    .rows()
                )
                raise DuplicateEntryError(
                    f"Found duplicate ({document}, {term}) rows in cast_sparse: "
                    f"{', '.join(map(str, examples))}\n"
                    "Use duplicates='sum' to add them up."
                )

        doc_index = frame.select(document).unique(maintain_order=True).with_row_index("_row")
        term_index = frame.select(term).unique(maintain_order=True).with_row_index("_col")
        indexed = frame.join(doc_index, on=document, how="left").join(
            term_index, on=term, how="left"
        )

        rows = indexed.get_column("_row").to_numpy()
        cols = indexed.get_column("_col").to_numpy()
        if value is None:
            data = np.ones(indexed.height, dtype=np.int64)
        else:
            data = indexed.get_column(value).to_numpy()

        shape = (doc_index.height, term_index.height)
        matrix = sparse.coo_matrix((data, (rows, cols)), shape=shape).tocsr()
        matrix.eliminate_zeros()

        return LabeledSparseMatrix(
            matrix,
            doc_index.get_column(document).to_list(),
            term_index.get_column(term).to_list(),
        )

    def cast_dtm(
        self,
        table: pl.DataFrame,
        document: str,
        term: str,
        value: Optional[str] = None,
    ) -> pl.DataFrame:
        """
        Convert a tidy table into a wide document-term DataFrame.

        :param table: A polars DataFrame in long format.
        :param document: Column holding document ids; becomes the first column.
        :param term: Column holding terms; each term becomes a column.
        :param value: Numeric weight column; rows are counted when None.
        :return: A polars DataFrame with one row per document, zeros filled.
        """
        table = ensure_dataframe(table, "in cast_dtm")
        required = {document: "any", term: "any"}
        if value is not None:
            required[value] = "numeric"
        validate_table_columns(table, required, "in cast_dtm")

        if value is None:
            weight = "_count"
            frame = table.select(document, term).with_columns(
                pl.lit(1, dtype=pl.UInt32).alias(weight)
            )
        else:
            weight = value
            frame = table.select(document, term, value)

        return (
            frame.drop_nulls()
            .with_columns(pl.col(term).cast(pl.String))
            .pivot(on=term, index=document, values=weight, aggregate_function="sum")
            .fill_null(0)
        )

    def dtm_to_sparse(
        self, dtm: pl.DataFrame, document: str = "doc_id"
    ) -> LabeledSparseMatrix:
        """
        Convert a wide document-term DataFrame into a labeled sparse matrix.

        :param dtm: A document-term-matrix with a document id column and
            one numeric column per term.
        :param document: Name of the document id column.
        :return: A LabeledSparseMatrix with documents as rows and the
            remaining column names as column labels.
        """
        dtm = ensure_dataframe(dtm, "in dtm_to_sparse")
        validate_table_columns(dtm, {document: "any"}, "in dtm_to_sparse")

        terms = dtm.drop(document)
        validate_table_columns(
            terms, {col: "numeric" for col in terms.columns}, "in dtm_to_sparse"
        )

        matrix = sparse.csr_matrix(terms.fill_null(0).to_numpy())
        matrix.eliminate_zeros()
        return LabeledSparseMatrix(
            matrix, dtm.get_column(document).to_list(), terms.columns
        )
