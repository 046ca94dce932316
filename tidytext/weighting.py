"""
Term weighting for tidy count tables.

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

import warnings

import polars as pl

from .validation import (
    ValidationWarning,
    ensure_dataframe,
    validate_table_columns,
)


class TermWeighter:
    """Adds weighting columns to tidy (document, term, count) tables."""

    def bind_tf_idf(
        self, table: pl.DataFrame, term: str, document: str, n: str
    ) -> pl.DataFrame:
        """
        Add term frequency, inverse document frequency and tf-idf columns.

        tf is the count divided by the document's total count; idf is
        log(documents / documents containing the term), natural log. Row
        order is unchanged.

        :param table: A tidy table with one row per (document, term).
        :param term: Column holding terms.
        :param document: Column holding document ids.
        :param n: Numeric column holding counts.
        :return: The table with 'tf', 'idf' and 'tf_idf' columns appended.
        """
        table = ensure_dataframe(table, "in bind_tf_idf")
        validate_table_columns(
            table, {term: "any", document: "any", n: "numeric"}, "in bind_tf_idf"
        )

        if table.select(document, term).is_duplicated().any():
            warnings.warn(
                "Some (document, term) pairs occur more than once in bind_tf_idf. "
                "Counts should be aggregated first, e.g. with "
                "group_by([document, term]).len().",
                ValidationWarning,
            )

        n_docs = table.get_column(document).n_unique()

        return (
            table.with_columns(
                pl.col(n).truediv(pl.col(n).sum().over(document)).alias("tf"),
                pl.lit(n_docs, dtype=pl.Float64)
                .truediv(pl.col(document).n_unique().over(term))
                .log()
                .alias("idf"),
            )
            .with_columns(pl.col("tf").mul(pl.col("idf")).alias("tf_idf"))
        )
