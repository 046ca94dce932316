"""
Reshaping text tables into one-token-per-row tables.

:class:`TableReshaper` expands each row of a table into one row per token
of its text column, carrying every other column forward unchanged. Rows
whose text yields no tokens disappear; output order follows input row
order, then token order within a row.

Example:
    Tokenize a corpus into words::

        import polars as pl
        from tidytext.reshapers import TableReshaper

        corpus = pl.DataFrame({
            'doc_id': ['doc1', 'doc2'],
            'text': ['The cat sat.', 'A dog!']
        })

        words = TableReshaper().unnest_tokens(corpus, 'word', 'text')
        # doc_id | word
        # doc1   | the
        # doc1   | cat
        # doc1   | sat
        # doc2   | a
        # doc2   | dog

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

from typing import Any, Dict, List, Optional, Sequence, Union

import polars as pl

from .performance import PerformanceMonitor
from .tokenizers import TokenSpec, Tokenizer
from .validation import (
    DataFormatError,
    ParameterValidationError,
    ensure_dataframe,
    validate_table_columns,
)

# keyword spellings accepted in place of TokenSpec field names
_OPTION_ALIASES = {"token": "strategy", "to_lower": "lowercase"}


def _spec_options(options: Dict[str, Any]) -> Dict[str, Any]:
    spec_options = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        if name in spec_options:
            raise ParameterValidationError(
                f"'{key}' and '{name}' both given in unnest_tokens; use one of them."
            )
        spec_options[name] = value
    return spec_options


class TableReshaper:
    """
    Expands text columns into tidy token tables.

    The reshaper holds no state between calls; every call builds a new
    DataFrame and leaves its input untouched.
    """

    @staticmethod
    def _validate_column_name(name: Any, parameter: str) -> None:
        if not isinstance(name, str) or name == "":
            raise ParameterValidationError(
                f"{parameter} must be a non-empty column name in unnest_tokens, "
                f"got {name!r}"
            )

    @staticmethod
    def _collapse_rows(
        table: pl.DataFrame, input: str, collapse: Sequence[str]
    ) -> pl.DataFrame:
        """Join the text of rows sharing the collapse columns."""
        if table.schema[input] == pl.Binary:
            raise DataFormatError(
                f"Cannot collapse Binary column '{input}' in unnest_tokens. "
                "Decode it to String first."
            )
        return (
            table.filter(pl.col(input).is_not_null())
            .group_by(list(collapse), maintain_order=True)
            .agg(pl.col(input).str.join("\n"))
        )

    def unnest_tokens(
        self,
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

        Args:
            table: A polars DataFrame with a String (or UTF-8 Binary) text
                column.
            output: Name of the token column to create. It is placed after
                all carried-forward columns. If equal to ``input`` the text
                column is replaced.
            input: Name of the text column to tokenize.
            spec: A TokenSpec, dict of spec options, or strategy name. When
                omitted, spec options may be given as keywords
                (``token="sentences"``, ``pattern=...``, ``to_lower=False``).
            drop: Drop the text column from the output.
            position_column: If given, also emit each token's start offset
                in its text under this name.
            collapse: Columns to group by before tokenizing; the text of
                each group is joined with newlines and only the collapse
                columns are carried forward.

        Returns:
            A polars DataFrame with one row per token. Rows with null text
            or no tokens contribute no rows.

        Raises:
            MissingColumnError: If ``input`` or a collapse column is absent.
            InvalidSpecError: If the token spec is invalid.
            TextEncodingError: If Binary text is not valid UTF-8.

        Example:
            >>> corpus = pl.DataFrame({'doc': [1], 'text': ['One. Two.']})
            >>> TableReshaper().unnest_tokens(corpus, 'sentence', 'text',
            ...                               token='sentences')
        """
        table = ensure_dataframe(table, "in unnest_tokens")
        self._validate_column_name(output, "output")
        self._validate_column_name(input, "input")
        if position_column is not None:
            self._validate_column_name(position_column, "position_column")
            if position_column == output:
                raise ParameterValidationError(
                    "position_column must differ from the output column in "
                    f"unnest_tokens, both are '{output}'."
                )

        required = {input: "text"}
        if collapse is not None:
            if isinstance(collapse, str):
                collapse = [collapse]
            required.update({col: "any" for col in collapse})
        validate_table_columns(table, required, "in unnest_tokens")

        # columns carried into the result; only the text column may be replaced
        carried = list(collapse) + [input] if collapse is not None else table.columns
        for name, kind in ((output, "output"), (position_column, "position_column")):
            if name is None or name not in carried:
                continue
            if name == input and (kind == "output" or drop):
                continue
            raise ParameterValidationError(
                f"{kind} '{name}' would overwrite an existing column in "
                "unnest_tokens. Choose a new column name."
            )

        tokenizer = Tokenizer(spec, **_spec_options(options))

        if collapse is not None:
            table = self._collapse_rows(table, input, collapse)

        with PerformanceMonitor("Tokenizing text column"):
            token_lists: List[List[str]] = []
            start_lists: List[List[int]] = []
            for text in table.get_column(input).to_list():
                tokens, starts = [], []
                for token, start in tokenizer.spans(text):
                    tokens.append(token)
                    starts.append(start)
                token_lists.append(tokens)
                start_lists.append(starts)

            new_columns = [pl.Series(output, token_lists, dtype=pl.List(pl.String))]
            if position_column is not None:
                new_columns.append(
                    pl.Series(position_column, start_lists, dtype=pl.List(pl.UInt32))
                )
            added = [col.name for col in new_columns]

            kept = [
                col
                for col in table.columns
                if col not in added and not (drop and col == input)
            ]

            return (
                table.with_columns(new_columns)
                .select(kept + added)
                .explode(added)
                .filter(pl.col(output).is_not_null())
            )
