"""
Error handling and validation utilities for tidytext.

This module provides the exception hierarchy, warning categories and
validation helpers used at every table boundary. Error messages name the
offending column or parameter, the operation that raised them, and a
suggestion where one exists.

Exception Classes:
    TidyTextError: Base exception for all tidytext errors
    InvalidSpecError: Bad or missing tokenization configuration
    MissingColumnError: Referenced column absent from a table
    DuplicateEntryError: Duplicate (document, term) rows rejected by policy
    TextEncodingError: Malformed text handed to a tokenizer
    DataFormatError: Table or value of the wrong type
    ParameterValidationError: Function parameter validation
    GroupSizeError: Pair-counting group above the caller's cap
    ValidationWarning: Non-fatal validation warnings
    PerformanceWarning: Performance-related warnings

Validation Functions:
    ensure_dataframe: Coerce supported table inputs to a DataFrame
    validate_table_columns: Check required columns and their kinds
    validate_choice_parameter: Validate an option against allowed values
    validate_text_value: Normalize one text cell for tokenization
    validate_group_sizes: Enforce/warn on pair-counting group sizes

Example:
    Catch every tidytext error::

        import polars as pl
        import tidytext as tt
        from tidytext.validation import TidyTextError

        table = pl.DataFrame({'doc': ['a'], 'text': ['Some text.']})

        try:
            tt.unnest_tokens(table, 'word', 'body')
        except TidyTextError as e:
            print(f"Tokenizing failed: {e}")

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

import warnings
from typing import Any, Dict, Iterable, Optional, Sequence, Union

import polars as pl

from .config import CONFIG


class TidyTextError(Exception):
    """
    Base exception class for all tidytext errors.

    Catching this class catches every error raised deliberately by the
    package; errors are never retried internally because every operation
    is deterministic.
    """

    pass


class InvalidSpecError(TidyTextError):
    """
    Raised when a tokenization spec is invalid.

    Common causes:
        - Unknown strategy name
        - strategy='regex' without a pattern, or with one that won't compile
        - A pattern given for a strategy other than 'regex'
        - n / n_min out of range for 'ngrams' or 'character_shingles'
    """

    pass


class MissingColumnError(TidyTextError):
    """Raised when a referenced column is absent from a table."""

    pass


class DuplicateEntryError(TidyTextError):
    """Raised when duplicate (document, term) rows are rejected by policy."""

    pass


class TextEncodingError(TidyTextError):
    """Raised when text is not valid UTF-8."""

    pass


class DataFormatError(TidyTextError):
    """Raised when data format is incorrect."""

    pass


class ParameterValidationError(TidyTextError):
    """Raised when function parameters are invalid."""

    pass


class GroupSizeError(TidyTextError):
    """Raised when a pair-counting group exceeds the allowed size."""

    pass


class ValidationWarning(UserWarning):
    """Warning for potentially problematic but non-fatal issues."""

    pass


class PerformanceWarning(UserWarning):
    """Warning for performance-related issues."""

    pass


def ensure_dataframe(table: Any, context: str = "") -> pl.DataFrame:
    """
    Coerce a supported table input to a polars DataFrame.

    DataFrames pass through untouched, LazyFrames are collected, and a
    mapping of column lists or a list of row mappings is constructed into
    a new DataFrame.

    :param table: The table to check.
    :param context: Context for error messages (e.g., "in unnest_tokens")
    :return: A polars DataFrame.
    """
    if table is None:
        raise DataFormatError(
            f"Table is None {context}. "
            "Please provide a polars DataFrame."
        )

    if isinstance(table, pl.DataFrame):
        return table

    if isinstance(table, pl.LazyFrame):
        return table.collect()

    if isinstance(table, (dict, list)):
        try:
            return pl.DataFrame(table)
        except (TypeError, ValueError, pl.exceptions.PolarsError) as e:
            raise DataFormatError(
                f"Could not build a DataFrame from {type(table).__name__} "
                f"{context}: {e}"
            ) from e

    raise DataFormatError(
        f"Expected a polars DataFrame {context}, "
        f"got {type(table).__name__}."
    )


def _column_kind_matches(dtype: pl.DataType, kind: str) -> bool:
    if kind == "any":
        return True
    if kind == "text":
        return dtype in (pl.String, pl.Binary, pl.Null)
    if kind == "numeric":
        return dtype.is_numeric() or dtype == pl.Null
    raise ValueError(f"Unknown column kind: {kind}")


def validate_table_columns(
    table: pl.DataFrame, required: Dict[str, str], context: str = ""
) -> None:
    """
    Check that a table has the required columns with compatible types.

    ``required`` maps column names to a kind: 'text' (String or Binary),
    'numeric', or 'any'. Missing columns are reported together.

    :param table: DataFrame to validate
    :param required: Ordered mapping of column name to kind
    :param context: Context for error messages
    """
    schema = table.collect_schema()

    missing = [col for col in required if col not in schema]
    if missing:
        error_msg = (
            f"Missing column(s) {context}: {', '.join(missing)}\n"
            f"Available columns: {', '.join(schema.names()) or '(none)'}"
        )
        # suggest case-insensitive matches
        lowered = {name.lower(): name for name in schema.names()}
        suggestions = [lowered[c.lower()] for c in missing if c.lower() in lowered]
        if suggestions:
            error_msg += f"\nDid you mean: {', '.join(suggestions)}?"
        raise MissingColumnError(error_msg)

    wrong_types = {
        col: (kind, schema[col])
        for col, kind in required.items()
        if not _column_kind_matches(schema[col], kind)
    }
    if wrong_types:
        error_msg = f"Incorrect column types {context}:\n"
        for col, (kind, actual) in wrong_types.items():
            error_msg += f"  {col}: expected {kind}, got {actual}\n"
        raise DataFormatError(error_msg)


def validate_choice_parameter(
    value: Any,
    valid_values: Sequence[str],
    name: str,
    context: str = "",
    error_class: type = ParameterValidationError,
) -> None:
    """
    Validate an option against its allowed values with helpful suggestions.

    :param value: Parameter value to validate
    :param valid_values: Allowed values
    :param name: Parameter name for the message
    :param context: Context for error messages
    :param error_class: Exception class to raise
    """
    if value in valid_values:
        return

    suggestions = []
    if isinstance(value, str) and value:
        if value.lower() in [v.lower() for v in valid_values]:
            suggestions = [v for v in valid_values if v.lower() == value.lower()]
        else:
            # Simple similarity check
            for valid in valid_values:
                if value.startswith(valid[:3]) or valid.startswith(value[:3]):
                    suggestions.append(valid)

    error_msg = f"Invalid {name} {context}: {value!r}\n"
    error_msg += f"Valid options are: {', '.join(valid_values)}"

    if suggestions:
        error_msg += f"\nDid you mean: {', '.join(suggestions)}?"

    raise error_class(error_msg)


def validate_text_value(text: Union[str, bytes, None], context: str = "") -> Optional[str]:
    """
    Normalize one text value for tokenization.

    Bytes are decoded as UTF-8. Strings holding unpaired surrogates (which
    can't be encoded to UTF-8) are rejected.

    :param text: A str, bytes or None.
    :param context: Context for error messages
    :return: The text as str, or None for missing text.
    """
    if text is None:
        return None

    if isinstance(text, (bytes, bytearray, memoryview)):
        try:
            return bytes(text).decode("utf-8")
        except UnicodeDecodeError as e:
            raise TextEncodingError(
                f"Text is not valid UTF-8 {context}: {e.reason} "
                f"at byte {e.start}."
            ) from e

    if not isinstance(text, str):
        raise DataFormatError(
            f"Expected text {context}, got {type(text).__name__}: {text!r}"
        )

    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise TextEncodingError(
            f"Text contains characters that can't be encoded as UTF-8 "
            f"{context}: {e.reason} at position {e.start}."
        ) from e

    if len(text) > CONFIG.LONG_TEXT_THRESHOLD:
        warnings.warn(
            f"Very long text ({len(text):,} characters) {context}. "
            "Tokenizing it may be slow.",
            PerformanceWarning,
        )

    return text


def validate_group_sizes(
    sizes: Iterable[int], max_group_size: Optional[int] = None, context: str = ""
) -> None:
    """
    Enforce the group size cap and warn about large groups.

    Pair counting is quadratic in group size, so a single large group can
    dominate the run time.

    :param sizes: Row counts per group
    :param max_group_size: Hard cap; None disables the cap
    :param context: Context for error messages
    """
    if max_group_size is not None and (
        not isinstance(max_group_size, int) or max_group_size < 1
    ):
        raise ParameterValidationError(
            f"max_group_size must be a positive integer {context}, "
            f"got {max_group_size!r}"
        )

    largest = max(sizes, default=0)

    if max_group_size is not None and largest > max_group_size:
        raise GroupSizeError(
            f"Group with {largest:,} rows exceeds max_group_size="
            f"{max_group_size:,} {context}. "
            "Filter rare or very common values first, or raise the cap."
        )

    if largest > CONFIG.PAIR_GROUP_WARN_SIZE:
        warnings.warn(
            f"Largest group has {largest:,} rows {context}. "
            "Pair counting grows with the square of group size and may be slow.",
            PerformanceWarning,
        )
