"""
tidytext: Tidy one-token-per-row tables from text.

This package turns text into tidy polars DataFrames with one token per row,
counts co-occurring token pairs within groups, and converts between sparse
document-term matrices and long-format tables. Joins, grouping and
aggregation are left to polars.
"""

# Core functions
from .text_analysis import (
    unnest_tokens,
    pairwise_count,
    tidy_sparse,
    cast_sparse,
    cast_dtm,
    dtm_to_sparse,
    bind_tf_idf,
)

# Tokenizers, reshapers and converters
from .tokenizers import TokenSpec, Tokenizer, tokenize
from .reshapers import TableReshaper
from .pairs import PairCounter, CooccurrencePair, count_group_pairs
from .sparse import LabeledSparseMatrix, SparseMatrixBridge
from .weighting import TermWeighter

# Configuration
from .config import ProcessingConfig, RegexPatterns

# Performance utilities
from .performance import (
    ProgressTracker,
    PerformanceMonitor,
    estimate_pair_work,
)

# Validation and error handling
from .validation import (
    # Exception classes
    TidyTextError,
    InvalidSpecError,
    MissingColumnError,
    DuplicateEntryError,
    TextEncodingError,
    DataFormatError,
    ParameterValidationError,
    GroupSizeError,
    ValidationWarning,
    PerformanceWarning,
    # Validation functions
    ensure_dataframe,
    validate_table_columns,
    validate_choice_parameter,
    validate_text_value,
    validate_group_sizes,
)

# Package metadata
__version__ = "0.1.0"
__author__ = "David Brown"
__email__ = "dwb2@andrew.cmu.edu"

# Public API - define what gets imported with "from tidytext import *"
__all__ = [
    # Core functions
    "unnest_tokens",
    "pairwise_count",
    "tidy_sparse",
    "cast_sparse",
    "cast_dtm",
    "dtm_to_sparse",
    "bind_tf_idf",
    # Tokenizers, reshapers and converters
    "TokenSpec",
    "Tokenizer",
    "tokenize",
    "TableReshaper",
    "PairCounter",
    "CooccurrencePair",
    "count_group_pairs",
    "LabeledSparseMatrix",
    "SparseMatrixBridge",
    "TermWeighter",
    # Configuration
    "ProcessingConfig",
    "RegexPatterns",
    # Performance utilities
    "ProgressTracker",
    "PerformanceMonitor",
    "estimate_pair_work",
    # Validation and error handling
    "TidyTextError",
    "InvalidSpecError",
    "MissingColumnError",
    "DuplicateEntryError",
    "TextEncodingError",
    "DataFormatError",
    "ParameterValidationError",
    "GroupSizeError",
    "ValidationWarning",
    "PerformanceWarning",
    "ensure_dataframe",
    "validate_table_columns",
    "validate_choice_parameter",
    "validate_text_value",
    "validate_group_sizes",
]
