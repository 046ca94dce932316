"""
Configuration constants for tidytext.

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

from dataclasses import dataclass, field
from typing import Tuple
import regex


@dataclass
class ProcessingConfig:
    """Configuration constants for tokenizing and reshaping tables."""

    # Tokenization
    DEFAULT_STRATEGY: str = "word"
    SUPPORTED_STRATEGIES: Tuple[str, ...] = field(
        default=(
            "word",
            "character",
            "sentence",
            "line",
            "paragraph",
            "regex",
            "ngrams",
            "character_shingles",
        )
    )
    # strategies that take n / n_min
    SIZED_STRATEGIES: Tuple[str, ...] = ("ngrams", "character_shingles")
    DEFAULT_NGRAM_SIZE: int = 2
    DEFAULT_SHINGLE_SIZE: int = 3
    NGRAM_SEPARATOR: str = " "

    # Default column names for tidy output
    DOCUMENT_COLUMN: str = "document"
    TERM_COLUMN: str = "term"
    VALUE_COLUMN: str = "count"
    PAIR_COLUMNS: Tuple[str, str, str] = ("item1", "item2", "n")

    # Sparse bridge
    DUPLICATE_POLICIES: Tuple[str, ...] = ("sum", "reject")
    DEFAULT_DUPLICATE_POLICY: str = "sum"

    # Pair counting
    PAIR_GROUP_WARN_SIZE: int = 5000  # rows in a single group
    MAX_DISTINCT_PAIRS_WARN: int = 10000000

    # Progress and timing
    PROGRESS_THRESHOLD: int = 5000  # groups to show progress
    PERFORMANCE_REPORT_SECONDS: float = 5.0

    # Validation
    LONG_TEXT_THRESHOLD: int = 1000000  # characters


@dataclass
class RegexPatterns:
    """Compiled patterns for text segmentation (``regex`` module syntax)."""

    # letter/digit runs, apostrophes allowed between runs (don't, o'clock)
    WORD = regex.compile(r"[^\W_]+(?:['\u2019][^\W_]+)*")
    # extended grapheme clusters (UAX #29)
    GRAPHEME = regex.compile(r"\X")
    # whitespace after terminal punctuation (and an optional closing quote or
    # bracket) when the next character is not a lowercase letter
    SENTENCE_BOUNDARY = regex.compile(
        r"(?:(?<=[.!?])|(?<=[.!?][\"'\u201d\u2019)\]]))"
        r"\s+(?=[^\s\p{Ll}])"
    )
    LINE = regex.compile(r"[^\r\n]+")
    PARAGRAPH_BREAK = regex.compile(r"\n[ \t\r\f\v]*\n\s*")


# Global configuration instance
CONFIG = ProcessingConfig()
PATTERNS = RegexPatterns()
