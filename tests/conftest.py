"""
Pytest configuration and shared fixtures for tidytext tests.

This module provides shared test fixtures, utilities, and hypothesis
strategies for the tidytext test suite.
"""

import pytest
import polars as pl
import numpy as np
from scipy import sparse
from hypothesis import strategies as st


@pytest.fixture(scope="session")
def simple_corpus():
    """Create a simple test corpus for basic functionality testing."""
    return pl.DataFrame(
        {
            "doc_id": ["test_doc1.txt", "test_doc2.txt", "test_doc3.txt"],
            "author": ["austen", "austen", "bronte"],
            "text": [
                "This is a test document for analysis.",
                "Another test document with different content.",
                "A third document to provide more test data.",
            ],
        }
    )


@pytest.fixture
def corpus_with_issues():
    """Create a corpus with various edge cases for error testing."""
    return pl.DataFrame(
        {
            "doc_id": [
                "empty_doc.txt",
                "normal_doc.txt",
                "special_chars_doc.txt",
                "null_doc.txt",
                "unicode_doc.txt",
            ],
            "text": [
                "",  # Empty document
                "This is a normal document.",  # Normal document
                "@#$%^&*()_+ {}[]|\\:;\"'<>,.?/~`",  # Punctuation only
                None,  # Missing text
                "Unicode test: café naïve résumé Москва 北京",  # Unicode
            ],
        }
    )


@pytest.fixture
def multiline_corpus():
    """Corpus with line and paragraph structure."""
    return pl.DataFrame(
        {
            "chapter": [1, 2],
            "text": [
                "It was a dark night.\nThe wind howled.\n\nMorning came.\nAll was calm.",
                "Short chapter.",
            ],
        }
    )


@pytest.fixture
def word_tokens():
    """A tidy word table grouped into sections."""
    return pl.DataFrame(
        {
            "section": [1, 1, 1, 2, 2, 3, 3, 3],
            "word": ["cat", "dog", "bird", "cat", "dog", "fish", "fish", "fish"],
        }
    )


@pytest.fixture
def labeled_coo():
    """A small COO matrix with row and column labels."""
    matrix = sparse.coo_matrix(
        (np.array([3, 1, 2, 5]), (np.array([1, 0, 0, 2]), np.array([0, 2, 1, 1]))),
        shape=(3, 3),
    )
    return matrix, ["doc_a", "doc_b", "doc_c"], ["apple", "banana", "cherry"]


@pytest.fixture
def count_table():
    """A tidy (document, term, count) table."""
    return pl.DataFrame(
        {
            "doc_id": ["d1", "d1", "d2", "d2", "d3"],
            "word": ["cat", "dog", "cat", "fish", "dog"],
            "n": [2, 1, 4, 3, 5],
        }
    )


# Test utilities
def assert_dataframe_structure(
    df: pl.DataFrame, expected_columns: list, min_rows: int = 0
):
    """Assert that a DataFrame has the expected structure."""
    assert isinstance(df, pl.DataFrame), "Result should be a polars DataFrame"
    assert df.height >= min_rows, f"DataFrame should have at least {min_rows} rows"

    for col in expected_columns:
        assert col in df.columns, f"Column '{col}' should be present"


def assert_pairs_canonical(pairs: pl.DataFrame):
    """Assert that a pair table has one canonical entry per unordered pair."""
    assert_dataframe_structure(pairs, ["item1", "item2", "n"])

    rows = pairs.select("item1", "item2").rows()
    assert all(a < b for a, b in rows), "item1 should sort before item2"
    assert len(set(rows)) == len(rows), "Each pair should appear once"
    if pairs.height > 0:
        assert (pairs["n"] > 0).all(), "All counts should be positive"


def triplet_set(table: pl.DataFrame, document: str, term: str, value: str) -> set:
    """Collect (document, term, value) rows as a set for order-free comparison."""
    return set(table.select(document, term, value).rows())


# Hypothesis strategies for property-based testing
@st.composite
def corpus_strategy(draw, min_docs=1, max_docs=8, max_text_length=120):
    """Generate corpus DataFrames with mixed text for property-based testing."""
    num_docs = draw(st.integers(min_value=min_docs, max_value=max_docs))

    texts = draw(
        st.lists(
            st.one_of(
                st.none(),
                st.text(
                    max_size=max_text_length,
                    alphabet=st.characters(
                        categories=("Lu", "Ll", "Nd", "Zs", "Po", "Cc"),
                        exclude_characters="\x00",
                    ),
                ),
            ),
            min_size=num_docs,
            max_size=num_docs,
        )
    )

    return pl.DataFrame(
        {"doc_id": [f"doc_{i:03d}.txt" for i in range(num_docs)], "text": texts},
        schema={"doc_id": pl.String, "text": pl.String},
    )


@st.composite
def grouped_values_strategy(draw, max_rows=40):
    """Generate (group, value) tables with small alphabets to force repeats."""
    rows = draw(
        st.lists(
            st.tuples(
                st.integers(min_value=0, max_value=4),
                st.sampled_from(["a", "b", "c", "d", "e"]),
            ),
            max_size=max_rows,
        )
    )
    return pl.DataFrame(
        {"group": [g for g, _ in rows], "value": [v for _, v in rows]},
        schema={"group": pl.Int64, "value": pl.String},
    )


@st.composite
def sparse_matrix_strategy(draw, max_dim=6):
    """Generate sparse integer matrices with no explicit zero entries."""
    n_rows = draw(st.integers(min_value=1, max_value=max_dim))
    n_cols = draw(st.integers(min_value=1, max_value=max_dim))
    dense = draw(
        st.lists(
            st.lists(
                st.integers(min_value=-3, max_value=9), min_size=n_cols, max_size=n_cols
            ),
            min_size=n_rows,
            max_size=n_rows,
        )
    )
    return sparse.coo_matrix(np.array(dense, dtype=np.int64))
