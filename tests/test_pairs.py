"""
Tests for pairwise co-occurrence counting.
"""

import warnings

import pytest
import polars as pl

import tidytext as tt
from tidytext.config import CONFIG
from tidytext.pairs import CooccurrencePair, PairCounter, count_group_pairs
from tidytext.validation import (
    GroupSizeError,
    MissingColumnError,
    ParameterValidationError,
    PerformanceWarning,
)

from conftest import assert_pairs_canonical


class TestCountGroupPairs:
    """Test counting within a single group."""

    def test_three_values(self):
        assert count_group_pairs(["a", "b", "c"]) == {
            ("a", "b"): 1,
            ("a", "c"): 1,
            ("b", "c"): 1,
        }

    def test_repeated_values_multiply(self):
        assert count_group_pairs(["a", "a", "b"]) == {("a", "b"): 2}
        assert count_group_pairs(["b", "a", "b", "a"]) == {("a", "b"): 4}

    def test_single_value(self):
        assert count_group_pairs(["x", "x", "x"]) == {}
        assert count_group_pairs([]) == {}

    def test_canonical_order(self):
        assert list(count_group_pairs(["z", "a"])) == [("a", "z")]


class TestPairwiseCount:
    """Test pair counting over a table."""

    def test_spec_example(self):
        table = pl.DataFrame({"g": [1, 1, 1], "v": ["a", "b", "c"]})
        pairs = tt.pairwise_count(table, "g", "v")
        assert pairs.rows() == [("a", "b", 1), ("a", "c", 1), ("b", "c", 1)]

    def test_counts_summed_over_groups(self, word_tokens):
        pairs = tt.pairwise_count(word_tokens, "section", "word")

        assert_pairs_canonical(pairs)
        assert pairs.columns == list(CONFIG.PAIR_COLUMNS)
        assert pairs.rows() == [
            ("cat", "dog", 2),
            ("bird", "cat", 1),
            ("bird", "dog", 1),
        ]

    def test_self_pairs_excluded(self, word_tokens):
        pairs = tt.pairwise_count(word_tokens, "section", "word")
        assert "fish" not in pairs.get_column("item1").to_list()
        assert "fish" not in pairs.get_column("item2").to_list()
        assert pairs.filter(pl.col("item1") == pl.col("item2")).height == 0

    def test_sorted_output(self):
        table = pl.DataFrame(
            {
                "g": [1, 1, 2, 2, 3, 3, 3],
                "v": ["x", "y", "c", "d", "c", "d", "x"],
            }
        )
        pairs = tt.pairwise_count(table, "g", "v", sort=True)
        assert pairs.rows() == [
            ("c", "d", 2),
            ("c", "x", 1),
            ("d", "x", 1),
            ("x", "y", 1),
        ]

    def test_first_seen_order(self):
        table = pl.DataFrame({"g": [2, 2, 1, 1], "v": ["m", "k", "b", "a"]})
        pairs = tt.pairwise_count(table, "g", "v")
        assert pairs.rows() == [("k", "m", 1), ("a", "b", 1)]

    def test_multiplicity_within_group(self):
        table = pl.DataFrame({"g": [1, 1, 1], "v": ["a", "a", "b"]})
        assert tt.pairwise_count(table, "g", "v").rows() == [("a", "b", 2)]

    def test_nulls_ignored(self):
        table = pl.DataFrame(
            {"g": [1, 1, 1, None, None], "v": ["a", None, "b", "a", "c"]}
        )
        assert tt.pairwise_count(table, "g", "v").rows() == [("a", "b", 1)]

    def test_nan_values_ignored(self):
        table = pl.DataFrame({"g": [1, 1, 1], "v": [float("nan"), float("nan"), 1.0]})
        assert tt.pairwise_count(table, "g", "v").height == 0

        table = pl.DataFrame({"g": [1, 1, 1], "v": [float("nan"), 1.0, 2.0]})
        assert tt.pairwise_count(table, "g", "v").rows() == [(1.0, 2.0, 1)]

    def test_no_pairs(self):
        table = pl.DataFrame({"g": [1, 2], "v": ["a", "b"]})
        pairs = tt.pairwise_count(table, "g", "v")
        assert pairs.height == 0
        assert pairs.columns == ["item1", "item2", "n"]
        assert pairs.schema["item1"] == pl.String

    def test_integer_values_keep_dtype(self):
        table = pl.DataFrame({"g": ["a", "a"], "v": [7, 3]})
        pairs = tt.pairwise_count(table, "g", "v")
        assert pairs.schema["item1"] == pl.Int64
        assert pairs.schema["n"] == pl.UInt64
        assert pairs.rows() == [(3, 7, 1)]

    def test_same_column_rejected(self, word_tokens):
        with pytest.raises(ParameterValidationError):
            tt.pairwise_count(word_tokens, "word", "word")

    def test_missing_column(self, word_tokens):
        with pytest.raises(MissingColumnError):
            tt.pairwise_count(word_tokens, "chapter", "word")

    def test_from_unnested_tokens(self, simple_corpus):
        words = tt.unnest_tokens(simple_corpus, "word", "text")
        pairs = tt.pairwise_count(words, "doc_id", "word", sort=True)

        assert_pairs_canonical(pairs)
        top = pairs.row(0, named=True)
        assert (top["item1"], top["item2"], top["n"]) == ("document", "test", 3)


class TestPairCounter:
    """Test counter options."""

    def test_count_pairs_returns_tuples(self, word_tokens):
        pairs = PairCounter().count_pairs(word_tokens, "section", "word", sort=True)
        assert pairs[0] == CooccurrencePair("cat", "dog", 2)
        assert pairs[0].n == 2

    def test_group_cap(self, word_tokens):
        with pytest.raises(GroupSizeError):
            tt.pairwise_count(word_tokens, "section", "word", max_group_size=2)

        pairs = tt.pairwise_count(word_tokens, "section", "word", max_group_size=3)
        assert pairs.height == 3

    @pytest.mark.parametrize("cap", [0, -5, 2.5])
    def test_invalid_cap(self, word_tokens, cap):
        with pytest.raises(ParameterValidationError):
            tt.pairwise_count(word_tokens, "section", "word", max_group_size=cap)

    @pytest.mark.parametrize("n_jobs", [0, -2, True, "4"])
    def test_invalid_n_jobs(self, n_jobs):
        with pytest.raises(ParameterValidationError):
            PairCounter(n_jobs=n_jobs)

    def test_all_cpus(self):
        assert PairCounter(n_jobs=-1).n_jobs >= 1

    def test_parallel_matches_serial(self, word_tokens):
        serial = PairCounter().pairwise_count(word_tokens, "section", "word")
        parallel = PairCounter(n_jobs=2).pairwise_count(word_tokens, "section", "word")
        assert parallel.equals(serial)

    def test_large_group_warns(self, monkeypatch):
        monkeypatch.setattr(CONFIG, "PAIR_GROUP_WARN_SIZE", 2)
        table = pl.DataFrame({"g": [1, 1, 1], "v": ["a", "b", "c"]})
        with pytest.warns(PerformanceWarning):
            tt.pairwise_count(table, "g", "v")

    def test_distinct_pairs_warns_once(self, monkeypatch):
        monkeypatch.setattr(CONFIG, "MAX_DISTINCT_PAIRS_WARN", 1)
        table = pl.DataFrame({"g": [1, 1, 1, 2, 2], "v": ["a", "b", "c", "d", "e"]})
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            tt.pairwise_count(table, "g", "v")
        performance = [w for w in caught if issubclass(w.category, PerformanceWarning)]
        assert len(performance) == 1
