"""
Tests for density and time-indexed queries
"""

import pytest

from lattice_app.errors import ZeroDurationError
from lattice_app.queries import (
    format_sorted_hits,
    lattice_density,
    sorted_hits,
    unique_words_at_time,
    word_count,
    write_word_set,
)

from conftest import make_lattice


class TestDensity:
    def test_scenario(self, u1):
        assert lattice_density(u1) == pytest.approx(1.0)
        assert f"{lattice_density(u1):.3f}" == "1.000"

    def test_counts_non_silence_edges(self, branchy):
        assert word_count(branchy) == 6
        assert lattice_density(branchy) == pytest.approx(6.0)

    def test_uses_start_and_end_times(self):
        lat = make_lattice([(0, 1, "a", 1, 1), (1, 2, "b", 1, 1)], 3, start=0, end=1, times=[0.0, 0.5, 2.0])
        assert lattice_density(lat) == pytest.approx(4.0)

    def test_zero_duration(self):
        lat = make_lattice([(0, 1, "a", 1, 1)], 2, times=[0.3, 0.3])
        with pytest.raises(ZeroDurationError):
            lattice_density(lat)


class TestWordsAtTime:
    def test_boundary_is_inclusive(self, u1):
        assert unique_words_at_time(u1, 0.5) == {"hello", "-silence-"}
        assert unique_words_at_time(u1, 0.0) == {"hello"}
        assert unique_words_at_time(u1, 1.0) == {"-silence-"}

    def test_outside_range_is_empty(self, u1):
        assert unique_words_at_time(u1, -0.01) == set()
        assert unique_words_at_time(u1, 1.5) == set()

    def test_unique_labels(self, branchy):
        assert unique_words_at_time(branchy, 0.5) == {"the", "a", "new_york", "newark", "yes"}

    def test_write_word_set(self, tmp_path, branchy):
        out = write_word_set(unique_words_at_time(branchy, 0.5), tmp_path / "utt42.wordsAtTime")
        with open(out, encoding="utf-8") as f:
            assert f.read().splitlines() == ["a", "new_york", "newark", "the", "yes"]


class TestSortedHits:
    def test_midpoints_sorted(self):
        lat = make_lattice(
            [(1, 2, "uh", 1, 1), (0, 1, "uh", 1, 1), (0, 2, "uh", 1, 1), (2, 3, "um", 1, 1)],
            4,
            times=[0.0, 0.5, 1.0, 1.5],
        )
        hits = sorted_hits(lat, "uh")
        assert hits == pytest.approx([0.25, 0.5, 0.75])
        assert format_sorted_hits(hits) == "0.25 0.50 0.75 "

    def test_silence(self, branchy):
        assert format_sorted_hits(sorted_hits(branchy, "-silence-")) == "0.10 0.90 "

    def test_no_hits(self, u1):
        assert sorted_hits(u1, "goodbye") == []
        assert format_sorted_hits([]) == ""
