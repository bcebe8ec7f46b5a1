"""Tests for line splitting and keyword filtering."""

import pytest

from content_viewer.filtering import apply_filter, filter_lines, get_lines


class TestGetLines:
    def test_splits_lf_and_crlf(self):
        assert get_lines("a\r\nb\nc") == ["a", "b", "c"]

    def test_none_is_one_empty_line(self):
        assert get_lines(None) == [""]

    def test_keeps_blank_lines(self):
        assert get_lines("a\n\nb") == ["a", "", "b"]


class TestFilterLines:
    @pytest.mark.parametrize("query", ["", "api", "ZZZ"])
    def test_empty_input_gives_empty_output(self, query):
        assert filter_lines([], query) == []

    def test_empty_query_is_identity(self):
        lines = ["One", "two"]
        assert filter_lines(lines, "") is lines

    def test_case_insensitive_substring(self):
        lines = ["Using the API", "nothing here", "rapid fire", "api docs"]
        assert filter_lines(lines, "Api") == ["Using the API", "rapid fire", "api docs"]

    def test_every_line_is_partitioned_correctly(self):
        lines = ["alpha", "Beta", "ALPHABET", "gamma", "betamax"]
        result = filter_lines(lines, "bet")
        assert all("bet" in line.lower() for line in result)
        assert all("bet" not in line.lower() for line in lines if line not in result)

    def test_preserves_order_and_does_not_mutate(self):
        lines = ["b match", "a", "c match"]
        snapshot = list(lines)
        assert filter_lines(lines, "match") == ["b match", "c match"]
        assert lines == snapshot

    def test_lower_not_casefold(self):
        # "ß".lower() stays "ß", so "ss" does not match it
        assert filter_lines(["Straße"], "ss") == []


class TestApplyFilter:
    def test_only_matches(self):
        filtered = apply_filter("line one\nline two\nAPI line", "api", only_matches=True)
        assert filtered.shown == ["API line"]
        assert filtered.match_count == 1
        assert filtered.summary == "Matches: 1"

    def test_show_all_still_counts(self):
        filtered = apply_filter("line one\nline two\nAPI line", "api", only_matches=False)
        assert filtered.shown == ["line one", "line two", "API line"]
        assert filtered.match_count == 1

    def test_summary_without_query(self):
        filtered = apply_filter("a\nb\nc", "")
        assert filtered.shown == ["a", "b", "c"]
        assert filtered.summary == "Total lines: 3"
