"""Tests for the wildcard hostname grammar and regex synthesis."""

from __future__ import annotations

import pytest

from originmatch.exceptions import InvalidHostError
from originmatch.grammar import (
    compile_labels,
    label_to_pattern,
    labels_to_pattern,
    parse_host,
)


class TestParseHost:
    """Tests for parse_host()."""

    @pytest.mark.parametrize(
        "hostname,labels",
        [
            ("localhost", ("localhost",)),
            ("example.com", ("example", "com")),
            ("*.example.com", ("*", "example", "com")),
            ("*.com", ("*", "com")),
            ("a*.*b.a*b.example.com", ("a*", "*b", "a*b", "example", "com")),
            ("123.example.com", ("123", "example", "com")),
            ("my-app.example.com", ("my-app", "example", "com")),
        ],
    )
    def test_valid_hosts(self, hostname, labels):
        """Test hosts accepted by the grammar."""
        assert parse_host(hostname) == labels

    @pytest.mark.parametrize(
        "hostname",
        [
            "*",
            "a*",
            "*.*",
            "a.*",
            "*.a.*.com",
            "example.c*m",
            "**.example.com",
            "a**b.example.com",
            "-app.example.com",
            "ex_ample.com",
            "example.com.",
            "example..com",
            "",
        ],
    )
    def test_invalid_hosts(self, hostname):
        """Test hosts rejected by the grammar."""
        with pytest.raises(InvalidHostError):
            parse_host(hostname)

    def test_error_reports_reason(self):
        """Test the error names the offending host and the broken rule."""
        with pytest.raises(InvalidHostError) as exc_info:
            parse_host("a.*.com")

        assert exc_info.value.spec == "a.*.com"
        assert exc_info.value.reason == "wildcard after a plain label"

    def test_wildcard_in_last_label_reason(self):
        """Test the apex label can never carry a wildcard."""
        with pytest.raises(InvalidHostError) as exc_info:
            parse_host("*.*")

        assert exc_info.value.reason == "wildcard in the last label"


class TestLabelToPattern:
    """Tests for label_to_pattern()."""

    def test_plain_label(self):
        assert label_to_pattern("example") == "example"

    def test_plain_label_is_escaped(self):
        assert label_to_pattern("my-app") == r"my\-app"

    def test_full_wildcard(self):
        assert label_to_pattern("*") == "[a-zA-Z0-9][-a-zA-Z0-9]*[a-zA-Z0-9]?"

    def test_leading_wildcard(self):
        assert label_to_pattern("*a") == "([a-zA-Z0-9][-a-zA-Z0-9]*)?a"

    def test_trailing_wildcard(self):
        assert label_to_pattern("a*") == "a[-a-zA-Z0-9]*[a-zA-Z0-9]?"

    def test_middle_wildcard(self):
        assert label_to_pattern("a*b") == "a[-a-zA-Z0-9]*b"


class TestLabelsToPattern:
    """Tests for anchored pattern synthesis."""

    @pytest.mark.parametrize(
        "hostname,expected",
        [
            ("localhost", r"^localhost$"),
            ("*.example.com", r"^[a-zA-Z0-9][-a-zA-Z0-9]*[a-zA-Z0-9]?\.example\.com$"),
            ("a*.example.com", r"^a[-a-zA-Z0-9]*[a-zA-Z0-9]?\.example\.com$"),
            ("*a.example.com", r"^([a-zA-Z0-9][-a-zA-Z0-9]*)?a\.example\.com$"),
        ],
    )
    def test_pattern_source(self, hostname, expected):
        """Test the pattern source for a host is stable."""
        assert labels_to_pattern(parse_host(hostname)) == expected

    def test_deterministic(self):
        """Test the same labels always give the same source."""
        labels = parse_host("a*.*b.example.com")
        assert labels_to_pattern(labels) == labels_to_pattern(tuple(labels))


class TestCompileLabels:
    """Tests for compiled patterns."""

    def test_cached(self):
        """Test compiled patterns are shared between equal label sequences."""
        first = compile_labels(("*", "example", "com"))
        second = compile_labels(("*", "example", "com"))
        assert first is second

    def test_wildcard_matches_one_label(self):
        """Test a wildcard never crosses a label boundary."""
        pattern = compile_labels(("*", "example", "com"))

        assert pattern.fullmatch("api.example.com")
        assert pattern.fullmatch("a.example.com")
        assert pattern.fullmatch("x-1.example.com")
        assert not pattern.fullmatch("a.b.example.com")
        assert not pattern.fullmatch("example.com")
        assert not pattern.fullmatch(".example.com")

    def test_leading_wildcard_may_be_empty(self):
        """Test "*a" matches the bare suffix too."""
        pattern = compile_labels(("*api", "example", "com"))

        assert pattern.fullmatch("api.example.com")
        assert pattern.fullmatch("v1-api.example.com")
        assert not pattern.fullmatch("v1.api.example.com")

    def test_middle_wildcard(self):
        pattern = compile_labels(("a*b", "example", "com"))

        assert pattern.fullmatch("ab.example.com")
        assert pattern.fullmatch("acb.example.com")
        assert not pattern.fullmatch("a.b.example.com")

    def test_rejects_trailing_newline(self):
        pattern = compile_labels(("localhost",))
        assert not pattern.fullmatch("localhost\n")
