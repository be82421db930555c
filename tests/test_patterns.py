"""
Tests for detection patterns and the pattern matcher.
"""

import logging
import re

import pytest

from linesentry.core import patterns
from linesentry.core.matcher import find_spans, first_span, match, matches_any
from linesentry.core.patterns import (
    LiteralPattern,
    PatternError,
    RegexPattern,
    parse_flags,
    parse_pattern,
)


class TestLiteralPattern:
    """Tests for case-insensitive literal patterns."""

    def test_finds_every_occurrence(self):
        """All occurrences are returned in order."""
        pattern = LiteralPattern("refund")

        assert match(pattern, "refund(); REFUND(); Refund()") == [0, 10, 20]

    def test_overlapping_occurrences(self):
        """Overlapping occurrences each count."""
        assert match(LiteralPattern("aa"), "aaa") == [0, 1]

    def test_no_match(self):
        """A missing substring yields an empty list."""
        assert match(LiteralPattern("eval("), "evaluate()") == []

    def test_empty_literal_rejected(self):
        """Empty literals cannot be built."""
        with pytest.raises(PatternError):
            LiteralPattern("")

    def test_source_is_text(self):
        assert LiteralPattern("SecureRandom").source == "SecureRandom"


class TestRegexPattern:
    """Tests for regular expression patterns."""

    def test_all_matches(self):
        """Every non-overlapping regex match is returned."""
        pattern = RegexPattern(r"\d+")

        assert find_spans(pattern, "a1 b22 c333") == [(1, 2), (4, 6), (8, 11)]

    def test_flags_respected(self):
        """Without the ignore-case flag, matching is case-sensitive."""
        assert match(RegexPattern("eval"), "EVAL(x)") == []
        assert match(RegexPattern("eval", re.IGNORECASE), "EVAL(x)") == [0]

    def test_compiled_pattern_keeps_flags(self):
        """A precompiled pattern keeps its own flags."""
        pattern = RegexPattern(re.compile("innerhtml", re.I))

        assert pattern.source == "/innerhtml/i"
        assert match(pattern, "el.innerHTML = x") == [3]

    def test_invalid_regex_is_inert(self):
        """An invalid expression never matches and never raises from the matcher."""
        pattern = RegexPattern("([a-z")

        assert not pattern.valid
        assert pattern.error
        assert match(pattern, "([a-z") == []
        assert first_span(pattern, "anything") is None

    def test_invalid_regex_raises_on_direct_use(self):
        """Evaluating the pattern itself reports the compile failure."""
        with pytest.raises(PatternError):
            list(RegexPattern("(unclosed").spans("text"))

    def test_empty_match(self):
        """Zero-width matches are reported."""
        assert first_span(RegexPattern("^$"), "") == (0, 0)


class TestParsePattern:
    """Tests for building patterns from rule data."""

    def test_plain_string_is_literal(self):
        pattern = parse_pattern("dangerouslySetInnerHTML")

        assert isinstance(pattern, LiteralPattern)

    def test_slash_notation(self):
        """/source/flags strings become regexes."""
        pattern = parse_pattern(r"/eval\s*\(/i")

        assert isinstance(pattern, RegexPattern)
        assert pattern.pattern == r"eval\s*\("
        assert pattern.flags & re.IGNORECASE
        assert pattern.source == r"/eval\s*\(/i"

    def test_mapping_forms(self):
        """Mappings select the pattern kind explicitly."""
        regex = parse_pattern({"regex": "md5", "flags": "i"})
        literal = parse_pattern({"literal": "/not/a/regex/"})

        assert isinstance(regex, RegexPattern)
        assert match(regex, "MD5(data)") == [0]
        assert isinstance(literal, LiteralPattern)
        assert literal.text == "/not/a/regex/"

    def test_compiled_pattern(self):
        pattern = parse_pattern(re.compile(r"md5"))

        assert isinstance(pattern, RegexPattern)

    def test_existing_pattern_returned(self):
        pattern = LiteralPattern("x")

        assert parse_pattern(pattern) is pattern

    def test_unknown_flag(self):
        """Unsupported flag letters are rejected."""
        with pytest.raises(PatternError):
            parse_pattern("/abc/q")

    def test_mapping_without_kind(self):
        with pytest.raises(PatternError):
            parse_pattern({"pattern": "abc"})

    def test_unsupported_type(self):
        with pytest.raises(PatternError):
            parse_pattern(42)

    def test_parse_flags(self):
        """Flag letters combine; g and u are accepted and ignored."""
        assert parse_flags("im") == re.IGNORECASE | re.MULTILINE
        assert parse_flags("gu") == 0


class TestMatchesAny:
    """Tests for matches_any."""

    def test_any_pattern(self):
        patterns = [LiteralPattern("noopener"), RegexPattern("nofollow")]

        assert matches_any(patterns, 'rel="nofollow"')
        assert not matches_any(patterns, 'rel="external"')

    def test_skips_broken_patterns(self):
        """A broken pattern does not hide a later matching one."""
        patterns = [RegexPattern("(bad"), LiteralPattern("good")]

        assert matches_any(patterns, "good")

    def test_empty(self):
        assert not matches_any([], "text")


class TestTimeouts:
    """Tests for time-limited regex evaluation."""

    class SlowPattern:
        kind = "regex"
        source = "/(a+)+$/"

        def spans(self, text):
            raise TimeoutError("regex timed out")

    def test_timeout_skips_pattern(self, caplog):
        """A timed-out pattern yields no matches and is logged."""
        with caplog.at_level(logging.WARNING, logger="linesentry.core.matcher"):
            assert find_spans(self.SlowPattern(), "aaaa!") == []
            assert first_span(self.SlowPattern(), "aaaa!") is None

        assert "timed out" in caplog.text

    def test_timeout_does_not_hide_other_patterns(self):
        assert matches_any([self.SlowPattern(), LiteralPattern("a")], "aaaa!")

    def test_pathological_regex_returns(self, monkeypatch):
        """Nested quantifiers finish within the time budget."""
        monkeypatch.setattr(patterns, "MATCH_TIMEOUT", 0.05)

        assert match(RegexPattern(r"(a+)+$"), "a" * 40 + "!") == []
