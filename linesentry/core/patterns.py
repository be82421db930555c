"""
Detection patterns.

A pattern is either a literal substring, matched case-insensitively, or a
regular expression matched with the flags it was authored with. Both
variants expose the same ``spans`` method so callers never inspect the
pattern type.

Regular expressions are evaluated with the ``regex`` package so that every
search runs under ``MATCH_TIMEOUT``; a runaway expression raises
TimeoutError instead of stalling the scan.
"""

import logging
import re
from typing import Any, Iterator, Optional, Tuple, Union

import regex

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

# Seconds allowed for one regex evaluation against one line of text.
MATCH_TIMEOUT = 0.5

# ``re`` and ``regex`` do not share flag values beyond the basic ones.
_REGEX_FLAGS = (
    (re.IGNORECASE, regex.IGNORECASE),
    (re.MULTILINE, regex.MULTILINE),
    (re.DOTALL, regex.DOTALL),
    (re.VERBOSE, regex.VERBOSE),
    (re.ASCII, regex.ASCII),
)

# JavaScript-style flag letters accepted in "/source/flags" notation.
_FLAG_LETTERS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "g": 0,
    "u": 0,
}

_SLASH_NOTATION = re.compile(r"^/(?P<source>.+)/(?P<flags>[a-z]*)$", re.DOTALL)


class PatternError(ValueError):
    """Raised when a pattern cannot be evaluated."""


class LiteralPattern:
    """Case-insensitive substring detector."""

    kind = "literal"

    def __init__(self, text: str):
        if not text:
            raise PatternError("Literal pattern must not be empty")
        self.text = text
        self._needle = text.lower()

    @property
    def source(self) -> str:
        return self.text

    def spans(self, text: str) -> Iterator[Span]:
        haystack = text.lower()
        start = haystack.find(self._needle)
        while start != -1:
            yield start, start + len(self._needle)
            start = haystack.find(self._needle, start + 1)

    def __eq__(self, other):
        return isinstance(other, LiteralPattern) and other.text == self.text

    def __hash__(self):
        return hash((self.kind, self.text))

    def __repr__(self) -> str:
        return f"LiteralPattern({self.text!r})"


class RegexPattern:
    """
    Regular-expression detector.

    A source that fails to compile produces an inert pattern: construction
    succeeds, the compile error is kept, and every evaluation raises
    PatternError so the matcher can isolate it. ``flags`` are ``re`` flags;
    a precompiled ``re.Pattern`` keeps its own.
    """

    kind = "regex"

    def __init__(self, pattern: Union[str, "re.Pattern[str]"], flags: int = 0):
        self.error: Optional[str] = None
        self._compiled = None
        if isinstance(pattern, re.Pattern):
            pattern, flags = pattern.pattern, pattern.flags
        self.pattern = pattern
        self.flags = flags
        try:
            self._compiled = regex.compile(pattern, _to_regex_flags(flags))
        except regex.error as e:
            self.error = str(e)
            logger.warning("Invalid regular expression %r: %s", pattern, e)

    @property
    def source(self) -> str:
        suffix = "i" if self.flags & re.IGNORECASE else ""
        return f"/{self.pattern}/{suffix}"

    @property
    def valid(self) -> bool:
        return self._compiled is not None

    def spans(self, text: str) -> Iterator[Span]:
        """Yield match spans; raises TimeoutError past ``MATCH_TIMEOUT``."""
        if self._compiled is None:
            raise PatternError(f"Pattern {self.pattern!r} did not compile: {self.error}")
        for match in self._compiled.finditer(text, timeout=MATCH_TIMEOUT):
            yield match.start(), match.end()

    def __eq__(self, other):
        return (
            isinstance(other, RegexPattern)
            and other.pattern == self.pattern
            and other.flags == self.flags
        )

    def __hash__(self):
        return hash((self.kind, self.pattern, self.flags))

    def __repr__(self) -> str:
        return f"RegexPattern({self.source!r})"


Pattern = Union[LiteralPattern, RegexPattern]


def _to_regex_flags(flags: int) -> int:
    converted = 0
    for re_flag, regex_flag in _REGEX_FLAGS:
        if flags & re_flag:
            converted |= regex_flag
    return converted


def parse_flags(letters: str) -> int:
    flags = 0
    for letter in letters:
        if letter not in _FLAG_LETTERS:
            raise PatternError(f"Unknown regex flag: {letter!r}")
        flags |= _FLAG_LETTERS[letter]
    return flags


def parse_pattern(value: Any) -> Pattern:
    """
    Build a pattern from rule data.

    Accepted forms:
        re.Pattern                      -> regex with its own flags
        "/source/flags"                 -> regex
        {"regex": "...", "flags": "i"}  -> regex
        {"literal": "..."}              -> literal
        any other non-empty string      -> literal
    """
    if isinstance(value, (LiteralPattern, RegexPattern)):
        return value
    if isinstance(value, re.Pattern):
        return RegexPattern(value)
    if isinstance(value, dict):
        if "regex" in value:
            return RegexPattern(str(value["regex"]), parse_flags(str(value.get("flags", ""))))
        if "literal" in value:
            return LiteralPattern(str(value["literal"]))
        raise PatternError(f"Pattern mapping needs a 'regex' or 'literal' key: {value!r}")
    if isinstance(value, str):
        slash = _SLASH_NOTATION.match(value)
        if slash:
            return RegexPattern(slash.group("source"), parse_flags(slash.group("flags")))
        return LiteralPattern(value)
    raise PatternError(f"Unsupported pattern type: {type(value).__name__}")
