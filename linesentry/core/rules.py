"""
Rule definitions for linesentry.

A rule is pure data: identity, reporting text, and the patterns that detect,
negate, or suppress a finding. Rules are built from plain mappings (Python
rule modules, YAML or JSON files) and validated on the way in.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from linesentry.core.findings import Category, RuleType, Severity
from linesentry.core.patterns import LiteralPattern, Pattern, PatternError, parse_pattern

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = ("code", "message", "severity", "category", "patterns")

# Characters that suggest a path pattern was meant as a regex, not a literal.
_REGEX_HINTS = set("\\$^?*+[]()|")


class RuleDefinitionError(ValueError):
    """Raised when a rule mapping is missing fields or holds invalid values."""

    def __init__(self, code: Optional[str], reason: str):
        self.code = code
        self.reason = reason
        super().__init__(f"{code or '<unknown>'}: {reason}")


@dataclass(frozen=True)
class FilePatterns:
    """Path-based restrictions for a rule."""
    include: Tuple[Pattern, ...] = ()
    reduce_severity_in: Tuple[Pattern, ...] = ()

    @property
    def empty(self) -> bool:
        return not self.include and not self.reduce_severity_in


@dataclass(frozen=True)
class Rule:
    """
    A named, immutable detection definition for one security concern.

    ``negative_window`` and ``nearby_window`` are line radii for the two
    suppression checks; None defers to the category or global default.
    """
    code: str
    message: str
    severity: Severity
    category: Category
    patterns: Tuple[Pattern, ...]
    suggestion: str = ""
    rule_type: RuleType = RuleType.CODE_DETECTABLE
    negative_patterns: Tuple[Pattern, ...] = ()
    suppress_if_nearby: Tuple[Pattern, ...] = ()
    file_patterns: Optional[FilePatterns] = None
    context_aware: bool = False
    negative_window: Optional[int] = None
    nearby_window: Optional[int] = None
    tags: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        if not self.code:
            raise RuleDefinitionError(None, "code must not be empty")
        if not self.patterns:
            raise RuleDefinitionError(self.code, "patterns must not be empty")

    def with_severity(self, severity: Severity) -> "Rule":
        return replace(self, severity=severity)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "severity": self.severity.value,
            "category": self.category.value,
            "rule_type": self.rule_type.value,
            "patterns": [p.source for p in self.patterns],
            "context_aware": self.context_aware,
        }
        if self.negative_patterns:
            data["negative_patterns"] = [p.source for p in self.negative_patterns]
        if self.suppress_if_nearby:
            data["suppress_if_nearby"] = [p.source for p in self.suppress_if_nearby]
        if self.file_patterns and not self.file_patterns.empty:
            data["file_patterns"] = {
                "include": [p.source for p in self.file_patterns.include],
                "reduce_severity_in": [p.source for p in self.file_patterns.reduce_severity_in],
            }
        return data


# camelCase keys are accepted so rule files exported from other tools load as-is.
_KEY_ALIASES = {
    "ruleType": "rule_type",
    "type": "rule_type",
    "negativePatterns": "negative_patterns",
    "suppressIfNearby": "suppress_if_nearby",
    "filePatterns": "file_patterns",
    "contextAware": "context_aware",
    "negativeWindow": "negative_window",
    "nearbyWindow": "nearby_window",
    "reduceSeverityIn": "reduce_severity_in",
}


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in data.items()}


def _parse_patterns(code: str, name: str, values: Any) -> Tuple[Pattern, ...]:
    if values is None:
        return ()
    if isinstance(values, (str, dict)) or not isinstance(values, Iterable):
        values = [values]
    try:
        return tuple(parse_pattern(value) for value in values)
    except PatternError as e:
        raise RuleDefinitionError(code, f"{name}: {e}") from e


def _parse_window(code: str, name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        window = int(value)
    except (TypeError, ValueError):
        raise RuleDefinitionError(code, f"{name} must be an integer")
    if window < 0:
        raise RuleDefinitionError(code, f"{name} must not be negative")
    return window


def _warn_literal_scopes(code: str, file_patterns: FilePatterns) -> None:
    for pattern in file_patterns.include + file_patterns.reduce_severity_in:
        if isinstance(pattern, LiteralPattern) and _REGEX_HINTS.intersection(pattern.text):
            logger.warning(
                "Rule %s: file pattern %r is matched as a literal substring; "
                "write it as /.../ to use it as a regular expression",
                code, pattern.text,
            )


def _parse_tags(code: str, value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, dict) or not isinstance(value, Iterable):
        raise RuleDefinitionError(code, "tags must be a list of strings")
    return tuple(str(tag) for tag in value)


def rule_from_dict(data: Dict[str, Any]) -> Rule:
    """
    Validate a rule mapping and build a Rule.

    Raises:
        RuleDefinitionError: if a required field is missing or a value is invalid.
    """
    if not isinstance(data, dict):
        raise RuleDefinitionError(None, "rule must be a mapping")

    data = _normalize_keys(data)
    code = str(data.get("code") or "").strip() or None

    for key in REQUIRED_FIELDS:
        if data.get(key) in (None, "", [], ()):
            raise RuleDefinitionError(code, f"missing required field '{key}'")

    try:
        severity = Severity.parse(data["severity"])
        category = Category.parse(data["category"])
        rule_type = RuleType(data.get("rule_type", RuleType.CODE_DETECTABLE.value))
    except ValueError as e:
        raise RuleDefinitionError(code, str(e)) from e

    patterns = _parse_patterns(code, "patterns", data["patterns"])
    if not patterns:
        raise RuleDefinitionError(code, "patterns must not be empty")

    file_patterns = None
    raw_scope = data.get("file_patterns")
    if raw_scope:
        if not isinstance(raw_scope, dict):
            raise RuleDefinitionError(code, "file_patterns must be a mapping")
        raw_scope = _normalize_keys(raw_scope)
        file_patterns = FilePatterns(
            include=_parse_patterns(code, "file_patterns.include", raw_scope.get("include")),
            reduce_severity_in=_parse_patterns(
                code, "file_patterns.reduce_severity_in", raw_scope.get("reduce_severity_in")
            ),
        )
        _warn_literal_scopes(code, file_patterns)

    return Rule(
        code=code,
        message=str(data["message"]),
        suggestion=str(data.get("suggestion", "")),
        severity=severity,
        category=category,
        rule_type=rule_type,
        patterns=patterns,
        negative_patterns=_parse_patterns(code, "negative_patterns", data.get("negative_patterns")),
        suppress_if_nearby=_parse_patterns(code, "suppress_if_nearby", data.get("suppress_if_nearby")),
        file_patterns=file_patterns,
        context_aware=bool(data.get("context_aware", False)),
        negative_window=_parse_window(code, "negative_window", data.get("negative_window")),
        nearby_window=_parse_window(code, "nearby_window", data.get("nearby_window")),
        tags=_parse_tags(code, data.get("tags")),
    )
