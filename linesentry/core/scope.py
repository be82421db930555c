"""File-scope filter: path-based applicability and severity dampening."""

from linesentry.core.findings import Severity
from linesentry.core.matcher import matches_any
from linesentry.core.rules import Rule


def normalize_path(file_path: str) -> str:
    return file_path.replace("\\", "/")


def is_applicable(rule: Rule, file_path: str) -> bool:
    """False when the rule has include patterns and none matches ``file_path``."""
    scope = rule.file_patterns
    if scope is None or not scope.include:
        return True
    return matches_any(scope.include, normalize_path(file_path))


def severity_for(rule: Rule, file_path: str) -> Severity:
    """The rule's severity, lowered one step when ``file_path`` is in a reduce-severity scope."""
    scope = rule.file_patterns
    if scope is not None and scope.reduce_severity_in:
        if matches_any(scope.reduce_severity_in, normalize_path(file_path)):
            return rule.severity.reduced()
    return rule.severity
