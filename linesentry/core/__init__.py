"""Core matching engine and data structures."""

from linesentry.core.findings import Category, Confidence, FileReport, Issue, RuleType, ScanResult, Severity
from linesentry.core.patterns import LiteralPattern, PatternError, RegexPattern, parse_pattern
from linesentry.core.rules import FilePatterns, Rule, RuleDefinitionError, rule_from_dict
from linesentry.core.corpus import (
    ConfigError,
    CorpusHolder,
    RejectedRule,
    RuleCorpus,
    build_corpus,
    default_corpus,
    load_corpus,
    load_rule_file,
)
from linesentry.core.suppression import MatchContext, WindowPolicy, should_suppress
from linesentry.core.scope import is_applicable, severity_for
from linesentry.core.engine import ScanEngine, analyze

__all__ = [
    "Category",
    "Confidence",
    "FileReport",
    "Issue",
    "RuleType",
    "ScanResult",
    "Severity",
    "LiteralPattern",
    "RegexPattern",
    "PatternError",
    "parse_pattern",
    "FilePatterns",
    "Rule",
    "RuleDefinitionError",
    "rule_from_dict",
    "ConfigError",
    "CorpusHolder",
    "RejectedRule",
    "RuleCorpus",
    "build_corpus",
    "default_corpus",
    "load_corpus",
    "load_rule_file",
    "MatchContext",
    "WindowPolicy",
    "should_suppress",
    "is_applicable",
    "severity_for",
    "ScanEngine",
    "analyze",
]
