"""
linesentry

A static rule-matching security scanner: a declarative corpus of rules is
run line by line over source text, producing ranked, de-duplicated,
line-addressed issues.
"""

__version__ = "1.0.0"
__author__ = "linesentry maintainers"

from linesentry.core.corpus import RuleCorpus, build_corpus, default_corpus, load_rule_file
from linesentry.core.engine import ScanEngine, analyze
from linesentry.core.findings import Category, Issue, Severity
from linesentry.core.rules import Rule
from linesentry.config import ScanConfig

__all__ = [
    "analyze",
    "build_corpus",
    "default_corpus",
    "load_rule_file",
    "RuleCorpus",
    "Rule",
    "Issue",
    "Severity",
    "Category",
    "ScanEngine",
    "ScanConfig",
]
