"""
Shared fixtures for linesentry tests.
"""

import pytest

from linesentry.core.corpus import build_corpus
from linesentry.core.rules import rule_from_dict


@pytest.fixture
def make_rule():
    """Build a Rule from keyword overrides on a minimal valid definition."""
    def _make_rule(**overrides):
        data = {
            "code": "TEST001",
            "message": "Test rule",
            "severity": "warning",
            "category": "secrets-credentials",
            "patterns": ["needle"],
        }
        data.update(overrides)
        return rule_from_dict(data)
    return _make_rule


@pytest.fixture
def make_corpus(make_rule):
    """Build a corpus from one or more rule override mappings."""
    def _make_corpus(*rule_overrides):
        return build_corpus([[make_rule(**overrides) for overrides in rule_overrides]])
    return _make_corpus
