"""
Tests for suppression checks and file-scope filtering.
"""

from linesentry.core.findings import Severity
from linesentry.core.scope import is_applicable, normalize_path, severity_for
from linesentry.core.suppression import (
    MatchContext,
    WindowPolicy,
    is_negated,
    is_suppressed_nearby,
    should_suppress,
)


class TestMatchContext:
    """Tests for line windows."""

    def test_window_radius(self):
        context = MatchContext(lines=["a", "b", "c", "d"], line=2)

        assert context.window(0) == "c"
        assert context.window(1) == "b\nc\nd"

    def test_window_clamped(self):
        """Windows stop at document boundaries."""
        context = MatchContext(lines=["a", "b"], line=0)

        assert context.window(5) == "a\nb"


class TestSuppression:
    """Tests for negative and nearby suppression."""

    def test_negative_same_line(self, make_rule):
        """Negative patterns only see the matched line by default."""
        rule = make_rule(negative_patterns=["safe"])
        lines = ["safe", "needle"]

        assert not is_negated(rule, MatchContext(lines=lines, line=1))
        assert is_negated(rule, MatchContext(lines=lines, line=1, negative_window=1))

    def test_nearby_window(self, make_rule):
        """Nearby suppression includes one line on either side by default."""
        rule = make_rule(suppress_if_nearby=["csrf_token"])
        lines = ["<form>", "needle", "{{ csrf_token }}", "", "</form>"]

        assert is_suppressed_nearby(rule, MatchContext(lines=lines, line=1))
        assert not is_suppressed_nearby(rule, MatchContext(lines=lines, line=1, nearby_window=0))

    def test_rule_without_suppression(self, make_rule):
        """Rules without suppression patterns are never suppressed."""
        rule = make_rule()

        assert not should_suppress(rule, MatchContext(lines=["needle"], line=0))

    def test_either_check_suppresses(self, make_rule):
        rule = make_rule(negative_patterns=["a"], suppress_if_nearby=["b"])

        assert should_suppress(rule, MatchContext(lines=["needle a"], line=0))
        assert should_suppress(rule, MatchContext(lines=["needle", "b"], line=0))
        assert not should_suppress(rule, MatchContext(lines=["needle", "", "b"], line=0))


class TestWindowPolicy:
    """Tests for window resolution."""

    def test_defaults(self, make_rule):
        assert WindowPolicy().for_rule(make_rule()) == (0, 1)

    def test_category_override(self, make_rule):
        """Category entries apply to rules without their own window."""
        policy = WindowPolicy.from_dict({
            "nearby": 2,
            "categories": {"secrets_credentials": {"negative": 3}},
        })

        assert policy.for_rule(make_rule()) == (3, 2)
        assert policy.for_rule(make_rule(category="frontend-security")) == (0, 2)

    def test_rule_window_wins(self, make_rule):
        """A rule's own window takes precedence over configuration."""
        policy = WindowPolicy.from_dict({"categories": {"secrets-credentials": {"nearby": 4}}})
        rule = make_rule(nearby_window=0)

        assert policy.for_rule(rule) == (0, 0)


class TestFileScope:
    """Tests for include and reduce-severity scopes."""

    def test_no_scope_applies_everywhere(self, make_rule):
        rule = make_rule()

        assert is_applicable(rule, "anything.txt")
        assert severity_for(rule, "anything.txt") == Severity.WARNING

    def test_include(self, make_rule):
        rule = make_rule(file_patterns={"include": ["/\\.py$/"]})

        assert is_applicable(rule, "app/main.py")
        assert not is_applicable(rule, "app/main.js")

    def test_reduce_only_does_not_restrict(self, make_rule):
        """A reduce-severity scope alone never makes a rule inapplicable."""
        rule = make_rule(file_patterns={"reduce_severity_in": ["/tests?\\//"]})

        assert is_applicable(rule, "src/app.py")
        assert severity_for(rule, "src/app.py") == Severity.WARNING
        assert severity_for(rule, "tests/test_app.py") == Severity.INFO

    def test_reduce_one_step(self, make_rule):
        rule = make_rule(severity="error", file_patterns={"reduce_severity_in": ["fixtures"]})

        assert severity_for(rule, "src/fixtures/data.ts") == Severity.WARNING

    def test_normalize_path(self):
        assert normalize_path("src\\pages\\index.tsx") == "src/pages/index.tsx"
