"""
Tests for confidence classification.
"""

from linesentry.core.confidence import classify_confidence, is_query_rule, is_secret_rule
from linesentry.core.findings import Confidence


def classify(text, code, line=None):
    lines = text.split("\n")
    if line is None:
        line = len(lines) - 1
    return classify_confidence(lines, line, 0, lines[line], code)


class TestSecretConfidence:
    """Tests for secrets rules."""

    def test_literal_secret_is_critical(self):
        assert classify('const apiKey = "abcd1234";', "CRED001") == Confidence.CRITICAL

    def test_env_lookup_needs_verification(self):
        """A literal next to an environment lookup may be a fallback default."""
        text = 'const apiKey = process.env.API_KEY || "dev-key";'

        assert classify(text, "CRED001") == Confidence.VERIFY_NEEDED

    def test_variable_assignment_needs_verification(self):
        assert classify("const apiKey = loadKey();", "CRED002") == Confidence.VERIFY_NEEDED

    def test_auth001_is_a_secret_rule(self):
        assert is_secret_rule("AUTH001")
        assert not is_secret_rule("AUTH002")

    def test_no_assignment(self):
        assert classify("authenticate(password)", "CRED001") is None


class TestQueryConfidence:
    """Tests for query rules."""

    def test_placeholders_are_safe(self):
        text = 'db.query("SELECT * FROM users WHERE id = $1", [id])'

        assert classify(text, "DB001") == Confidence.SAFE

    def test_concatenation_needs_verification(self):
        text = 'db.query("SELECT * FROM users WHERE id = " + id)'

        assert classify(text, "DB001") == Confidence.VERIFY_NEEDED

    def test_interpolation_needs_verification(self):
        text = "db.query(`SELECT * FROM users WHERE id = ${id}`)"

        assert classify(text, "DB002") == Confidence.VERIFY_NEEDED

    def test_multi_line_query_building(self):
        """Interpolation on a neighbouring line marks the query for review."""
        text = "const sql = `\n  SELECT * FROM users\n  WHERE id = ${id}`\ndb.query(sql)"

        assert classify(text, "KT-DB001") == Confidence.VERIFY_NEEDED

    def test_query_prefixes(self):
        assert is_query_rule("SQL001")
        assert is_query_rule("KT-DB001")
        assert not is_query_rule("DB003")


class TestOtherRules:
    """Rules outside secrets and queries get no confidence."""

    def test_unclassified(self):
        assert classify('el.innerHTML = "<b>x</b>"', "XSS001") is None

    def test_out_of_range_line(self):
        assert classify_confidence(["x"], 5, 0, "x", "CRED001") is None
