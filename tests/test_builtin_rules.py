"""
Tests for the built-in rule catalog.
"""

import pytest

from linesentry.core.corpus import build_corpus, default_corpus
from linesentry.core.engine import analyze
from linesentry.core.findings import Category, RuleType, Severity
from linesentry.rules import BUILTIN_MODULES, builtin_sources


@pytest.fixture(scope="module")
def corpus():
    return default_corpus()


class TestCatalog:
    """Tests for catalog integrity."""

    def test_no_rejected_rules(self, corpus):
        assert corpus.rejected == ()

    def test_codes_unique(self):
        codes = [entry["code"] for source in builtin_sources() for entry in source]

        assert len(codes) == len(set(codes))

    def test_every_module_contributes(self, corpus):
        for module in BUILTIN_MODULES:
            module_corpus = build_corpus([module.RULES])
            assert len(module_corpus) == len(module.RULES)

    def test_rule_fields(self, corpus):
        for rule in corpus:
            assert rule.message
            assert isinstance(rule.severity, Severity)
            assert isinstance(rule.category, Category)
            assert isinstance(rule.rule_type, RuleType)

    def test_kotlin_rules_scoped(self, corpus):
        for rule in corpus:
            if rule.code.startswith("KT-"):
                assert rule.file_patterns is not None and rule.file_patterns.include

    def test_all_patterns_compile(self, corpus):
        for rule in corpus:
            for pattern in rule.patterns + rule.negative_patterns + rule.suppress_if_nearby:
                assert getattr(pattern, "valid", True), rule.code


class TestDetections:
    """Spot checks for representative rules."""

    @pytest.mark.parametrize("path,text,code", [
        ("app.js", 'const password = "hunter22";', "CRED001"),
        ("app.js", "el.innerHTML = userInput;", "XSS001"),
        ("Main.kt", "webView.addJavascriptInterface(bridge, \"Android\")", "KT-AUTH002"),
        ("Main.kt", "val prefs = getSharedPreferences(\"p\", MODE_PRIVATE)", "KT-ENC002"),
        ("Main.kt", "openFileOutput(name, MODE_WORLD_READABLE)", "KT-FILE001"),
        ("index.html", '<a href="x" target="_blank">', "FE003"),
    ])
    def test_detects(self, corpus, path, text, code):
        assert code in [issue.code for issue in analyze(text, path, corpus)]

    @pytest.mark.parametrize("path,text,code", [
        ("Main.kt", "val rng = SecureRandom()", "KT-ENC001"),
        ("Main.kt", "val prefs = EncryptedSharedPreferences.create(getSharedPreferences(\"p\", 0))", "KT-ENC002"),
        ("app.js", "el.innerHTML = DOMPurify.sanitize(userInput);", "XSS001"),
    ])
    def test_negative_patterns(self, corpus, path, text, code):
        assert code not in [issue.code for issue in analyze(text, path, corpus)]

    def test_secure_random_negative_is_case_sensitive(self, corpus):
        """Only the SecureRandom class name cancels an insecure Random finding."""
        text = "val rng = java.util.Random(secureRandomSeed)"

        assert "KT-ENC001" in [issue.code for issue in analyze(text, "Main.kt", corpus)]

    def test_csrf_token_nearby(self, corpus):
        """A form carrying a CSRF token field is not flagged."""
        text = '<form method="post" action="/transfer">\n  {% csrf_token %}\n</form>'

        codes = [issue.code for issue in analyze(text, "templates/transfer.html", corpus)]

        assert "CSRF001" not in codes
