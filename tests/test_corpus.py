"""
Tests for rule definitions and the rule corpus.
"""

import json
import logging
import re

import pytest

from linesentry.core import corpus as corpus_module
from linesentry.core.corpus import (
    ConfigError,
    CorpusHolder,
    RuleCorpus,
    build_corpus,
    load_corpus,
    load_rule_file,
)
from linesentry.core.findings import Category, RuleType, Severity
from linesentry.core.patterns import LiteralPattern, RegexPattern
from linesentry.core.rules import RuleDefinitionError, rule_from_dict


VALID_RULE = {
    "code": "X001",
    "message": "Example",
    "severity": "error",
    "category": "api-security",
    "patterns": ["/api_key/i"],
}


class TestRuleFromDict:
    """Tests for rule validation."""

    def test_valid_rule(self):
        rule = rule_from_dict(VALID_RULE)

        assert rule.code == "X001"
        assert rule.severity == Severity.ERROR
        assert rule.category == Category.API_SECURITY
        assert rule.rule_type == RuleType.CODE_DETECTABLE
        assert isinstance(rule.patterns[0], RegexPattern)

    @pytest.mark.parametrize("missing", ["code", "message", "severity", "category", "patterns"])
    def test_missing_required_field(self, missing):
        """Each required field is enforced."""
        data = {k: v for k, v in VALID_RULE.items() if k != missing}

        with pytest.raises(RuleDefinitionError):
            rule_from_dict(data)

    def test_empty_patterns(self):
        with pytest.raises(RuleDefinitionError) as exc_info:
            rule_from_dict({**VALID_RULE, "patterns": []})

        assert exc_info.value.code == "X001"

    def test_unknown_severity(self):
        with pytest.raises(RuleDefinitionError):
            rule_from_dict({**VALID_RULE, "severity": "critical"})

    def test_unknown_category(self):
        with pytest.raises(RuleDefinitionError):
            rule_from_dict({**VALID_RULE, "category": "astrology"})

    def test_bad_pattern_flag(self):
        with pytest.raises(RuleDefinitionError):
            rule_from_dict({**VALID_RULE, "patterns": ["/abc/z"]})

    def test_negative_window_rejected(self):
        with pytest.raises(RuleDefinitionError):
            rule_from_dict({**VALID_RULE, "nearby_window": -1})

    def test_camel_case_keys(self):
        """camelCase keys from exported rule files are accepted."""
        rule = rule_from_dict({
            **VALID_RULE,
            "ruleType": "project-advisory",
            "negativePatterns": ["process.env"],
            "suppressIfNearby": ["/vault/"],
            "filePatterns": {"reduceSeverityIn": ["/test/"]},
            "contextAware": True,
        })

        assert rule.rule_type == RuleType.PROJECT_ADVISORY
        assert rule.negative_patterns == (LiteralPattern("process.env"),)
        assert rule.suppress_if_nearby == (RegexPattern("vault"),)
        assert rule.file_patterns.reduce_severity_in == (RegexPattern("test"),)
        assert rule.context_aware

    def test_regex_like_literal_scope_warns(self, caplog):
        """A plain-string file pattern that looks like a regex is flagged at load."""
        with caplog.at_level(logging.WARNING, logger="linesentry.core.rules"):
            rule = rule_from_dict({**VALID_RULE, "file_patterns": {"include": ["\\.kts?$"]}})

        assert rule.file_patterns.include == (LiteralPattern("\\.kts?$"),)
        assert "X001" in caplog.text
        assert "literal" in caplog.text

    def test_plain_literal_scope_is_quiet(self, caplog):
        with caplog.at_level(logging.WARNING, logger="linesentry.core.rules"):
            rule_from_dict({**VALID_RULE, "file_patterns": {"include": ["src/api/", "/\\.kts?$/i"]}})

        assert caplog.text == ""

    @pytest.mark.parametrize("tags", [5, {"a": "b"}])
    def test_malformed_tags(self, tags):
        with pytest.raises(RuleDefinitionError, match="tags"):
            rule_from_dict({**VALID_RULE, "tags": tags})

    def test_tags(self):
        assert rule_from_dict({**VALID_RULE, "tags": ["owasp", 7]}).tags == ("owasp", "7")
        assert rule_from_dict({**VALID_RULE, "tags": "owasp"}).tags == ("owasp",)

    def test_single_pattern_string(self):
        """A single pattern may be given without a list."""
        rule = rule_from_dict({**VALID_RULE, "patterns": "eval("})

        assert rule.patterns == (LiteralPattern("eval("),)

    def test_to_dict(self):
        data = rule_from_dict({**VALID_RULE, "negative_patterns": ["getenv"]}).to_dict()

        assert data["patterns"] == ["/api_key/i"]
        assert data["negative_patterns"] == ["getenv"]
        assert "file_patterns" not in data


class TestBuildCorpus:
    """Tests for corpus construction."""

    def test_order_preserved(self):
        """Rules keep source order across sources."""
        corpus = build_corpus([
            [{**VALID_RULE, "code": "B"}, {**VALID_RULE, "code": "A"}],
            [{**VALID_RULE, "code": "C"}],
        ])

        assert corpus.codes == ["B", "A", "C"]
        assert [rule.code for rule in corpus] == ["B", "A", "C"]

    def test_invalid_entry_rejected(self):
        """Invalid entries are excluded and reported; the rest load."""
        corpus = build_corpus([[VALID_RULE, {"code": "BROKEN", "message": "x"}]])

        assert corpus.codes == ["X001"]
        assert corpus.rejected_codes == ["BROKEN"]
        assert "missing required field" in corpus.rejected[0].reason

    def test_malformed_tags_rejected(self):
        """A rule with unusable tags is rejected without losing the others."""
        corpus = build_corpus([[{**VALID_RULE, "code": "BAD1", "tags": 5}, VALID_RULE]])

        assert corpus.codes == ["X001"]
        assert corpus.rejected_codes == ["BAD1"]

    def test_unexpected_definition_error_rejected(self, monkeypatch):
        """Type errors raised while building a rule become rejections."""
        def explode(entry):
            raise TypeError("unsupported value")

        monkeypatch.setattr(corpus_module, "rule_from_dict", explode)

        corpus = build_corpus([[{**VALID_RULE, "code": "ODD1"}]])

        assert len(corpus) == 0
        assert corpus.rejected_codes == ["ODD1"]
        assert "unsupported value" in corpus.rejected[0].reason

    def test_duplicate_code_first_wins(self):
        corpus = build_corpus([[VALID_RULE], [{**VALID_RULE, "message": "Second"}]])

        assert len(corpus) == 1
        assert corpus["X001"].message == "Example"
        assert corpus.rejected_codes == ["X001"]

    def test_lookup(self):
        corpus = build_corpus([[VALID_RULE]])

        assert corpus.get("X001") is corpus["X001"]
        assert corpus.get("NOPE") is None
        assert "X001" in corpus
        assert corpus.by_category(Category.API_SECURITY) == [corpus["X001"]]
        assert corpus.by_category("secrets-credentials") == []
        assert corpus.categories() == [Category.API_SECURITY]

    def test_empty_corpus(self):
        corpus = RuleCorpus()

        assert len(corpus) == 0
        assert corpus.all_rules() == []

    def test_configured(self):
        """Disabled codes, prefixes and categories are removed; overrides applied."""
        corpus = build_corpus([[
            {**VALID_RULE, "code": "DEP001", "category": "dependencies-supply-chain"},
            {**VALID_RULE, "code": "DEP002", "category": "dependencies-supply-chain"},
            {**VALID_RULE, "code": "CORS001", "category": "cors-configuration"},
            {**VALID_RULE, "code": "LOG001", "category": "logging-monitoring"},
            {**VALID_RULE, "code": "FE001", "category": "frontend-security", "severity": "info"},
        ]])

        configured = corpus.configured(
            disabled=["DEP*", "CORS001"],
            disabled_categories=["logging-monitoring"],
            severity_overrides={"FE001": "warning"},
        )

        assert configured.codes == ["FE001"]
        assert configured["FE001"].severity == Severity.WARNING
        assert corpus["FE001"].severity == Severity.INFO

    def test_compiled_patterns(self):
        """Python rule modules may pass compiled expressions directly."""
        corpus = build_corpus([[{**VALID_RULE, "patterns": [re.compile("eval", re.I)]}]])

        assert corpus["X001"].patterns[0].source == "/eval/i"


class TestRuleFiles:
    """Tests for YAML and JSON rule files."""

    def test_yaml_rule_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "rules:\n"
            "  - code: Y001\n"
            "    message: Yaml rule\n"
            "    severity: info\n"
            "    category: file-handling\n"
            "    patterns:\n"
            "      - '/\\bunlink\\(/'\n"
            "      - literal: rm -rf\n"
        )

        corpus = build_corpus([load_rule_file(path)])

        rule = corpus["Y001"]
        assert rule.patterns[0] == RegexPattern(r"\bunlink\(")
        assert rule.patterns[1] == LiteralPattern("rm -rf")

    def test_json_rule_list(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([VALID_RULE]))

        assert load_rule_file(path) == [VALID_RULE]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_rule_file(tmp_path / "missing.yaml")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_rule_file(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("just a string\n")

        with pytest.raises(ConfigError):
            load_rule_file(path)

    def test_load_corpus_without_builtins(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([VALID_RULE]))

        assert load_corpus([path], include_builtin=False).codes == ["X001"]

    def test_file_rule_cannot_replace_builtin(self, tmp_path):
        """Built-in rules load first, so a file reusing a code is rejected."""
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([{**VALID_RULE, "code": "CRED001"}]))

        corpus = load_corpus([path])

        assert corpus["CRED001"].category == Category.SECRETS_CREDENTIALS
        assert corpus.rejected_codes == ["CRED001"]


class TestCorpusHolder:
    """Tests for atomic corpus replacement."""

    def test_swap(self):
        first = build_corpus([[VALID_RULE]])
        second = build_corpus([[{**VALID_RULE, "code": "X002"}]])
        holder = CorpusHolder(first)

        previous = holder.swap(second)

        assert previous is first
        assert holder.current is second
        assert first.codes == ["X001"]

    def test_reload(self):
        holder = CorpusHolder()
        replacement = build_corpus([[VALID_RULE]])

        assert len(holder.current) == 0
        assert holder.reload(lambda: replacement) is replacement
        assert holder.current is replacement

    def test_reload_failure_keeps_current(self):
        """A failing loader leaves the active corpus in place."""
        current = build_corpus([[VALID_RULE]])
        holder = CorpusHolder(current)

        def broken_loader():
            raise ConfigError("bad rule file")

        with pytest.raises(ConfigError):
            holder.reload(broken_loader)
        assert holder.current is current
