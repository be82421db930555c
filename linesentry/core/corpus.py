"""
Rule corpus.

The corpus is an immutable, ordered collection of rules keyed by code. It is
produced by an explicit builder from an ordered list of rule sources, never
mutated afterwards, and safe to share across threads. Reloading swaps in a
new corpus through CorpusHolder.
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import yaml

from linesentry.core.findings import Category, Severity
from linesentry.core.rules import Rule, RuleDefinitionError, rule_from_dict

logger = logging.getLogger(__name__)

RuleSource = Iterable[Union[Rule, Dict[str, Any]]]


class ConfigError(ValueError):
    """Raised when a configuration or rule file cannot be read."""


@dataclass(frozen=True)
class RejectedRule:
    """A corpus entry excluded at load time."""
    code: Optional[str]
    reason: str

    def __str__(self) -> str:
        return f"{self.code or '<unknown>'}: {self.reason}"


class RuleCorpus:
    """
    Read-only view over an ordered set of rules.

    Iteration follows corpus order, which is also the order rules are
    evaluated in for every line.
    """

    def __init__(self, rules: Iterable[Rule] = (), rejected: Iterable[RejectedRule] = ()):
        ordered: Dict[str, Rule] = {}
        for rule in rules:
            ordered.setdefault(rule.code, rule)
        self._rules: Mapping[str, Rule] = MappingProxyType(ordered)
        self._order: Tuple[Rule, ...] = tuple(ordered.values())
        self.rejected: Tuple[RejectedRule, ...] = tuple(rejected)

    def all_rules(self) -> List[Rule]:
        return list(self._order)

    def by_category(self, category: Union[Category, str]) -> List[Rule]:
        category = Category.parse(category)
        return [rule for rule in self._order if rule.category == category]

    def get(self, code: str) -> Optional[Rule]:
        return self._rules.get(code)

    def categories(self) -> List[Category]:
        """Categories present in the corpus, in first-seen order."""
        seen: List[Category] = []
        for rule in self._order:
            if rule.category not in seen:
                seen.append(rule.category)
        return seen

    @property
    def codes(self) -> List[str]:
        return list(self._rules)

    @property
    def rejected_codes(self) -> List[str]:
        return [entry.code or "<unknown>" for entry in self.rejected]

    def configured(
        self,
        disabled: Iterable[str] = (),
        disabled_categories: Iterable[Union[Category, str]] = (),
        severity_overrides: Optional[Mapping[str, Any]] = None,
    ) -> "RuleCorpus":
        """
        Derive a new corpus with rules removed and severities overridden.

        ``disabled`` entries may end with ``*`` to match a code prefix.
        """
        disabled = list(disabled)
        skipped_categories = {Category.parse(c) for c in disabled_categories}
        overrides = {code: Severity.parse(level) for code, level in (severity_overrides or {}).items()}

        rules = []
        for rule in self._order:
            if rule.category in skipped_categories or _code_matches(rule.code, disabled):
                continue
            if rule.code in overrides:
                rule = rule.with_severity(overrides[rule.code])
            rules.append(rule)
        return RuleCorpus(rules, self.rejected)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, code: object) -> bool:
        return code in self._rules

    def __getitem__(self, code: str) -> Rule:
        return self._rules[code]

    def __repr__(self) -> str:
        return f"RuleCorpus({len(self)} rules, {len(self.rejected)} rejected)"


def _code_matches(code: str, selectors: List[str]) -> bool:
    for selector in selectors:
        if selector.endswith("*"):
            if code.startswith(selector[:-1]):
                return True
        elif code == selector:
            return True
    return False


def _entry_code(entry: Any) -> Optional[str]:
    if isinstance(entry, dict) and entry.get("code"):
        return str(entry["code"])
    return None


def build_corpus(sources: Iterable[RuleSource]) -> RuleCorpus:
    """
    Build one immutable corpus from an ordered list of rule sources.

    Each source is an iterable of Rule objects or rule mappings. Invalid
    entries and duplicate codes are excluded and reported in
    ``corpus.rejected``; the first definition of a code wins.
    """
    rules: List[Rule] = []
    seen = set()
    rejected: List[RejectedRule] = []

    for source in sources:
        for entry in source:
            try:
                rule = entry if isinstance(entry, Rule) else rule_from_dict(entry)
            except RuleDefinitionError as e:
                logger.warning("Rejected rule %s", e)
                rejected.append(RejectedRule(e.code, e.reason))
                continue
            except (TypeError, ValueError) as e:
                code = _entry_code(entry)
                logger.warning("Rejected rule %s: %s", code or "<unknown>", e)
                rejected.append(RejectedRule(code, f"invalid definition: {e}"))
                continue
            if rule.code in seen:
                logger.warning("Rejected rule %s: duplicate code", rule.code)
                rejected.append(RejectedRule(rule.code, "duplicate code"))
                continue
            seen.add(rule.code)
            rules.append(rule)

    logger.debug("Built corpus with %d rules (%d rejected)", len(rules), len(rejected))
    return RuleCorpus(rules, rejected)


def load_rule_file(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load rule mappings from a YAML or JSON file.

    The file holds either a list of rules or a mapping with a ``rules`` list.
    Validation happens later, in ``build_corpus``.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Rule file not found: {path}")

    content = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse rule file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("rules", [])
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError(f"Rule file {path} must contain a list of rules")
    return data


def load_corpus(paths: Iterable[Union[str, Path]], include_builtin: bool = True) -> RuleCorpus:
    """Build a corpus from the built-in rules followed by rule files."""
    sources: List[RuleSource] = []
    if include_builtin:
        from linesentry.rules import builtin_sources
        sources.extend(builtin_sources())
    for path in paths:
        sources.append(load_rule_file(path))
    return build_corpus(sources)


def default_corpus() -> RuleCorpus:
    """Corpus built from the rule modules shipped with linesentry."""
    return load_corpus(())


class CorpusHolder:
    """
    Holds the active corpus and swaps it atomically on reload.

    Analyses read ``current`` once and keep that reference for the whole
    call, so a concurrent swap never changes the rules mid-analysis.
    """

    def __init__(self, corpus: Optional[RuleCorpus] = None):
        self._lock = threading.Lock()
        self._corpus = corpus if corpus is not None else RuleCorpus()

    @property
    def current(self) -> RuleCorpus:
        with self._lock:
            return self._corpus

    def swap(self, corpus: RuleCorpus) -> RuleCorpus:
        """Install ``corpus`` and return the previous one."""
        with self._lock:
            previous, self._corpus = self._corpus, corpus
        logger.info("Rule corpus reloaded: %d rules, %d rejected", len(corpus), len(corpus.rejected))
        return previous

    def reload(self, loader: Callable[[], RuleCorpus]) -> RuleCorpus:
        """Build a new corpus with ``loader`` outside the lock, then swap it in."""
        corpus = loader()
        self.swap(corpus)
        return corpus
