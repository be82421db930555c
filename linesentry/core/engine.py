"""
Analysis engine for linesentry.

``analyze`` is the core: a pure function of (document text, file path, rule
corpus) that returns ordered, de-duplicated issues. ScanEngine wraps it for
files and directories: discovery, ignore handling, thresholds and parallel
scanning.
"""

import fnmatch
import logging
import os
import re
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Sequence

from linesentry.core.confidence import classify_confidence
from linesentry.core.corpus import CorpusHolder, RuleCorpus, load_corpus
from linesentry.core.findings import FileReport, Issue, ScanResult, Severity
from linesentry.core.ignore import IgnoreEntry, is_ignored, load_ignore_file
from linesentry.core.matcher import first_span
from linesentry.core.rules import Rule
from linesentry.core.scope import is_applicable, severity_for
from linesentry.core.suppression import MatchContext, WindowPolicy, should_suppress

logger = logging.getLogger(__name__)


# Language detection by file extension
LANGUAGE_EXTENSIONS: Dict[str, List[str]] = {
    "javascript": [".js", ".jsx", ".mjs", ".cjs"],
    "typescript": [".ts", ".tsx", ".mts", ".cts"],
    "python": [".py"],
    "java": [".java"],
    "kotlin": [".kt", ".kts"],
    "csharp": [".cs"],
    "php": [".php"],
    "go": [".go"],
    "rust": [".rs"],
    "html": [".html", ".htm", ".vue", ".svelte"],
    "json": [".json"],
}

# Reverse mapping for quick lookup
EXTENSION_TO_LANGUAGE: Dict[str, str] = {}
for lang, exts in LANGUAGE_EXTENSIONS.items():
    for ext in exts:
        EXTENSION_TO_LANGUAGE[ext] = lang


DEFAULT_IGNORE_PATTERNS = [
    "node_modules/**",
    ".git/**",
    "__pycache__/**",
    ".tox/**",
    "venv/**",
    ".venv/**",
    "vendor/**",
    "dist/**",
    "build/**",
    "target/**",
    "*.min.js",
    "*.bundle.js",
    "package-lock.json",
    "coverage/**",
    "*.egg-info/**",
]

DEFAULT_INLINE_MARKER = "linesentry-ignore"

_INLINE_CODES = re.compile(r"\s*[:=]\s*([\w-]+(?:\s*,\s*[\w-]+)*)")


def split_lines(document_text: str) -> List[str]:
    """Split on newlines, keeping every line (a trailing blank line included)."""
    return [line[:-1] if line.endswith("\r") else line for line in document_text.split("\n")]


def analyze(
    document_text: str,
    file_path: str,
    rule_corpus: RuleCorpus,
    windows: Optional[WindowPolicy] = None,
) -> List[Issue]:
    """
    Run every applicable rule over every line of ``document_text``.

    Each rule fires at most once per line, at the position of its first
    matching pattern, unless a negative or nearby pattern suppresses it.
    Issues are ordered by line, column, then rule code. Never raises for a
    bad rule or pattern; those are logged and skipped.
    """
    if not document_text:
        document_text = ""
    windows = windows or WindowPolicy()
    lines = split_lines(document_text)

    active = []
    for rule in rule_corpus:
        try:
            if not is_applicable(rule, file_path):
                continue
            active.append((rule, severity_for(rule, file_path), windows.for_rule(rule)))
        except Exception as e:
            logger.error("Error applying file scope of rule %s to %s: %s", rule.code, file_path, e)

    issues: List[Issue] = []
    for index in range(len(lines)):
        for rule, severity, (negative_window, nearby_window) in active:
            try:
                issue = _evaluate_rule(rule, severity, lines, index, negative_window, nearby_window)
            except Exception as e:
                logger.error("Error running rule %s on %s:%d: %s", rule.code, file_path, index + 1, e)
                continue
            if issue is not None:
                issues.append(issue)

    issues.sort(key=lambda issue: issue.sort_key)
    return issues


def _evaluate_rule(
    rule: Rule,
    severity: Severity,
    lines: Sequence[str],
    index: int,
    negative_window: int,
    nearby_window: int,
) -> Optional[Issue]:
    line = lines[index]
    for pattern in rule.patterns:
        span = first_span(pattern, line)
        if span is None:
            continue

        start, end = span
        context = MatchContext(
            lines=lines,
            line=index,
            column=start,
            negative_window=negative_window,
            nearby_window=nearby_window,
        )
        if should_suppress(rule, context):
            return None

        matched_text = line[start:end]
        return Issue(
            code=rule.code,
            message=rule.message,
            suggestion=rule.suggestion,
            severity=severity,
            category=rule.category,
            line=index,
            column=start,
            matched_pattern=pattern.source,
            matched_text=matched_text,
            rule_type=rule.rule_type,
            confidence=classify_confidence(lines, index, start, matched_text, rule.code),
        )
    return None


class ScanEngine:
    """
    Workspace scanner built on ``analyze``.

    The engine:
    1. Builds the rule corpus (built-in rules plus configured rule files)
    2. Discovers files in the target directory
    3. Runs ``analyze`` on each file, in parallel when there are several
    4. Drops issues below the severity threshold or covered by ignores
    5. Collects everything into a ScanResult
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, corpus: Optional[RuleCorpus] = None):
        self.config = config or {}
        self.errors: List[str] = []

        self.max_file_size = self.config.get("max_file_size", 10 * 1024 * 1024)  # 10MB
        self.max_workers = self.config.get("max_workers", 4)
        self.ignore_patterns = self.config.get("ignore_patterns", DEFAULT_IGNORE_PATTERNS)
        self.include_patterns = self.config.get("include_patterns", None)
        self.severity_threshold = Severity.parse(self.config.get("severity_threshold", "info"))
        self.languages = self.config.get("languages") or list(LANGUAGE_EXTENSIONS)
        self.inline_marker = self.config.get("inline_marker", DEFAULT_INLINE_MARKER)
        self.use_ignore_file = self.config.get("use_ignore_file", True)
        self.windows = WindowPolicy.from_dict(self.config.get("windows", {}))
        self.rule_config = self.config.get("rules", {})

        self.corpus_holder = CorpusHolder(self._configure_corpus(corpus))

    @property
    def corpus(self) -> RuleCorpus:
        return self.corpus_holder.current

    def _configure_corpus(self, corpus: Optional[RuleCorpus] = None) -> RuleCorpus:
        """Load the corpus and apply disabled rules and severity overrides."""
        if corpus is None:
            corpus = load_corpus(self.rule_config.get("extra_rule_files", []))
        configured = corpus.configured(
            disabled=self.rule_config.get("disabled", []),
            disabled_categories=self.rule_config.get("disabled_categories", []),
            severity_overrides=self.rule_config.get("severity_overrides", {}),
        )
        if configured.rejected:
            logger.warning("Rejected rules: %s", ", ".join(configured.rejected_codes))
        return configured

    def reload_rules(self) -> RuleCorpus:
        """Rebuild the corpus from configuration and swap it in."""
        return self.corpus_holder.reload(self._configure_corpus)

    def detect_language(self, file_path: str) -> Optional[str]:
        ext = os.path.splitext(file_path)[1].lower()
        return EXTENSION_TO_LANGUAGE.get(ext)

    def should_ignore(self, file_path: str, base_path: str) -> bool:
        """Check if a file should be ignored based on patterns."""
        rel_path = Path(os.path.relpath(file_path, base_path)).as_posix()
        name = os.path.basename(file_path)

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(name, pattern):
                return True
            if pattern.endswith("/**") and (rel_path + "/").startswith(pattern[:-2]):
                return True

        if self.include_patterns:
            if not any(
                fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(name, pattern)
                for pattern in self.include_patterns
            ):
                return True

        return False

    def discover_files(self, target_path: str) -> Generator[str, None, None]:
        """Discover all files to scan in the target path."""
        target = Path(target_path)

        if target.is_file():
            yield str(target)
            return

        for root, dirs, files in os.walk(target):
            dirs[:] = sorted(
                d for d in dirs
                if not self.should_ignore(os.path.join(root, d), target_path)
            )

            for file in sorted(files):
                file_path = os.path.join(root, file)

                if self.should_ignore(file_path, target_path):
                    continue

                try:
                    if os.path.getsize(file_path) > self.max_file_size:
                        logger.debug("Skipping %s: larger than %d bytes", file_path, self.max_file_size)
                        continue
                except OSError:
                    continue

                if self.detect_language(file_path) in self.languages:
                    yield file_path

    def read_file(self, file_path: str) -> Optional[str]:
        try:
            with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
                return f.read()
        except OSError as e:
            self.errors.append(f"Error reading {file_path}: {e}")
            return None

    def scan_content(
        self,
        content: str,
        file_path: str = "<stdin>",
        relative_path: Optional[str] = None,
        ignore_entries: Optional[List[IgnoreEntry]] = None,
    ) -> FileReport:
        """
        Analyze text directly without reading from disk.

        Useful for editor integrations and testing.
        """
        corpus = self.corpus_holder.current
        lines = split_lines(content)
        report = FileReport(file_path=file_path)

        for issue in analyze(content, file_path, corpus, self.windows):
            if issue.severity < self.severity_threshold:
                continue
            if self._inline_ignored(lines, issue):
                report.suppressed += 1
                continue
            if ignore_entries and is_ignored(ignore_entries, issue.code, relative_path or file_path, issue.line):
                report.suppressed += 1
                continue
            report.issues.append(issue)

        return report

    def _inline_ignored(self, lines: Sequence[str], issue: Issue) -> bool:
        """An ignore comment on the issue's line or the line above, optionally listing codes."""
        if not self.inline_marker:
            return False
        for index in (issue.line, issue.line - 1):
            if index < 0 or index >= len(lines):
                continue
            position = lines[index].find(self.inline_marker)
            if position == -1:
                continue
            codes = _INLINE_CODES.match(lines[index], position + len(self.inline_marker))
            if codes is None:
                return True
            if issue.code in {code.strip() for code in codes.group(1).split(",")}:
                return True
        return False

    def scan_file(
        self,
        file_path: str,
        base_path: Optional[str] = None,
        ignore_entries: Optional[List[IgnoreEntry]] = None,
    ) -> Optional[FileReport]:
        content = self.read_file(file_path)
        if content is None:
            return None
        relative = Path(os.path.relpath(file_path, base_path)).as_posix() if base_path else file_path
        return self.scan_content(content, file_path, relative, ignore_entries)

    def scan(self, target_path: str) -> ScanResult:
        """
        Scan a target path and return results.

        Args:
            target_path: Path to a file or directory to scan.

        Returns:
            ScanResult containing all issues and metadata.
        """
        start_time = time.time()
        self.errors = []
        reports: List[FileReport] = []

        target = Path(target_path)
        base_path = str(target if target.is_dir() else target.parent)
        ignore_entries = load_ignore_file(base_path) if self.use_ignore_file else []

        files = list(self.discover_files(target_path))
        logger.info("Scanning %d files under %s", len(files), target_path)

        if len(files) > 1 and self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {
                    executor.submit(self.scan_file, f, base_path, ignore_entries): f
                    for f in files
                }
                for future in as_completed(futures):
                    file_path = futures[future]
                    try:
                        report = future.result()
                    except Exception as e:
                        self.errors.append(f"Error scanning {file_path}: {e}")
                        continue
                    if report is not None:
                        reports.append(report)
        else:
            for file_path in files:
                try:
                    report = self.scan_file(file_path, base_path, ignore_entries)
                except Exception as e:
                    self.errors.append(f"Error scanning {file_path}: {e}")
                    continue
                if report is not None:
                    reports.append(report)

        reports.sort(key=lambda r: r.file_path)
        rules_applied = sorted({issue.code for report in reports for issue in report.issues})

        return ScanResult(
            files=reports,
            files_scanned=len(reports),
            scan_time_seconds=round(time.time() - start_time, 3),
            rules_applied=rules_applied,
            rejected_rules=self.corpus.rejected_codes,
            errors=list(self.errors),
        )


def create_engine(config_path: Optional[str] = None, **kwargs) -> ScanEngine:
    """
    Create a scan engine with configuration.

    Args:
        config_path: Optional path to a configuration file.
        **kwargs: Additional engine configuration options.
    """
    config: Dict[str, Any] = {}

    if config_path:
        from linesentry.config import load_scan_config
        config = load_scan_config(config_path).to_engine_config()

    config.update(kwargs)

    return ScanEngine(config)
