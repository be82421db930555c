"""
CLI output formatter for human-readable results.

Rendering goes through a recording rich Console so the formatter returns a
string like the other formatters; ANSI styles are kept only when color is on.
"""

import io
import sys
from collections import defaultdict
from typing import Dict, List

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from linesentry.core.findings import Issue, ScanResult, Severity

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def supports_color() -> bool:
    """Check if the terminal supports color output."""
    if not hasattr(sys.stdout, "isatty"):
        return False
    return sys.stdout.isatty()


class CLIFormatter:
    """
    Formats scan results for human-readable CLI output.
    """

    def __init__(self, use_color: bool = True, verbose: bool = False, show_suggestions: bool = True, width: int = 100):
        self.use_color = use_color and supports_color()
        self.verbose = verbose
        self.show_suggestions = show_suggestions
        self.width = width

    def _console(self) -> Console:
        return Console(
            file=io.StringIO(),
            record=True,
            width=self.width,
            force_terminal=self.use_color,
            no_color=not self.use_color,
            highlight=False,
        )

    def _render(self, console: Console) -> str:
        return console.export_text(styles=self.use_color).rstrip("\n")

    def _severity_label(self, severity: Severity) -> Text:
        return Text(f"[{severity.value.upper()}]", style=SEVERITY_STYLES.get(severity, ""))

    def format_result(self, result: ScanResult) -> str:
        """Format a complete scan result."""
        console = self._console()

        console.print()
        console.rule(Text("LINESENTRY SCAN RESULTS", style="bold"))
        console.print()

        # Summary
        summary = Table(show_header=False, box=None, padding=(0, 2))
        summary.add_column("key", style="bold")
        summary.add_column("value")
        summary.add_row("Files scanned", str(result.files_scanned))
        summary.add_row("Scan time", f"{result.scan_time_seconds:.2f}s")
        summary.add_row("Rules triggered", str(len(result.rules_applied)))
        if result.rejected_rules:
            summary.add_row("Rejected rules", Text(", ".join(result.rejected_rules), style="red"))
        console.print(summary)
        console.print()

        if result.total_issues == 0:
            console.print(Text("  No issues found!", style="green"))
        else:
            counts = Table(box=box.SIMPLE, show_edge=False)
            counts.add_column("Severity")
            counts.add_column("Issues", justify="right")
            for severity in (Severity.ERROR, Severity.WARNING, Severity.INFO):
                counts.add_row(self._severity_label(severity), str(result.count(severity)))
            if result.suppressed_count > 0:
                counts.add_row(Text("Suppressed", style="dim"), str(result.suppressed_count))
            console.print(counts)

        # Detailed issues, grouped by file
        for report in result.files:
            if not report.issues:
                continue
            console.print()
            console.rule(Text(report.file_path, style="bold cyan"), align="left")
            for issue in report.issues:
                for line in self._issue_lines(issue, report.file_path):
                    console.print(line)
                console.print()

        if result.errors:
            console.print()
            console.rule(Text("ERRORS", style="red"))
            for error in result.errors:
                console.print(Text(f"  - {error}"))

        return self._render(console)

    def _issue_lines(self, issue: Issue, file_path: str) -> List[Text]:
        lines = []

        title = Text("  ")
        title.append_text(self._severity_label(issue.severity))
        title.append(f" {issue.code} ", style="bold")
        title.append(issue.message)
        lines.append(title)

        location = Text("  Location: ", style="dim")
        location.append(f"{file_path}:{issue.line + 1}:{issue.column + 1}")
        lines.append(location)

        if self.verbose:
            detail = Text("  Category: ", style="dim")
            detail.append(issue.category.label)
            if issue.confidence is not None:
                detail.append("  Confidence: ", style="dim")
                detail.append(issue.confidence.value)
            lines.append(detail)
            if issue.matched_text:
                matched = Text("  Matched: ", style="dim")
                matched.append(issue.matched_text)
                lines.append(matched)

        if self.show_suggestions and issue.suggestion:
            suggestion = Text("  Fix: ", style="green")
            suggestion.append(issue.suggestion)
            lines.append(suggestion)

        return lines

    def format_issues(self, issues: List[Issue], file_path: str = "<stdin>") -> str:
        """Format issues from a single analysis."""
        console = self._console()
        for issue in issues:
            for line in self._issue_lines(issue, file_path):
                console.print(line)
        return self._render(console)

    def format_rules(self, rules) -> str:
        """Format a rule listing grouped by category."""
        console = self._console()
        grouped: Dict[str, list] = defaultdict(list)
        for rule in rules:
            grouped[rule.category.label].append(rule)

        for label, category_rules in grouped.items():
            table = Table(title=label, title_justify="left", box=box.SIMPLE_HEAD, expand=False)
            table.add_column("Code", style="bold", no_wrap=True)
            table.add_column("Severity", no_wrap=True)
            table.add_column("Type", no_wrap=True)
            table.add_column("Message")
            for rule in category_rules:
                table.add_row(
                    rule.code,
                    Text(rule.severity.value, style=SEVERITY_STYLES.get(rule.severity, "")),
                    rule.rule_type.value,
                    rule.message,
                )
            console.print(table)

        return self._render(console)
