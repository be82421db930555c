"""
JSON output formatter for machine-readable results.
"""

import json
from typing import List

from linesentry.core.findings import Issue, ScanResult


class JSONFormatter:
    """
    Formats scan results as JSON for machine consumption.
    """

    def __init__(self, indent: int = 2, include_clean_files: bool = False):
        self.indent = indent
        self.include_clean_files = include_clean_files

    def format_result(self, result: ScanResult) -> str:
        """Format a complete scan result as JSON."""
        data = result.to_dict()

        if self.include_clean_files:
            data["files"] = [report.to_dict() for report in result.files]

        return json.dumps(data, indent=self.indent, default=str)

    def format_issue(self, issue: Issue) -> str:
        """Format a single issue as JSON."""
        return json.dumps(issue.to_dict(), indent=self.indent, default=str)

    def format_issues(self, issues: List[Issue], file_path: str = "<stdin>") -> str:
        """Format a list of issues as JSON."""
        data = {
            "file_path": file_path,
            "issues": [issue.to_dict() for issue in issues],
        }
        return json.dumps(data, indent=self.indent, default=str)

    def format_rules(self, rules) -> str:
        return json.dumps([rule.to_dict() for rule in rules], indent=self.indent, default=str)
