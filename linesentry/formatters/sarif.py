"""
SARIF output formatter for IDE integration.

SARIF (Static Analysis Results Interchange Format) is a standard
format for static analysis tool output, supported by many IDEs
and code review tools.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from linesentry import __version__
from linesentry.core.findings import Issue, ScanResult, Severity


SARIF_LEVEL = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}


class SARIFFormatter:
    """
    Formats scan results in SARIF format.

    SARIF is supported by:
    - GitHub Code Scanning
    - VS Code SARIF Viewer
    - Azure DevOps
    """

    SARIF_VERSION = "2.1.0"
    SCHEMA_URI = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"

    def format_result(self, result: ScanResult) -> str:
        """Format a complete scan result in SARIF format."""
        pairs = [(report.file_path, issue) for report in result.files for issue in report.issues]
        sarif = {
            "$schema": self.SCHEMA_URI,
            "version": self.SARIF_VERSION,
            "runs": [self._create_run(pairs, result.errors)],
        }

        return json.dumps(sarif, indent=2)

    def format_issues(self, issues: List[Issue], file_path: str = "<stdin>") -> str:
        sarif = {
            "$schema": self.SCHEMA_URI,
            "version": self.SARIF_VERSION,
            "runs": [self._create_run([(file_path, issue) for issue in issues])],
        }
        return json.dumps(sarif, indent=2)

    def _create_run(self, pairs, errors: Optional[List[str]] = None) -> Dict[str, Any]:
        """Create a SARIF run object."""
        rules = self._collect_rules(issue for _, issue in pairs)

        return {
            "tool": self._create_tool(rules),
            "results": [self._create_result(file_path, issue) for file_path, issue in pairs],
            "invocations": [self._create_invocation(errors or [])],
        }

    def _create_tool(self, rules: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create a SARIF tool object."""
        return {
            "driver": {
                "name": "linesentry",
                "version": __version__,
                "rules": rules,
            }
        }

    def _collect_rules(self, issues) -> List[Dict[str, Any]]:
        """Collect unique rules from issues."""
        rules_seen = set()
        rules = []

        for issue in issues:
            if issue.code not in rules_seen:
                rules_seen.add(issue.code)
                rules.append(self._create_rule(issue))

        return rules

    def _create_rule(self, issue: Issue) -> Dict[str, Any]:
        """Create a SARIF rule object from an issue."""
        rule = {
            "id": issue.code,
            "shortDescription": {
                "text": issue.message,
            },
            "defaultConfiguration": {
                "level": SARIF_LEVEL.get(issue.severity, "warning"),
            },
            "properties": {
                "category": issue.category.value,
                "ruleType": issue.rule_type.value,
            },
        }

        if issue.suggestion:
            rule["help"] = {
                "text": issue.suggestion,
            }

        return rule

    def _create_result(self, file_path: str, issue: Issue) -> Dict[str, Any]:
        """Create a SARIF result object from an issue."""
        result = {
            "ruleId": issue.code,
            "level": SARIF_LEVEL.get(issue.severity, "warning"),
            "message": {
                "text": issue.message,
            },
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {
                            "uri": file_path.replace("\\", "/"),
                        },
                        "region": {
                            # SARIF is 1-indexed
                            "startLine": issue.line + 1,
                            "startColumn": issue.column + 1,
                            "endColumn": issue.end_column + 1,
                        },
                    },
                }
            ],
            "properties": {
                "matchedPattern": issue.matched_pattern,
            },
        }

        if issue.matched_text:
            result["locations"][0]["physicalLocation"]["region"]["snippet"] = {
                "text": issue.matched_text,
            }
        if issue.confidence is not None:
            result["properties"]["confidence"] = issue.confidence.value

        return result

    def _create_invocation(self, errors: List[str]) -> Dict[str, Any]:
        """Create a SARIF invocation object."""
        return {
            "executionSuccessful": len(errors) == 0,
            "endTimeUtc": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "toolExecutionNotifications": [
                {
                    "message": {
                        "text": error,
                    },
                    "level": "error",
                }
                for error in errors
            ],
        }
