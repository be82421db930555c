"""
Finding data structures for linesentry.

This module defines the enums shared by rules and issues, the Issue record
produced by the analysis engine, and the ScanResult aggregate returned by
workspace scans.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any
import json


class Severity(Enum):
    """Severity levels for rules and issues."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self == other or self < other

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self == other or self > other

    def reduced(self) -> "Severity":
        """Return the next lower level, flooring at INFO."""
        return _SEVERITY_ORDER[max(0, self.rank - 1)]

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Accept an enum member, its value, its name, or the numeric level 0-2."""
        if isinstance(value, Severity):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(_SEVERITY_ORDER):
                return _SEVERITY_ORDER[value]
            raise ValueError(f"Unknown severity level: {value}")
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown severity: {value!r}")


_SEVERITY_ORDER = [Severity.INFO, Severity.WARNING, Severity.ERROR]


class Category(Enum):
    """Security domains used to group rules."""
    AUTH_ACCESS_CONTROL = "auth-access-control"
    INPUT_VALIDATION_XSS = "input-validation-xss"
    CSRF_PROTECTION = "csrf-protection"
    CORS_CONFIGURATION = "cors-configuration"
    ENCRYPTION_DATA_PROTECTION = "encryption-data-protection"
    API_SECURITY = "api-security"
    DATABASE_SECURITY = "database-security"
    FILE_HANDLING = "file-handling"
    SECRETS_CREDENTIALS = "secrets-credentials"
    FRONTEND_SECURITY = "frontend-security"
    BUSINESS_LOGIC_PAYMENT = "business-logic-payment"
    LOGGING_MONITORING = "logging-monitoring"
    DEPENDENCIES_SUPPLY_CHAIN = "dependencies-supply-chain"
    INFRASTRUCTURE_DEPLOYMENT = "infrastructure-deployment"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> "Category":
        if isinstance(value, Category):
            return value
        text = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if text == member.value:
                return member
        raise ValueError(f"Unknown category: {value!r}")


CATEGORY_LABELS: Dict[Category, str] = {
    Category.AUTH_ACCESS_CONTROL: "Authentication & Access Control",
    Category.INPUT_VALIDATION_XSS: "Input Validation & XSS",
    Category.CSRF_PROTECTION: "CSRF Protection",
    Category.CORS_CONFIGURATION: "CORS Configuration",
    Category.ENCRYPTION_DATA_PROTECTION: "Encryption & Data Protection",
    Category.API_SECURITY: "API Security",
    Category.DATABASE_SECURITY: "Database Security",
    Category.FILE_HANDLING: "File Handling",
    Category.SECRETS_CREDENTIALS: "Secrets & Credentials",
    Category.FRONTEND_SECURITY: "Frontend Security",
    Category.BUSINESS_LOGIC_PAYMENT: "Business Logic & Payment",
    Category.LOGGING_MONITORING: "Logging & Monitoring",
    Category.DEPENDENCIES_SUPPLY_CHAIN: "Dependencies & Supply Chain",
    Category.INFRASTRUCTURE_DEPLOYMENT: "Infrastructure & Deployment",
}


class RuleType(Enum):
    """How a match relates to an actual defect."""
    CODE_DETECTABLE = "code-detectable"
    INFORMATIONAL = "informational"
    PROJECT_ADVISORY = "project-advisory"


class Confidence(Enum):
    """Heuristic confidence attached to secrets and query issues."""
    CRITICAL = "critical"
    SAFE = "safe"
    VERIFY_NEEDED = "verify-needed"


@dataclass(frozen=True)
class Issue:
    """
    One finding produced by the analysis engine.

    ``line`` and ``column`` are 0-based. ``matched_pattern`` is the source of
    the pattern that fired and ``matched_text`` the substring it matched.
    """
    code: str
    message: str
    suggestion: str
    severity: Severity
    category: Category
    line: int
    column: int
    matched_pattern: str
    matched_text: str = ""
    rule_type: RuleType = RuleType.CODE_DETECTABLE
    confidence: Optional[Confidence] = None

    @property
    def sort_key(self):
        return (self.line, self.column, self.code)

    @property
    def end_column(self) -> int:
        return self.column + (len(self.matched_text) or len(self.matched_pattern))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the issue to a dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "severity": self.severity.value,
            "category": self.category.value,
            "rule_type": self.rule_type.value,
            "line": self.line,
            "column": self.column,
            "matched_pattern": self.matched_pattern,
            "matched_text": self.matched_text,
            "confidence": self.confidence.value if self.confidence else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        """Create an Issue from a dictionary produced by ``to_dict``."""
        confidence = data.get("confidence")
        return cls(
            code=data["code"],
            message=data["message"],
            suggestion=data.get("suggestion", ""),
            severity=Severity.parse(data["severity"]),
            category=Category.parse(data["category"]),
            line=int(data["line"]),
            column=int(data.get("column", 0)),
            matched_pattern=data.get("matched_pattern", ""),
            matched_text=data.get("matched_text", ""),
            rule_type=RuleType(data.get("rule_type", RuleType.CODE_DETECTABLE.value)),
            confidence=Confidence(confidence) if confidence else None,
        )


@dataclass
class FileReport:
    """Issues found in a single file."""
    file_path: str
    issues: List[Issue] = field(default_factory=list)
    suppressed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "issues": [issue.to_dict() for issue in self.issues],
            "suppressed": self.suppressed,
        }


@dataclass
class ScanResult:
    """Results from a complete workspace scan."""
    files: List[FileReport]
    files_scanned: int
    scan_time_seconds: float
    rules_applied: List[str]
    rejected_rules: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def issues(self) -> List[Issue]:
        return [issue for report in self.files for issue in report.issues]

    def count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self.count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self.count(Severity.WARNING)

    @property
    def info_count(self) -> int:
        return self.count(Severity.INFO)

    @property
    def total_issues(self) -> int:
        return sum(len(report.issues) for report in self.files)

    @property
    def suppressed_count(self) -> int:
        return sum(report.suppressed for report in self.files)

    def by_category(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for issue in self.issues:
            counts[issue.category.value] = counts.get(issue.category.value, 0) + 1
        return counts

    @property
    def highest_severity(self) -> Optional[Severity]:
        issues = self.issues
        if not issues:
            return None
        return max(issue.severity for issue in issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": {
                "files_scanned": self.files_scanned,
                "scan_time_seconds": self.scan_time_seconds,
                "rules_applied": self.rules_applied,
                "rejected_rules": self.rejected_rules,
                "total_issues": self.total_issues,
                "suppressed_issues": self.suppressed_count,
                "by_severity": {
                    "error": self.error_count,
                    "warning": self.warning_count,
                    "info": self.info_count,
                },
                "by_category": self.by_category(),
            },
            "files": [report.to_dict() for report in self.files if report.issues],
            "errors": self.errors,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
