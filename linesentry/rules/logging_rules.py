"""Logging and monitoring rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

_LOG_CALL = r"(?:console\.log|logger\.\w+|log\.\w+|print)\s*\("

RULES = [
    {
        "code": "LOG001",
        "message": "Reminder: Log all authentication attempts (success and failure)",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:login|signIn|authenticate)\s*(?:\(|=)", re.I),
        ],
        "suggestion": (
            "Log all authentication attempts with timestamp, IP, user agent, and outcome "
            "(success/failure) for audit trails"
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "LOG002",
        "message": "Reminder: Log all authorization failures",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:unauthorized|forbidden|403|accessDenied|access_denied)", re.I),
        ],
        "suggestion": (
            "Log all authorization failures with user ID, requested resource, and timestamp "
            "to detect privilege escalation attempts"
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "LOG003",
        "message": "Reminder: Log all admin and privileged operations",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:isAdmin|is_admin|role.*admin|adminAction|privileged)", re.I),
        ],
        "suggestion": "Log all admin/privileged operations including who performed them, what changed, and when",
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "LOG004",
        "message": "Reminder: Log all role/permission changes and payment/API key modifications",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:updateRole|changeRole|setPermission|grantAccess|revokeAccess)", re.I),
            re.compile(r"(?:update|change|modify).*(?:role|permission|access)", re.I),
        ],
        "suggestion": (
            "Log all role/permission changes, payment modifications, data exports, and API key "
            "operations with before/after values"
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "LOG005",
        "message": "Password may be present in log output",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(_LOG_CALL + r".*password", re.I),
            re.compile(_LOG_CALL + r".*passwd", re.I),
        ],
        "suggestion": "NEVER log passwords in any form; strip password fields before logging request bodies",
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "LOG006",
        "message": "API key or secret may be present in log output",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(_LOG_CALL + r".*(?:api[_-]?key|apiSecret|secret[_-]?key|access[_-]?key)", re.I),
        ],
        "suggestion": (
            "NEVER log API keys or secrets; mask them (e.g., show only last 4 characters) "
            "if needed for debugging"
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "LOG007",
        "message": "Reminder: Store logs securely with encryption",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:winston|bunyan|pino|log4js|morgan)\s*(?:\(|\.)", re.I),
            "createLogger",
        ],
        "suggestion": (
            "Store logs in encrypted storage; use centralized logging (e.g., ELK, CloudWatch, "
            "Datadog) with encryption at rest"
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.PROJECT_ADVISORY,
    },
    {
        "code": "LOG008",
        "message": "Reminder: Restrict log access to admin/security personnel only",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"logFile|log_file|logPath|log_path|logDir", re.I),
        ],
        "suggestion": (
            "Restrict log file access to admin/security team only; use IAM policies for cloud "
            "log services; set file permissions to 0600"
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.PROJECT_ADVISORY,
    },
    {
        "code": "LOG009",
        "message": "Reminder: Log data export and API key change operations",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:export|download).*(?:data|report|csv|pdf)", re.I),
            re.compile(r"(?:rotate|regenerate|revoke).*(?:key|token|secret)", re.I),
        ],
        "suggestion": (
            "Log all data export operations and API key lifecycle events (creation, rotation, "
            "revocation) for compliance auditing"
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.INFORMATIONAL,
    },
]
