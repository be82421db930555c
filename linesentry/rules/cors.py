"""CORS configuration rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

RULES = [
    {
        "code": "CORS001",
        "message": "CORS allows all origins (wildcard)",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"""Access-Control-Allow-Origin['":\s]*['"]\*['"]""", re.I),
            re.compile(r"""origin\s*:\s*['"]\*['"]""", re.I),
            re.compile(r"cors\(\s*\)"),
        ],
        "suggestion": "Restrict CORS to specific trusted origins instead of using wildcard *",
        "category": Category.CORS_CONFIGURATION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "CORS002",
        "message": "CORS credentials enabled with potentially permissive origin",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"credentials\s*:\s*true", re.I),
        ],
        "suggestion": "When credentials are enabled, ensure origin is explicitly whitelisted (not wildcard)",
        "category": Category.CORS_CONFIGURATION,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "CORS003",
        "message": "CORS origin reflected from request without validation",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"Access-Control-Allow-Origin.*req\.header", re.I),
            re.compile(r"Access-Control-Allow-Origin.*request\.headers", re.I),
        ],
        "suggestion": "Validate the Origin header against a whitelist before reflecting it",
        "category": Category.CORS_CONFIGURATION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "CORS004",
        "message": "Overly permissive CORS methods",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"""Access-Control-Allow-Methods['":\s]*['"].*\*.*['"]""", re.I),
        ],
        "suggestion": "Restrict allowed methods to only those required by the endpoint",
        "category": Category.CORS_CONFIGURATION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "CORS005",
        "message": "Reminder: Review CORS headers configuration for least privilege",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"Access-Control-Allow-Headers", re.I),
        ],
        "suggestion": "Only expose headers that consumers actually need; avoid exposing sensitive headers",
        "category": Category.CORS_CONFIGURATION,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "CORS006",
        "message": "CORS preflight cache set too long",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"maxAge\s*:\s*\d{6,}"),
            re.compile(r"""Access-Control-Max-Age['":\s]*['"]?\d{6,}""", re.I),
        ],
        "suggestion": "Keep CORS preflight cache (maxAge) to 86400 (24 hours) or less",
        "category": Category.CORS_CONFIGURATION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
]
