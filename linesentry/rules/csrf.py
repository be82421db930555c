"""CSRF protection rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

RULES = [
    {
        "code": "CSRF001",
        "message": "Form without CSRF token",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"""<form\s[^>]*method\s*=\s*['"]post['"][^>]*>""", re.I),
        ],
        "suppress_if_nearby": [
            re.compile(r"csrf_token|_token|csrfmiddlewaretoken|_csrf", re.I),
        ],
        "suggestion": "Include a CSRF token in all POST forms (e.g., csrf_token, _token, csrfmiddlewaretoken)",
        "category": Category.CSRF_PROTECTION,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "CSRF002",
        "message": "CSRF protection explicitly disabled",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"csrf\s*[:=]\s*false", re.I),
            re.compile(r"csrfProtection\s*[:=]\s*false", re.I),
            "@csrf_exempt",
            "csrf_exempt",
        ],
        "suggestion": "Do not disable CSRF protection; if needed for an API endpoint, use token-based auth instead",
        "category": Category.CSRF_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "CSRF003",
        "message": "Cookie SameSite set to None",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"""sameSite\s*:\s*['"]none['"]""", re.I),
        ],
        "suggestion": "Set SameSite=Lax or SameSite=Strict on cookies to prevent CSRF",
        "category": Category.CSRF_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "CSRF004",
        "message": "State-changing operation using GET method",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"app\.get\s*\(.*(?:delete|remove|update|create|modify)", re.I),
            re.compile(r"router\.get\s*\(.*(?:delete|remove|update|create|modify)", re.I),
        ],
        "suggestion": "Use POST, PUT, or DELETE methods for state-changing operations, not GET",
        "category": Category.CSRF_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "CSRF005",
        "message": "Reminder: Verify CSRF tokens are validated on all state-changing endpoints",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"app\.(?:post|put|patch|delete)\s*\(", re.I),
            re.compile(r"router\.(?:post|put|patch|delete)\s*\(", re.I),
        ],
        "suggestion": "Ensure CSRF middleware is applied before route handlers for POST/PUT/PATCH/DELETE",
        "category": Category.CSRF_PROTECTION,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "CSRF006",
        "message": "CSRF token may not be cryptographically random",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"csrf.*Math\.random", re.I),
            re.compile(r"token.*Math\.random", re.I),
            re.compile(r"Math\.random.*csrf", re.I),
            re.compile(r"Math\.random.*token", re.I),
        ],
        "suggestion": (
            "Generate CSRF tokens using a CSPRNG (e.g., crypto.randomBytes, crypto.getRandomValues); "
            "never use Math.random()"
        ),
        "category": Category.CSRF_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "CSRF007",
        "message": "Reminder: Ensure CSRF tokens expire and are rotated per session",
        "severity": Severity.INFO,
        "patterns": ["csrfToken", "csrf_token", "_csrf"],
        "suggestion": "Set a reasonable expiration on CSRF tokens and regenerate them on login/session rotation",
        "category": Category.CSRF_PROTECTION,
        "rule_type": RuleType.INFORMATIONAL,
    },
]
