"""Authentication and access-control rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

RULES = [
    {
        "code": "AUTH001",
        "message": "Hardcoded JWT secret detected",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"""jwt\.sign\s*\([^,]+,\s*['"][^'"]{1,}['"]""", re.I),
            re.compile(r"""jsonwebtoken.*secret\s*[:=]\s*['"][^'"]+['"]""", re.I),
        ],
        "suggestion": "Store JWT secrets in environment variables, never hardcode them",
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "AUTH002",
        "message": "Session configured without secure flags",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"httpOnly\s*:\s*false", re.I),
            re.compile(r"secure\s*:\s*false", re.I),
        ],
        "suggestion": "Set httpOnly: true, secure: true, and sameSite on session cookies",
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "AUTH003",
        "message": "Comparing passwords with equality operator instead of constant-time comparison",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"password\s*===?\s*(?:req\.|request\.|body\.|params\.|input)", re.I),
            re.compile(r"(?:req\.|request\.|body\.)password\s*===?\s*", re.I),
        ],
        "suggestion": "Use crypto.timingSafeEqual() or bcrypt.compare() to prevent timing attacks",
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "AUTH004",
        "message": "Authentication bypass: permissive access control",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"isAdmin\s*[:=]\s*true", re.I),
            re.compile(r"skipAuth\s*[:=]\s*true", re.I),
        ],
        "suggestion": "Avoid hardcoding administrative privileges; use proper RBAC mechanisms",
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "AUTH005",
        "message": "Weak password policy: minimum length too short",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"password\.length\s*>=?\s*[1-5]\b", re.I),
            re.compile(r"minlength\s*[:=]\s*[1-5]\b", re.I),
            re.compile(r"min_length\s*[:=]\s*[1-5]\b", re.I),
        ],
        "suggestion": "Enforce minimum 8-character passwords with complexity requirements",
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "AUTH006",
        "message": "Reminder: Apply rate limiting to authentication endpoints",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"/login|/signin|/authenticate|/auth/", re.I),
        ],
        "suggestion": "Apply rate limiting (e.g., express-rate-limit) to prevent brute force attacks",
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "AUTH007",
        "message": "Token stored in localStorage is vulnerable to XSS",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(
                r"""localStorage\.setItem\s*\(\s*['"](?:token|jwt|auth|session|access_token)['"]""",
                re.I,
            ),
        ],
        "suggestion": "Use httpOnly cookies instead of localStorage for authentication tokens",
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
]
