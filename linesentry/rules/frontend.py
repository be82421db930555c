"""
Frontend security rules.

Browser-side risks: dynamic code execution, unsafe cross-window messaging,
tab-nabbing, unsandboxed frames and third-party scripts.
"""

import re

from linesentry.core.findings import Category, RuleType, Severity

RULES = [
    {
        "code": "FE001",
        "message": "Unsafe eval() usage allows arbitrary code execution",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"\beval\s*\("),
            re.compile(r"new\s+Function\s*\("),
            re.compile(r"""setTimeout\s*\(\s*['"`]"""),
            re.compile(r"""setInterval\s*\(\s*['"`]"""),
        ],
        "suggestion": "Avoid eval(), new Function(), and string arguments to setTimeout/setInterval",
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
        "context_aware": True,
    },
    {
        "code": "FE002",
        "message": "postMessage without origin validation",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"""postMessage\s*\([^,]+,\s*['"]\*['"]\s*\)"""),
        ],
        "suggestion": "Always specify target origin in postMessage and verify event.origin in message handlers",
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "FE003",
        "message": 'Opening links without rel="noopener noreferrer"',
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"""target\s*=\s*['"]_blank['"]""", re.I),
        ],
        "suppress_if_nearby": [
            re.compile(r"""rel\s*=\s*['"][^'"]*noopener[^'"]*noreferrer[^'"]*['"]""", re.I),
            re.compile(r"""rel\s*=\s*['"][^'"]*noreferrer[^'"]*noopener[^'"]*['"]""", re.I),
        ],
        "suggestion": 'Add rel="noopener noreferrer" to links with target="_blank" to prevent tab-nabbing',
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "FE004",
        "message": "Insecure use of iframe without sandbox",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"<iframe(?![^>]*sandbox)[^>]*>", re.I),
        ],
        "suggestion": "Add sandbox attribute to iframes to restrict embedded content capabilities",
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "FE005",
        "message": "Script loaded from external CDN without integrity check",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(
                r"""<script\s+src\s*=\s*['"]https?://(?![^'"]*localhost)[^'"]*['"](?![^>]*integrity)[^>]*>""",
                re.I,
            ),
        ],
        "suggestion": "Add Subresource Integrity (SRI) hash attributes to external script tags",
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "FE006",
        "message": "Sensitive data stored via document.cookie",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"document\.cookie\s*=", re.I),
        ],
        "suggestion": "Use Secure, HttpOnly, and SameSite flags on cookies; prefer server-side cookie setting",
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "FE007",
        "message": "Prototype pollution: unsafe __proto__ or constructor access",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"__proto__"),
            re.compile(r"\bconstructor\s*\["),
        ],
        "suggestion": (
            "Use Object.create(null) for dictionaries; validate keys to prevent __proto__ "
            "and constructor pollution"
        ),
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "FE008",
        "message": "Reminder: Add Subresource Integrity for third-party CDN resources",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"cdn\.|unpkg\.com|cdnjs|jsdelivr", re.I),
        ],
        "suggestion": "Add integrity and crossorigin attributes to all third-party script and link tags",
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "FE009",
        "message": "Reminder: Client-side validation is for UX only; server-side validation is required for security",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"checkValidity\s*\("),
            re.compile(r"setCustomValidity\s*\("),
            re.compile(r"\.validity\."),
            re.compile(r"reportValidity\s*\("),
        ],
        "suggestion": (
            "Client-side validation improves user experience but can be bypassed. Always validate "
            "and sanitize all inputs on the server side as the authoritative security boundary"
        ),
        "category": Category.FRONTEND_SECURITY,
        "rule_type": RuleType.INFORMATIONAL,
    },
]
