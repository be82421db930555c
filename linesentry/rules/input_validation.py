"""
Input validation and XSS rules.

Covers DOM sinks that render raw HTML, request data echoed into responses,
template injection and shell/code execution with untrusted input.
"""

import re

from linesentry.core.findings import Category, RuleType, Severity

RULES = [
    {
        "code": "XSS001",
        "message": "Raw HTML written to the DOM",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"\.innerHTML\s*=(?!=)"),
            re.compile(r"\.outerHTML\s*=(?!=)"),
            re.compile(r"document\.write(?:ln)?\s*\("),
            re.compile(r"\.insertAdjacentHTML\s*\("),
            re.compile(r"dangerouslySetInnerHTML\s*="),
            re.compile(r"v-html\s*="),
            re.compile(r"\[innerHTML\]\s*="),
        ],
        "negative_patterns": [re.compile(r"DOMPurify\.sanitize|sanitizeHtml\s*\(", re.I)],
        "suggestion": "Use textContent or a framework binding; sanitize with DOMPurify when HTML is required",
        "category": Category.INPUT_VALIDATION_XSS,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "XSS002",
        "message": "Request data reflected into the response without encoding",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"res\.send\s*\(.*req\.(?:body|query|params)"),
            re.compile(r"res\.write\s*\(.*req\."),
            re.compile(r"render_template_string\s*\(.*request"),
            re.compile(r"Markup\s*\(.*request"),
            re.compile(r"getWriter\(\)\.(?:print|write)\s*\(.*getParameter"),
        ],
        "suggestion": "Encode output for its context (HTML, attribute, URL) or render through an auto-escaping template",
        "category": Category.INPUT_VALIDATION_XSS,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "XSS003",
        "message": "Template compiled from a dynamically built string",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"render_template_string\s*\([^,)]+\+"),
            re.compile(r"render_template_string\s*\(.*\.format"),
            re.compile(r"Environment.*from_string"),
            re.compile(r"(?:ejs|pug)\.render\s*\([^,)]+\+"),
            re.compile(r"handlebars\.compile\s*\([^,)]+\+", re.I),
        ],
        "suggestion": "Load templates from files and pass user data as template variables",
        "category": Category.INPUT_VALIDATION_XSS,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "INJ001",
        "message": "Shell command built from input or run through a shell",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"subprocess\.(?:call|run|Popen|check_output)\s*\([^)]*shell\s*=\s*True"),
            re.compile(r"os\.(?:system|popen)\s*\([^)]*(?:\+|%|\.format|f['\"])"),
            re.compile(r"child_process\.exec(?:Sync)?\s*\([^)]*(?:\+|\$\{)"),
            re.compile(r"Runtime\.getRuntime\(\)\.exec\s*\([^)]*\+"),
        ],
        "suggestion": "Pass arguments as a list without a shell, and validate input against an allow-list",
        "category": Category.INPUT_VALIDATION_XSS,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "INJ002",
        "message": "Unsafe deserialization of untrusted data",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"pickle\.loads?\s*\("),
            re.compile(r"yaml\.load\s*\((?![^)]*Loader\s*=\s*(?:yaml\.)?SafeLoader)"),
            re.compile(r"ObjectInputStream\s*\("),
            re.compile(r"unserialize\s*\(\s*\$_(?:GET|POST|REQUEST|COOKIE)"),
        ],
        "suggestion": "Use data-only formats (JSON) or safe loaders such as yaml.safe_load for untrusted input",
        "category": Category.INPUT_VALIDATION_XSS,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
]
