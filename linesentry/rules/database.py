"""Database security rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

RULES = [
    {
        "code": "DB001",
        "message": "SQL query built by string concatenation or interpolation",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"""['"`]\s*(?:SELECT|INSERT|UPDATE|DELETE)\b[^'"`]*['"`]\s*\+""", re.I),
            re.compile(r"""`\s*(?:SELECT|INSERT|UPDATE|DELETE)\b[^`]*\$\{""", re.I),
            re.compile(r"""f['"]\s*(?:SELECT|INSERT|UPDATE|DELETE)\b[^'"]*\{""", re.I),
            re.compile(r"""\$"\s*(?:SELECT|INSERT|UPDATE|DELETE)\b""", re.I),
        ],
        "suggestion": "Use parameterized queries or prepared statements; never build SQL from user input",
        "category": Category.DATABASE_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "DB002",
        "message": "Query executed with a formatted or concatenated string",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"""execute\s*\([^)]*['"].*%"""),
            re.compile(r"execute\s*\([^)]*\.format\s*\("),
            re.compile(r"""execute\s*\(\s*f['"]"""),
            re.compile(r"\.query\s*\([^)]*\+"),
            re.compile(r"executeQuery\s*\([^)]*\+"),
            re.compile(r"\.raw\s*\([^)]*%"),
        ],
        "suggestion": "Pass values as bound parameters (execute(sql, params)) instead of formatting them into SQL",
        "category": Category.DATABASE_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "DB003",
        "message": "NoSQL query evaluates JavaScript or accepts raw operators",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"""['"]?\$where['"]?\s*:"""),
            re.compile(r"\.find(?:One)?\s*\(\s*req\.(?:body|query)"),
        ],
        "suggestion": "Avoid $where; validate query objects and strip keys starting with $ from user input",
        "category": Category.DATABASE_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "DB004",
        "message": "Reminder: Connect to the database with a least-privilege account",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:postgres|postgresql|mysql|mongodb(?:\+srv)?|mssql)://", re.I),
        ],
        "suggestion": "Use a dedicated application role with only the grants it needs; never connect as a superuser",
        "category": Category.DATABASE_SECURITY,
        "rule_type": RuleType.PROJECT_ADVISORY,
    },
]
