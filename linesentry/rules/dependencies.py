"""Dependency and supply-chain rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

# Lines that declare or import dependencies
_DEPENDENCY_MARKERS = [
    re.compile(r"""["']dependencies["']\s*:"""),
    re.compile(r"require\s*\("),
    re.compile(r"""from\s+["'][a-z@]"""),
]

RULES = [
    {
        "code": "DEP001",
        "message": "Dependency version is not pinned to an exact version",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"""["']\^[0-9]+\."""),
            re.compile(r"""["']~[0-9]+\."""),
            re.compile(r"""["']\*["']"""),
            re.compile(r"""["']>=\s*[0-9]+\."""),
            re.compile(r"""["']latest["']"""),
        ],
        "suggestion": (
            'Pin all dependencies to exact versions (e.g., "1.2.3" instead of "^1.2.3") to ensure '
            "deterministic builds and prevent unexpected breaking changes or supply chain attacks"
        ),
        "category": Category.DEPENDENCIES_SUPPLY_CHAIN,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "DEP002",
        "message": "Reminder: Keep dependencies updated regularly to avoid known vulnerabilities",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"""["']dependencies["']\s*:"""),
            re.compile(r"""["']devDependencies["']\s*:"""),
            re.compile(r"require\s*\("),
        ],
        "suggestion": (
            "Establish a regular schedule (at least monthly) to review and update dependencies. "
            "Use tools like npm outdated, pip list --outdated, or Dependabot to track stale packages"
        ),
        "category": Category.DEPENDENCIES_SUPPLY_CHAIN,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "DEP003",
        "message": "Reminder: Apply security patches to dependencies within 48 hours of disclosure",
        "severity": Severity.INFO,
        "patterns": _DEPENDENCY_MARKERS,
        "suggestion": (
            "Subscribe to security advisories (GitHub Dependabot, Snyk, npm audit) and apply "
            "critical patches within 48 hours. Define an SLA for patch response times"
        ),
        "category": Category.DEPENDENCIES_SUPPLY_CHAIN,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "DEP004",
        "message": "Reminder: Run npm audit / pip-audit / dependency vulnerability scans weekly",
        "severity": Severity.INFO,
        "patterns": _DEPENDENCY_MARKERS,
        "suggestion": (
            "Run dependency audit tools (npm audit, pip-audit, snyk test, cargo audit) at least "
            "weekly in CI/CD. Fail builds on critical or high severity vulnerabilities"
        ),
        "category": Category.DEPENDENCIES_SUPPLY_CHAIN,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "DEP005",
        "message": "Reminder: Identify and remediate known vulnerable dependencies",
        "severity": Severity.INFO,
        "patterns": _DEPENDENCY_MARKERS,
        "suggestion": (
            "Integrate vulnerability scanning into CI/CD (Snyk, npm audit, OWASP Dependency-Check). "
            "Track and remediate all known CVEs in your dependency tree"
        ),
        "category": Category.DEPENDENCIES_SUPPLY_CHAIN,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "DEP006",
        "message": "Reminder: Monitor transitive (indirect) dependencies for vulnerabilities",
        "severity": Severity.INFO,
        "patterns": _DEPENDENCY_MARKERS,
        "suggestion": (
            "Use tools that scan the full dependency tree including transitive dependencies "
            "(npm audit, snyk, pip-audit). Review lock files (package-lock.json, yarn.lock) "
            "for unexpected transitive packages"
        ),
        "category": Category.DEPENDENCIES_SUPPLY_CHAIN,
        "rule_type": RuleType.INFORMATIONAL,
    },
]
