"""
Confidence classification for secrets and query issues.

Looks at the flagged line (and, for queries, its neighbors) to tell a
literal hardcoded secret from an environment lookup, or a parameterized
query from one built by concatenation. Returns None when no call can be made.
"""

import re
from typing import Optional, Sequence

from linesentry.core.findings import Confidence

SECRET_RULE_PREFIXES = ("CRED", "AUTH001")
QUERY_RULE_PREFIXES = ("SQL", "DB001", "DB002", "KT-DB")

_LITERAL_ASSIGNMENT = re.compile(r"""=\s*['"`][^'"`]{2,}['"`]""")
_ENV_REFERENCE = re.compile(r"process\.env|os\.environ|getenv|env\[|ENV\[", re.IGNORECASE)
_ANY_ASSIGNMENT = re.compile(r"=\s*\w+")

_CONCATENATION = re.compile(r"""['"`]\s*\+|\+\s*['"`]""")
_INTERPOLATION = re.compile(r"\$\{")
_PLACEHOLDERS = re.compile(r"\?\s*[,)]|\$\d+|:\w+")
_STATIC_STRING = re.compile(r"""=\s*['"`][^+$]*['"`]\s*[;,]?\s*$""")


def is_secret_rule(code: str) -> bool:
    return code.startswith(SECRET_RULE_PREFIXES)


def is_query_rule(code: str) -> bool:
    return code.startswith(QUERY_RULE_PREFIXES)


def classify_confidence(
    lines: Sequence[str],
    line: int,
    column: int,
    matched: str,
    code: str,
) -> Optional[Confidence]:
    if line < 0 or line >= len(lines):
        return None

    text = lines[line]
    if is_secret_rule(code):
        return _classify_secret(text)
    if is_query_rule(code):
        return _classify_query(lines, line, text)
    return None


def _classify_secret(text: str) -> Optional[Confidence]:
    stripped = text.strip()
    if _LITERAL_ASSIGNMENT.search(stripped):
        if _ENV_REFERENCE.search(stripped):
            return Confidence.VERIFY_NEEDED
        return Confidence.CRITICAL
    if _ANY_ASSIGNMENT.search(stripped):
        return Confidence.VERIFY_NEEDED
    return None


def _classify_query(lines: Sequence[str], line: int, text: str) -> Optional[Confidence]:
    stripped = text.strip()
    if _CONCATENATION.search(stripped) or _INTERPOLATION.search(stripped):
        return Confidence.VERIFY_NEEDED
    if _PLACEHOLDERS.search(stripped):
        return Confidence.SAFE
    if _STATIC_STRING.search(stripped):
        return Confidence.SAFE

    # multi-line query building
    for index in range(max(0, line - 2), min(len(lines), line + 3)):
        if index == line:
            continue
        nearby = lines[index]
        if _CONCATENATION.search(nearby) or _INTERPOLATION.search(nearby):
            return Confidence.VERIFY_NEEDED
    return None
