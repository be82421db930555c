"""Encryption and data-protection rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

RULES = [
    {
        "code": "ENC001",
        "message": "Weak hashing algorithm (MD5/SHA-1)",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"hashlib\.(?:md5|sha1)\s*\("),
            re.compile(r"""createHash\s*\(\s*['"](?:md5|sha1)['"]""", re.I),
            re.compile(r"CryptoJS\.(?:MD5|SHA1)\s*\("),
            re.compile(r"""MessageDigest\.getInstance\s*\(\s*['"](?:MD5|SHA-?1)['"]""", re.I),
            re.compile(r"(?:md5|sha1)\.(?:New|Sum)\s*\("),
        ],
        "negative_patterns": [re.compile(r"usedforsecurity\s*=\s*False")],
        "suggestion": "Use SHA-256 or stronger for integrity; use bcrypt, scrypt or Argon2 for passwords",
        "category": Category.ENCRYPTION_DATA_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "ENC002",
        "message": "Weak or deprecated cipher",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"\bDES\b(?!3)"),
            re.compile(r"DESede|3DES|Triple.?DES", re.I),
            re.compile(r"\bRC4\b|\bARC4\b", re.I),
            re.compile(r"""['"][A-Z0-9]+/ECB/""", re.I),
            re.compile(r"AES\.MODE_ECB"),
        ],
        "suggestion": "Use AES-GCM or ChaCha20-Poly1305 with a random nonce per message",
        "category": Category.ENCRYPTION_DATA_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "ENC003",
        "message": "Insecure randomness used for a security value",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"(?:token|secret|salt|nonce|password|key).*Math\.random\s*\(", re.I),
            re.compile(r"(?:token|secret|salt|nonce|password|key).*random\.(?:random|randint|choice)\s*\(", re.I),
        ],
        "negative_patterns": [re.compile(r"secrets\.|SystemRandom|crypto\.randomBytes|getRandomValues")],
        "suggestion": "Use a CSPRNG: secrets in Python, crypto.randomBytes or crypto.getRandomValues in JavaScript",
        "category": Category.ENCRYPTION_DATA_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "ENC004",
        "message": "TLS certificate verification disabled",
        "severity": Severity.ERROR,
        "patterns": [
            re.compile(r"verify\s*=\s*False"),
            re.compile(r"rejectUnauthorized\s*:\s*false"),
            re.compile(r"NODE_TLS_REJECT_UNAUTHORIZED\s*=\s*['\"]?0"),
            re.compile(r"InsecureSkipVerify\s*:\s*true"),
        ],
        "suggestion": "Keep certificate verification on; trust a private CA explicitly instead of disabling checks",
        "category": Category.ENCRYPTION_DATA_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
]
