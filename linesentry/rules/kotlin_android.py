"""
Kotlin and Android rules.

Every rule here is restricted to ``.kt`` and ``.kts`` files.
"""

import re

from linesentry.core.findings import Category, RuleType, Severity

KOTLIN_ONLY = {"include": [re.compile(r"\.kts?$", re.I)]}

RULES = [
    {
        "code": "KT-AUTH001",
        "message": "WebView has JavaScript enabled",
        "severity": Severity.WARNING,
        "patterns": [re.compile(r"\.setJavaScriptEnabled\s*\(\s*true\s*\)")],
        "suggestion": (
            "Only enable JavaScript in WebView if strictly necessary. Validate all content "
            "loaded and use a Content Security Policy."
        ),
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-AUTH002",
        "message": "WebView exposes native interface to JavaScript (addJavascriptInterface)",
        "severity": Severity.ERROR,
        "patterns": [re.compile(r"\.addJavascriptInterface\s*\(")],
        "suggestion": (
            "addJavascriptInterface exposes Kotlin/Java objects to JS. Restrict to trusted, "
            "first-party content and require API level >= 17 (@JavascriptInterface annotation)."
        ),
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-AUTH003",
        "message": "Broadcast sent without receiver permission",
        "severity": Severity.WARNING,
        "patterns": [re.compile(r"sendBroadcast\s*\(\s*(?!.*permission)")],
        "suggestion": (
            "Use sendBroadcast(intent, receiverPermission) or LocalBroadcastManager to prevent "
            "other apps from receiving sensitive broadcasts."
        ),
        "category": Category.AUTH_ACCESS_CONTROL,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-XSS001",
        "message": "WebView file access enabled; allows file:// URI access",
        "severity": Severity.WARNING,
        "patterns": [re.compile(r"\.setAllowFileAccess\s*\(\s*true\s*\)")],
        "suggestion": (
            "setAllowFileAccess(true) lets web content read local files. Set to false unless "
            "your app explicitly requires it, and restrict to trusted origins."
        ),
        "category": Category.INPUT_VALIDATION_XSS,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-ENC001",
        "message": "Insecure random number generator (java.util.Random)",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"\bnew\s+Random\s*\("),
            re.compile(r"\bRandom\s*\(\s*\)\b"),
            re.compile(r"java\.util\.Random\s*\("),
        ],
        "negative_patterns": [re.compile(r"SecureRandom")],
        "suggestion": (
            "Use java.security.SecureRandom for any security-sensitive randomness (tokens, "
            "session IDs, salts). java.util.Random is predictable."
        ),
        "category": Category.ENCRYPTION_DATA_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-ENC002",
        "message": "Unencrypted SharedPreferences; may expose sensitive data",
        "severity": Severity.WARNING,
        "patterns": [re.compile(r"getSharedPreferences\s*\(")],
        "negative_patterns": [re.compile(r"EncryptedSharedPreferences", re.I)],
        "suggestion": (
            "Use androidx.security.crypto.EncryptedSharedPreferences for any sensitive data "
            "(tokens, credentials, PII). Plain SharedPreferences are stored unencrypted on disk."
        ),
        "category": Category.ENCRYPTION_DATA_PROTECTION,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-FILE001",
        "message": "File created with world-readable or world-writable mode",
        "severity": Severity.ERROR,
        "patterns": [re.compile(r"MODE_WORLD_READABLE|MODE_WORLD_WRITEABLE")],
        "suggestion": (
            "MODE_WORLD_READABLE and MODE_WORLD_WRITEABLE are deprecated and insecure. Use "
            "MODE_PRIVATE (0) and share data via ContentProvider or FileProvider instead."
        ),
        "category": Category.FILE_HANDLING,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-FILE002",
        "message": "External storage access; data is not encrypted and accessible to other apps",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"getExternalStorageDirectory\s*\("),
            re.compile(r"Environment\.getExternalStorage"),
        ],
        "suggestion": (
            "Prefer app-specific external storage (getExternalFilesDir) or internal storage for "
            "sensitive data. External storage is readable by any app with READ_EXTERNAL_STORAGE "
            "permission."
        ),
        "category": Category.FILE_HANDLING,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-DB001",
        "message": "Room @RawQuery; ensure inputs are not user-controlled",
        "severity": Severity.WARNING,
        "patterns": [re.compile(r"@RawQuery")],
        "suggestion": (
            "Raw queries bypass Room's compile-time SQL verification. If user input drives the "
            "query, use parameterised queries (@Query with :param bindings) to prevent SQL injection."
        ),
        "category": Category.DATABASE_SECURITY,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
    {
        "code": "KT-LOG001",
        "message": "Android log statement may expose sensitive data in production",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"\bLog\.[dvie]\s*\("),
            re.compile(r"\bLog\.wtf\s*\("),
        ],
        "suggestion": (
            "Strip or guard debug/verbose log statements in release builds using ProGuard rules "
            "or a logging wrapper that respects BuildConfig.DEBUG. Logs are readable by other "
            "apps on rooted devices and via adb."
        ),
        "category": Category.LOGGING_MONITORING,
        "rule_type": RuleType.CODE_DETECTABLE,
        "file_patterns": KOTLIN_ONLY,
    },
]
