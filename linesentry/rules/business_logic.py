"""Business logic and payment rules."""

import re

from linesentry.core.findings import Category, RuleType, Severity

# UI code where a client-side feature check is expected and less severe
CLIENT_SIDE_PATHS = [
    re.compile(r"\.tsx$", re.I),
    re.compile(r"\.jsx$", re.I),
    re.compile(r"components?/", re.I),
    re.compile(r"pages?/", re.I),
    re.compile(r"views?/", re.I),
    re.compile(r"hooks?/", re.I),
]

RULES = [
    {
        "code": "BIZ001",
        "message": "Premium/paid feature check may be client-side only",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"(?:isPremium|isPro|isSubscribed|hasPlan|planType)\s*(?:&&|\?)", re.I),
            re.compile(r"(?:premium|subscription|plan)\s*[:=]\s*(?:true|false)", re.I),
        ],
        "suggestion": (
            "Enforce premium/subscription checks SERVER-SIDE; never trust client-side "
            "feature flags for paid features"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
        "file_patterns": {"reduce_severity_in": CLIENT_SIDE_PATHS},
    },
    {
        "code": "BIZ002",
        "message": "Reminder: Verify payment success server-side before unlocking features",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"(?:payment|checkout).*(?:success|complete|confirmed)", re.I),
            re.compile(r"(?:onSuccess|onApprove|paymentIntent).*(?:status|result)", re.I),
        ],
        "suggestion": (
            "Verify payment success via server-side webhook (e.g., Stripe webhook) before "
            "granting access; never rely on client-side payment callbacks alone"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "BIZ003",
        "message": "Refund logic may allow duplicate refunds",
        "severity": Severity.WARNING,
        "patterns": ["refund"],
        "suggestion": (
            "Implement idempotency checks for refund operations; track refund status to "
            "prevent duplicate refunds"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "BIZ004",
        "message": "Trial period logic detected; ensure it cannot be exploited",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"(?:trial|freeTrial|free_trial|trialEnd|trial_end)", re.I),
            re.compile(r"trialPeriod", re.I),
        ],
        "suggestion": (
            "Enforce trial limits server-side; prevent trial reuse via account re-creation "
            "(tie trials to payment method, device, or email domain)"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "BIZ005",
        "message": "Reminder: Revoke feature access immediately on subscription cancellation",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:cancel|unsubscribe).*(?:subscription|plan|membership)", re.I),
            re.compile(r"(?:subscription|plan|membership).*(?:cancel|unsubscribe)", re.I),
        ],
        "suggestion": (
            "Revoke premium feature access on subscription cancel/expiry; handle via payment "
            "processor webhooks (e.g., customer.subscription.deleted)"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "BIZ006",
        "message": "Reminder: Keep subscription state synced with payment processor",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:stripe|paypal|paddle|braintree|chargebee)", re.I),
        ],
        "suggestion": (
            "Sync subscription state via webhooks from your payment processor; never rely "
            "solely on local database state for billing decisions"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "BIZ007",
        "message": "Quota or usage limit may be enforced client-side only",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"(?:quota|usage|limit|remaining).*(?:count|check|enforce|exceeded)", re.I),
            re.compile(r"(?:count|check|enforce|exceeded).*(?:quota|usage|limit|remaining)", re.I),
        ],
        "suggestion": "Enforce quotas and usage limits SERVER-SIDE; do not trust client-reported usage counts",
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
    },
    {
        "code": "BIZ008",
        "message": "Usage tracking may rely on client-reported data",
        "severity": Severity.WARNING,
        "patterns": [
            re.compile(r"(?:req|request)\.(?:body|query|params)\.(?:count|usage|consumed|used)", re.I),
        ],
        "suggestion": (
            "Track usage server-side using metered counters; never accept client-reported "
            "usage values for billing or quota enforcement"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.CODE_DETECTABLE,
    },
    {
        "code": "BIZ009",
        "message": "Reminder: Ensure quota resets occur at the correct time server-side",
        "severity": Severity.INFO,
        "patterns": [
            re.compile(r"(?:reset|renew).*(?:quota|usage|limit|allowance)", re.I),
            re.compile(r"(?:quota|usage|limit|allowance).*(?:reset|renew)", re.I),
        ],
        "suggestion": (
            "Schedule quota resets server-side using cron jobs or payment processor billing "
            "cycle events; verify reset timing is correct"
        ),
        "category": Category.BUSINESS_LOGIC_PAYMENT,
        "rule_type": RuleType.INFORMATIONAL,
    },
]
