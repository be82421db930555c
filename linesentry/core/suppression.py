"""
Suppression evaluator.

Two independent checks can cancel a candidate finding:

1. Negative patterns, searched in the same unit of text as the positive
   match (the matched line, widened by ``negative_window`` lines).
2. Nearby suppression, searched in the matched line plus ``nearby_window``
   lines on either side.

Either check matching is enough to drop the finding.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple

from linesentry.core.matcher import matches_any
from linesentry.core.rules import Rule

DEFAULT_NEGATIVE_WINDOW = 0
DEFAULT_NEARBY_WINDOW = 1


@dataclass(frozen=True)
class WindowPolicy:
    """
    Line radii for the suppression checks.

    Resolution order: the rule's own window, then the per-category entry
    (keyed by category value, e.g. ``frontend-security``), then the global
    default.
    """
    negative: int = DEFAULT_NEGATIVE_WINDOW
    nearby: int = DEFAULT_NEARBY_WINDOW
    categories: Mapping[str, Mapping[str, int]] = field(default_factory=dict)

    def for_rule(self, rule: Rule) -> Tuple[int, int]:
        overrides = self.categories.get(rule.category.value, {})
        negative = rule.negative_window
        if negative is None:
            negative = int(overrides.get("negative", self.negative))
        nearby = rule.nearby_window
        if nearby is None:
            nearby = int(overrides.get("nearby", self.nearby))
        return negative, nearby

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WindowPolicy":
        categories: Dict[str, Dict[str, int]] = {}
        for name, values in (data.get("categories") or {}).items():
            key = str(name).lower().replace("_", "-")
            categories[key] = {k: int(v) for k, v in (values or {}).items()}
        return cls(
            negative=int(data.get("negative", DEFAULT_NEGATIVE_WINDOW)),
            nearby=int(data.get("nearby", DEFAULT_NEARBY_WINDOW)),
            categories=categories,
        )


@dataclass(frozen=True)
class MatchContext:
    """A candidate match and the document lines around it."""
    lines: Sequence[str]
    line: int
    column: int = 0
    negative_window: int = DEFAULT_NEGATIVE_WINDOW
    nearby_window: int = DEFAULT_NEARBY_WINDOW

    def window(self, radius: int) -> str:
        start = max(0, self.line - radius)
        end = min(len(self.lines), self.line + radius + 1)
        return "\n".join(self.lines[start:end])


def is_negated(rule: Rule, context: MatchContext) -> bool:
    if not rule.negative_patterns:
        return False
    return matches_any(rule.negative_patterns, context.window(context.negative_window))


def is_suppressed_nearby(rule: Rule, context: MatchContext) -> bool:
    if not rule.suppress_if_nearby:
        return False
    return matches_any(rule.suppress_if_nearby, context.window(context.nearby_window))


def should_suppress(rule: Rule, context: MatchContext) -> bool:
    return is_negated(rule, context) or is_suppressed_nearby(rule, context)
