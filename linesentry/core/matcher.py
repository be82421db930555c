"""
Pattern matcher.

Single entry point for evaluating a pattern against text. Any failure raised
by a pattern is caught here and logged, so one bad pattern can never abort
a scan. A regex that exceeds its time budget is skipped for that text.
"""

import logging
from typing import List, Optional

from linesentry.core.patterns import Pattern, Span

logger = logging.getLogger(__name__)


def match(pattern: Pattern, text: str) -> List[int]:
    """Return the start offsets of every occurrence of ``pattern`` in ``text``."""
    return [start for start, _ in find_spans(pattern, text)]


def find_spans(pattern: Pattern, text: str) -> List[Span]:
    try:
        return list(pattern.spans(text))
    except TimeoutError:
        logger.warning("Pattern %s timed out on a %d-character line; skipped", pattern.source, len(text))
    except Exception as e:
        logger.debug("Pattern %s failed: %s", pattern.source, e)
    return []


def first_span(pattern: Pattern, text: str) -> Optional[Span]:
    """Return the first ``(start, end)`` match, or None."""
    try:
        for span in pattern.spans(text):
            return span
    except TimeoutError:
        logger.warning("Pattern %s timed out on a %d-character line; skipped", pattern.source, len(text))
    except Exception as e:
        logger.debug("Pattern %s failed: %s", pattern.source, e)
    return None


def matches_any(patterns, text: str) -> bool:
    """True if any of ``patterns`` occurs in ``text``."""
    return any(first_span(pattern, text) is not None for pattern in patterns)
