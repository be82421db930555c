"""
Output formatters for scan results.

Provides multiple output formats including:
- Human-readable CLI output (rich)
- JSON for machine processing
- SARIF for IDE integration
"""

from linesentry.formatters.cli import CLIFormatter
from linesentry.formatters.json_formatter import JSONFormatter
from linesentry.formatters.sarif import SARIFFormatter

__all__ = [
    "CLIFormatter",
    "JSONFormatter",
    "SARIFFormatter",
    "get_formatter",
]


def get_formatter(format_name: str, **options):
    """Get a formatter by name."""
    formatters = {
        "text": CLIFormatter,
        "cli": CLIFormatter,
        "json": JSONFormatter,
        "sarif": SARIFFormatter,
    }

    formatter_class = formatters.get(format_name.lower())
    if formatter_class is None:
        raise ValueError(f"Unknown format: {format_name}")

    if formatter_class is CLIFormatter:
        return formatter_class(**options)
    return formatter_class()
