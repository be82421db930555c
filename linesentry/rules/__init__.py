"""
Built-in rule corpus.

Each module holds a ``RULES`` list of plain rule mappings for one security
domain. ``builtin_sources`` returns them in corpus order; the corpus builder
validates and freezes them.
"""

from typing import Any, Dict, List

from linesentry.rules import (
    auth,
    business_logic,
    cors,
    csrf,
    database,
    dependencies,
    encryption,
    frontend,
    input_validation,
    kotlin_android,
    logging_rules,
    secrets,
)

BUILTIN_MODULES = [
    auth,
    input_validation,
    csrf,
    cors,
    encryption,
    database,
    secrets,
    frontend,
    business_logic,
    logging_rules,
    dependencies,
    kotlin_android,
]


def builtin_sources() -> List[List[Dict[str, Any]]]:
    """One rule source per built-in module, in corpus order."""
    return [module.RULES for module in BUILTIN_MODULES]


__all__ = ["BUILTIN_MODULES", "builtin_sources"]
