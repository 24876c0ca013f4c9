"""
treespec notifiers.

This package provides the notifier contract observed by schedulers, its
combinators and the built-in output formats.
"""

from treespec.notifiers.base import Composite, Notifier, Null, ShortIdSupport, Synchronized
from treespec.notifiers.formatters import (
    DEFAULT_SPLITS,
    Character,
    ColoredDocumentation,
    Documentation,
    FailuresAtEnd,
    TimingsAtEnd,
    default_notifier,
)

__all__ = [
    "Notifier",
    "Composite",
    "Null",
    "Synchronized",
    "ShortIdSupport",
    "Character",
    "Documentation",
    "ColoredDocumentation",
    "FailuresAtEnd",
    "TimingsAtEnd",
    "DEFAULT_SPLITS",
    "default_notifier",
]
