# Path: cpms/output/formatters/__init__.py
"""
Result Formatters

Each formatter renders matching results into a specific output format.
Formatters are format-specific; they know nothing about scoring.
New formats add new formatters without touching the engine.
"""

from .base_formatter import to_data, BaseFormatter, FormatterRegistry
from .json_formatter import JsonFormatter
from .text_formatter import TextFormatter


def register_default_formatters() -> None:
    """Register the built-in formatters."""
    FormatterRegistry.register(JsonFormatter)
    FormatterRegistry.register(TextFormatter)


register_default_formatters()


__all__ = [
    'to_data',
    'BaseFormatter',
    'FormatterRegistry',
    'JsonFormatter',
    'TextFormatter',
    'register_default_formatters',
]
