# Path: cpms/output/__init__.py
"""
Output Module for cpms

OUTPUT layer: renders matching results for people (text) and tools
(JSON).

Usage:
    from cpms.output import FormatterRegistry

    formatter = FormatterRegistry.get('text')
    print(formatter.format_result(assignment))
"""

from .formatters import (
    to_data,
    BaseFormatter,
    FormatterRegistry,
    JsonFormatter,
    TextFormatter,
    register_default_formatters,
)


__all__ = [
    'to_data',
    'BaseFormatter',
    'FormatterRegistry',
    'JsonFormatter',
    'TextFormatter',
    'register_default_formatters',
]
