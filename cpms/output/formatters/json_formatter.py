# Path: cpms/output/formatters/json_formatter.py
"""
JSON Formatter

Renders matching results as JSON, keeping every trace detail for
downstream tools.
"""

import json
from typing import Any

from cpms.constants import DEFAULT_JSON_INDENT, OutputFormat
from .base_formatter import BaseFormatter, to_data


class JsonFormatter(BaseFormatter):
    """Renders results as JSON."""

    def __init__(self, indent: int = DEFAULT_JSON_INDENT):
        self.indent = indent if indent and indent > 0 else None
        super().__init__()

    @property
    def format_name(self) -> str:
        return OutputFormat.JSON.value

    @property
    def file_extension(self) -> str:
        return '.json'

    def format_result(self, result: Any) -> str:
        """Serialize a result to a JSON string."""
        return json.dumps(to_data(result), indent=self.indent, ensure_ascii=False, default=str)


__all__ = ['JsonFormatter']
