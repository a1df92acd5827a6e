# Path: cpms/output/formatters/base_formatter.py
"""
Base Formatter and Formatter Registry

Abstract base class for result formatters and a registry to look them
up by format name.

A formatter renders any matching result: a Decision, a top-k list, a
ConceptExplanation, an Assignment, a (result, explanation) pair or an
Observation.

To add a new format:
1. Subclass BaseFormatter
2. Implement format_result()
3. Register via FormatterRegistry.register()
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from cpms.core.logger import get_output_logger


def to_data(result: Any) -> Any:
    """
    Convert a matching result into plain data.

    Dataclass results use their to_dict(); pydantic documents are dumped
    in JSON mode; lists and (result, explanation) pairs are converted
    element-wise.
    """
    if hasattr(result, 'to_dict'):
        return result.to_dict()
    if isinstance(result, BaseModel):
        return result.model_dump(mode='json', exclude_none=True)
    if isinstance(result, tuple) and len(result) == 2:
        outcome, explanation = result
        return {'result': to_data(outcome), 'explain': to_data(explanation)}
    if isinstance(result, list):
        return [to_data(item) for item in result]
    if isinstance(result, dict):
        return {key: to_data(value) for key, value in result.items()}
    return result


class BaseFormatter(ABC):
    """
    Abstract base for result formatters.

    Formatters know nothing about matching; they only render results.
    """

    def __init__(self):
        self.logger = get_output_logger(f'formatters.{self.format_name}')

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Short name for this format (e.g., 'json', 'text')."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """File extension including dot (e.g., '.json', '.txt')."""

    @abstractmethod
    def format_result(self, result: Any) -> str:
        """
        Render a result to string.

        Args:
            result: Matching result to render

        Returns:
            Formatted string representation
        """

    def write_result(self, result: Any, output_path: Path) -> Path:
        """
        Write a rendered result to a file.

        Args:
            result: Matching result to render
            output_path: Target file; the format's extension is added
                         when the path has none

        Returns:
            Path to the written file
        """
        output_path = Path(output_path)
        if not output_path.suffix:
            output_path = output_path.with_suffix(self.file_extension)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        output_path.write_text(self.format_result(result), encoding='utf-8')
        self.logger.info(f"Wrote {self.format_name} output to {output_path}")
        return output_path


class FormatterRegistry:
    """
    Registry of available formatters.

    Lookup by format name. The CLI uses this to find the formatter for
    the requested output format.
    """

    _formatters: Dict[str, Type[BaseFormatter]] = {}

    @classmethod
    def register(cls, formatter_class: Type[BaseFormatter]) -> None:
        """Register a formatter class."""
        instance = formatter_class()
        cls._formatters[instance.format_name] = formatter_class

    @classmethod
    def get(cls, format_name: str, **options: Any) -> Optional[BaseFormatter]:
        """Get a formatter instance by name, built with options."""
        formatter_class = cls._formatters.get(format_name)
        if formatter_class:
            return formatter_class(**options)
        return None

    @classmethod
    def get_available(cls) -> list[str]:
        """Return list of registered format names."""
        return list(cls._formatters.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations (for testing)."""
        cls._formatters.clear()


__all__ = ['to_data', 'BaseFormatter', 'FormatterRegistry']
