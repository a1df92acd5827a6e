# Path: cpms/process/matcher/evaluators/base_evaluator.py
"""
Base Evaluator

Abstract base class for the built-in signal evaluators.

An evaluator inspects one candidate and returns a number, nominally in
[0, 1], saying how strongly the candidate shows one piece of evidence.
The scorer clamps whatever comes back, so evaluators never need to.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from cpms.core.logger import get_process_logger
from ..models.observation import DomEvidence, VisionEvidence


class BaseEvaluator(ABC):
    """
    Abstract base class for signal evaluators.

    Each evaluator handles one registry name:
    - AttrInEvaluator: dom.attr_in
    - TextContainsAnyEvaluator: dom.text_contains_any
    - RoleIsEvaluator: dom.role_is
    - TypeIsEvaluator: dom.type_is
    - OcrNearbyContainsEvaluator: vision.ocr_nearby_contains

    Instances are callable with the (candidate, params) signature the
    registry expects, so plain functions and evaluator objects register
    the same way.

    Example:
        evaluator = AttrInEvaluator()
        raw = evaluator(candidate, {"attr": "autocomplete", "values": ["email"]})
    """

    def __init__(self):
        """Initialize evaluator."""
        self.logger = get_process_logger(f'matcher.evaluators.{self.evaluator_type}')

    @property
    @abstractmethod
    def evaluator_type(self) -> str:
        """Return the registry name of this evaluator."""
        pass

    @abstractmethod
    def evaluate(self, candidate: Any, params: dict) -> float:
        """
        Evaluate one candidate.

        Args:
            candidate: Candidate to inspect
            params: Signal parameters

        Returns:
            Evidence strength, 1.0 or 0.0 for the built-ins
        """
        pass

    def __call__(self, candidate: Any, params: Optional[dict] = None) -> float:
        return self.evaluate(candidate, params or {})

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.evaluator_type!r})'

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _dom(self, candidate: Any) -> Optional[DomEvidence]:
        """DOM evidence of a candidate, if any."""
        return getattr(candidate, 'dom', None)

    def _vision(self, candidate: Any) -> Optional[VisionEvidence]:
        """Vision evidence of a candidate, if any."""
        return getattr(candidate, 'vision', None)

    def _lower(self, value: Any) -> str:
        """Lower-cased string form of a value ('' for None)."""
        if value is None:
            return ''
        return str(value).lower()

    def _as_list(self, value: Any) -> list:
        """Accept a scalar or a sequence parameter."""
        if value is None:
            return []
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(value)
        return [value]

    def _join_text(self, parts: Iterable[Any]) -> str:
        """
        Join text fragments into one lower-cased haystack.

        Empty fragments are skipped; list fragments are flattened.

        Args:
            parts: Strings, lists of strings or None

        Returns:
            Fragments joined with single spaces, lower-cased
        """
        fragments = []
        for part in parts:
            for item in self._as_list(part):
                if item:
                    fragments.append(str(item))
        return ' '.join(fragments).lower()

    def _contains_any(self, haystack: str, terms: Any) -> bool:
        """Check if any term is a case-insensitive substring of haystack."""
        return any(self._lower(term) in haystack for term in self._as_list(terms))


__all__ = ['BaseEvaluator']
