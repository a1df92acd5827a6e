# Path: cpms/process/matcher/evaluators/vision_evaluator.py
"""
Vision Evaluator

Reads OCR tokens that an upstream extractor attached to a candidate.
No image processing happens here.
"""

from typing import Any

from cpms.constants import EvaluatorName
from .base_evaluator import BaseEvaluator


class OcrNearbyContainsEvaluator(BaseEvaluator):
    """
    vision.ocr_nearby_contains: any term appears in the nearby OCR tokens.

    Params:
        terms: Substrings to look for (case-insensitive)
    """

    @property
    def evaluator_type(self) -> str:
        return EvaluatorName.OCR_NEARBY_CONTAINS.value

    def evaluate(self, candidate: Any, params: dict) -> float:
        vision = self._vision(candidate)
        if vision is None or not vision.ocr_nearby:
            return 0.0

        haystack = ' '.join(str(token) for token in vision.ocr_nearby).lower()
        return 1.0 if self._contains_any(haystack, params.get('terms')) else 0.0


__all__ = ['OcrNearbyContainsEvaluator']
