# Path: cpms/process/matcher/evaluators/__init__.py
"""
Signal Evaluators

Each evaluator inspects one candidate and returns evidence strength in
[0, 1] for one kind of signal. The registry maps signal evaluator names
to these callables.

Evaluators:
- AttrInEvaluator: dom.attr_in
- TextContainsAnyEvaluator: dom.text_contains_any
- RoleIsEvaluator: dom.role_is
- TypeIsEvaluator: dom.type_is
- OcrNearbyContainsEvaluator: vision.ocr_nearby_contains
"""

from .base_evaluator import BaseEvaluator
from .dom_evaluators import (
    AttrInEvaluator,
    TextContainsAnyEvaluator,
    RoleIsEvaluator,
    TypeIsEvaluator,
)
from .vision_evaluator import OcrNearbyContainsEvaluator
from .registry import (
    EvaluatorFn,
    BUILTIN_EVALUATORS,
    EvaluatorRegistry,
    create_default_registry,
)

__all__ = [
    'BaseEvaluator',
    'AttrInEvaluator',
    'TextContainsAnyEvaluator',
    'RoleIsEvaluator',
    'TypeIsEvaluator',
    'OcrNearbyContainsEvaluator',
    'EvaluatorFn',
    'BUILTIN_EVALUATORS',
    'EvaluatorRegistry',
    'create_default_registry',
]
