# Path: cpms/process/matcher/evaluators/registry.py
"""
Evaluator Registry

Name -> callable lookup used by the scorer. A callable takes
(candidate, params) and returns a number.

The registry is an explicit object: the coordinator owns one and hands
it to the scorer, explainer and resolver. Register everything before
matching starts; registration is not safe while evaluations run on
other threads.

Example:
    registry = create_default_registry()
    registry.register("dom.has_value", lambda cand, params: 1.0)
    raw = registry.evaluate("dom.attr_in", candidate,
                            {"attr": "autocomplete", "values": ["email"]})
"""

from typing import Any, Callable, Iterator, Optional

from cpms.core.logger import get_process_logger
from ..errors import UnknownEvaluatorError
from .base_evaluator import BaseEvaluator
from .dom_evaluators import (
    AttrInEvaluator,
    TextContainsAnyEvaluator,
    RoleIsEvaluator,
    TypeIsEvaluator,
)
from .vision_evaluator import OcrNearbyContainsEvaluator


EvaluatorFn = Callable[[Any, dict], float]

BUILTIN_EVALUATORS: tuple[type[BaseEvaluator], ...] = (
    AttrInEvaluator,
    TextContainsAnyEvaluator,
    RoleIsEvaluator,
    TypeIsEvaluator,
    OcrNearbyContainsEvaluator,
)


class EvaluatorRegistry:
    """
    Mapping of evaluator names to callables.

    Re-registering a name overwrites the previous callable. Looking up a
    name that was never registered raises UnknownEvaluatorError.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self.logger = get_process_logger('matcher.evaluators.registry')
        self._evaluators: dict[str, EvaluatorFn] = {}

    def register(self, name: str, fn: EvaluatorFn) -> None:
        """
        Register an evaluator under a name.

        Args:
            name: Registry name (e.g. dom.attr_in)
            fn: Callable taking (candidate, params)
        """
        if not callable(fn):
            raise TypeError(f"Evaluator for {name} is not callable: {fn!r}")
        if name in self._evaluators:
            self.logger.debug(f"Overwriting evaluator: {name}")
        self._evaluators[name] = fn

    def register_evaluator(self, evaluator: BaseEvaluator) -> None:
        """Register an evaluator object under its own evaluator_type."""
        self.register(evaluator.evaluator_type, evaluator)

    def get(self, name: str) -> EvaluatorFn:
        """
        Get the callable registered under a name.

        Raises:
            UnknownEvaluatorError: If nothing is registered under name
        """
        try:
            return self._evaluators[name]
        except KeyError:
            raise UnknownEvaluatorError(name) from None

    def evaluate(self, name: str, candidate: Any, params: Optional[dict] = None) -> float:
        """
        Run the evaluator registered under name against a candidate.

        Args:
            name: Registry name
            candidate: Candidate to inspect
            params: Signal parameters (empty dict when None)

        Returns:
            Whatever the evaluator returned, unclamped

        Raises:
            UnknownEvaluatorError: If nothing is registered under name
        """
        fn = self.get(name)
        return fn(candidate, params if params is not None else {})

    def names(self) -> list[str]:
        """Registered names, sorted."""
        return sorted(self._evaluators)

    def copy(self) -> 'EvaluatorRegistry':
        """Independent registry holding the same evaluators."""
        other = EvaluatorRegistry()
        other._evaluators = dict(self._evaluators)
        return other

    def __contains__(self, name: object) -> bool:
        return name in self._evaluators

    def __len__(self) -> int:
        return len(self._evaluators)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


def create_default_registry() -> EvaluatorRegistry:
    """
    Build a registry holding the built-in evaluators.

    Returns:
        New EvaluatorRegistry; callers may register more on it
    """
    registry = EvaluatorRegistry()
    for evaluator_cls in BUILTIN_EVALUATORS:
        registry.register_evaluator(evaluator_cls())
    return registry


__all__ = [
    'EvaluatorFn',
    'BUILTIN_EVALUATORS',
    'EvaluatorRegistry',
    'create_default_registry',
]
