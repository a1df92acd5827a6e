# Path: cpms/process/matcher/errors.py
"""
Matcher Errors

Errors raised by the matching engine. Both are fatal for the call that
raised them and are never converted into a zero score.

- UnknownEvaluatorError: a signal names an evaluator missing from the registry
- MissingConceptError: a pattern includes a concept id that was not supplied
"""


class MatcherError(Exception):
    """Base class for matching engine errors."""


class UnknownEvaluatorError(MatcherError, KeyError):
    """Raised when an evaluator name is not registered."""

    def __init__(self, evaluator_name: str):
        self.evaluator_name = evaluator_name
        super().__init__(evaluator_name)

    def __str__(self) -> str:
        return f"Unknown evaluator: {self.evaluator_name}"


class MissingConceptError(MatcherError, KeyError):
    """Raised when a pattern references a concept that was not supplied."""

    def __init__(self, concept_id: str, pattern_id: str = ''):
        self.concept_id = concept_id
        self.pattern_id = pattern_id
        super().__init__(concept_id)

    def __str__(self) -> str:
        if self.pattern_id:
            return f"Missing concept: {self.concept_id} (pattern {self.pattern_id})"
        return f"Missing concept: {self.concept_id}"


__all__ = ['MatcherError', 'UnknownEvaluatorError', 'MissingConceptError']
