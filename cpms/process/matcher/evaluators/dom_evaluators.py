# Path: cpms/process/matcher/evaluators/dom_evaluators.py
"""
DOM Evaluators

Evaluators reading the DOM evidence of a candidate: attributes, role,
input type and the text that surrounds an element.

All comparisons are case-insensitive. A candidate without DOM evidence
scores 0 on every DOM evaluator.
"""

from typing import Any

from cpms.constants import EvaluatorName, TEXT_EVIDENCE_FIELDS, TEXT_EVIDENCE_ATTRS
from .base_evaluator import BaseEvaluator


class AttrInEvaluator(BaseEvaluator):
    """
    dom.attr_in: attribute value is one of a set.

    Params:
        attr: Attribute name (e.g. autocomplete)
        values: Accepted values

    Example:
        AttrInEvaluator()(candidate, {"attr": "autocomplete",
                                      "values": ["email", "username"]})
    """

    @property
    def evaluator_type(self) -> str:
        return EvaluatorName.ATTR_IN.value

    def evaluate(self, candidate: Any, params: dict) -> float:
        dom = self._dom(candidate)
        if dom is None:
            return 0.0

        observed = self._lower(dom.attrs.get(params.get('attr')))
        if not observed:
            return 0.0

        accepted = {self._lower(v) for v in self._as_list(params.get('values'))}
        return 1.0 if observed in accepted else 0.0


class TextContainsAnyEvaluator(BaseEvaluator):
    """
    dom.text_contains_any: any term appears in the element's text.

    Searches label text, placeholder, aria-label, nearby text and the
    name and id attributes, joined into one string.

    Params:
        terms: Substrings to look for
    """

    @property
    def evaluator_type(self) -> str:
        return EvaluatorName.TEXT_CONTAINS_ANY.value

    def evaluate(self, candidate: Any, params: dict) -> float:
        dom = self._dom(candidate)
        if dom is None:
            return 0.0

        parts = [getattr(dom, name, None) for name in TEXT_EVIDENCE_FIELDS]
        parts.extend(dom.attrs.get(name) for name in TEXT_EVIDENCE_ATTRS)
        haystack = self._join_text(parts)

        return 1.0 if self._contains_any(haystack, params.get('terms')) else 0.0


class RoleIsEvaluator(BaseEvaluator):
    """
    dom.role_is: element role equals the expected role.

    A missing role compares as the empty string on both sides, so a
    role-less candidate matches a signal without a role parameter.
    """

    @property
    def evaluator_type(self) -> str:
        return EvaluatorName.ROLE_IS.value

    def evaluate(self, candidate: Any, params: dict) -> float:
        dom = self._dom(candidate)
        observed = self._lower(dom.role) if dom is not None else ''
        return 1.0 if observed == self._lower(params.get('role')) else 0.0


class TypeIsEvaluator(BaseEvaluator):
    """
    dom.type_is: input type is one of the expected types.

    The observed type is dom.type, falling back to attrs.type. Expected
    types come from `types` (list or scalar), falling back to `type`.
    """

    @property
    def evaluator_type(self) -> str:
        return EvaluatorName.TYPE_IS.value

    def evaluate(self, candidate: Any, params: dict) -> float:
        dom = self._dom(candidate)
        if dom is None:
            return 0.0

        observed = dom.type if dom.type is not None else dom.attrs.get('type')
        if not observed:
            return 0.0

        target = params.get('types')
        if target is None:
            target = params.get('type')

        observed = self._lower(observed)
        choices = {self._lower(v) for v in self._as_list(target)}
        return 1.0 if observed in choices else 0.0


__all__ = [
    'AttrInEvaluator',
    'TextContainsAnyEvaluator',
    'RoleIsEvaluator',
    'TypeIsEvaluator',
]
