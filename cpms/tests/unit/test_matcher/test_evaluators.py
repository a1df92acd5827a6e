# Path: cpms/tests/unit/test_matcher/test_evaluators.py
"""
Tests for the built-in evaluators and the evaluator registry.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[4]))

from cpms.process.matcher.errors import MatcherError, UnknownEvaluatorError
from cpms.process.matcher.evaluators import (
    AttrInEvaluator,
    EvaluatorRegistry,
    OcrNearbyContainsEvaluator,
    RoleIsEvaluator,
    TextContainsAnyEvaluator,
    TypeIsEvaluator,
    create_default_registry,
)
from cpms.process.matcher.models import Candidate


def make_candidate(dom=None, vision=None, candidate_id='cand'):
    return Candidate.model_validate({
        'candidate_id': candidate_id,
        'dom': dom,
        'vision': vision,
    })


class TestAttrIn:
    """Test dom.attr_in."""

    def test_matches_listed_value(self):
        """Attribute value in the list scores 1."""
        cand = make_candidate({'attrs': {'autocomplete': 'email'}})
        assert AttrInEvaluator()(cand, {'attr': 'autocomplete', 'values': ['email', 'username']}) == 1.0

    def test_case_insensitive(self):
        """Comparison ignores case on both sides."""
        cand = make_candidate({'attrs': {'autocomplete': 'EMAIL'}})
        assert AttrInEvaluator()(cand, {'attr': 'autocomplete', 'values': ['Email']}) == 1.0

    def test_unlisted_value(self):
        """Attribute value outside the list scores 0."""
        cand = make_candidate({'attrs': {'autocomplete': 'current-password'}})
        assert AttrInEvaluator()(cand, {'attr': 'autocomplete', 'values': ['email']}) == 0.0

    def test_missing_attribute(self):
        """Missing attribute scores 0."""
        cand = make_candidate({'attrs': {'name': 'email'}})
        assert AttrInEvaluator()(cand, {'attr': 'autocomplete', 'values': ['email']}) == 0.0

    def test_no_dom(self):
        """Candidate without DOM evidence scores 0."""
        assert AttrInEvaluator()(make_candidate(), {'attr': 'autocomplete', 'values': ['email']}) == 0.0


class TestTextContainsAny:
    """Test dom.text_contains_any."""

    def test_matches_label(self):
        """Term found in label text."""
        cand = make_candidate({'label_text': 'Email address'})
        assert TextContainsAnyEvaluator()(cand, {'terms': ['email']}) == 1.0

    def test_matches_placeholder_and_aria(self):
        """Placeholder and aria-label are searched."""
        evaluator = TextContainsAnyEvaluator()
        assert evaluator(make_candidate({'placeholder': 'Your E-mail'}), {'terms': ['e-mail']}) == 1.0
        assert evaluator(make_candidate({'aria_label': 'Username'}), {'terms': ['username']}) == 1.0

    def test_matches_nearby_text_list(self):
        """nearby_text may be a list of strings."""
        cand = make_candidate({'nearby_text': ['✉️', 'Requerido']})
        assert TextContainsAnyEvaluator()(cand, {'terms': ['requerido']}) == 1.0

    def test_matches_name_and_id_attrs(self):
        """name and id attributes are part of the searched text."""
        evaluator = TextContainsAnyEvaluator()
        assert evaluator(make_candidate({'attrs': {'name': 'userEmail'}}), {'terms': ['email']}) == 1.0
        assert evaluator(make_candidate({'attrs': {'id': 'correo'}}), {'terms': ['correo']}) == 1.0

    def test_other_attrs_not_searched(self):
        """Attributes other than name and id are ignored."""
        cand = make_candidate({'attrs': {'class': 'email-field'}})
        assert TextContainsAnyEvaluator()(cand, {'terms': ['email']}) == 0.0

    def test_no_match(self):
        cand = make_candidate({'label_text': 'Password'})
        assert TextContainsAnyEvaluator()(cand, {'terms': ['email', 'username']}) == 0.0

    def test_no_terms(self):
        """No terms never matches."""
        cand = make_candidate({'label_text': 'Email'})
        assert TextContainsAnyEvaluator()(cand, {}) == 0.0

    def test_unicode_terms(self):
        """Non-ASCII terms match."""
        cand = make_candidate({'label_text': 'メールアドレス'})
        assert TextContainsAnyEvaluator()(cand, {'terms': ['メール']}) == 1.0


class TestRoleIs:
    """Test dom.role_is."""

    def test_matches_role(self):
        cand = make_candidate({'role': 'Button'})
        assert RoleIsEvaluator()(cand, {'role': 'button'}) == 1.0

    def test_other_role(self):
        cand = make_candidate({'role': 'link'})
        assert RoleIsEvaluator()(cand, {'role': 'button'}) == 0.0

    def test_missing_role_matches_empty_role(self):
        """A missing role compares equal to an absent or empty role param."""
        cand = make_candidate({'attrs': {}})
        assert RoleIsEvaluator()(cand, {}) == 1.0
        assert RoleIsEvaluator()(cand, {'role': ''}) == 1.0
        assert RoleIsEvaluator()(cand, {'role': 'button'}) == 0.0

    def test_role_param_against_no_dom(self):
        assert RoleIsEvaluator()(make_candidate(), {'role': 'button'}) == 0.0


class TestTypeIs:
    """Test dom.type_is."""

    def test_matches_direct_dom_type(self):
        """Matches dom.type."""
        assert TypeIsEvaluator()(make_candidate({'type': 'password'}), {'type': 'password'}) == 1.0

    def test_matches_attrs_type_case_insensitively(self):
        """Falls back to attrs.type, ignoring case."""
        cand = make_candidate({'attrs': {'type': 'Email'}})
        assert TypeIsEvaluator()(cand, {'type': 'email'}) == 1.0

    def test_accepts_list_of_types(self):
        """types may list several accepted values."""
        cand = make_candidate({'type': 'text'})
        assert TypeIsEvaluator()(cand, {'types': ['email', 'text']}) == 1.0

    def test_types_takes_precedence(self):
        """types wins over type when both are given."""
        cand = make_candidate({'type': 'text'})
        assert TypeIsEvaluator()(cand, {'types': ['text'], 'type': 'password'}) == 1.0

    def test_returns_zero_when_no_match(self):
        cand = make_candidate({'type': 'search'})
        assert TypeIsEvaluator()(cand, {'type': 'password'}) == 0.0

    def test_no_observed_type(self):
        assert TypeIsEvaluator()(make_candidate({'attrs': {}}), {'type': 'text'}) == 0.0


class TestOcrNearbyContains:
    """Test vision.ocr_nearby_contains."""

    def test_matches_token(self):
        cand = make_candidate(vision={'ocr_nearby': ['Card', 'Number']})
        assert OcrNearbyContainsEvaluator()(cand, {'terms': ['number']}) == 1.0

    def test_no_tokens(self):
        cand = make_candidate(vision={'ocr_nearby': []})
        assert OcrNearbyContainsEvaluator()(cand, {'terms': ['number']}) == 0.0

    def test_no_vision(self):
        cand = make_candidate({'label_text': 'Card number'})
        assert OcrNearbyContainsEvaluator()(cand, {'terms': ['number']}) == 0.0


class TestEvaluatorRegistry:
    """Test EvaluatorRegistry."""

    def test_default_registry_has_builtins(self):
        """All built-in evaluators are registered."""
        registry = create_default_registry()
        assert registry.names() == [
            'dom.attr_in',
            'dom.role_is',
            'dom.text_contains_any',
            'dom.type_is',
            'vision.ocr_nearby_contains',
        ]

    def test_evaluate_by_name(self):
        registry = create_default_registry()
        result = registry.evaluate('dom.type_is', make_candidate({'type': 'password'}), {'type': 'password'})
        assert result == 1

    def test_evaluate_without_params(self):
        """Missing params are passed as an empty dict."""
        registry = EvaluatorRegistry()
        seen = []
        registry.register('custom.params', lambda cand, params: seen.append(params) or 1.0)
        registry.evaluate('custom.params', make_candidate())
        assert seen == [{}]

    def test_unknown_evaluator_raises(self):
        """Unknown names raise UnknownEvaluatorError."""
        registry = create_default_registry()
        with pytest.raises(UnknownEvaluatorError) as exc_info:
            registry.evaluate('dom.nope', make_candidate(), {})
        assert exc_info.value.evaluator_name == 'dom.nope'
        assert isinstance(exc_info.value, MatcherError)
        assert 'dom.nope' in str(exc_info.value)

    def test_register_overwrites(self):
        """Re-registering a name replaces the callable."""
        registry = create_default_registry()
        registry.register('dom.attr_in', lambda cand, params: 0.25)
        assert registry.evaluate('dom.attr_in', make_candidate(), {}) == 0.25

    def test_register_rejects_non_callable(self):
        with pytest.raises(TypeError):
            EvaluatorRegistry().register('bad', 'not callable')

    def test_registries_are_independent(self):
        """Registering on one registry does not affect another."""
        first = create_default_registry()
        second = create_default_registry()
        first.register('custom.one', lambda cand, params: 1.0)
        assert 'custom.one' in first
        assert 'custom.one' not in second

    def test_copy(self):
        original = create_default_registry()
        clone = original.copy()
        clone.register('custom.two', lambda cand, params: 1.0)
        assert len(clone) == len(original) + 1
        assert 'custom.two' not in original

    def test_empty_registry(self):
        registry = EvaluatorRegistry()
        assert len(registry) == 0
        assert list(registry) == []
