# Path: cpms/tests/unit/test_output.py
"""
Unit Tests for Output Module

Tests the result formatters:
- to_data conversion
- JsonFormatter
- TextFormatter
- FormatterRegistry
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[3]))


@pytest.fixture
def assignment(payment_pattern, payment_concepts, payment_observation):
    from cpms.process.matcher import MatchingCoordinator
    return MatchingCoordinator().match_pattern(payment_pattern, payment_concepts, payment_observation)


@pytest.fixture
def swap_assignment(swap_pattern, swap_concepts, swap_observation):
    from cpms.process.matcher import MatchingCoordinator
    return MatchingCoordinator().match_pattern(swap_pattern, swap_concepts, swap_observation)


class TestToData:
    """Test to_data conversion."""

    def test_dataclass_uses_to_dict(self, email_concept, login_observation):
        from cpms.output import to_data
        from cpms.process.matcher import MatchingCoordinator

        decision = MatchingCoordinator().match_concept(email_concept, login_observation)
        data = to_data(decision)
        assert data['best']['candidate_id'] == 'cand_email'
        assert data['accepted'] is True

    def test_pydantic_model(self, login_observation):
        from cpms.output import to_data

        data = to_data(login_observation)
        assert data['page_id'] == 'fixture:login'
        assert data['candidates'][0]['candidate_id'] == 'cand_email'

    def test_match_and_explain_pair(self, email_concept, login_observation):
        from cpms.output import to_data
        from cpms.process.matcher import MatchingCoordinator

        data = to_data(MatchingCoordinator().match_and_explain(email_concept, login_observation))
        assert set(data) == {'result', 'explain'}
        assert data['explain']['candidates'][0]['signals'][0]['signal_id'] == 'ac'

    def test_list_of_scored(self):
        from cpms.output import to_data
        from cpms.process.matcher.models import ScoredCandidate

        assert to_data([ScoredCandidate('a', 0.5)]) == [{'candidate_id': 'a', 'p': 0.5}]


class TestJsonFormatter:
    """Test JsonFormatter."""

    def test_assignment_round_trips_through_json(self, assignment):
        from cpms.output import JsonFormatter

        data = json.loads(JsonFormatter().format_result(assignment))
        assert data['pattern_id'] == 'pattern:payment@1.0.0'
        assert data['assigned']['concept:card_cvv@1.0.0'] == 'cand_cvv'
        assert data['trace']['missing_required'] == []

    def test_swap_repair_serialized(self, swap_assignment):
        from cpms.output import JsonFormatter

        data = json.loads(JsonFormatter().format_result(swap_assignment))
        repair = data['trace']['repairs'][0]
        assert repair['type'] == 'swap'
        assert repair['holder'] == 'concept:A@1.0.0'
        assert repair['holder_to'] == 'alt-a'

    def test_indent(self, assignment):
        from cpms.output import JsonFormatter

        assert '\n' not in JsonFormatter(indent=0).format_result(assignment)
        assert '\n    ' in JsonFormatter(indent=4).format_result(assignment)

    def test_unicode_preserved(self, localized_observation):
        from cpms.output import JsonFormatter

        assert 'Correo electrónico' in JsonFormatter().format_result(localized_observation)

    def test_write_result_adds_extension(self, assignment, tmp_path):
        from cpms.output import JsonFormatter

        path = JsonFormatter().write_result(assignment, tmp_path / 'out' / 'payment')
        assert path.suffix == '.json'
        assert json.loads(path.read_text(encoding='utf-8'))['pattern_id'] == 'pattern:payment@1.0.0'


class TestTextFormatter:
    """Test TextFormatter."""

    def test_decision(self, email_concept, login_observation):
        from cpms.output import TextFormatter
        from cpms.process.matcher import MatchingCoordinator

        text = TextFormatter().format_result(
            MatchingCoordinator().match_concept(email_concept, login_observation)
        )
        assert 'MATCH: concept:email@1.0.0' in text
        assert 'ACCEPTED' in text
        assert 'cand_email' in text

    def test_explanation_lists_signals(self, email_concept, login_observation):
        from cpms.output import TextFormatter
        from cpms.process.matcher import MatchingCoordinator

        text = TextFormatter().format_result(
            MatchingCoordinator().explain_concept(email_concept, login_observation)
        )
        assert 'EXPLAIN: concept:email@1.0.0' in text
        assert 'dom.text_contains_any' in text

    def test_assignment_with_repairs(self, swap_assignment):
        from cpms.output import TextFormatter

        text = TextFormatter().format_result(swap_assignment)
        assert 'PATTERN: pattern:swap-demo@1.0.0' in text
        assert 'REPAIRS (1)' in text
        assert 'concept:A@1.0.0 -> alt-a' in text
        assert 'Missing required:  none' in text

    def test_observation(self, login_observation):
        from cpms.output import TextFormatter

        text = TextFormatter().format_result(login_observation)
        assert 'OBSERVATION: fixture:login' in text
        assert "label='Email'" in text

    def test_unknown_result_falls_back_to_json(self):
        from cpms.output import TextFormatter

        assert '"key": "value"' in TextFormatter().format_result({'key': 'value'})

    def test_text_is_ascii_for_ascii_input(self, assignment):
        from cpms.output import TextFormatter

        text = TextFormatter().format_result(assignment)
        assert all(ord(c) < 128 for c in text)


class TestFormatterRegistry:
    """Test FormatterRegistry."""

    def test_defaults_registered(self):
        from cpms.output import FormatterRegistry

        assert set(FormatterRegistry.get_available()) >= {'json', 'text'}

    def test_get_with_options(self):
        from cpms.output import FormatterRegistry

        formatter = FormatterRegistry.get('json', indent=4)
        assert formatter.indent == 4

    def test_unknown_format(self):
        from cpms.output import FormatterRegistry

        assert FormatterRegistry.get('xml') is None

    def test_clear_and_register(self, reset_singletons):
        from cpms.output import FormatterRegistry, TextFormatter

        FormatterRegistry.clear()
        assert FormatterRegistry.get_available() == []
        FormatterRegistry.register(TextFormatter)
        assert FormatterRegistry.get_available() == ['text']
