# Path: cpms/tests/unit/test_constants.py
"""
Unit Tests for Constants Module

Tests the system-wide constants.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[3]))

from cpms.constants import (
    EvaluatorName,
    RepairType,
    OutputFormat,
    DEFAULT_EPSILON,
    DEFAULT_CONFIRM_THRESHOLD,
    DEFAULT_PATTERN_TOP_K,
    DEFAULT_MAX_REPAIRS,
    BAYES_FIRE_THRESHOLD,
    WEIGHT_RANGE,
    LLR_RANGE,
    PRIOR_LOGIT_RANGE,
    STATUS_OK,
    STATUS_FAIL,
    STATUS_WARN,
)


class TestEvaluatorNameEnum:
    """Test EvaluatorName enum."""

    def test_dom_names(self):
        assert EvaluatorName.ATTR_IN.value == 'dom.attr_in'
        assert EvaluatorName.TEXT_CONTAINS_ANY.value == 'dom.text_contains_any'
        assert EvaluatorName.ROLE_IS.value == 'dom.role_is'
        assert EvaluatorName.TYPE_IS.value == 'dom.type_is'

    def test_vision_name(self):
        assert EvaluatorName.OCR_NEARBY_CONTAINS.value == 'vision.ocr_nearby_contains'

    def test_enum_is_string(self):
        """Enum members compare equal to their names."""
        assert EvaluatorName.ATTR_IN == 'dom.attr_in'


class TestRepairTypeEnum:
    """Test RepairType enum."""

    def test_values(self):
        assert RepairType.ASSIGN_FREE.value == 'assign_free'
        assert RepairType.SWAP.value == 'swap'


class TestOutputFormatEnum:
    """Test OutputFormat enum."""

    def test_values(self):
        assert {f.value for f in OutputFormat} == {'json', 'text'}


class TestDefaults:
    """Test default values."""

    def test_score_model_defaults(self):
        assert DEFAULT_EPSILON == 1e-4
        assert BAYES_FIRE_THRESHOLD == 0.5

    def test_decision_defaults(self):
        assert DEFAULT_CONFIRM_THRESHOLD == 0.9

    def test_pattern_defaults(self):
        assert DEFAULT_PATTERN_TOP_K == 7
        assert DEFAULT_MAX_REPAIRS == 10

    @pytest.mark.parametrize('bounds', [WEIGHT_RANGE, LLR_RANGE, PRIOR_LOGIT_RANGE])
    def test_ranges_are_symmetric(self, bounds):
        """Compiler ranges are symmetric around zero."""
        lo, hi = bounds
        assert lo == -hi
        assert lo < hi


class TestStatusIndicators:
    """Test status indicators are ASCII."""

    def test_status_ascii_only(self):
        for status in (STATUS_OK, STATUS_FAIL, STATUS_WARN):
            assert all(ord(c) < 128 for c in status)
