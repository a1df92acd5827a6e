# Path: cpms/constants.py
"""
System-Wide Constants for cpms (Concept/Pattern Matching System)

Central repository for all constant values used across the system.
NO HARDCODED VALUES in module code - all constants defined here.

Constants are organized by category:
- Score Model Defaults
- Decision Defaults
- Pattern Strategy Defaults
- Compiler Ranges
- Evaluator Names
- Repair Operations
- Display
"""

from enum import Enum
from typing import Final


# ==============================================================================
# SCORE MODEL DEFAULTS
# ==============================================================================

DEFAULT_PRIOR_LOGIT: Final[float] = 0.0
DEFAULT_EPSILON: Final[float] = 1e-4
DEFAULT_SIGNAL_WEIGHT: Final[float] = 1.0
DEFAULT_LLR: Final[float] = 0.0

# Bayes signals fire when the evaluator output reaches this value
BAYES_FIRE_THRESHOLD: Final[float] = 0.5


# ==============================================================================
# DECISION DEFAULTS
# ==============================================================================

DEFAULT_MIN_CONF: Final[float] = 0.0
DEFAULT_MIN_MARGIN: Final[float] = 0.0
DEFAULT_CONFIRM_THRESHOLD: Final[float] = 0.90
DEFAULT_DECISION_TOP_K: Final[int] = 3


# ==============================================================================
# PATTERN STRATEGY DEFAULTS
# ==============================================================================

DEFAULT_PATTERN_TOP_K: Final[int] = 7
DEFAULT_MAX_REPAIRS: Final[int] = 10

# Minimum gain for a swap to be applied (filters floating-point noise)
DEFAULT_SWAP_EPSILON: Final[float] = 1e-4

STRATEGY_GREEDY_REPAIR: Final[str] = 'greedy_repair'
CONSTRAINT_REQUIRED_CONCEPTS: Final[str] = 'required_concepts'
KNOWN_CONSTRAINT_TYPES: Final[frozenset[str]] = frozenset({
    CONSTRAINT_REQUIRED_CONCEPTS,
})


# ==============================================================================
# COMPILER RANGES
# ==============================================================================

WEIGHT_RANGE: Final[tuple[float, float]] = (-10.0, 10.0)
LLR_RANGE: Final[tuple[float, float]] = (-20.0, 20.0)
PRIOR_LOGIT_RANGE: Final[tuple[float, float]] = (-10.0, 10.0)

CONCEPT_KIND: Final[str] = 'cpms.concept'
PATTERN_KIND: Final[str] = 'cpms.pattern'


# ==============================================================================
# EVALUATOR NAMES
# ==============================================================================

class EvaluatorName(str, Enum):
    """Names of the built-in evaluators."""
    ATTR_IN = 'dom.attr_in'
    TEXT_CONTAINS_ANY = 'dom.text_contains_any'
    ROLE_IS = 'dom.role_is'
    TYPE_IS = 'dom.type_is'
    OCR_NEARBY_CONTAINS = 'vision.ocr_nearby_contains'


# DOM fields searched by dom.text_contains_any, in order
TEXT_EVIDENCE_FIELDS: Final[tuple[str, ...]] = (
    'label_text',
    'placeholder',
    'aria_label',
    'nearby_text',
)
TEXT_EVIDENCE_ATTRS: Final[tuple[str, ...]] = ('name', 'id')


# ==============================================================================
# REPAIR OPERATIONS
# ==============================================================================

class RepairType(str, Enum):
    """Repair operations recorded in an assignment trace."""
    ASSIGN_FREE = 'assign_free'
    SWAP = 'swap'


# ==============================================================================
# OUTPUT
# ==============================================================================

class OutputFormat(str, Enum):
    """Supported output formats."""
    JSON = 'json'
    TEXT = 'text'


DEFAULT_JSON_INDENT: Final[int] = 2


# ==============================================================================
# DISPLAY CONSTANTS
# ==============================================================================

MENU_WIDTH: Final[int] = 70
MENU_SEPARATOR: Final[str] = '-' * MENU_WIDTH
MENU_HEADER: Final[str] = '=' * MENU_WIDTH

STATUS_OK: Final[str] = '[OK]'
STATUS_FAIL: Final[str] = '[FAIL]'
STATUS_WARN: Final[str] = '[WARN]'
STATUS_INFO: Final[str] = '[INFO]'


__all__ = [
    'DEFAULT_PRIOR_LOGIT',
    'DEFAULT_EPSILON',
    'DEFAULT_SIGNAL_WEIGHT',
    'DEFAULT_LLR',
    'BAYES_FIRE_THRESHOLD',
    'DEFAULT_MIN_CONF',
    'DEFAULT_MIN_MARGIN',
    'DEFAULT_CONFIRM_THRESHOLD',
    'DEFAULT_DECISION_TOP_K',
    'DEFAULT_PATTERN_TOP_K',
    'DEFAULT_MAX_REPAIRS',
    'DEFAULT_SWAP_EPSILON',
    'STRATEGY_GREEDY_REPAIR',
    'CONSTRAINT_REQUIRED_CONCEPTS',
    'KNOWN_CONSTRAINT_TYPES',
    'WEIGHT_RANGE',
    'LLR_RANGE',
    'PRIOR_LOGIT_RANGE',
    'CONCEPT_KIND',
    'PATTERN_KIND',
    'EvaluatorName',
    'TEXT_EVIDENCE_FIELDS',
    'TEXT_EVIDENCE_ATTRS',
    'RepairType',
    'OutputFormat',
    'DEFAULT_JSON_INDENT',
    'MENU_WIDTH',
    'MENU_SEPARATOR',
    'MENU_HEADER',
    'STATUS_OK',
    'STATUS_FAIL',
    'STATUS_WARN',
    'STATUS_INFO',
]
