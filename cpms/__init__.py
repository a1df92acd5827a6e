# Path: cpms/__init__.py
"""
cpms - Concept/Pattern Matching System

Scores abstract UI concepts against page candidates with hybrid logit
scoring and resolves multi-concept patterns into assignments.

Layers:
    - loaders/  INPUT: documents, schema compiler, HTML observations
    - process/  PROCESS: evaluators, scoring, decisions, pattern resolution
    - output/   OUTPUT: JSON and text formatters
"""

__version__ = '1.0.0'

from cpms.process.matcher import (
    MatcherError,
    UnknownEvaluatorError,
    MissingConceptError,
    MatchingCoordinator,
    EvaluatorRegistry,
    create_default_registry,
)

__all__ = [
    '__version__',
    'MatcherError',
    'UnknownEvaluatorError',
    'MissingConceptError',
    'MatchingCoordinator',
    'EvaluatorRegistry',
    'create_default_registry',
]
