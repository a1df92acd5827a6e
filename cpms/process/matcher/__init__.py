# Path: cpms/process/matcher/__init__.py
"""
Matching Engine - Concept and Pattern Matching

Matches abstract concepts (an email field, a submit button) against
candidates observed on a page, and resolves multi-concept patterns (a
login form) into one-to-one assignments.

Core Components:
    - MatchingCoordinator: Main orchestrator
    - EvaluatorRegistry: Named evidence evaluators
    - HybridLogitScorer: Prior plus signal contributions in logit space
    - ConceptExplainer: Per-signal audit trail
    - PatternResolver: Greedy assignment with local repair

Example:
    from cpms.process.matcher import MatchingCoordinator

    coordinator = MatchingCoordinator()
    decision = coordinator.match_concept(concept, observation)
    assignment = coordinator.match_pattern(pattern, concepts, observation)
"""

from .errors import MatcherError, UnknownEvaluatorError, MissingConceptError
from .engine import MatchingCoordinator, PatternResolver
from .evaluators import BaseEvaluator, EvaluatorRegistry, create_default_registry
from .scoring import HybridLogitScorer, ConceptExplainer, winner_take_all, top_k
from .models import (
    Concept,
    Signal,
    Pattern,
    Candidate,
    Observation,
    Decision,
    ScoredCandidate,
    ConceptExplanation,
    Assignment,
)

__all__ = [
    'MatcherError',
    'UnknownEvaluatorError',
    'MissingConceptError',
    'MatchingCoordinator',
    'PatternResolver',
    'BaseEvaluator',
    'EvaluatorRegistry',
    'create_default_registry',
    'HybridLogitScorer',
    'ConceptExplainer',
    'winner_take_all',
    'top_k',
    'Concept',
    'Signal',
    'Pattern',
    'Candidate',
    'Observation',
    'Decision',
    'ScoredCandidate',
    'ConceptExplanation',
    'Assignment',
]
