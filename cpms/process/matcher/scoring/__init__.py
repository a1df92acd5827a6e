# Path: cpms/process/matcher/scoring/__init__.py
"""
Scoring Module

Components for scoring candidates and deciding on matches:
- HybridLogitScorer: Prior plus fuzzy/bayes signal contributions in logit space
- winner_take_all / top_k: Decision policies over scored candidates
- ConceptExplainer: Traced scoring for auditability
"""

from .hybrid_logit import (
    clamp,
    sigmoid,
    logit,
    calibrate,
    evaluate_signal,
    signal_contribution,
    HybridLogitScorer,
)
from .decision import rank_scores, compute_margin, winner_take_all, top_k
from .explainer import ConceptExplainer

__all__ = [
    'clamp',
    'sigmoid',
    'logit',
    'calibrate',
    'evaluate_signal',
    'signal_contribution',
    'HybridLogitScorer',
    'rank_scores',
    'compute_margin',
    'winner_take_all',
    'top_k',
    'ConceptExplainer',
]
