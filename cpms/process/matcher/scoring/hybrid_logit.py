# Path: cpms/process/matcher/scoring/hybrid_logit.py
"""
Hybrid Logit Scorer

Scores one (concept, candidate) pair by accumulating evidence in logit
space:

    L = prior_logit
    for each signal:
        raw = clamp(evaluate(signal), 0, 1)
        fuzzy: L += weight * logit(clamp(raw, eps, 1 - eps))
        bayes: L += llr_when_true if raw >= 0.5 else llr_when_false
    p = sigmoid(L)     (calibration "sigmoid")
    p = L              (calibration "none")

Fuzzy signals turn graded evidence into a bounded push; bayes signals
add a fixed log-likelihood ratio when the evidence fires. The explainer
reuses evaluate_signal and signal_contribution so the traced and
untraced paths cannot drift apart.
"""

import math
from typing import Any, Optional

from cpms.constants import BAYES_FIRE_THRESHOLD
from cpms.core.logger import get_process_logger
from ..evaluators.registry import EvaluatorRegistry, create_default_registry
from ..models.concept_definition import Calibration, Concept, Signal, SignalMode
from ..models.match_result import ScoredCandidate
from ..models.observation import Observation


# Smallest and largest doubles strictly inside (0, 1)
_P_MIN = math.nextafter(0.0, 1.0)
_P_MAX = math.nextafter(1.0, 0.0)


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    return max(lo, min(hi, x))


def sigmoid(x: float) -> float:
    """
    Logistic function, held strictly inside (0, 1).

    Computed in the form that never overflows exp(). Where float
    rounding would give exactly 0 or 1 the nearest representable value
    inside the interval is returned instead.
    """
    if x >= 0:
        p = 1.0 / (1.0 + math.exp(-x))
    else:
        z = math.exp(x)
        p = z / (1.0 + z)
    return clamp(p, _P_MIN, _P_MAX)


def logit(p: float, epsilon: float) -> float:
    """log(p / (1 - p)) with p clamped into [epsilon, 1 - epsilon]."""
    pp = clamp(p, epsilon, 1.0 - epsilon)
    return math.log(pp / (1.0 - pp))


def calibrate(total_logit: float, calibration: Calibration) -> float:
    """Apply a concept's calibration to an accumulated logit."""
    if calibration == Calibration.NONE:
        return total_logit
    return sigmoid(total_logit)


def evaluate_signal(registry: EvaluatorRegistry, signal: Signal, candidate: Any) -> float:
    """
    Run a signal's evaluator and clamp the output into [0, 1].

    NaN counts as no evidence.

    Raises:
        UnknownEvaluatorError: If the signal's evaluator is not registered
    """
    raw = float(registry.evaluate(signal.evaluator, candidate, signal.params))
    if math.isnan(raw):
        return 0.0
    return clamp(raw, 0.0, 1.0)


def signal_contribution(signal: Signal, raw: float, epsilon: float) -> float:
    """
    Logit contribution of one signal given its clamped evaluator output.

    Args:
        signal: Signal definition
        raw: Evaluator output already clamped into [0, 1]
        epsilon: Score model epsilon

    Returns:
        Amount to add to the accumulated logit
    """
    if signal.mode == SignalMode.BAYES:
        if raw >= BAYES_FIRE_THRESHOLD:
            return signal.llr_when_true
        return signal.llr_when_false
    return signal.weight * logit(raw, epsilon)


class HybridLogitScorer:
    """
    Scores candidates for a concept with the hybrid logit model.

    Scoring is pure: it reads the concept, the candidate and the
    registry, and keeps no state between calls.

    Example:
        scorer = HybridLogitScorer(registry)
        p = scorer.score_pair(concept, candidate)
    """

    def __init__(self, registry: Optional[EvaluatorRegistry] = None):
        """
        Initialize scorer.

        Args:
            registry: Evaluator registry (built-ins when None)
        """
        self.registry = registry if registry is not None else create_default_registry()
        self.logger = get_process_logger('matcher.scoring.hybrid_logit')

    def score_pair(self, concept: Concept, candidate: Any) -> float:
        """
        Score one candidate for one concept.

        Args:
            concept: Concept to score
            candidate: Candidate to score

        Returns:
            Probability in (0, 1) for sigmoid calibration, the raw
            accumulated logit for calibration none

        Raises:
            UnknownEvaluatorError: If any signal's evaluator is not registered
        """
        model = concept.score_model
        total = model.prior_logit

        for signal in concept.signals:
            raw = evaluate_signal(self.registry, signal, candidate)
            total += signal_contribution(signal, raw, model.epsilon)

        return calibrate(total, model.calibration)

    def score_observation(
        self,
        concept: Concept,
        observation: Observation
    ) -> list[ScoredCandidate]:
        """
        Score every candidate of an observation, in observation order.

        Returns:
            One ScoredCandidate per candidate (unsorted)
        """
        scored = [
            ScoredCandidate(
                candidate_id=candidate.candidate_id,
                p=self.score_pair(concept, candidate),
            )
            for candidate in observation.candidates
        ]
        self.logger.debug(
            f"Scored {len(scored)} candidates for {concept.concept_id} "
            f"on {observation.page_id}"
        )
        return scored


__all__ = [
    'clamp',
    'sigmoid',
    'logit',
    'calibrate',
    'evaluate_signal',
    'signal_contribution',
    'HybridLogitScorer',
]
