# Path: cpms/process/matcher/scoring/explainer.py
"""
Concept Explainer

Recomputes the hybrid logit score of every candidate while keeping the
evidence: each signal's clamped evaluator output and its contribution,
the prior, the accumulated logit and the calibrated score. The same
winner-take-all decision is then applied to the traced scores.

The pattern resolver works from these explanations, so every pair it
looks at has already been traced.
"""

from typing import Any, Optional

from cpms.core.logger import get_process_logger
from ..evaluators.registry import EvaluatorRegistry
from ..models.concept_definition import Concept
from ..models.match_result import ConceptExplanation, ScoreTrace, SignalTrace
from ..models.observation import Observation
from .decision import winner_take_all
from .hybrid_logit import (
    HybridLogitScorer,
    calibrate,
    evaluate_signal,
    signal_contribution,
)


class ConceptExplainer:
    """
    Produces auditable score traces for a concept.

    Example:
        explainer = ConceptExplainer(scorer)
        explanation = explainer.explain(concept, observation)
        for trace in explanation.candidates:
            print(trace.candidate_id, trace.p)
    """

    def __init__(self, scorer: Optional[HybridLogitScorer] = None):
        """
        Initialize explainer.

        Args:
            scorer: Scorer whose registry is used (built-ins when None)
        """
        self.scorer = scorer if scorer is not None else HybridLogitScorer()
        self.logger = get_process_logger('matcher.scoring.explainer')

    @property
    def registry(self) -> EvaluatorRegistry:
        return self.scorer.registry

    def trace_pair(self, concept: Concept, candidate: Any) -> ScoreTrace:
        """
        Score one candidate keeping every signal's contribution.

        The resulting p equals HybridLogitScorer.score_pair for the same
        inputs.

        Raises:
            UnknownEvaluatorError: If any signal's evaluator is not registered
        """
        model = concept.score_model
        total = model.prior_logit
        signal_traces = []

        for signal in concept.signals:
            raw = evaluate_signal(self.registry, signal, candidate)
            contribution = signal_contribution(signal, raw, model.epsilon)
            total += contribution
            signal_traces.append(SignalTrace(
                signal_id=signal.signal_id,
                evaluator=signal.evaluator,
                mode=signal.mode.value,
                raw=raw,
                contribution=contribution,
            ))

        return ScoreTrace(
            candidate_id=candidate.candidate_id,
            prior_logit=model.prior_logit,
            total_logit=total,
            p=calibrate(total, model.calibration),
            signals=signal_traces,
        )

    def explain(self, concept: Concept, observation: Observation) -> ConceptExplanation:
        """
        Explain the match of a concept against every candidate.

        Args:
            concept: Concept to explain
            observation: Candidates to score

        Returns:
            ConceptExplanation with traces sorted best first and the
            winner-take-all decision over them

        Raises:
            UnknownEvaluatorError: If any signal's evaluator is not registered
        """
        traces = [
            self.trace_pair(concept, candidate)
            for candidate in observation.candidates
        ]
        traces.sort(key=lambda t: t.p, reverse=True)

        decision = winner_take_all(concept, [t.to_scored() for t in traces])

        if decision.best is not None:
            self.logger.debug(
                f"[EXPLAIN] {concept.concept_id}: best={decision.best.candidate_id} "
                f"p={decision.best.p:.4f} margin={decision.margin:.4f} "
                f"accepted={decision.accepted}"
            )
        else:
            self.logger.debug(f"[EXPLAIN] {concept.concept_id}: no candidates")

        return ConceptExplanation(
            concept_id=concept.concept_id,
            decision=decision,
            candidates=traces,
        )


__all__ = ['ConceptExplainer']
