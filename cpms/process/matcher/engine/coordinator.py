# Path: cpms/process/matcher/engine/coordinator.py
"""
Matching Coordinator

The main entry point for the matching engine. Owns one evaluator
registry and wires it into the scorer, explainer and pattern resolver.
"""

from typing import Optional, Union

from cpms.constants import (
    DEFAULT_DECISION_TOP_K,
    DEFAULT_PATTERN_TOP_K,
    DEFAULT_MAX_REPAIRS,
    DEFAULT_SWAP_EPSILON,
)
from cpms.config_loader import ConfigLoader
from cpms.core.logger import get_process_logger
from ..evaluators.registry import EvaluatorFn, EvaluatorRegistry, create_default_registry
from ..models.concept_definition import Concept, DecisionPolicy
from ..models.match_result import Assignment, ConceptExplanation, Decision, ScoredCandidate
from ..models.observation import Observation
from ..models.pattern_definition import Pattern
from ..scoring.decision import top_k, winner_take_all
from ..scoring.explainer import ConceptExplainer
from ..scoring.hybrid_logit import HybridLogitScorer
from .pattern_resolver import ConceptSource, PatternResolver


MatchOutcome = Union[Decision, list[ScoredCandidate]]


class MatchingCoordinator:
    """
    Main orchestrator for concept and pattern matching.

    The MatchingCoordinator:
    1. Holds the evaluator registry (built-ins unless one is injected)
    2. Scores a concept against an observation and applies its policy
    3. Explains a concept's scores signal by signal
    4. Resolves patterns into candidate assignments

    Example:
        coordinator = MatchingCoordinator()

        decision = coordinator.match_concept(email_concept, observation)
        if decision.accepted and not decision.needs_user_confirmation:
            fill(decision.best.candidate_id)

        assignment = coordinator.match_pattern(login_pattern, concepts, observation)
        assignment.assigned
        # {"concept:email@1.0.0": "cand_email", ...}
    """

    def __init__(
        self,
        registry: Optional[EvaluatorRegistry] = None,
        decision_top_k: int = DEFAULT_DECISION_TOP_K,
        pattern_top_k: int = DEFAULT_PATTERN_TOP_K,
        max_repairs: int = DEFAULT_MAX_REPAIRS,
        swap_epsilon: float = DEFAULT_SWAP_EPSILON
    ):
        """
        Initialize matching coordinator.

        Args:
            registry: Evaluator registry (built-ins when None)
            decision_top_k: k for top_k concepts without decision.top_k
            pattern_top_k: top_k for patterns without strategy.top_k
            max_repairs: max_repairs for patterns without strategy.max_repairs
            swap_epsilon: Minimum gain for a repair swap
        """
        self.logger = get_process_logger('matcher.coordinator')

        self.registry = registry if registry is not None else create_default_registry()
        self.decision_top_k = decision_top_k

        self.scorer = HybridLogitScorer(self.registry)
        self.explainer = ConceptExplainer(self.scorer)
        self.resolver = PatternResolver(
            self.explainer,
            default_top_k=pattern_top_k,
            default_max_repairs=max_repairs,
            swap_epsilon=swap_epsilon,
        )

        self.logger.debug(
            f"Coordinator ready with {len(self.registry)} evaluators: "
            f"{', '.join(self.registry.names())}"
        )

    @classmethod
    def from_config(
        cls,
        config: Optional[ConfigLoader] = None,
        registry: Optional[EvaluatorRegistry] = None
    ) -> 'MatchingCoordinator':
        """
        Build a coordinator with defaults read from configuration.

        Args:
            config: ConfigLoader (the shared instance when None)
            registry: Evaluator registry (built-ins when None)
        """
        if config is None:
            config = ConfigLoader()

        return cls(
            registry=registry,
            decision_top_k=config.get('decision_top_k', DEFAULT_DECISION_TOP_K),
            pattern_top_k=config.get('pattern_top_k', DEFAULT_PATTERN_TOP_K),
            max_repairs=config.get('pattern_max_repairs', DEFAULT_MAX_REPAIRS),
            swap_epsilon=config.get('swap_epsilon', DEFAULT_SWAP_EPSILON),
        )

    def register_evaluator(self, name: str, fn: EvaluatorFn) -> None:
        """Register an extra evaluator on this coordinator's registry."""
        self.registry.register(name, fn)

    # -------------------------------------------------------------------------
    # Concepts
    # -------------------------------------------------------------------------

    def match_concept(self, concept: Concept, observation: Observation) -> MatchOutcome:
        """
        Match one concept against an observation.

        Args:
            concept: Concept to match
            observation: Candidates to score

        Returns:
            Decision for the winner_take_all policy, the best k
            ScoredCandidates for the top_k policy

        Raises:
            UnknownEvaluatorError: If a signal's evaluator is not registered
        """
        scored = self.scorer.score_observation(concept, observation)

        if concept.decision.policy == DecisionPolicy.TOP_K:
            ranked = top_k(concept, scored, self.decision_top_k)
            self.logger.info(
                f"[MATCH] {concept.concept_id}: top {len(ranked)} of {len(scored)}"
            )
            return ranked

        decision = winner_take_all(concept, scored)
        if decision.best is not None:
            self.logger.info(
                f"[MATCH] {concept.concept_id} -> {decision.best.candidate_id} "
                f"(p={decision.best.p:.4f}, margin={decision.margin:.4f}, "
                f"accepted={decision.accepted}, "
                f"confirm={decision.needs_user_confirmation})"
            )
        else:
            self.logger.info(f"[MATCH] {concept.concept_id}: no candidates")
        return decision

    def explain_concept(self, concept: Concept, observation: Observation) -> ConceptExplanation:
        """Explain one concept against an observation, signal by signal."""
        return self.explainer.explain(concept, observation)

    def match_and_explain(
        self,
        concept: Concept,
        observation: Observation
    ) -> tuple[MatchOutcome, ConceptExplanation]:
        """
        Match a concept and explain it in one call.

        Returns:
            (match_concept result, explain_concept result)
        """
        return (
            self.match_concept(concept, observation),
            self.explain_concept(concept, observation),
        )

    # -------------------------------------------------------------------------
    # Patterns
    # -------------------------------------------------------------------------

    def match_pattern(
        self,
        pattern: Pattern,
        concepts: ConceptSource,
        observation: Observation
    ) -> Assignment:
        """
        Resolve a pattern into a candidate assignment.

        Args:
            pattern: Pattern to resolve
            concepts: Concepts by id, or a sequence of concepts
            observation: Candidates to assign

        Returns:
            Assignment with the repair trace

        Raises:
            MissingConceptError: If an included concept is not supplied
            UnknownEvaluatorError: If a concept uses an unregistered evaluator
        """
        return self.resolver.resolve(pattern, concepts, observation)


__all__ = ['MatchingCoordinator', 'MatchOutcome']
