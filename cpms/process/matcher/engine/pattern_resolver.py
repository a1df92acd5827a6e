# Path: cpms/process/matcher/engine/pattern_resolver.py
"""
Pattern Resolver

Assigns observation candidates to the concepts of a pattern so that no
candidate serves two concepts.

Algorithm (greedy with bounded local repair):
1. Explain every included concept against the observation and keep its
   top-k candidates.
2. Rank concepts by best score, then by margin (both descending).
3. Greedy pass: in rank order, each concept takes its first unclaimed
   top-k candidate scoring at least its min_conf.
4. Repair passes (at most max_repairs): every still-unassigned concept
   first tries a free top-k candidate, then tries to take a candidate
   from its holder when the holder can move to another free candidate
   and the pair's total score improves. A pass that changes nothing
   ends the loop.
5. Required concepts left unassigned are reported, not raised.

This is a heuristic, not an optimal assignment. Scores come only from
the step 1 explanations; no pair is scored twice.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Union

from cpms.constants import (
    DEFAULT_PATTERN_TOP_K,
    DEFAULT_MAX_REPAIRS,
    DEFAULT_SWAP_EPSILON,
    RepairType,
)
from cpms.core.logger import get_process_logger
from ..errors import MissingConceptError
from ..models.concept_definition import Concept
from ..models.match_result import (
    Assignment,
    AssignmentTrace,
    ConceptExplanation,
    ConceptRanking,
    RepairOperation,
    ScoredCandidate,
)
from ..models.observation import Observation
from ..models.pattern_definition import Pattern
from ..scoring.decision import compute_margin, rank_scores
from ..scoring.explainer import ConceptExplainer


ConceptSource = Union[Mapping[str, Concept], Sequence[Concept]]


@dataclass
class _ConceptState:
    """Per-concept working data for one resolution."""
    concept: Concept
    explanation: ConceptExplanation
    top: list[ScoredCandidate] = field(default_factory=list)
    scores: dict[str, float] = field(default_factory=dict)

    @property
    def concept_id(self) -> str:
        return self.concept.concept_id

    @property
    def min_conf(self) -> float:
        return self.concept.min_conf

    @property
    def best_p(self) -> float:
        return self.top[0].p if self.top else 0.0

    @property
    def margin(self) -> float:
        return compute_margin(self.top)

    def score_of(self, candidate_id: str) -> float:
        return self.scores.get(candidate_id, 0.0)

    def to_ranking(self) -> ConceptRanking:
        return ConceptRanking(
            concept_id=self.concept_id,
            top=list(self.top),
            best_p=self.best_p,
            margin=self.margin,
        )


class _AssignmentState:
    """
    Two-way concept/candidate assignment.

    assign() refuses to hand out a candidate that is already claimed by
    another concept, so no candidate is ever held twice.
    """

    def __init__(self):
        self.by_concept: dict[str, str] = {}
        self.by_candidate: dict[str, str] = {}

    def is_taken(self, candidate_id: str) -> bool:
        return candidate_id in self.by_candidate

    def holder_of(self, candidate_id: str) -> Optional[str]:
        return self.by_candidate.get(candidate_id)

    def has(self, concept_id: str) -> bool:
        return concept_id in self.by_concept

    def assign(self, concept_id: str, candidate_id: str) -> None:
        holder = self.by_candidate.get(candidate_id)
        if holder is not None and holder != concept_id:
            raise RuntimeError(
                f"Candidate {candidate_id} already held by {holder}"
            )
        previous = self.by_concept.get(concept_id)
        if previous is not None:
            del self.by_candidate[previous]
        self.by_concept[concept_id] = candidate_id
        self.by_candidate[candidate_id] = concept_id

    def swap(self, concept_id: str, holder: str, contested: str, alternative: str) -> None:
        """Move holder to alternative and give contested to concept_id."""
        self.assign(holder, alternative)
        self.assign(concept_id, contested)


class PatternResolver:
    """
    Resolves patterns with greedy assignment plus local repair.

    Example:
        resolver = PatternResolver(explainer)
        assignment = resolver.resolve(pattern, concepts, observation)
        assignment.assigned      # {"concept:email@1.0.0": "cand_email", ...}
        assignment.trace.repairs # swaps and free fills, in order
    """

    def __init__(
        self,
        explainer: Optional[ConceptExplainer] = None,
        default_top_k: int = DEFAULT_PATTERN_TOP_K,
        default_max_repairs: int = DEFAULT_MAX_REPAIRS,
        swap_epsilon: float = DEFAULT_SWAP_EPSILON
    ):
        """
        Initialize resolver.

        Args:
            explainer: Explainer used to score concepts (built-ins when None)
            default_top_k: top_k when the pattern strategy has none
            default_max_repairs: max_repairs when the pattern strategy has none
            swap_epsilon: Minimum gain for a swap to be applied
        """
        self.explainer = explainer if explainer is not None else ConceptExplainer()
        self.default_top_k = default_top_k
        self.default_max_repairs = default_max_repairs
        self.swap_epsilon = swap_epsilon
        self.logger = get_process_logger('matcher.pattern_resolver')

    def resolve(
        self,
        pattern: Pattern,
        concepts: ConceptSource,
        observation: Observation
    ) -> Assignment:
        """
        Assign candidates to the concepts a pattern includes.

        Args:
            pattern: Pattern to resolve
            concepts: Concepts by id, or a sequence of concepts
            observation: Candidates to assign

        Returns:
            Assignment with assigned/unassigned concepts and the trace

        Raises:
            MissingConceptError: If an included concept is not supplied
            UnknownEvaluatorError: If a concept uses an unregistered evaluator
        """
        top_k = pattern.strategy.top_k or self.default_top_k
        max_repairs = pattern.strategy.max_repairs
        if max_repairs is None:
            max_repairs = self.default_max_repairs

        included = self._resolve_includes(pattern, self._index_concepts(concepts))

        self.logger.info(
            f"[PATTERN] {pattern.pattern_id}: {len(included)} concepts, "
            f"{len(observation.candidates)} candidates (top_k={top_k}, "
            f"max_repairs={max_repairs})"
        )

        # Step 1: explain and keep top-k
        states = [self._build_state(concept, observation, top_k) for concept in included]

        # Step 2: rank concepts (stable)
        ranked = sorted(states, key=lambda s: (-s.best_p, -s.margin))
        by_id = {state.concept_id: state for state in ranked}

        # Step 3: greedy
        assignment = _AssignmentState()
        for state in ranked:
            choice = self._first_free(state, assignment)
            if choice is not None:
                assignment.assign(state.concept_id, choice.candidate_id)
                self.logger.debug(
                    f"[ASSIGN] {state.concept_id} -> {choice.candidate_id} (p={choice.p:.4f})"
                )

        # Step 4: repair
        trace = AssignmentTrace(rankings=[s.to_ranking() for s in ranked])
        trace.score_history.append(self._realized_total(assignment, by_id))
        self._repair(ranked, by_id, assignment, max_repairs, trace)

        # Step 5: required concepts
        unassigned = [s.concept_id for s in ranked if not assignment.has(s.concept_id)]
        trace.missing_required = self._missing_required(pattern, by_id, unassigned)

        assigned = {
            s.concept_id: assignment.by_concept[s.concept_id]
            for s in ranked if assignment.has(s.concept_id)
        }
        scores = {cid: by_id[cid].score_of(cand) for cid, cand in assigned.items()}

        self.logger.info(
            f"[PATTERN] {pattern.pattern_id}: {len(assigned)}/{len(ranked)} assigned, "
            f"{len(trace.repairs)} repairs, missing required: {trace.missing_required}"
        )

        return Assignment(
            pattern_id=pattern.pattern_id,
            assigned=assigned,
            unassigned=unassigned,
            trace=trace,
            scores=scores,
            explanations={s.concept_id: s.explanation for s in states},
        )

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def _index_concepts(self, concepts: ConceptSource) -> Mapping[str, Concept]:
        if isinstance(concepts, Mapping):
            return concepts
        return {concept.concept_id: concept for concept in concepts}

    def _resolve_includes(
        self,
        pattern: Pattern,
        by_id: Mapping[str, Concept]
    ) -> list[Concept]:
        """Included concepts in pattern order, checked before any scoring."""
        included: list[Concept] = []
        seen: set[str] = set()
        for concept_id in pattern.includes:
            if concept_id in seen:
                self.logger.warning(
                    f"Pattern {pattern.pattern_id} includes {concept_id} twice"
                )
                continue
            concept = by_id.get(concept_id)
            if concept is None:
                raise MissingConceptError(concept_id, pattern.pattern_id)
            seen.add(concept_id)
            included.append(concept)
        return included

    def _build_state(
        self,
        concept: Concept,
        observation: Observation,
        top_k: int
    ) -> _ConceptState:
        explanation = self.explainer.explain(concept, observation)
        scored = [trace.to_scored() for trace in explanation.candidates]
        return _ConceptState(
            concept=concept,
            explanation=explanation,
            top=rank_scores(scored)[:top_k],
            scores=explanation.scores_by_candidate(),
        )

    # -------------------------------------------------------------------------
    # Assignment helpers
    # -------------------------------------------------------------------------

    def _first_free(
        self,
        state: _ConceptState,
        assignment: _AssignmentState,
        exclude: Optional[str] = None
    ) -> Optional[ScoredCandidate]:
        """First unclaimed top-k candidate meeting the concept's min_conf."""
        for candidate in state.top:
            if candidate.candidate_id == exclude:
                continue
            if assignment.is_taken(candidate.candidate_id):
                continue
            if candidate.p < state.min_conf:
                continue
            return candidate
        return None

    def _realized_total(
        self,
        assignment: _AssignmentState,
        by_id: dict[str, _ConceptState]
    ) -> float:
        return sum(
            by_id[cid].score_of(cand) for cid, cand in assignment.by_concept.items()
        )

    # -------------------------------------------------------------------------
    # Repair
    # -------------------------------------------------------------------------

    def _repair(
        self,
        ranked: list[_ConceptState],
        by_id: dict[str, _ConceptState],
        assignment: _AssignmentState,
        max_repairs: int,
        trace: AssignmentTrace
    ) -> None:
        """Run repair passes until nothing changes or max_repairs is reached."""
        while trace.iterations < max_repairs:
            pending = [s for s in ranked if not assignment.has(s.concept_id)]
            if not pending:
                trace.converged = True
                return

            trace.iterations += 1
            changed = False

            for state in pending:
                operation = (
                    self._try_assign_free(state, assignment, trace.iterations)
                    or self._try_swap(state, by_id, assignment, trace.iterations)
                )
                if operation is not None:
                    trace.repairs.append(operation)
                    changed = True

            trace.score_history.append(self._realized_total(assignment, by_id))

            if not changed:
                trace.converged = True
                return

        # Loop exhausted: converged only if nothing is left to repair
        trace.converged = all(assignment.has(s.concept_id) for s in ranked)

    def _try_assign_free(
        self,
        state: _ConceptState,
        assignment: _AssignmentState,
        iteration: int
    ) -> Optional[RepairOperation]:
        free = self._first_free(state, assignment)
        if free is None:
            return None

        assignment.assign(state.concept_id, free.candidate_id)
        self.logger.debug(
            f"[REPAIR] assign_free {state.concept_id} -> {free.candidate_id}"
        )
        return RepairOperation(
            type=RepairType.ASSIGN_FREE,
            concept_id=state.concept_id,
            candidate_id=free.candidate_id,
            p=free.p,
            gain=free.p,
            iteration=iteration,
        )

    def _try_swap(
        self,
        state: _ConceptState,
        by_id: dict[str, _ConceptState],
        assignment: _AssignmentState,
        iteration: int
    ) -> Optional[RepairOperation]:
        """
        Take a candidate from its holder if the holder can move elsewhere.

        Applies the first contested candidate, in this concept's top-k
        order, for which the pair total improves by more than
        swap_epsilon and this concept's score meets its min_conf.
        """
        for wish in state.top:
            holder_id = assignment.holder_of(wish.candidate_id)
            if holder_id is None:
                continue

            holder = by_id[holder_id]
            alternative = self._first_free(holder, assignment, exclude=wish.candidate_id)
            if alternative is None:
                continue

            current = holder.score_of(wish.candidate_id)
            proposed_holder = holder.score_of(alternative.candidate_id)
            proposed_this = state.score_of(wish.candidate_id)
            gain = proposed_this + proposed_holder - current

            if gain > self.swap_epsilon and proposed_this >= state.min_conf:
                assignment.swap(
                    state.concept_id, holder_id,
                    wish.candidate_id, alternative.candidate_id,
                )
                self.logger.debug(
                    f"[REPAIR] swap {state.concept_id} takes {wish.candidate_id}, "
                    f"{holder_id} -> {alternative.candidate_id} (gain={gain:.4f})"
                )
                return RepairOperation(
                    type=RepairType.SWAP,
                    concept_id=state.concept_id,
                    candidate_id=wish.candidate_id,
                    p=proposed_this,
                    holder=holder_id,
                    holder_to=alternative.candidate_id,
                    gain=gain,
                    iteration=iteration,
                )
        return None

    # -------------------------------------------------------------------------
    # Constraints
    # -------------------------------------------------------------------------

    def _missing_required(
        self,
        pattern: Pattern,
        by_id: dict[str, _ConceptState],
        unassigned: list[str]
    ) -> list[str]:
        """Required ids that ended unassigned, in constraint order."""
        missing = []
        for concept_id in pattern.required_concept_ids():
            if concept_id not in by_id:
                self.logger.warning(
                    f"Pattern {pattern.pattern_id} requires {concept_id} "
                    f"but does not include it"
                )
                continue
            if concept_id in unassigned:
                missing.append(concept_id)
        return missing


__all__ = ['PatternResolver']
