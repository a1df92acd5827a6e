# Path: cpms/process/matcher/models/match_result.py
"""
Match Result Models

Models representing the results of matching operations. All of them are
derived values: recomputed on every call and never persisted.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from cpms.constants import RepairType


@dataclass(frozen=True)
class ScoredCandidate:
    """
    Score of one candidate for one concept.

    Attributes:
        candidate_id: The scored candidate
        p: Calibrated probability, or the raw logit when calibration is none
    """
    candidate_id: str
    p: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'candidate_id': self.candidate_id,
            'p': self.p,
        }


@dataclass
class SignalTrace:
    """
    Contribution of a single signal to a candidate's logit.

    Attributes:
        signal_id: Signal that produced the contribution
        evaluator: Evaluator name
        mode: fuzzy or bayes
        raw: Evaluator output clamped to [0, 1]
        contribution: Amount added to the logit
    """
    signal_id: str
    evaluator: str
    mode: str
    raw: float
    contribution: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'signal_id': self.signal_id,
            'evaluator': self.evaluator,
            'mode': self.mode,
            'raw': self.raw,
            'contribution': self.contribution,
        }


@dataclass
class ScoreTrace:
    """
    Audit trail for one (concept, candidate) pair.

    Attributes:
        candidate_id: The scored candidate
        prior_logit: Starting logit
        total_logit: prior_logit plus every signal contribution
        p: Calibrated score (equals total_logit when calibration is none)
        signals: Per-signal contributions in signal order
    """
    candidate_id: str
    prior_logit: float
    total_logit: float
    p: float
    signals: list[SignalTrace] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'candidate_id': self.candidate_id,
            'prior_logit': self.prior_logit,
            'total_logit': self.total_logit,
            'p': self.p,
            'signals': [s.to_dict() for s in self.signals],
        }

    def to_scored(self) -> ScoredCandidate:
        return ScoredCandidate(candidate_id=self.candidate_id, p=self.p)


@dataclass
class Decision:
    """
    Winner-take-all decision for one concept.

    accepted and needs_user_confirmation are independent guards: a match
    can be accepted and still need confirmation when its absolute score
    is below the concept's confirm_threshold.

    Attributes:
        accepted: best exists, meets min_conf and min_margin
        needs_user_confirmation: not accepted, or best below confirm_threshold
        best: Top-ranked candidate
        runner_up: Second-ranked candidate
        margin: best - runner_up (best alone when there is no runner-up)
        ranked: All candidates, best first
        concept_id: Concept the decision belongs to
    """
    accepted: bool
    needs_user_confirmation: bool
    best: Optional[ScoredCandidate] = None
    runner_up: Optional[ScoredCandidate] = None
    margin: float = 0.0
    ranked: list[ScoredCandidate] = field(default_factory=list)
    concept_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'concept_id': self.concept_id,
            'accepted': self.accepted,
            'needs_user_confirmation': self.needs_user_confirmation,
            'best': self.best.to_dict() if self.best else None,
            'runner_up': self.runner_up.to_dict() if self.runner_up else None,
            'margin': self.margin,
            'ranked': [c.to_dict() for c in self.ranked],
        }


@dataclass
class ConceptExplanation:
    """
    Explained match of one concept against an observation.

    Attributes:
        concept_id: Explained concept
        decision: Winner-take-all decision over the traced scores
        candidates: Score traces, best first
    """
    concept_id: str
    decision: Decision
    candidates: list[ScoreTrace] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.decision.accepted

    @property
    def needs_user_confirmation(self) -> bool:
        return self.decision.needs_user_confirmation

    @property
    def best(self) -> Optional[ScoredCandidate]:
        return self.decision.best

    @property
    def runner_up(self) -> Optional[ScoredCandidate]:
        return self.decision.runner_up

    @property
    def margin(self) -> float:
        return self.decision.margin

    def get_trace(self, candidate_id: str) -> Optional[ScoreTrace]:
        """Get the trace of a candidate."""
        for trace in self.candidates:
            if trace.candidate_id == candidate_id:
                return trace
        return None

    def scores_by_candidate(self) -> dict[str, float]:
        """Map candidate_id -> score."""
        return {trace.candidate_id: trace.p for trace in self.candidates}

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'concept_id': self.concept_id,
            'accepted': self.accepted,
            'needs_user_confirmation': self.needs_user_confirmation,
            'best': self.best.to_dict() if self.best else None,
            'runner_up': self.runner_up.to_dict() if self.runner_up else None,
            'margin': self.margin,
            'candidates': [t.to_dict() for t in self.candidates],
        }


@dataclass
class ConceptRanking:
    """
    Top-k candidates of one concept inside a pattern resolution.

    Attributes:
        concept_id: Ranked concept
        top: Top-k candidates, best first
        best_p: Score of the best candidate (0 when there is none)
        margin: Gap between the two best candidates
    """
    concept_id: str
    top: list[ScoredCandidate] = field(default_factory=list)
    best_p: float = 0.0
    margin: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'concept_id': self.concept_id,
            'best_p': self.best_p,
            'margin': self.margin,
            'top': [c.to_dict() for c in self.top],
        }


@dataclass
class RepairOperation:
    """
    One repair step applied after the greedy pass.

    assign_free: concept_id took the unclaimed candidate_id.
    swap: concept_id took candidate_id from holder, which moved to holder_to.

    Attributes:
        type: Repair type
        concept_id: Concept that gained an assignment
        candidate_id: Candidate it was assigned
        p: Score of concept_id for candidate_id
        holder: Previous holder of candidate_id (swap only)
        holder_to: Candidate the holder moved to (swap only)
        gain: Increase of the realized total
        iteration: Repair pass in which the step was applied (1-based)
    """
    type: RepairType
    concept_id: str
    candidate_id: str
    p: float
    holder: Optional[str] = None
    holder_to: Optional[str] = None
    gain: float = 0.0
    iteration: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            'type': self.type.value,
            'concept_id': self.concept_id,
            'candidate_id': self.candidate_id,
            'p': self.p,
            'gain': self.gain,
            'iteration': self.iteration,
        }
        if self.type == RepairType.SWAP:
            data['holder'] = self.holder
            data['holder_to'] = self.holder_to
        return data


@dataclass
class AssignmentTrace:
    """
    Structured trace of a pattern resolution.

    Attributes:
        rankings: Concept rankings in resolution order
        repairs: Repair operations in the order applied
        missing_required: Required concepts that ended unassigned
        iterations: Repair passes run
        converged: Whether the loop stopped on a pass without changes
        score_history: Realized total after greedy and after each pass
    """
    rankings: list[ConceptRanking] = field(default_factory=list)
    repairs: list[RepairOperation] = field(default_factory=list)
    missing_required: list[str] = field(default_factory=list)
    iterations: int = 0
    converged: bool = False
    score_history: list[float] = field(default_factory=list)

    @property
    def swap_count(self) -> int:
        return sum(1 for r in self.repairs if r.type == RepairType.SWAP)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'rankings': [r.to_dict() for r in self.rankings],
            'repairs': [r.to_dict() for r in self.repairs],
            'missing_required': list(self.missing_required),
            'iterations': self.iterations,
            'converged': self.converged,
            'score_history': list(self.score_history),
        }


@dataclass
class Assignment:
    """
    Result of resolving a pattern against an observation.

    Attributes:
        pattern_id: Resolved pattern
        assigned: concept_id -> candidate_id (partial)
        unassigned: Included concepts without a candidate, in rank order
        trace: Rankings, repairs and missing required concepts
        scores: concept_id -> score of its assigned candidate
        explanations: Per-concept explanations computed during resolution
    """
    pattern_id: str
    assigned: dict[str, str] = field(default_factory=dict)
    unassigned: list[str] = field(default_factory=list)
    trace: AssignmentTrace = field(default_factory=AssignmentTrace)
    scores: dict[str, float] = field(default_factory=dict)
    explanations: dict[str, ConceptExplanation] = field(default_factory=dict)

    @property
    def missing_required(self) -> list[str]:
        return self.trace.missing_required

    @property
    def total_score(self) -> float:
        """Sum of each assigned concept's score for its candidate."""
        return sum(self.scores.values())

    @property
    def is_complete(self) -> bool:
        """True when every included concept is assigned."""
        return not self.unassigned

    def get_candidate(self, concept_id: str) -> Optional[str]:
        """Get the candidate assigned to a concept."""
        return self.assigned.get(concept_id)

    def to_dict(self, include_explanations: bool = False) -> dict:
        """Convert to dictionary."""
        data = {
            'pattern_id': self.pattern_id,
            'assigned': dict(self.assigned),
            'unassigned': list(self.unassigned),
            'scores': dict(self.scores),
            'trace': self.trace.to_dict(),
        }
        if include_explanations:
            data['explanations'] = {
                cid: ex.to_dict() for cid, ex in self.explanations.items()
            }
        return data


__all__ = [
    'ScoredCandidate',
    'SignalTrace',
    'ScoreTrace',
    'Decision',
    'ConceptExplanation',
    'ConceptRanking',
    'RepairOperation',
    'AssignmentTrace',
    'Assignment',
]
