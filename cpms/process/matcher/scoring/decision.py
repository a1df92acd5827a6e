# Path: cpms/process/matcher/scoring/decision.py
"""
Decision Policies

Turn a list of scored candidates into a result:
- winner_take_all: pick the best candidate and decide whether to accept
  it and whether to ask the user to confirm
- top_k: return the k best candidates without any decision

Sorting is stable: candidates with equal scores keep their observation
order.
"""

from typing import Iterable, Optional

from cpms.constants import DEFAULT_DECISION_TOP_K
from ..models.concept_definition import Concept
from ..models.match_result import Decision, ScoredCandidate


def rank_scores(scored: Iterable[ScoredCandidate]) -> list[ScoredCandidate]:
    """Sort scored candidates by p descending, keeping input order on ties."""
    return sorted(scored, key=lambda c: c.p, reverse=True)


def compute_margin(ranked: list[ScoredCandidate]) -> float:
    """
    Gap between the two best candidates of a ranked list.

    With a single candidate the margin is its score; with none it is 0.
    """
    if not ranked:
        return 0.0
    if len(ranked) == 1:
        return ranked[0].p
    return ranked[0].p - ranked[1].p


def winner_take_all(concept: Concept, scored: Iterable[ScoredCandidate]) -> Decision:
    """
    Winner-take-all decision for one concept.

    accepted requires a best candidate with p >= min_conf and a margin
    >= min_margin. needs_user_confirmation is set whenever the match is
    not accepted or the best score is below confirm_threshold.

    Args:
        concept: Concept supplying the decision parameters
        scored: Scored candidates in observation order

    Returns:
        Decision with best, runner_up, margin and the full ranking
    """
    config = concept.decision
    ranked = rank_scores(scored)

    best: Optional[ScoredCandidate] = ranked[0] if ranked else None
    runner_up: Optional[ScoredCandidate] = ranked[1] if len(ranked) > 1 else None
    margin = compute_margin(ranked)

    accepted = (
        best is not None
        and best.p >= config.min_conf
        and margin >= config.min_margin
    )
    best_p = best.p if best is not None else 0.0
    needs_confirmation = not accepted or best_p < config.confirm_threshold

    return Decision(
        accepted=accepted,
        needs_user_confirmation=needs_confirmation,
        best=best,
        runner_up=runner_up,
        margin=margin,
        ranked=ranked,
        concept_id=concept.concept_id,
    )


def top_k(
    concept: Concept,
    scored: Iterable[ScoredCandidate],
    default_k: int = DEFAULT_DECISION_TOP_K
) -> list[ScoredCandidate]:
    """
    The k best candidates, best first.

    k is the concept's decision.top_k, or default_k when unset.
    """
    k = concept.decision.top_k or default_k
    return rank_scores(scored)[:k]


__all__ = ['rank_scores', 'compute_margin', 'winner_take_all', 'top_k']
