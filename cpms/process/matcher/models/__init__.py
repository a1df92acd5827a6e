# Path: cpms/process/matcher/models/__init__.py
"""
Matcher Models

Data models for the matching engine:
- Concept / Signal: Concept documents (pydantic)
- Pattern: Multi-concept pattern documents (pydantic)
- Observation / Candidate: Observed page elements (pydantic)
- Decision / ConceptExplanation / Assignment: Derived results (dataclasses)
"""

from .concept_definition import (
    SignalMode,
    Calibration,
    DecisionPolicy,
    RepresentationKind,
    Signal,
    ScoreModel,
    DecisionConfig,
    Resolution,
    Concept,
)

from .pattern_definition import (
    PatternStrategy,
    PatternConstraint,
    Pattern,
)

from .observation import (
    DomEvidence,
    VisionEvidence,
    Candidate,
    Observation,
)

from .match_result import (
    ScoredCandidate,
    SignalTrace,
    ScoreTrace,
    Decision,
    ConceptExplanation,
    ConceptRanking,
    RepairOperation,
    AssignmentTrace,
    Assignment,
)

__all__ = [
    # Concept Definition
    'SignalMode',
    'Calibration',
    'DecisionPolicy',
    'RepresentationKind',
    'Signal',
    'ScoreModel',
    'DecisionConfig',
    'Resolution',
    'Concept',
    # Pattern Definition
    'PatternStrategy',
    'PatternConstraint',
    'Pattern',
    # Observation
    'DomEvidence',
    'VisionEvidence',
    'Candidate',
    'Observation',
    # Results
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
