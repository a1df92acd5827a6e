# Path: cpms/process/matcher/models/concept_definition.py
"""
Concept Definition Model

Pydantic models representing concept documents. A concept describes one
kind of UI affordance (an email field, a submit button) as an ordered list
of evidence signals plus the parameters used to score and decide.

Documents arrive already validated by the schema layer; the models only
fill documented defaults and freeze the result so nothing is mutated
while matching.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from cpms.constants import (
    DEFAULT_PRIOR_LOGIT,
    DEFAULT_EPSILON,
    DEFAULT_SIGNAL_WEIGHT,
    DEFAULT_LLR,
    DEFAULT_MIN_CONF,
    DEFAULT_MIN_MARGIN,
    DEFAULT_CONFIRM_THRESHOLD,
)


# =============================================================================
# ENUMS
# =============================================================================

class SignalMode(str, Enum):
    """How a signal's evaluator output is turned into a logit contribution."""
    FUZZY = "fuzzy"
    BAYES = "bayes"


class Calibration(str, Enum):
    """Calibration applied to the accumulated logit."""
    SIGMOID = "sigmoid"
    NONE = "none"


class DecisionPolicy(str, Enum):
    """Policy used to turn ranked scores into a result."""
    WINNER_TAKE_ALL = "winner_take_all"
    TOP_K = "top_k"


class RepresentationKind(str, Enum):
    """Candidate modality a signal applies to."""
    DOM = "dom"
    VISION = "vision"
    TEXT = "text"
    HYBRID = "hybrid"


# =============================================================================
# SIGNALS
# =============================================================================

class Signal(BaseModel):
    """
    One piece of evidence attached to a concept.

    Fuzzy signals add weight * logit(raw); bayes signals add a fixed
    log-likelihood ratio depending on whether raw crossed 0.5.
    """
    signal_id: str = Field(
        description="Identifier, unique within the concept"
    )
    evaluator: str = Field(
        description="Registry name of the evaluator (e.g. dom.attr_in)"
    )
    mode: SignalMode = Field(
        default=SignalMode.FUZZY,
        description="fuzzy or bayes"
    )
    weight: float = Field(
        default=DEFAULT_SIGNAL_WEIGHT,
        description="Fuzzy multiplier on the evaluator logit"
    )
    llr_when_true: float = Field(
        default=DEFAULT_LLR,
        description="Bayes contribution when raw >= 0.5"
    )
    llr_when_false: float = Field(
        default=DEFAULT_LLR,
        description="Bayes contribution when raw < 0.5"
    )
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Evaluator-specific parameters"
    )
    applies_to: list[RepresentationKind] = Field(
        default_factory=list,
        description="Candidate modalities this signal is meant for"
    )

    model_config = {
        'frozen': True,
    }

    @model_validator(mode='before')
    @classmethod
    def fill_null_numbers(cls, data: Any) -> Any:
        """Treat explicit nulls as missing so defaults apply."""
        if isinstance(data, dict):
            data = {
                key: value for key, value in data.items()
                if not (value is None and key in (
                    'mode', 'weight', 'llr_when_true', 'llr_when_false', 'params'
                ))
            }
        return data


# =============================================================================
# RESOLUTION
# =============================================================================

class ScoreModel(BaseModel):
    """Hybrid logit score model parameters."""
    type: str = Field(
        default="hybrid_logit",
        description="Score model identifier"
    )
    prior_logit: float = Field(
        default=DEFAULT_PRIOR_LOGIT,
        description="Starting logit before any evidence"
    )
    epsilon: float = Field(
        default=DEFAULT_EPSILON,
        gt=0.0, lt=0.5,
        description="Clamp applied to raw values before taking the logit"
    )
    calibration: Calibration = Field(
        default=Calibration.SIGMOID,
        description="sigmoid returns a probability, none the raw logit"
    )

    model_config = {
        'frozen': True,
    }


class DecisionConfig(BaseModel):
    """Decision policy parameters."""
    policy: DecisionPolicy = Field(
        default=DecisionPolicy.WINNER_TAKE_ALL,
        description="winner_take_all or top_k"
    )
    min_conf: float = Field(
        default=DEFAULT_MIN_CONF,
        description="Minimum best score to accept"
    )
    min_margin: float = Field(
        default=DEFAULT_MIN_MARGIN,
        description="Minimum gap between best and runner-up to accept"
    )
    confirm_threshold: float = Field(
        default=DEFAULT_CONFIRM_THRESHOLD,
        description="Best score below this always asks the user to confirm"
    )
    top_k: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of results for the top_k policy"
    )

    model_config = {
        'frozen': True,
    }


class Resolution(BaseModel):
    """Score model and decision parameters of a concept."""
    score_model: ScoreModel = Field(default_factory=ScoreModel)
    decision: DecisionConfig = Field(default_factory=DecisionConfig)

    model_config = {
        'frozen': True,
    }


# =============================================================================
# CONCEPT (main model)
# =============================================================================

class Concept(BaseModel):
    """
    Complete definition of a matchable concept.

    Example:
        concept = Concept(
            concept_id="concept:email@1.0.0",
            signals=[
                Signal(
                    signal_id="ac",
                    evaluator="dom.attr_in",
                    params={"attr": "autocomplete", "values": ["email"]},
                    mode=SignalMode.BAYES,
                    llr_when_true=3.0,
                ),
            ],
            resolution=Resolution(
                score_model=ScoreModel(prior_logit=-1.0),
                decision=DecisionConfig(min_conf=0.75, min_margin=0.1),
            ),
        )
    """

    # Identity
    concept_id: str = Field(
        description="Concept identifier (falls back to uuid)"
    )
    uuid: Optional[str] = Field(
        default=None,
        description="Stable document uuid"
    )
    concept_type: Optional[str] = Field(
        default=None,
        description="Type tag, e.g. type:email_field"
    )
    labels: list[str] = Field(
        default_factory=list,
        description="Human readable labels"
    )

    # Evidence
    signals: list[Signal] = Field(
        default_factory=list,
        description="Ordered evidence signals"
    )

    # Scoring and decision
    resolution: Resolution = Field(
        default_factory=Resolution,
        description="Score model and decision parameters"
    )

    model_config = {
        'frozen': True,
    }

    @model_validator(mode='before')
    @classmethod
    def fill_identity(cls, data: Any) -> Any:
        """Use uuid as concept_id when the document has no concept_id."""
        if isinstance(data, dict) and not data.get('concept_id') and data.get('uuid'):
            data = {**data, 'concept_id': data['uuid']}
        return data

    @property
    def score_model(self) -> ScoreModel:
        return self.resolution.score_model

    @property
    def decision(self) -> DecisionConfig:
        return self.resolution.decision

    @property
    def min_conf(self) -> float:
        """Minimum confidence a candidate needs to be assigned to this concept."""
        return self.resolution.decision.min_conf

    def get_signal(self, signal_id: str) -> Optional[Signal]:
        """Get a signal by id."""
        for signal in self.signals:
            if signal.signal_id == signal_id:
                return signal
        return None

    def evaluator_names(self) -> list[str]:
        """Evaluator names used by this concept, in signal order."""
        return [signal.evaluator for signal in self.signals]


__all__ = [
    # Enums
    'SignalMode',
    'Calibration',
    'DecisionPolicy',
    'RepresentationKind',
    # Models
    'Signal',
    'ScoreModel',
    'DecisionConfig',
    'Resolution',
    'Concept',
]
