# Path: cpms/process/matcher/models/pattern_definition.py
"""
Pattern Definition Model

A pattern is a set of concepts resolved jointly against one observation
(e.g. a login form: email, password, submit). Each candidate may be
claimed by at most one of the pattern's concepts.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from cpms.constants import (
    STRATEGY_GREEDY_REPAIR,
    CONSTRAINT_REQUIRED_CONCEPTS,
)


class PatternStrategy(BaseModel):
    """
    Assignment strategy parameters.

    top_k and max_repairs are left unset when the document omits them;
    the resolver then applies its configured defaults.
    """
    type: str = Field(
        default=STRATEGY_GREEDY_REPAIR,
        description="Assignment strategy identifier"
    )
    top_k: Optional[int] = Field(
        default=None,
        ge=1,
        description="Candidates kept per concept"
    )
    max_repairs: Optional[int] = Field(
        default=None,
        ge=0,
        description="Maximum repair passes"
    )

    model_config = {
        'frozen': True,
    }


class PatternConstraint(BaseModel):
    """A constraint on the final assignment."""
    type: str = Field(
        description="Constraint type, e.g. required_concepts"
    )
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Constraint parameters"
    )

    model_config = {
        'frozen': True,
    }


class Pattern(BaseModel):
    """
    Complete definition of a multi-concept pattern.

    Example:
        pattern = Pattern(
            pattern_id="pattern:login@1.0.0",
            includes=["concept:email@1.0.0", "concept:password@1.0.0"],
            strategy=PatternStrategy(top_k=5, max_repairs=10),
            constraints=[
                PatternConstraint(
                    type="required_concepts",
                    params={"ids": ["concept:email@1.0.0"]},
                )
            ],
        )
    """
    pattern_id: str = Field(
        description="Pattern identifier (falls back to uuid)"
    )
    uuid: Optional[str] = Field(
        default=None,
        description="Stable document uuid"
    )
    labels: list[str] = Field(
        default_factory=list,
        description="Human readable labels"
    )
    includes: list[str] = Field(
        default_factory=list,
        description="Ordered ids of the included concepts"
    )
    strategy: PatternStrategy = Field(
        default_factory=PatternStrategy,
        description="Assignment strategy"
    )
    constraints: list[PatternConstraint] = Field(
        default_factory=list,
        description="Constraints on the final assignment"
    )

    model_config = {
        'frozen': True,
    }

    @model_validator(mode='before')
    @classmethod
    def fill_identity(cls, data: Any) -> Any:
        """Use uuid as pattern_id when the document has no pattern_id."""
        if isinstance(data, dict) and not data.get('pattern_id') and data.get('uuid'):
            data = {**data, 'pattern_id': data['uuid']}
        return data

    def required_concept_ids(self) -> list[str]:
        """
        Concept ids listed by required_concepts constraints.

        Returns:
            Ids in constraint order, without duplicates
        """
        required: list[str] = []
        for constraint in self.constraints:
            if constraint.type != CONSTRAINT_REQUIRED_CONCEPTS:
                continue
            for concept_id in constraint.params.get('ids') or []:
                if concept_id not in required:
                    required.append(concept_id)
        return required


__all__ = ['PatternStrategy', 'PatternConstraint', 'Pattern']
