# Path: cpms/process/matcher/models/observation.py
"""
Observation Models

An observation is the ordered set of candidates extracted from one page
or scene. Candidates carry modality-specific evidence: DOM attributes and
text for page elements, OCR tokens for vision candidates.

Evidence models allow extra fields so custom evaluators can read
extractor-specific data that the built-ins ignore.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator


class DomEvidence(BaseModel):
    """
    DOM evidence for a candidate element.

    Attributes:
        attrs: Raw element attributes (name, id, autocomplete, type, ...)
        label_text: Text of the associated <label>
        placeholder: Placeholder text
        aria_label: aria-label text
        nearby_text: Text found near the element (string or list of strings)
        role: Explicit or implied ARIA role
        type: Input type
        text: Element text content
        tag: Element tag name
    """
    attrs: dict[str, Any] = Field(default_factory=dict)
    label_text: Optional[str] = None
    placeholder: Optional[str] = None
    aria_label: Optional[str] = None
    nearby_text: Union[str, list[str], None] = None
    role: Optional[str] = None
    type: Optional[str] = None
    text: Optional[str] = None
    tag: Optional[str] = None

    model_config = {
        'frozen': True,
        'extra': 'allow',
    }


class VisionEvidence(BaseModel):
    """Vision evidence: OCR tokens found around the candidate."""
    ocr_nearby: list[str] = Field(default_factory=list)
    bbox: Optional[list[float]] = None

    model_config = {
        'frozen': True,
        'extra': 'allow',
    }


class Candidate(BaseModel):
    """One observed entity eligible to match a concept."""
    candidate_id: str
    dom: Optional[DomEvidence] = None
    vision: Optional[VisionEvidence] = None

    model_config = {
        'frozen': True,
        'extra': 'allow',
    }


class Observation(BaseModel):
    """
    Ordered candidates sharing one page_id.

    Candidate order is significant: ties in score are broken by it.
    """
    page_id: str
    candidates: list[Candidate] = Field(default_factory=list)

    model_config = {
        'frozen': True,
        'extra': 'allow',
    }

    @model_validator(mode='after')
    def check_unique_candidate_ids(self) -> 'Observation':
        """Candidate ids must be unique within an observation."""
        seen = set()
        for candidate in self.candidates:
            if candidate.candidate_id in seen:
                raise ValueError(
                    f"Duplicate candidate_id in observation {self.page_id}: "
                    f"{candidate.candidate_id}"
                )
            seen.add(candidate.candidate_id)
        return self

    @property
    def candidate_ids(self) -> list[str]:
        return [c.candidate_id for c in self.candidates]

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        """Get a candidate by id."""
        for candidate in self.candidates:
            if candidate.candidate_id == candidate_id:
                return candidate
        return None


__all__ = ['DomEvidence', 'VisionEvidence', 'Candidate', 'Observation']
