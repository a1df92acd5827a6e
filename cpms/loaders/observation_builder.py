# Path: cpms/loaders/observation_builder.py
"""
Observation Builder

Builds an Observation from page HTML. Every form control becomes a
candidate, in document order:
- input elements (except type=hidden)
- textarea and select elements
- button elements
- any other element with role="button"

Candidate ids are cand_0, cand_1, ... in that order.

Label text comes from a <label for=...> pointing at the element's id,
else from a wrapping <label>. Buttons use their own text, falling back
to aria-label (and to value for submit/button inputs).
"""

import time
from pathlib import Path
from typing import Optional

import lxml.html
from lxml import etree

from cpms.core.logger import get_input_logger
from cpms.process.matcher.models import Candidate, DomEvidence, Observation


CONTROL_TAGS = frozenset({'input', 'textarea', 'select', 'button'})
BUTTON_INPUT_TYPES = frozenset({'submit', 'button', 'reset', 'image'})
SKIPPED_INPUT_TYPES = frozenset({'hidden'})

CANDIDATE_ID_PREFIX = 'cand_'
PAGE_ID_PREFIX = 'page:'


def _normalize_space(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; None for empty text."""
    if not text:
        return None
    collapsed = ' '.join(text.split())
    return collapsed or None


class ObservationBuilder:
    """
    Extracts form candidates from HTML.

    Example:
        builder = ObservationBuilder()
        observation = builder.build_from_html(html, url="https://example.com/login")
        for candidate in observation.candidates:
            print(candidate.candidate_id, candidate.dom.label_text)
    """

    def __init__(self):
        """Initialize observation builder."""
        self.logger = get_input_logger('observation_builder')

    def build_from_html(
        self,
        html: str,
        page_id: Optional[str] = None,
        url: Optional[str] = None
    ) -> Observation:
        """
        Build an observation from an HTML document or fragment.

        Args:
            html: Page HTML
            page_id: Observation id (defaults to url, then a timestamp id)
            url: Page URL

        Returns:
            Observation with one candidate per form control
        """
        page_id = page_id or url or f'{PAGE_ID_PREFIX}{int(time.time() * 1000)}'
        candidates = self.extract_candidates(html)

        self.logger.info(f"Built observation {page_id} with {len(candidates)} candidates")
        return Observation(page_id=page_id, candidates=candidates)

    def build_from_file(self, file_path: Path, page_id: Optional[str] = None) -> Observation:
        """Build an observation from an HTML file (page_id defaults to the file name)."""
        file_path = Path(file_path)
        html = file_path.read_text(encoding='utf-8')
        return self.build_from_html(html, page_id=page_id or file_path.name)

    def extract_candidates(self, html: str) -> list[Candidate]:
        """
        Extract candidates from HTML.

        Args:
            html: Page HTML

        Returns:
            Candidates in document order
        """
        if not html or not html.strip():
            return []

        try:
            root = lxml.html.fromstring(html)
        except (etree.ParserError, ValueError) as e:
            self.logger.warning(f"Could not parse HTML: {e}")
            return []

        labels_by_for = self._index_labels(root)

        candidates = []
        for element in root.iter():
            if not self._is_candidate(element):
                continue
            dom = self._build_dom(element, labels_by_for)
            candidates.append(Candidate(
                candidate_id=f'{CANDIDATE_ID_PREFIX}{len(candidates)}',
                dom=dom,
            ))

        self.logger.debug(f"Extracted {len(candidates)} candidates")
        return candidates

    # -------------------------------------------------------------------------
    # Element inspection
    # -------------------------------------------------------------------------

    def _tag(self, element) -> Optional[str]:
        # Comments and processing instructions have a non-string tag
        if not isinstance(element.tag, str):
            return None
        return element.tag.lower()

    def _is_candidate(self, element) -> bool:
        tag = self._tag(element)
        if tag is None:
            return False
        if tag == 'input':
            return self._input_type(element) not in SKIPPED_INPUT_TYPES
        if tag in CONTROL_TAGS:
            return True
        return (element.get('role') or '').strip().lower() == 'button'

    def _input_type(self, element) -> str:
        return (element.get('type') or 'text').strip().lower()

    def _is_button(self, element) -> bool:
        tag = self._tag(element)
        if tag == 'button':
            return True
        if tag == 'input':
            return self._input_type(element) in BUTTON_INPUT_TYPES
        return (element.get('role') or '').strip().lower() == 'button'

    def _index_labels(self, root) -> dict[str, str]:
        """Map element id -> text of the first <label for=id>."""
        labels = {}
        for label in root.iter('label'):
            target = label.get('for')
            text = _normalize_space(label.text_content())
            if target and text and target not in labels:
                labels[target] = text
        return labels

    def _wrapping_label_text(self, element) -> Optional[str]:
        for label in element.iterancestors('label'):
            text = label.text_content()
            own = element.text_content()
            if own:
                text = text.replace(own, '', 1)
            return _normalize_space(text)
        return None

    def _build_dom(self, element, labels_by_for: dict[str, str]) -> DomEvidence:
        tag = self._tag(element)
        attrs = {name.lower(): value for name, value in element.attrib.items()}
        is_button = self._is_button(element)

        role = (attrs.get('role') or '').strip().lower() or None
        if role is None and is_button:
            role = 'button'

        if tag == 'input':
            input_type = self._input_type(element)
        elif tag == 'button':
            input_type = (attrs.get('type') or 'submit').strip().lower()
        else:
            input_type = None

        text = None
        if tag == 'input':
            if is_button:
                text = _normalize_space(attrs.get('value'))
        elif is_button:
            text = _normalize_space(element.text_content())

        element_id = attrs.get('id')
        label_text = labels_by_for.get(element_id) if element_id else None
        if label_text is None:
            label_text = self._wrapping_label_text(element)
        if label_text is None and is_button:
            label_text = text or _normalize_space(attrs.get('aria-label'))

        return DomEvidence(
            attrs=attrs,
            label_text=label_text,
            placeholder=attrs.get('placeholder'),
            aria_label=attrs.get('aria-label'),
            role=role,
            type=input_type,
            text=text,
            tag=tag,
        )


__all__ = ['ObservationBuilder']
