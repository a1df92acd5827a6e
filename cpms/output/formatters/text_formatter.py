# Path: cpms/output/formatters/text_formatter.py
"""
Text Formatter

Renders matching results as ASCII text suitable for console display
and plain-text file output. Each result type has its own renderer;
anything else falls back to indented JSON.
"""

import json
from typing import Any

from cpms.constants import MENU_HEADER, MENU_SEPARATOR, OutputFormat
from cpms.process.matcher.models import (
    Assignment,
    ConceptExplanation,
    Decision,
    Observation,
    ScoredCandidate,
)
from .base_formatter import BaseFormatter, to_data

DIVIDER = MENU_HEADER
SUB_DIVIDER = MENU_SEPARATOR


def _yes_no(flag: bool) -> str:
    return 'yes' if flag else 'no'


def _scored(candidate) -> str:
    if candidate is None:
        return '[none]'
    return f"{candidate.candidate_id} (p={candidate.p:.4f})"


class TextFormatter(BaseFormatter):
    """Renders results as ASCII text."""

    @property
    def format_name(self) -> str:
        return OutputFormat.TEXT.value

    @property
    def file_extension(self) -> str:
        return '.txt'

    def format_result(self, result: Any) -> str:
        """Render a result as text."""
        lines = self._render(result)
        lines.append('')
        return '\n'.join(lines)

    def _render(self, result: Any) -> list[str]:
        """Dispatch to type-specific renderer."""
        if isinstance(result, Decision):
            return self._render_decision(result)
        if isinstance(result, ConceptExplanation):
            return self._render_explanation(result)
        if isinstance(result, Assignment):
            return self._render_assignment(result)
        if isinstance(result, Observation):
            return self._render_observation(result)
        if isinstance(result, tuple) and len(result) == 2:
            return self._render(result[0]) + self._render(result[1])
        if isinstance(result, list) and all(isinstance(c, ScoredCandidate) for c in result):
            return self._render_top_k(result)
        return self._render_generic(result)

    def _header(self, title: str) -> list[str]:
        return ['', DIVIDER, f"  {title}", DIVIDER]

    def _render_ranked(self, ranked: list[ScoredCandidate]) -> list[str]:
        lines = []
        for position, candidate in enumerate(ranked, start=1):
            lines.append(f"    {position:3d}. {candidate.candidate_id:30s} {candidate.p:12.6f}")
        return lines

    def _render_decision(self, decision: Decision) -> list[str]:
        """Render a winner-take-all decision."""
        lines = self._header(f"MATCH: {decision.concept_id or '[concept]'}")
        status = 'ACCEPTED' if decision.accepted else 'NOT ACCEPTED'
        lines.append(f"    Status:        {status}")
        lines.append(f"    Confirm:       {_yes_no(decision.needs_user_confirmation)}")
        lines.append(f"    Best:          {_scored(decision.best)}")
        lines.append(f"    Runner-up:     {_scored(decision.runner_up)}")
        lines.append(f"    Margin:        {decision.margin:.4f}")
        lines.append('')
        lines.append(f"  RANKED ({len(decision.ranked)}):")
        lines.append(SUB_DIVIDER)
        lines.extend(self._render_ranked(decision.ranked))
        return lines

    def _render_top_k(self, ranked: list[ScoredCandidate]) -> list[str]:
        lines = self._header(f"TOP {len(ranked)}")
        lines.extend(self._render_ranked(ranked))
        return lines

    def _render_explanation(self, explanation: ConceptExplanation) -> list[str]:
        """Render per-candidate score traces."""
        lines = self._render_decision(explanation.decision)
        lines[2] = f"  EXPLAIN: {explanation.concept_id}"

        for trace in explanation.candidates:
            lines.append('')
            lines.append(
                f"  {trace.candidate_id}: p={trace.p:.6f} "
                f"(prior {trace.prior_logit:+.3f}, logit {trace.total_logit:+.3f})"
            )
            lines.append(SUB_DIVIDER)
            for signal in trace.signals:
                lines.append(
                    f"    {signal.signal_id:20s} {signal.evaluator:28s} "
                    f"{signal.mode:6s} raw={signal.raw:.2f} {signal.contribution:+9.3f}"
                )
        return lines

    def _render_assignment(self, assignment: Assignment) -> list[str]:
        """Render a pattern assignment and its repair trace."""
        trace = assignment.trace
        lines = self._header(f"PATTERN: {assignment.pattern_id}")

        lines.append('')
        lines.append(f"  ASSIGNED ({len(assignment.assigned)}):")
        lines.append(SUB_DIVIDER)
        for concept_id, candidate_id in assignment.assigned.items():
            p = assignment.scores.get(concept_id)
            p_str = f"{p:.4f}" if p is not None else 'N/A'
            lines.append(f"    [OK] {concept_id:35s} -> {candidate_id:20s} ({p_str})")
        for concept_id in assignment.unassigned:
            tag = '[!!]' if concept_id in trace.missing_required else '[--]'
            lines.append(f"    {tag} {concept_id}")

        if trace.repairs:
            lines.append('')
            lines.append(f"  REPAIRS ({len(trace.repairs)}):")
            lines.append(SUB_DIVIDER)
            for repair in trace.repairs:
                if repair.holder:
                    lines.append(
                        f"    #{repair.iteration} {repair.type.value}: {repair.concept_id} takes "
                        f"{repair.candidate_id}, {repair.holder} -> {repair.holder_to} "
                        f"(gain {repair.gain:+.4f})"
                    )
                else:
                    lines.append(
                        f"    #{repair.iteration} {repair.type.value}: {repair.concept_id} -> "
                        f"{repair.candidate_id} (p={repair.p:.4f})"
                    )

        lines.append('')
        lines.append(f"    Repair passes:     {trace.iterations}")
        lines.append(f"    Converged:         {_yes_no(trace.converged)}")
        lines.append(f"    Total score:       {assignment.total_score:.4f}")
        missing = ', '.join(trace.missing_required) if trace.missing_required else 'none'
        lines.append(f"    Missing required:  {missing}")
        return lines

    def _render_observation(self, observation: Observation) -> list[str]:
        """Render the candidates of an observation."""
        lines = self._header(f"OBSERVATION: {observation.page_id}")
        for candidate in observation.candidates:
            dom = candidate.dom
            if dom is None:
                lines.append(f"    {candidate.candidate_id}")
                continue
            describe = ' '.join(
                f"{key}={value!r}" for key, value in (
                    ('tag', dom.tag), ('type', dom.type), ('role', dom.role),
                    ('label', dom.label_text), ('name', dom.attrs.get('name')),
                ) if value
            )
            lines.append(f"    {candidate.candidate_id:10s} {describe}")
        return lines

    def _render_generic(self, result: Any) -> list[str]:
        """Fallback renderer for unknown result types."""
        return [json.dumps(to_data(result), indent=2, ensure_ascii=False, default=str)]


__all__ = ['TextFormatter']
