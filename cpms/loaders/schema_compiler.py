# Path: cpms/loaders/schema_compiler.py
"""
Schema Compiler

Soft lint and normalization for concept and pattern documents.

Compilation never blocks on lint findings: it reports warnings and
errors, normalizes what it can, and still produces a model. Only a
document the models themselves reject (no concept_id and no uuid, a
malformed signal) raises pydantic.ValidationError.

Normalization:
- weight clamped to [-10, 10]
- llr_when_true / llr_when_false clamped to [-20, 20]
- prior_logit clamped to [-10, 10]
- non-finite numbers removed so the model default applies
- signals naming an evaluator outside the allow-list are dropped
- pattern top_k raised to at least 1, max_repairs to at least 0

The input document is never modified; compilation works on a deep copy.
"""

import copy
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from cpms.constants import (
    CONCEPT_KIND,
    PATTERN_KIND,
    KNOWN_CONSTRAINT_TYPES,
    CONSTRAINT_REQUIRED_CONCEPTS,
    WEIGHT_RANGE,
    LLR_RANGE,
    PRIOR_LOGIT_RANGE,
    EvaluatorName,
)
from cpms.core.logger import get_input_logger
from cpms.process.matcher.models import Concept, Pattern


LLR_KEYS = ('llr_when_true', 'llr_when_false')


@dataclass
class LintReport:
    """
    Findings of a lint or compile run.

    Attributes:
        warnings: Problems that were tolerated or normalized away
        errors: Problems that make the document suspect (still compiled)
        dropped_signals: Signals removed by the compiler
    """
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    dropped_signals: list[dict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'ok': self.ok,
            'warnings': list(self.warnings),
            'errors': list(self.errors),
            'dropped_signals': list(self.dropped_signals),
        }


@dataclass
class CompiledConcept:
    """A compiled concept with its normalized document and report."""
    concept: Concept
    document: dict
    report: LintReport


@dataclass
class CompiledPattern:
    """A compiled pattern with its normalized document and report."""
    pattern: Pattern
    document: dict
    report: LintReport


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return max(lo, min(hi, value))


class SchemaCompiler:
    """
    Lints and normalizes concept and pattern documents.

    Example:
        compiler = SchemaCompiler()
        compiled = compiler.compile_concept(document)
        for warning in compiled.report.warnings:
            print(warning)
        concept = compiled.concept
    """

    def __init__(self, allowed_evaluators: Optional[Iterable[str]] = None):
        """
        Initialize compiler.

        Args:
            allowed_evaluators: Evaluator names signals may use
                               (the built-ins when None)
        """
        self.logger = get_input_logger('schema_compiler')
        if allowed_evaluators is None:
            allowed_evaluators = [name.value for name in EvaluatorName]
        self.allowed_evaluators = frozenset(allowed_evaluators)

    # -------------------------------------------------------------------------
    # Concepts
    # -------------------------------------------------------------------------

    def lint_concept(self, document: Any) -> LintReport:
        """
        Lint a concept document without changing it.

        Args:
            document: Raw concept document

        Returns:
            LintReport (dropped_signals is always empty here)
        """
        report = LintReport()

        if not isinstance(document, dict):
            report.errors.append("concept document must be a mapping")
            return report

        kind = document.get('kind')
        if kind is None:
            report.warnings.append(f"kind missing; expected {CONCEPT_KIND}")
        elif kind != CONCEPT_KIND:
            report.errors.append(f"kind must be {CONCEPT_KIND}, got {kind!r}")

        if not document.get('concept_id') and not document.get('uuid'):
            report.errors.append("concept_id and uuid both missing")
        elif not document.get('uuid'):
            report.warnings.append("uuid missing")

        labels = document.get('labels')
        if not isinstance(labels, list) or not labels:
            report.warnings.append("labels should be a non-empty list")

        if not document.get('resolution'):
            report.warnings.append("resolution missing; defaults will apply")

        signals = document.get('signals')
        if signals is None:
            report.warnings.append("signals missing")
            return report
        if not isinstance(signals, list):
            report.errors.append("signals must be a list")
            return report

        seen_ids = set()
        for index, signal in enumerate(signals):
            self._lint_signal(signal, index, seen_ids, report)

        return report

    def _lint_signal(self, signal: Any, index: int, seen_ids: set, report: LintReport) -> None:
        if not isinstance(signal, dict):
            report.errors.append(f"signal #{index} must be a mapping")
            return

        signal_id = signal.get('signal_id') or f'#{index}'
        if signal_id in seen_ids:
            report.warnings.append(f"signal {signal_id} appears more than once")
        seen_ids.add(signal_id)

        evaluator = signal.get('evaluator')
        if not evaluator:
            report.warnings.append(f"signal {signal_id} missing evaluator")
        elif evaluator not in self.allowed_evaluators:
            report.warnings.append(
                f"unknown evaluator '{evaluator}' in signal {signal_id} "
                f"(will be dropped by the compiler)"
            )

        for key in ('weight',) + LLR_KEYS:
            value = signal.get(key)
            if _is_number(value) and not math.isfinite(value):
                report.warnings.append(f"signal {signal_id} {key} is not finite")

    def compile_concept(self, document: dict) -> CompiledConcept:
        """
        Lint, normalize and validate a concept document.

        Args:
            document: Raw concept document (not modified)

        Returns:
            CompiledConcept holding the Concept model

        Raises:
            pydantic.ValidationError: If the normalized document is not a valid concept
        """
        report = self.lint_concept(document)
        normalized = copy.deepcopy(document)

        score_model = (normalized.get('resolution') or {}).get('score_model')
        if isinstance(score_model, dict):
            self._normalize_number(score_model, 'prior_logit', PRIOR_LOGIT_RANGE)

        kept = []
        for signal in normalized.get('signals') or []:
            if not isinstance(signal, dict):
                continue
            evaluator = signal.get('evaluator')
            if evaluator and evaluator not in self.allowed_evaluators:
                report.dropped_signals.append({
                    'signal_id': signal.get('signal_id'),
                    'reason': 'unknown_evaluator',
                    'evaluator': evaluator,
                })
                continue
            self._normalize_number(signal, 'weight', WEIGHT_RANGE)
            for key in LLR_KEYS:
                self._normalize_number(signal, key, LLR_RANGE)
            kept.append(signal)
        normalized['signals'] = kept

        concept = Concept.model_validate(normalized)

        if report.dropped_signals:
            self.logger.warning(
                f"Dropped {len(report.dropped_signals)} signals from "
                f"{concept.concept_id}: "
                f"{[d['evaluator'] for d in report.dropped_signals]}"
            )
        for error in report.errors:
            self.logger.warning(f"{concept.concept_id}: {error}")

        return CompiledConcept(concept=concept, document=normalized, report=report)

    # -------------------------------------------------------------------------
    # Patterns
    # -------------------------------------------------------------------------

    def lint_pattern(self, document: Any) -> LintReport:
        """Lint a pattern document without changing it."""
        report = LintReport()

        if not isinstance(document, dict):
            report.errors.append("pattern document must be a mapping")
            return report

        kind = document.get('kind')
        if kind is not None and kind != PATTERN_KIND:
            report.errors.append(f"kind must be {PATTERN_KIND}, got {kind!r}")

        if not document.get('pattern_id') and not document.get('uuid'):
            report.errors.append("pattern_id and uuid both missing")

        includes = document.get('includes') or []
        if not includes:
            report.warnings.append("includes is empty")

        for constraint in document.get('constraints') or []:
            constraint_type = constraint.get('type') if isinstance(constraint, dict) else None
            if constraint_type not in KNOWN_CONSTRAINT_TYPES:
                report.warnings.append(f"unknown constraint type {constraint_type!r}")
                continue
            if constraint_type == CONSTRAINT_REQUIRED_CONCEPTS:
                ids = (constraint.get('params') or {}).get('ids') or []
                for concept_id in ids:
                    if concept_id not in includes:
                        report.warnings.append(
                            f"required concept {concept_id} is not included"
                        )

        strategy = document.get('strategy') or {}
        top_k = strategy.get('top_k')
        if _is_number(top_k) and top_k < 1:
            report.warnings.append(f"strategy.top_k {top_k} raised to 1")
        max_repairs = strategy.get('max_repairs')
        if _is_number(max_repairs) and max_repairs < 0:
            report.warnings.append(f"strategy.max_repairs {max_repairs} raised to 0")

        return report

    def compile_pattern(self, document: dict) -> CompiledPattern:
        """
        Lint, normalize and validate a pattern document.

        Raises:
            pydantic.ValidationError: If the normalized document is not a valid pattern
        """
        report = self.lint_pattern(document)
        normalized = copy.deepcopy(document)

        strategy = normalized.get('strategy')
        if isinstance(strategy, dict):
            if _is_number(strategy.get('top_k')):
                strategy['top_k'] = max(1, int(strategy['top_k']))
            if _is_number(strategy.get('max_repairs')):
                strategy['max_repairs'] = max(0, int(strategy['max_repairs']))

        pattern = Pattern.model_validate(normalized)
        for error in report.errors:
            self.logger.warning(f"{pattern.pattern_id}: {error}")

        return CompiledPattern(pattern=pattern, document=normalized, report=report)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _normalize_number(self, data: dict, key: str, bounds: tuple[float, float]) -> None:
        """Clamp a finite number into bounds; remove a non-finite one."""
        value = data.get(key)
        if not _is_number(value):
            return
        if not math.isfinite(value):
            del data[key]
            return
        data[key] = _clamp(value, bounds)


__all__ = [
    'LintReport',
    'CompiledConcept',
    'CompiledPattern',
    'SchemaCompiler',
]
