# Path: cpms/loaders/__init__.py
"""
cpms Loaders Package

INPUT layer: everything that turns files and pages into models.

Components:
    - DocumentLoader: Concept, pattern and observation documents (YAML/JSON)
    - SchemaCompiler: Soft lint and normalization of documents
    - ObservationBuilder: Form candidates extracted from HTML

Example:
    from cpms.loaders import DocumentLoader, ObservationBuilder

    loader = DocumentLoader()
    pattern = loader.get_pattern('pattern:login@1.0.0')
    concepts = loader.concepts_for(pattern)

    observation = ObservationBuilder().build_from_html(html)
"""

from .schema_compiler import (
    LintReport,
    CompiledConcept,
    CompiledPattern,
    SchemaCompiler,
)
from .document_loader import DocumentLoader, DOCUMENT_SUFFIXES
from .observation_builder import ObservationBuilder


__all__ = [
    'LintReport',
    'CompiledConcept',
    'CompiledPattern',
    'SchemaCompiler',
    'DocumentLoader',
    'DOCUMENT_SUFFIXES',
    'ObservationBuilder',
]
