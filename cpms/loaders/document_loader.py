# Path: cpms/loaders/document_loader.py
"""
Document Loader

Loads concept, pattern and observation documents from YAML or JSON
files and turns them into models.

Dictionary layout:
    <dictionary>/concepts/**/*.yaml|*.yml|*.json
    <dictionary>/patterns/**/*.yaml|*.yml|*.json

Loading a single file raises on malformed input. Scanning a dictionary
directory logs the failure and moves on to the next file.
"""

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from cpms.core.logger import get_input_logger
from cpms.dictionary import DICTIONARY_DIR
from cpms.process.matcher.models import Concept, Observation, Pattern
from .schema_compiler import LintReport, SchemaCompiler


YAML_SUFFIXES = ('.yaml', '.yml')
JSON_SUFFIXES = ('.json',)
DOCUMENT_SUFFIXES = YAML_SUFFIXES + JSON_SUFFIXES

CONCEPTS_DIR = 'concepts'
PATTERNS_DIR = 'patterns'


class DocumentLoader:
    """
    Loads CPMS documents from files and dictionary directories.

    Example:
        loader = DocumentLoader(Path('dictionary'))
        concepts = loader.load_concepts()    # concept_id -> Concept
        patterns = loader.load_patterns()    # pattern_id -> Pattern

        observation = loader.load_observation(Path('login_page.json'))
    """

    def __init__(
        self,
        dictionary_path: Optional[Path] = None,
        compiler: Optional[SchemaCompiler] = None,
        compile_documents: bool = True
    ):
        """
        Initialize document loader.

        Args:
            dictionary_path: Dictionary directory.
                           Defaults to the dictionary shipped with cpms
            compiler: Compiler used when compile_documents is set
            compile_documents: Lint and normalize documents before validation
        """
        self.logger = get_input_logger('document_loader')

        if dictionary_path is None:
            self.dictionary_path = DICTIONARY_DIR
        else:
            self.dictionary_path = Path(dictionary_path)

        self.concepts_path = self.dictionary_path / CONCEPTS_DIR
        self.patterns_path = self.dictionary_path / PATTERNS_DIR

        self.compiler = compiler if compiler is not None else SchemaCompiler()
        self.compile_documents = compile_documents

        self.reports: dict[str, LintReport] = {}
        self._concepts_cache: Optional[dict[str, Concept]] = None
        self._patterns_cache: Optional[dict[str, Pattern]] = None

    # -------------------------------------------------------------------------
    # Raw documents
    # -------------------------------------------------------------------------

    def read_document(self, file_path: Path) -> Any:
        """
        Parse a YAML or JSON file.

        Args:
            file_path: Path to the document

        Returns:
            Parsed document

        Raises:
            ValueError: If the suffix is not supported or the file is empty
            yaml.YAMLError / json.JSONDecodeError: If the file does not parse
        """
        file_path = Path(file_path)
        suffix = file_path.suffix.lower()
        if suffix not in DOCUMENT_SUFFIXES:
            raise ValueError(f"Unsupported document type: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            if suffix in JSON_SUFFIXES:
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        if data is None:
            raise ValueError(f"Empty document: {file_path}")
        return data

    # -------------------------------------------------------------------------
    # Single documents
    # -------------------------------------------------------------------------

    def concept_from_dict(self, document: dict) -> Concept:
        """Build a Concept from a raw document, compiling it if enabled."""
        if not self.compile_documents:
            return Concept.model_validate(document)

        compiled = self.compiler.compile_concept(document)
        self.reports[compiled.concept.concept_id] = compiled.report
        for warning in compiled.report.warnings:
            self.logger.debug(f"{compiled.concept.concept_id}: {warning}")
        return compiled.concept

    def pattern_from_dict(self, document: dict) -> Pattern:
        """Build a Pattern from a raw document, compiling it if enabled."""
        if not self.compile_documents:
            return Pattern.model_validate(document)

        compiled = self.compiler.compile_pattern(document)
        self.reports[compiled.pattern.pattern_id] = compiled.report
        for warning in compiled.report.warnings:
            self.logger.debug(f"{compiled.pattern.pattern_id}: {warning}")
        return compiled.pattern

    def load_concept(self, file_path: Path) -> Concept:
        """Load one concept file."""
        return self.concept_from_dict(self._read_mapping(file_path))

    def load_pattern(self, file_path: Path) -> Pattern:
        """Load one pattern file."""
        return self.pattern_from_dict(self._read_mapping(file_path))

    def load_observation(self, file_path: Path) -> Observation:
        """
        Load one observation file.

        Raises:
            pydantic.ValidationError: If the document is not an observation
                                      (e.g. duplicate candidate ids)
        """
        return Observation.model_validate(self._read_mapping(file_path))

    # -------------------------------------------------------------------------
    # Dictionary scanning
    # -------------------------------------------------------------------------

    def load_concepts(self, use_cache: bool = True) -> dict[str, Concept]:
        """
        Load every concept in the dictionary.

        Args:
            use_cache: Whether to use cached results

        Returns:
            Dictionary mapping concept_id to Concept
        """
        if use_cache and self._concepts_cache is not None:
            return self._concepts_cache

        concepts = self._scan(self.concepts_path, self.concept_from_dict, 'concept_id')
        self._concepts_cache = concepts
        return concepts

    def load_patterns(self, use_cache: bool = True) -> dict[str, Pattern]:
        """
        Load every pattern in the dictionary.

        Args:
            use_cache: Whether to use cached results

        Returns:
            Dictionary mapping pattern_id to Pattern
        """
        if use_cache and self._patterns_cache is not None:
            return self._patterns_cache

        patterns = self._scan(self.patterns_path, self.pattern_from_dict, 'pattern_id')
        self._patterns_cache = patterns
        return patterns

    def get_concept(self, concept_id: str) -> Optional[Concept]:
        """Get a dictionary concept by id."""
        return self.load_concepts().get(concept_id)

    def get_pattern(self, pattern_id: str) -> Optional[Pattern]:
        """Get a dictionary pattern by id."""
        return self.load_patterns().get(pattern_id)

    def concepts_for(self, pattern: Pattern) -> dict[str, Concept]:
        """Dictionary concepts included by a pattern (missing ones are left out)."""
        concepts = self.load_concepts()
        return {cid: concepts[cid] for cid in pattern.includes if cid in concepts}

    def clear_cache(self) -> None:
        """Forget cached dictionary contents."""
        self._concepts_cache = None
        self._patterns_cache = None
        self.reports.clear()

    def _scan(self, directory: Path, build, id_field: str) -> dict:
        documents: dict[str, Any] = {}

        if not directory.exists():
            self.logger.warning(f"Directory not found: {directory}")
            return documents

        files = sorted(
            p for p in directory.rglob('*')
            if p.is_file() and p.suffix.lower() in DOCUMENT_SUFFIXES
        )
        self.logger.info(f"Found {len(files)} document files in {directory}")

        for file_path in files:
            try:
                model = build(self._read_mapping(file_path))
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                self.logger.error(f"Parse error in {file_path}: {e}")
                continue
            except (ValidationError, ValueError) as e:
                self.logger.error(f"Invalid document {file_path}: {e}")
                continue

            doc_id = getattr(model, id_field)
            if doc_id in documents:
                self.logger.warning(f"Duplicate {id_field}: {doc_id} in {file_path}")
            documents[doc_id] = model

        self.logger.info(f"Loaded {len(documents)} documents from {directory}")
        return documents

    def _read_mapping(self, file_path: Path) -> dict:
        data = self.read_document(file_path)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {file_path}, got {type(data).__name__}")
        return data


__all__ = ['DocumentLoader', 'DOCUMENT_SUFFIXES']
