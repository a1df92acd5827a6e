#!/usr/bin/env python3
# Path: cpms/main.py
"""
cpms (Concept/Pattern Matching System) - Main Entry Point

Matches concept and pattern documents against page observations.

Data Flow:
    INPUT:   concept/pattern documents (YAML/JSON), observation JSON or page HTML
    PROCESS: hybrid logit scoring, winner-take-all, greedy + repair assignment
    OUTPUT:  JSON or text on stdout (or --output file)

Usage:
    cpms match   --concept email.yaml --observation page.json
    cpms explain --concept concept:email@1.0.0 --html login.html
    cpms pattern --pattern pattern:login@1.0.0 --html login.html
    cpms observe --html login.html

Exit codes:
    0  success
    1  invalid input or matcher error
    130 interrupted
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from cpms.config_loader import ConfigLoader
from cpms.core.logger import setup_ipo_logging, get_input_logger
from cpms.loaders import DocumentLoader, ObservationBuilder
from cpms.output import FormatterRegistry
from cpms.process.matcher import MatcherError, MatchingCoordinator
from cpms.process.matcher.models import Concept, Observation, Pattern
from cpms.constants import (
    STATUS_OK, STATUS_FAIL, STATUS_INFO,
    MENU_HEADER, OutputFormat,
)


def print_banner() -> None:
    """Print application banner."""
    print(file=sys.stderr)
    print(MENU_HEADER, file=sys.stderr)
    print("  CPMS - Concept/Pattern Matching System", file=sys.stderr)
    print("  Concept scoring and form pattern resolution", file=sys.stderr)
    print(MENU_HEADER, file=sys.stderr)
    print(file=sys.stderr)


def initialize_system(args: argparse.Namespace) -> ConfigLoader:
    """
    Load configuration and set up logging.

    Args:
        args: Parsed command line arguments

    Returns:
        ConfigLoader instance
    """
    config = ConfigLoader()

    log_level = config.get('log_level', 'INFO')
    if args.quiet:
        log_level = 'WARNING'

    setup_ipo_logging(
        log_dir=config.get('log_dir'),
        log_level=log_level,
        console_output=config.get('log_console', True)
    )
    return config


def build_loader(config: ConfigLoader, args: argparse.Namespace) -> DocumentLoader:
    """DocumentLoader for the configured or requested dictionary."""
    dictionary = args.dictionary or config.get('dictionary_dir')
    compile_documents = config.get('compile_documents', True) and not args.no_compile
    return DocumentLoader(dictionary, compile_documents=compile_documents)


# ------------------------------------------------------------------------------
# Input resolution
# ------------------------------------------------------------------------------

def resolve_concept(loader: DocumentLoader, ref: str) -> Concept:
    """
    Resolve a concept from a file path or a dictionary concept_id.

    Raises:
        ValueError: If ref is neither a file nor a known concept_id
    """
    path = Path(ref)
    if path.is_file():
        return loader.load_concept(path)
    concept = loader.get_concept(ref)
    if concept is None:
        raise ValueError(f"Concept not found (no such file or concept_id): {ref}")
    return concept


def resolve_pattern(loader: DocumentLoader, ref: str) -> Pattern:
    """Resolve a pattern from a file path or a dictionary pattern_id."""
    path = Path(ref)
    if path.is_file():
        return loader.load_pattern(path)
    pattern = loader.get_pattern(ref)
    if pattern is None:
        raise ValueError(f"Pattern not found (no such file or pattern_id): {ref}")
    return pattern


def resolve_observation(loader: DocumentLoader, args: argparse.Namespace) -> Observation:
    """Observation from --observation (JSON/YAML) or --html."""
    if args.observation:
        return loader.load_observation(Path(args.observation))
    if args.html:
        return ObservationBuilder().build_from_file(Path(args.html), page_id=args.page_id)
    raise ValueError("An observation is required: use --observation or --html")


def resolve_pattern_concepts(
    loader: DocumentLoader,
    pattern: Pattern,
    refs: Optional[list[str]]
) -> dict[str, Concept]:
    """
    Concepts for a pattern: explicit --concept refs, then the dictionary.

    Included concepts found nowhere are left out, so the matcher reports
    them as missing.
    """
    concepts: dict[str, Concept] = {}
    for ref in refs or []:
        concept = resolve_concept(loader, ref)
        concepts[concept.concept_id] = concept

    dictionary_concepts = loader.load_concepts()
    for concept_id in pattern.includes:
        if concept_id not in concepts and concept_id in dictionary_concepts:
            concepts[concept_id] = dictionary_concepts[concept_id]
    return concepts


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

def run_match(coordinator: MatchingCoordinator, loader: DocumentLoader, args) -> Any:
    concept = resolve_concept(loader, args.concept)
    observation = resolve_observation(loader, args)
    if args.explain:
        return coordinator.match_and_explain(concept, observation)
    return coordinator.match_concept(concept, observation)


def run_explain(coordinator: MatchingCoordinator, loader: DocumentLoader, args) -> Any:
    concept = resolve_concept(loader, args.concept)
    observation = resolve_observation(loader, args)
    return coordinator.explain_concept(concept, observation)


def run_pattern(coordinator: MatchingCoordinator, loader: DocumentLoader, args) -> Any:
    pattern = resolve_pattern(loader, args.pattern)
    concepts = resolve_pattern_concepts(loader, pattern, args.concept)
    observation = resolve_observation(loader, args)
    return coordinator.match_pattern(pattern, concepts, observation)


def run_observe(coordinator: MatchingCoordinator, loader: DocumentLoader, args) -> Any:
    return resolve_observation(loader, args)


COMMANDS = {
    'match': run_match,
    'explain': run_explain,
    'pattern': run_pattern,
    'observe': run_observe,
}


def emit(result: Any, config: ConfigLoader, args: argparse.Namespace) -> None:
    """Render a result and write it to stdout or --output."""
    format_name = args.format or config.get('output_format', OutputFormat.JSON.value)
    options = {}
    if format_name == OutputFormat.JSON.value:
        options['indent'] = config.get('json_indent')

    formatter = FormatterRegistry.get(format_name, **options)
    if formatter is None:
        raise ValueError(
            f"Unknown output format: {format_name} "
            f"(available: {', '.join(FormatterRegistry.get_available())})"
        )

    if args.output:
        path = formatter.write_result(result, Path(args.output))
        if not args.quiet:
            print(f"{STATUS_OK} Wrote {path}", file=sys.stderr)
    else:
        sys.stdout.write(formatter.format_result(result))
        if not args.quiet and format_name == OutputFormat.JSON.value:
            sys.stdout.write('\n')


# ------------------------------------------------------------------------------
# Argument parsing
# ------------------------------------------------------------------------------

def add_observation_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        '--observation', '-o',
        type=str,
        help='Observation document (JSON or YAML)'
    )
    group.add_argument(
        '--html',
        type=str,
        help='HTML page to build the observation from'
    )
    parser.add_argument(
        '--page-id',
        type=str,
        help='page_id for observations built from HTML'
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog='cpms',
        description='cpms - Concept/Pattern Matching System',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cpms match --concept concept:email@1.0.0 --html login.html
  cpms explain --concept email.yaml --observation page.json --format text
  cpms pattern --pattern pattern:payment@1.0.0 --html checkout.html
  cpms observe --html login.html --format text
        """
    )

    parser.add_argument(
        '--format', '-f',
        choices=[f.value for f in OutputFormat],
        help='Output format (default from CPMS_OUTPUT_FORMAT)'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Write the result to this file instead of stdout'
    )
    parser.add_argument(
        '--dictionary', '-d',
        type=str,
        help='Dictionary directory with concepts/ and patterns/'
    )
    parser.add_argument(
        '--no-compile',
        action='store_true',
        help='Validate documents without lint/normalization'
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress banner and status output'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    match_parser = subparsers.add_parser('match', help='Match one concept')
    match_parser.add_argument('--concept', '-c', required=True,
                              help='Concept file or dictionary concept_id')
    match_parser.add_argument('--explain', action='store_true',
                              help='Include the score trace')
    add_observation_arguments(match_parser)

    explain_parser = subparsers.add_parser('explain', help='Explain one concept')
    explain_parser.add_argument('--concept', '-c', required=True,
                                help='Concept file or dictionary concept_id')
    add_observation_arguments(explain_parser)

    pattern_parser = subparsers.add_parser('pattern', help='Resolve a pattern')
    pattern_parser.add_argument('--pattern', '-p', required=True,
                                help='Pattern file or dictionary pattern_id')
    pattern_parser.add_argument('--concept', '-c', action='append',
                                help='Concept file or id (repeatable); '
                                     'others come from the dictionary')
    add_observation_arguments(pattern_parser)

    observe_parser = subparsers.add_parser('observe', help='Build an observation')
    add_observation_arguments(observe_parser)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for cpms.

    Args:
        argv: Command line arguments (sys.argv[1:] when None)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = build_parser().parse_args(argv)

    if not args.quiet and args.format == OutputFormat.TEXT.value:
        print_banner()

    try:
        config = initialize_system(args)
        logger = get_input_logger('main')
        logger.info(f"Running command: {args.command}")

        loader = build_loader(config, args)
        coordinator = MatchingCoordinator.from_config(config)

        result = COMMANDS[args.command](coordinator, loader, args)
        emit(result, config, args)
        return 0

    except MatcherError as e:
        print(f"\n{STATUS_FAIL} Matcher error: {e}", file=sys.stderr)
        return 1

    except ValidationError as e:
        print(f"\n{STATUS_FAIL} Invalid document: {e}", file=sys.stderr)
        return 1

    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"\n{STATUS_FAIL} Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print(f"\n{STATUS_INFO} Interrupted", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
