# Path: cpms/core/logger/ipo_logging.py
"""
IPO-Aware Logging for cpms

Input-Process-Output separated logging for the matching engine.

Layers:
- INPUT (document loader, schema compiler, observation builder, CLI)
- PROCESS (evaluators, scoring, explainer, pattern resolver)
- OUTPUT (formatters)

When a log directory is configured each layer gets its own file plus a
combined full_activity.log. Without one, records go to the console only.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s'
CONSOLE_FORMAT = '[%(levelname)s] %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LAYERS = ('input', 'process', 'output')


class IPOFilter(logging.Filter):
    """Filter logs by IPO layer prefix."""

    def __init__(self, layer: str):
        """
        Initialize filter for specific IPO layer.

        Args:
            layer: 'input', 'process', or 'output'
        """
        super().__init__()
        self.layer = layer

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter records by logger name prefix."""
        return record.name == self.layer or record.name.startswith(f'{self.layer}.')


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_ipo_logging(
    log_dir: Optional[Path] = None,
    log_level: str = 'INFO',
    console_output: bool = True
) -> None:
    """
    Set up IPO-aware logging for cpms.

    Creates, when log_dir is given:
    - input_activity.log (INPUT layer)
    - process_activity.log (matching engine)
    - output_activity.log (OUTPUT layer)
    - full_activity.log (all activities combined)

    Args:
        log_dir: Directory for log files, or None for console only
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Whether to also output to console

    Example:
        setup_ipo_logging(
            log_dir=Path('/var/log/cpms'),
            log_level='DEBUG',
            console_output=False
        )
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        root_logger.addHandler(_file_handler(log_dir / 'full_activity.log', formatter))

        for layer in LAYERS:
            handler = _file_handler(log_dir / f'{layer}_activity.log', formatter)
            handler.addFilter(IPOFilter(layer))
            root_logger.addHandler(handler)

    # Console is the fallback when there is nowhere else to write
    if console_output or log_dir is None:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)


def get_input_logger(name: str) -> logging.Logger:
    """
    Get logger for INPUT layer.

    Args:
        name: Logger name (e.g., 'document_loader', 'cli')

    Returns:
        Logger named input.<name>
    """
    return logging.getLogger(f'input.{name}')


def get_process_logger(name: str) -> logging.Logger:
    """
    Get logger for PROCESS layer (matching engine).

    Args:
        name: Logger name (e.g., 'matcher.pattern_resolver')

    Returns:
        Logger named process.<name>

    Example:
        logger = get_process_logger('matcher.coordinator')
        logger.info("[MATCH] concept:email@1.0.0 -> cand_email")
    """
    return logging.getLogger(f'process.{name}')


def get_output_logger(name: str) -> logging.Logger:
    """Get logger for OUTPUT layer (formatters)."""
    return logging.getLogger(f'output.{name}')


__all__ = [
    'IPOFilter',
    'setup_ipo_logging',
    'get_input_logger',
    'get_process_logger',
    'get_output_logger',
]
