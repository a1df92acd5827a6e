# Path: cpms/core/logger/__init__.py
"""
cpms Logger Package

IPO-aware logging for the matching system.

Provides separate log streams for:
- INPUT layer (documents, observations, CLI)
- PROCESS layer (matching engine)
- OUTPUT layer (formatters)
"""

from .ipo_logging import (
    IPOFilter,
    setup_ipo_logging,
    get_input_logger,
    get_process_logger,
    get_output_logger,
)

__all__ = [
    'IPOFilter',
    'setup_ipo_logging',
    'get_input_logger',
    'get_process_logger',
    'get_output_logger',
]
