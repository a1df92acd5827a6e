# Path: cpms/process/matcher/engine/__init__.py
"""
Matching Engine Core

Core components of the matching engine:
- MatchingCoordinator: Main orchestrator
- PatternResolver: Greedy assignment with local repair
"""

from .pattern_resolver import PatternResolver, ConceptSource
from .coordinator import MatchingCoordinator, MatchOutcome

__all__ = [
    'PatternResolver',
    'ConceptSource',
    'MatchingCoordinator',
    'MatchOutcome',
]
