# Path: cpms/process/__init__.py
"""
Process Layer for cpms

The PROCESS layer handles all matching operations:
- matcher/evaluators - Named evidence evaluators
- matcher/scoring - Hybrid logit scoring, decisions, explanations
- matcher/engine - Coordinator and pattern resolution

All components follow the IPO pattern:
- Read from INPUT layer (loaders)
- Process data (scoring, assignment)
- Prepare for OUTPUT layer (formatters)
"""

from cpms.process.matcher import MatchingCoordinator, PatternResolver, ConceptExplainer

__all__ = [
    'MatchingCoordinator',
    'PatternResolver',
    'ConceptExplainer',
]
