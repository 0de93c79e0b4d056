"""
Quiz pipeline agent modules.
"""
from .deduplicator import InFlightRequestDeduplicator
from .parser import QuizParser, parse_strict
from .performance_analyzer import PerformanceAnalyzer, get_basic_analysis
from .progress_aggregator import ProgressAggregator
from .provider import GenerationProvider, LangChainGenerationProvider
from .sanitizer import sanitize_response
from .scorer import QuizScorer

__all__ = [
    "InFlightRequestDeduplicator",
    "QuizParser",
    "parse_strict",
    "PerformanceAnalyzer",
    "get_basic_analysis",
    "ProgressAggregator",
    "GenerationProvider",
    "LangChainGenerationProvider",
    "sanitize_response",
    "QuizScorer",
]
