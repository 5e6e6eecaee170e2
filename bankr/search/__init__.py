"""
Query interpretation pipeline.

raw query -> normalize_query -> AbbreviationMatcher -> build_query -> SearchExecutor
"""

from bankr.search.analysis import build_index, build_mapping
from bankr.search.executor import ResultPage, SearchExecutor
from bankr.search.matcher import AbbreviationMatcher, MatchResult
from bankr.search.normalizer import QueryToken, normalize_query
from bankr.search.query_builder import build_query
from bankr.search.registry import RegistrySnapshot, load_registry

__all__ = [
    "build_index",
    "build_mapping",
    "ResultPage",
    "SearchExecutor",
    "AbbreviationMatcher",
    "MatchResult",
    "QueryToken",
    "normalize_query",
    "build_query",
    "RegistrySnapshot",
    "load_registry",
]
