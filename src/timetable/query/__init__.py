"""
Query Package

Criteria parsing, predicate trees and query compilation.
"""

from .engine import CompiledQuery, QueryEngine
from .params import parse_criteria

__all__ = ["CompiledQuery", "QueryEngine", "parse_criteria"]
