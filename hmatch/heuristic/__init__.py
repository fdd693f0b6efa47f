"""Heuristic scoring engine: rule compilation, score normalization and execution."""

from .ranges import linear_range, gaussian_range
from .scoring import Score, normalize_result, wrap_score
from .rules import (
    SerializedRule,
    CompiledRule,
    compile_rule,
    compile_rules,
    load_rules,
    compute_extractor,
    compute_scorer,
)
from .engine import ExecutionResult, execute

__all__ = [
    "linear_range",
    "gaussian_range",
    "Score",
    "normalize_result",
    "wrap_score",
    "SerializedRule",
    "CompiledRule",
    "compile_rule",
    "compile_rules",
    "load_rules",
    "compute_extractor",
    "compute_scorer",
    "ExecutionResult",
    "execute",
]
