"""Top-level package for heuristic-matcher (hmatch).

Two engines share this package:

- :mod:`hmatch.match` compiles declarative patterns into reusable testers.
- :mod:`hmatch.heuristic` compiles rule sets and scores pairs of values.

Version identifier is defined in :mod:`hmatch.version`.
"""

from .version import __version__  # re-export
from .errors import HeuristicMatchError, CompileError, ExpressionError, BadScorerResult
from .match import Knowledge, Tester, compile_pattern
from .heuristic import (
    SerializedRule,
    CompiledRule,
    ExecutionResult,
    Score,
    compile_rule,
    compile_rules,
    load_rules,
    execute,
    wrap_score,
    linear_range,
    gaussian_range,
)

__all__ = [
    "__version__",
    "HeuristicMatchError",
    "CompileError",
    "ExpressionError",
    "BadScorerResult",
    "Knowledge",
    "Tester",
    "compile_pattern",
    "SerializedRule",
    "CompiledRule",
    "ExecutionResult",
    "Score",
    "compile_rule",
    "compile_rules",
    "load_rules",
    "execute",
    "wrap_score",
    "linear_range",
    "gaussian_range",
]
