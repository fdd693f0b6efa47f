"""Exception types raised by the pattern compiler and the heuristic engine."""

from __future__ import annotations
from typing import Any, List, Optional


class HeuristicMatchError(Exception):
    """Base class for all errors raised by hmatch."""


class CompileError(HeuristicMatchError):
    """A pattern could not be compiled into a tester.

    Raised for unknown object-schema discriminators and malformed schema
    arguments. Carries the offending schema name when known.
    """

    def __init__(self, message: str, schema: Optional[str] = None, allowed: Optional[List[str]] = None):
        self.schema = schema
        self.allowed = allowed
        full_msg = message
        if allowed:
            full_msg += f". Allowed: {', '.join(sorted(allowed))}"
        super().__init__(full_msg)


class ExpressionError(HeuristicMatchError):
    """An extractor or scorer expression is invalid or failed to resolve a name."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source is not None:
            message = f"{message} in expression: {source!r}"
        super().__init__(message)


class BadScorerResult(HeuristicMatchError):
    """A comparison callable returned a value the score normalizer cannot interpret."""

    def __init__(self, result: Any):
        self.result = result
        super().__init__(f"Bad result: {result!r}")


__all__ = ["HeuristicMatchError", "CompileError", "ExpressionError", "BadScorerResult"]
