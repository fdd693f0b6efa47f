"""Restricted expression language used for rule extractors, scorers and skills."""

from .evaluator import Expression, compile_expression, SAFE_BUILTINS

__all__ = ["Expression", "compile_expression", "SAFE_BUILTINS"]
