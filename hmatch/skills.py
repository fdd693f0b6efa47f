"""Demonstration extension: an ``expr:`` string schema.

    compile_pattern(skills, "expr:price > 10 and 'sale' in tags")

The body is a restricted expression evaluated against the subject. The
subject is bound to ``_`` and ``locals``; when it is a mapping its keys are
also available as free names. Evaluation errors make the test fail rather
than propagate.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
import logging

from .expr.evaluator import Expression, compile_expression
from .match.knowledge import Knowledge
from .match.testers import Tester

logger = logging.getLogger(__name__)

skills = Knowledge()


@dataclass(frozen=True)
class ExpressionTester(Tester):
    expression: Expression

    def test(self, value: Any) -> bool:
        namespace = value if isinstance(value, Mapping) else None
        try:
            return bool(self.expression(namespace, value, value))
        except Exception as e:
            logger.debug(f"expr test failed for {self.expression.source!r}: {e}")
            return False


@skills.string_schema("expr")
def compile_expression_schema(knowledge: Knowledge, body: str) -> Tester:
    return ExpressionTester(compile_expression(body, ("_", "locals")))


__all__ = ["skills", "ExpressionTester"]
