"""Rule-set executor: weighted similarity between two values.

For each compiled rule the executor extracts one value from each subject,
scores the pair and accumulates ``achieved * strength`` into the score and
``possible * strength`` into the total. Failures never abort the run: they
degrade the aggregate and show up in ``errors`` and ``details`` instead.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union
import logging

from .rules import CompiledRule
from .scoring import normalize_result

logger = logging.getLogger(__name__)

Detail = Union[Tuple[float, float], str]


class ExecutionResult(NamedTuple):
    score: float
    total: float
    errors: List[BaseException]
    details: Dict[str, Detail]

    @property
    def similarity(self) -> Optional[float]:
        """``score / total``, or None when no rule produced a comparison."""
        if self.total > 0:
            return self.score / self.total
        return None


def describe_error(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


def execute(rules: Iterable[CompiledRule], left: Any, right: Any,
            namespace: Optional[Dict[str, Any]] = None) -> ExecutionResult:
    """Run ``rules`` over ``left`` and ``right``.

    Rules whose extracted values are None are skipped entirely: they add
    nothing to score or total and get no details entry. A rule whose
    extraction or comparison raises still adds its strength to the total,
    records the exception in ``errors`` and its description in ``details``.

    Args:
        rules: Compiled rules, evaluated in iteration order
        left: Subject passed to each rule's extractor
        right: Subject passed to each rule's ``against`` extractor
        namespace: Shared scope visible to every expression. Owned by the
            caller and never cleared; a fresh dict is used when omitted.

    Returns:
        ExecutionResult(score, total, errors, details)
    """
    if namespace is None:
        namespace = {}
    score = 0.0
    total = 0.0
    errors: List[BaseException] = []
    details: Dict[str, Detail] = {}
    for rule in rules:
        try:
            left_value = rule.extractor(namespace, left)
            right_value = rule.against(namespace, right)
            if left_value is None or right_value is None:
                logger.debug(f"Rule '{rule.criteria}' skipped: nothing to compare")
                continue
            achieved, possible, rule_errors = normalize_result(rule.compare(namespace, left_value, right_value))
            weighted = (achieved * rule.strength, possible * rule.strength)
            if possible > 0:
                score += weighted[0]
                total += weighted[1]
            details[rule.criteria] = weighted
            errors.extend(rule_errors)
        except Exception as e:
            logger.debug(f"Rule '{rule.criteria}' failed: {describe_error(e)}")
            total += rule.strength
            errors.append(e)
            details[rule.criteria] = describe_error(e)
    return ExecutionResult(score, total, errors, details)


__all__ = ["ExecutionResult", "execute", "describe_error"]
