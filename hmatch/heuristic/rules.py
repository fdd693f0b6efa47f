"""Rule compilation: serialized heuristic rules -> executable comparison logic.

A serialized rule names what to compare (``extractor`` / ``against``) and how
to score the pair (``scorer``)::

    {
        "category": "pricing",
        "criteria": "price",
        "context": "catalog",
        "strength": 3,
        "extractor": "_.price",
        "against": "_.list_price",
        "scorer": "linear:0;100;150"
    }

``extractor`` and ``against`` are expressions over one subject bound to ``_``.
``scorer`` is either a compact range descriptor ``kind:min;ref;max`` (``linear`` or
``gaussian``; unknown kinds fall back to ``linear``) or an expression over
``l`` and ``r``. Every expression also sees the shared namespace passed to
:func:`~hmatch.heuristic.engine.execute`.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional
import json
import logging
import re

from ..expr.evaluator import compile_expression
from .ranges import linear_range, gaussian_range
from .scoring import Score, wrap_score

logger = logging.getLogger(__name__)

DEFAULT_EXTRACTOR = "_"
DEFAULT_SCORER = "0"

_NUMBER = r"(-?\d+(?:\.\d+)?)"
_RANGE_PATTERN = re.compile(rf"^(\w+):{_NUMBER};{_NUMBER};{_NUMBER}$")

RANGE_COMPARATORS: Dict[str, Callable[..., float]] = {
    "linear": linear_range,
    "gaussian": gaussian_range,
}

# Exposed to every extractor and scorer expression.
RULE_HELPERS: Dict[str, Any] = {
    "linear_range": linear_range,
    "gaussian_range": gaussian_range,
}


@dataclass
class SerializedRule:
    """Rule as written in a rule file."""
    category: str
    criteria: str
    context: str
    strength: Optional[float] = None
    extractor: Optional[str] = None
    against: Optional[str] = None
    scorer: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SerializedRule:
        """Build from a mapping, ignoring unknown keys.

        Raises:
            ValueError: If ``category``, ``criteria`` or ``context`` is missing
        """
        missing = [key for key in ("category", "criteria", "context") if key not in data]
        if missing:
            raise ValueError(f"Rule is missing required field(s): {', '.join(missing)}")
        return cls(
            category=data["category"],
            criteria=data["criteria"],
            context=data["context"],
            strength=data.get("strength"),
            extractor=data.get("extractor"),
            against=data.get("against"),
            scorer=data.get("scorer"),
        )


@dataclass(frozen=True)
class CompiledRule:
    """Executable rule.

    ``extractor(namespace, subject)`` and ``against(namespace, subject)``
    produce the values to compare. ``compare(namespace, l, r)`` is the raw
    comparison; ``scorer`` is the same comparison wrapped by
    :func:`~hmatch.heuristic.scoring.wrap_score` and always returns a Score.
    """
    category: str
    criteria: str
    context: str
    strength: float
    extractor: Callable[..., Any]
    against: Callable[..., Any]
    compare: Callable[..., Any]
    scorer: Callable[..., Score]


def compute_extractor(extractor: Optional[str]) -> Callable[..., Any]:
    """Compile extractor text into ``fn(namespace, subject)``."""
    return compile_expression(extractor or DEFAULT_EXTRACTOR, ("_",), RULE_HELPERS)


def compute_comparison(scorer: Optional[str]) -> Callable[..., Any]:
    """Compile scorer text into a raw ``fn(namespace, l, r)`` comparison."""
    text = scorer or DEFAULT_SCORER
    match = _RANGE_PATTERN.match(text.strip())
    if match is None:
        return compile_expression(text, ("l", "r"), RULE_HELPERS)
    kind, raw_min, raw_ref, raw_max = match.groups()
    low, ref, high = float(raw_min), float(raw_ref), float(raw_max)
    comparator = RANGE_COMPARATORS.get(kind)
    if comparator is None:
        logger.debug(f"Unknown range kind '{kind}', using linear")
        comparator = linear_range

    def compare_range(namespace: Any, l: Any, r: Any) -> float:
        return comparator(l, r, low, ref, high)

    return compare_range


def compute_scorer(scorer: Optional[str]) -> Callable[..., Score]:
    """Compile scorer text into a normalized ``fn(namespace, l, r) -> Score``."""
    return wrap_score(compute_comparison(scorer))


def compile_rule(rule: SerializedRule | Dict[str, Any]) -> CompiledRule:
    """Compile one serialized rule.

    Strength defaults to 1 and is never below 1. ``against`` defaults to the
    extractor.

    Raises:
        ExpressionError: If any expression text is invalid
        ValueError: If required fields are missing
    """
    if not isinstance(rule, SerializedRule):
        rule = SerializedRule.from_dict(rule)
    strength = rule.strength if rule.strength is not None and rule.strength > 1 else 1
    extractor = compute_extractor(rule.extractor)
    against = compute_extractor(rule.against) if rule.against else extractor
    compare = compute_comparison(rule.scorer)
    return CompiledRule(
        category=rule.category,
        criteria=rule.criteria,
        context=rule.context,
        strength=strength,
        extractor=extractor,
        against=against,
        compare=compare,
        scorer=wrap_score(compare),
    )


def compile_rules(rules: Iterable[SerializedRule | Dict[str, Any]]) -> List[CompiledRule]:
    return [compile_rule(rule) for rule in rules]


def load_rules(path: Path | str) -> List[CompiledRule]:
    """Load and compile a JSON array of serialized rules.

    Raises:
        ValueError: If the file does not hold a JSON array of objects
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"Rule file {path} must contain a JSON array of rule objects")
    rules = compile_rules(data)
    logger.debug(f"Loaded {len(rules)} rules from {path}")
    return rules


__all__ = [
    "SerializedRule",
    "CompiledRule",
    "compile_rule",
    "compile_rules",
    "load_rules",
    "compute_extractor",
    "compute_comparison",
    "compute_scorer",
    "RANGE_COMPARATORS",
]
