"""Score normalization.

Comparison callables may return almost anything: a number, a boolean, None,
or a partial ``[achieved, possible, errors]`` list. :func:`normalize_result`
reduces all of these to a :class:`Score` triple, and :func:`wrap_score`
additionally turns raised exceptions into error entries, so callers never
have to special-case a failing comparator.
"""

from __future__ import annotations
from typing import Any, Callable, List, NamedTuple
import logging

from ..errors import BadScorerResult

logger = logging.getLogger(__name__)


class Score(NamedTuple):
    achieved: float
    possible: float
    errors: List[BaseException]


def normalize_result(result: Any) -> Score:
    """Reduce a raw comparator return value to a Score triple.

    | raw result        | score                              |
    |-------------------|------------------------------------|
    | number n          | (n, 1, [])                         |
    | bool b            | (1 if b else 0, 1, [])             |
    | None              | (0, 1, [])                         |
    | [a, p, errors]    | unchanged (extra items dropped)    |
    | [a, p]            | (a, p, [])                         |
    | [a]               | (a, 1, [])                         |
    | []                | (0, 1, [])                         |
    | anything else     | (0, 1, [BadScorerResult])          |
    """
    if result is None:
        return Score(0, 1, [])
    if isinstance(result, bool):
        return Score(1 if result else 0, 1, [])
    if isinstance(result, (int, float)):
        return Score(result, 1, [])
    if isinstance(result, (list, tuple)):
        if len(result) >= 3:
            return Score(result[0], result[1], list(result[2] or []))
        if len(result) == 2:
            return Score(result[0], result[1], [])
        if len(result) == 1:
            return Score(result[0], 1, [])
        return Score(0, 1, [])
    return Score(0, 1, [BadScorerResult(result)])


def wrap_score(fn: Callable[..., Any]) -> Callable[..., Score]:
    """Wrap ``fn`` so every call returns a Score, even when it raises."""
    def scorer(*args: Any) -> Score:
        try:
            return normalize_result(fn(*args))
        except Exception as e:
            logger.debug(f"Scorer raised {type(e).__name__}: {e}")
            return Score(0, 1, [e])
    scorer.__wrapped__ = fn  # type: ignore[attr-defined]
    return scorer


__all__ = ["Score", "normalize_result", "wrap_score"]
