"""Tester variants produced by the pattern compiler.

Every variant is an immutable dataclass implementing :class:`Tester`. Each
one carries only the payload it needs: a literal, a set of literal keys, a
tuple of child testers, or a tuple of field names. Composite testers own
their children, so a compiled tester can be shared and reused freely.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Hashable, Tuple
import re
import types


class Tester(ABC):
    """Compiled predicate over arbitrary values."""

    @abstractmethod
    def test(self, value: Any) -> bool:
        """Return True when ``value`` matches the compiled pattern."""

    def __call__(self, value: Any) -> bool:
        return self.test(value)


# --- Value helpers ---------------------------------------------------------

def literal_key(value: Any) -> Tuple[str, Hashable]:
    """Return a hashable key under which ``True`` and ``1`` stay distinct."""
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, (int, float)):
        return ("number", value)
    return (type(value).__name__, value)


def strict_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    try:
        return bool(left == right)
    except Exception:
        return False


def is_keyed(value: Any) -> bool:
    """True for values that can be matched field by field.

    Mappings and plain data objects qualify. Functions, classes and modules
    do not, even though they carry a ``__dict__``.
    """
    if value is None or isinstance(value, (str, bytes, int, float, bool, list, tuple, set, frozenset)):
        return False
    if isinstance(value, Mapping):
        return True
    if callable(value) or isinstance(value, types.ModuleType):
        return False
    return hasattr(value, "__dict__")


def has_field(value: Any, name: str) -> bool:
    if isinstance(value, Mapping):
        return name in value
    return hasattr(value, name)


def get_field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value[name]
    return getattr(value, name)


# --- Leaf variants ---------------------------------------------------------

@dataclass(frozen=True)
class EqualTester(Tester):
    """Matches a single literal (``"test"``, ``42``, ``True``)."""
    value: Any

    def test(self, value: Any) -> bool:
        return strict_equal(self.value, value)


@dataclass(frozen=True)
class NullTester(Tester):
    """Matches only ``None``."""

    def test(self, value: Any) -> bool:
        return value is None


@dataclass(frozen=True)
class NeverTester(Tester):
    """Never matches. Stands in for leaves that failed to compile."""
    reason: str = ""

    def test(self, value: Any) -> bool:
        return False


@dataclass(frozen=True)
class CallableTester(Tester):
    """Adopts a plain predicate function as a tester."""
    predicate: Callable[[Any], Any]

    def test(self, value: Any) -> bool:
        return bool(self.predicate(value))


@dataclass(frozen=True)
class RegexpTester(Tester):
    """Matches strings (and numbers, by their text) against a regular expression.

    ``sticky`` anchors the match at the start of the input. A fresh match is
    performed on every call, so there is no scan cursor to carry between
    invocations; ``is_global`` is kept only so the descriptor round-trips.
    """
    regexp: re.Pattern
    is_global: bool = False
    sticky: bool = False

    def test(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            value = str(value)
        if not isinstance(value, str):
            return False
        if self.sticky:
            return self.regexp.match(value) is not None
        return self.regexp.search(value) is not None


# --- Alternation -----------------------------------------------------------

# pattern: [1, 2, 3, 'toto']
@dataclass(frozen=True)
class OneWithSetTester(Tester):
    """Set-membership test over literal alternatives."""
    keys: FrozenSet[Tuple[str, Hashable]]

    def test(self, value: Any) -> bool:
        try:
            return literal_key(value) in self.keys
        except TypeError:
            # unhashable input can never be one of the literals
            return False


# pattern: [1, 2, 3, 'toto', re.compile('test', re.I)]
@dataclass(frozen=True)
class OneOfTester(Tester):
    """Matches when any member matches, tried in order."""
    members: Tuple[Tester, ...]

    def test(self, value: Any) -> bool:
        for member in self.members:
            if member.test(value):
                return True
        return False


# --- Sequences -------------------------------------------------------------

# pattern: [[1, 15, 100]] against [0, 1, 2, 3, ..., 100] => True
# pattern: [[15, 1, 100]] against [0, 1, 2, 3, ..., 100] => False
@dataclass(frozen=True)
class ArrayFitTester(Tester):
    """Greedy in-order fit of sub-patterns onto an input sequence.

    Each point consumes input elements until one matches, then the next point
    resumes right after it. There is no backtracking.
    """
    points: Tuple[Tester, ...]

    def test(self, value: Any) -> bool:
        if not isinstance(value, (list, tuple)):
            return False
        i = 0
        for point in self.points:
            while i < len(value):
                matched = point.test(value[i])
                i += 1
                if matched:
                    break
            else:
                return False
        return True


# pattern: {'$': 'and', 'forAll': [{'$': 'Object.has', 'fields': ['a']}, {'b': 1}]}
@dataclass(frozen=True)
class ArrayAndTester(Tester):
    """Every member must match the same input value."""
    members: Tuple[Tester, ...]

    def test(self, value: Any) -> bool:
        for member in self.members:
            if not member.test(value):
                return False
        return True


# --- Keyed maps ------------------------------------------------------------

# pattern: {'a': 42, 'b': 'toto', 'c': re.compile('titi')}
@dataclass(frozen=True)
class AllOfTester(Tester):
    """Non-exhaustive structural match: every named field must be present and match."""
    fields: Tuple[Tuple[str, Tester], ...]

    def test(self, value: Any) -> bool:
        if not is_keyed(value):
            return False
        for name, tester in self.fields:
            if not has_field(value, name):
                return False
            if not tester.test(get_field(value, name)):
                return False
        return True


# pattern: {'$': 'Object.has', 'fields': ['a', 'b']}
@dataclass(frozen=True)
class ObjectHasTester(Tester):
    field_names: Tuple[str, ...]

    def test(self, value: Any) -> bool:
        if not is_keyed(value):
            return False
        return all(has_field(value, name) for name in self.field_names)


# pattern: {'$': 'Object.hasNot', 'fields': ['a', 'b']}
@dataclass(frozen=True)
class ObjectHasNotTester(Tester):
    field_names: Tuple[str, ...]

    def test(self, value: Any) -> bool:
        if not is_keyed(value):
            return False
        return not any(has_field(value, name) for name in self.field_names)


__all__ = [
    "Tester",
    "EqualTester",
    "NullTester",
    "NeverTester",
    "CallableTester",
    "RegexpTester",
    "OneWithSetTester",
    "OneOfTester",
    "ArrayFitTester",
    "ArrayAndTester",
    "AllOfTester",
    "ObjectHasTester",
    "ObjectHasNotTester",
    "literal_key",
    "strict_equal",
]
