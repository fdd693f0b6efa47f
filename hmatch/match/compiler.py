"""Pattern compiler: turns declarative pattern data into reusable testers.

The compiler inspects the runtime shape of a pattern and builds exactly one
tester variant, recursing into sequences and keyed maps:

    None                     -> NullTester
    True / 42 / 4.2          -> EqualTester
    "text"                   -> EqualTester, unless "<schema>:<body>" names a
                                registered or built-in string schema
    re.compile("x")          -> RegexpTester
    [[p1, p2, ...]]          -> ArrayFitTester (greedy in-order fit)
    [p1, p2, ...]            -> OneWithSetTester / OneOfTester (alternation)
    {"$": "Object.has", ...} -> object schema selected by the discriminator
    {"a": p1, ...}           -> AllOfTester (non-exhaustive sub-structure match)
    callable / Tester        -> adopted as-is

Patterns are never mutated. Unknown object schemas raise CompileError.
A broken regular expression only disables its own leaf: it is logged and
replaced with a NeverTester so the rest of a composite pattern still compiles.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple
import logging
import re

from ..errors import CompileError
from .knowledge import Knowledge, SchemaConstructor
from .testers import (
    Tester,
    EqualTester,
    NullTester,
    NeverTester,
    CallableTester,
    RegexpTester,
    OneWithSetTester,
    OneOfTester,
    ArrayFitTester,
    ArrayAndTester,
    AllOfTester,
    ObjectHasTester,
    ObjectHasNotTester,
    literal_key,
)

logger = logging.getLogger(__name__)

DISCRIMINATOR = "$"
SCHEMA_SEPARATOR = ":"

# Descriptor flag -> re flag. "g", "u" and "y" are handled separately.
_REGEXP_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}
_REGEXP_MARKERS = {"g", "u", "y"}


# --- Entry point -----------------------------------------------------------

def compile_pattern(knowledge: Optional[Knowledge], pattern: Any) -> Tester:
    """Compile ``pattern`` into a tester, consulting ``knowledge`` for schemas.

    Args:
        knowledge: Schema registry (None for built-ins only)
        pattern: Pattern data (literal, regex, sequence, keyed map, callable)

    Returns:
        Tester for the pattern

    Raises:
        CompileError: If a tagged map names an unknown object schema, or a
            schema receives malformed arguments
    """
    if pattern is None:
        return NullTester()
    if isinstance(pattern, Tester):
        return pattern
    if isinstance(pattern, (bool, int, float)):
        return EqualTester(pattern)
    if isinstance(pattern, str):
        return compile_meta(knowledge, pattern)
    if isinstance(pattern, re.Pattern):
        return compile_regexp(knowledge, pattern)
    if isinstance(pattern, (list, tuple)):
        if len(pattern) == 1 and isinstance(pattern[0], (list, tuple)):
            return compile_array_fit(knowledge, pattern[0])
        return compile_one_of(knowledge, pattern)
    if isinstance(pattern, Mapping):
        if isinstance(pattern.get(DISCRIMINATOR), str):
            return compile_tagged(knowledge, pattern)
        return compile_all_of(knowledge, pattern)
    if callable(pattern):
        return CallableTester(pattern)
    return EqualTester(pattern)


# --- Strings ---------------------------------------------------------------

# "42"
# "Regexp:/test/i"
def compile_meta(knowledge: Optional[Knowledge], pattern: str) -> Tester:
    """Resolve a string pattern: a ``schema:body`` reference or a plain literal."""
    schema, sep, body = pattern.partition(SCHEMA_SEPARATOR)
    if not sep:
        return EqualTester(pattern)
    constructor = _lookup(knowledge, schema, "string", STRING_SCHEMAS)
    if constructor is None:
        return EqualTester(pattern)
    return constructor(knowledge, body)


def parse_regexp_descriptor(descriptor: str) -> Tuple[str, str]:
    """Split ``"/body/flags"`` into ``(body, flags)``.

    The first character is the delimiter and the body runs to its last
    occurrence, so ``"#a/b#i"`` is also accepted.

    Raises:
        ValueError: If the descriptor has no closing delimiter
    """
    if len(descriptor) < 2:
        raise ValueError(f"Unable to build regular expression from {descriptor!r}")
    delimiter = descriptor[0]
    end = descriptor.rfind(delimiter)
    if end <= 0:
        raise ValueError(f"Missing closing delimiter {delimiter!r} in {descriptor!r}")
    return descriptor[1:end], descriptor[end + 1:]


# pattern: "/test/i"
def compile_regexp(knowledge: Optional[Knowledge], regexp: Any) -> Tester:
    """Build a RegexpTester from a compiled pattern or a descriptor string.

    Malformed descriptors are logged and yield a NeverTester.
    """
    if isinstance(regexp, re.Pattern):
        return RegexpTester(regexp)
    if not isinstance(regexp, str):
        raise CompileError(f"Regexp schema expects a string descriptor, got {type(regexp).__name__}", schema="Regexp")
    try:
        body, flags = parse_regexp_descriptor(regexp)
        re_flags = 0
        for flag in flags:
            if flag in _REGEXP_FLAGS:
                re_flags |= _REGEXP_FLAGS[flag]
            elif flag not in _REGEXP_MARKERS:
                raise ValueError(f"Invalid regular expression flag {flag!r}")
        compiled = re.compile(body, re_flags)
    except (ValueError, re.error) as e:
        logger.warning(f"{regexp}\n{e}")
        return NeverTester(reason=str(e))
    return RegexpTester(compiled, is_global="g" in flags, sticky="y" in flags)


# --- Sequences -------------------------------------------------------------

def compile_one_of(knowledge: Optional[Knowledge], members: Any) -> Tester:
    """Compile an alternation, folding literal members into one set lookup."""
    keys: List[Any] = []
    testers: List[Tester] = []
    for member in members:
        if member is None:
            keys.append(literal_key(None))
            continue
        tester = compile_pattern(knowledge, member)
        if isinstance(tester, EqualTester) and tester.value is member and _is_hashable(member):
            keys.append(literal_key(member))
        else:
            testers.append(tester)
    if not testers:
        if keys:
            return OneWithSetTester(frozenset(keys))
        return NeverTester(reason="empty alternation")
    if keys:
        testers.insert(0, OneWithSetTester(frozenset(keys)))
    return OneOfTester(tuple(testers))


def compile_array_fit(knowledge: Optional[Knowledge], points: Any) -> Tester:
    return ArrayFitTester(tuple(compile_pattern(knowledge, point) for point in points))


def compile_array_and(knowledge: Optional[Knowledge], members: Any) -> Tester:
    return ArrayAndTester(tuple(compile_pattern(knowledge, member) for member in members))


# --- Keyed maps ------------------------------------------------------------

def compile_all_of(knowledge: Optional[Knowledge], pattern: Mapping) -> Tester:
    return AllOfTester(tuple(
        (key, compile_pattern(knowledge, value)) for key, value in pattern.items()
    ))


def compile_tagged(knowledge: Optional[Knowledge], pattern: Mapping) -> Tester:
    """Dispatch a tagged map to the object schema named by its discriminator."""
    schema = pattern[DISCRIMINATOR]
    constructor = _lookup(knowledge, schema, "object", OBJECT_SCHEMAS)
    if constructor is None:
        known = set(OBJECT_SCHEMAS)
        if knowledge is not None:
            known.update(knowledge.object)
        raise CompileError(f"Unknown object schema '{schema}'", schema=schema, allowed=sorted(known))
    return constructor(knowledge, pattern)


# { '$': 'Object.has', 'fields': ['a', 'b'] }
def _compile_object_has(knowledge: Optional[Knowledge], pattern: Mapping) -> Tester:
    return ObjectHasTester(_field_names(pattern))


# { '$': 'Object.hasNot', 'fields': ['a', 'b'] }
def _compile_object_has_not(knowledge: Optional[Knowledge], pattern: Mapping) -> Tester:
    return ObjectHasNotTester(_field_names(pattern))


# { '$': 'and', 'forAll': [...patterns] }
def _compile_and(knowledge: Optional[Knowledge], pattern: Mapping) -> Tester:
    members = pattern.get("forAll")
    if not isinstance(members, (list, tuple)):
        raise CompileError("'and' schema requires a 'forAll' list", schema=pattern[DISCRIMINATOR])
    return compile_array_and(knowledge, members)


def _field_names(pattern: Mapping) -> Tuple[str, ...]:
    fields = pattern.get("fields")
    if not isinstance(fields, (list, tuple)) or not all(isinstance(f, str) for f in fields):
        raise CompileError(f"'{pattern[DISCRIMINATOR]}' schema requires a 'fields' list of strings",
                           schema=pattern[DISCRIMINATOR])
    return tuple(fields)


# --- Built-in schemas ------------------------------------------------------

STRING_SCHEMAS: Dict[str, SchemaConstructor] = {
    "Regexp": compile_regexp,
}

OBJECT_SCHEMAS: Dict[str, SchemaConstructor] = {
    "Object.has": _compile_object_has,
    "Object.hasNot": _compile_object_has_not,
    "and": _compile_and,
}


def _lookup(knowledge: Optional[Knowledge], name: str, namespace: str,
            builtins: Dict[str, SchemaConstructor]) -> Optional[SchemaConstructor]:
    if knowledge is not None:
        if namespace == "string":
            constructor = knowledge.lookup_string(name)
        else:
            constructor = knowledge.lookup_object(name)
        if constructor is not None:
            return constructor
    return builtins.get(name)


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


__all__ = [
    "compile_pattern",
    "compile_meta",
    "compile_regexp",
    "compile_one_of",
    "compile_array_fit",
    "compile_array_and",
    "compile_all_of",
    "compile_tagged",
    "parse_regexp_descriptor",
    "STRING_SCHEMAS",
    "OBJECT_SCHEMAS",
    "DISCRIMINATOR",
]
