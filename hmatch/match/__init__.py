"""Pattern matching package: schema registry, tester variants and compiler."""

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
)
from .compiler import compile_pattern, STRING_SCHEMAS, OBJECT_SCHEMAS, DISCRIMINATOR

__all__ = [
    "Knowledge",
    "SchemaConstructor",
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
    "compile_pattern",
    "STRING_SCHEMAS",
    "OBJECT_SCHEMAS",
    "DISCRIMINATOR",
]
