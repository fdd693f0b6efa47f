"""Pytest fixtures shared by the pattern and heuristic test suites.

Global test safety measures:
 - Skip .env loading unless a test opts in with HMATCH_ENABLE_DOTENV=1
"""
import os
from dataclasses import dataclass

import pytest

from hmatch.match.knowledge import Knowledge
from hmatch.match.testers import Tester


def pytest_sessionstart(session):  # type: ignore[no-untyped-def]
    os.environ.pop('HMATCH_ENABLE_DOTENV', None)


@dataclass(frozen=True)
class LengthTester(Tester):
    size: int

    def test(self, value):
        return isinstance(value, str) and len(value) == self.size


@pytest.fixture
def knowledge() -> Knowledge:
    """Registry with one custom string schema and one custom object schema."""
    k = Knowledge()

    @k.string_schema('Len')
    def _length(knowledge, body):
        return LengthTester(int(body))

    @k.object_schema('String.length')
    def _string_length(knowledge, pattern):
        return LengthTester(pattern['eq'])

    return k


@pytest.fixture
def numbers():
    return list(range(101))
