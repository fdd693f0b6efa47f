"""Schema registry consulted by the pattern compiler.

A :class:`Knowledge` holds two independent name -> constructor tables:

- ``string``: schemas selected by a ``"<schema>:<body>"`` string pattern.
  The constructor receives the text after the first colon.
- ``object``: schemas selected by the ``"$"`` discriminator of a keyed map.
  The constructor receives the whole tagged map.

Constructors are called as ``constructor(knowledge, body)`` and must return a
:class:`~hmatch.match.testers.Tester`. Registered entries are looked up before
the compiler's built-in schemas, so extensions can both add and override.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .testers import Tester

SchemaConstructor = Callable[["Knowledge", Any], Tester]


@dataclass
class Knowledge:
    string: Dict[str, SchemaConstructor] = field(default_factory=dict)
    object: Dict[str, SchemaConstructor] = field(default_factory=dict)

    def string_schema(self, name: str) -> Callable[[SchemaConstructor], SchemaConstructor]:
        """Decorator registering a string-schema constructor under ``name``."""
        def register(constructor: SchemaConstructor) -> SchemaConstructor:
            self.string[name] = constructor
            return constructor
        return register

    def object_schema(self, name: str) -> Callable[[SchemaConstructor], SchemaConstructor]:
        """Decorator registering an object-schema constructor under ``name``."""
        def register(constructor: SchemaConstructor) -> SchemaConstructor:
            self.object[name] = constructor
            return constructor
        return register

    def lookup_string(self, name: str) -> Optional[SchemaConstructor]:
        return self.string.get(name)

    def lookup_object(self, name: str) -> Optional[SchemaConstructor]:
        return self.object.get(name)

    def merged(self, other: Optional["Knowledge"]) -> "Knowledge":
        """Return a new registry with ``other``'s entries layered over this one."""
        if other is None:
            return Knowledge(string=dict(self.string), object=dict(self.object))
        return Knowledge(
            string={**self.string, **other.string},
            object={**self.object, **other.object},
        )


__all__ = ["Knowledge", "SchemaConstructor"]
