"""Procedure reference builder.

Fluent construction of ProcedureRefJson values. The builder is an immutable
value: every fluent method returns a new builder, and ``.ref`` is a pure
function of the builder's fields.

Example:
    >>> proc(["git", "add"]).input({"all": True}).ref
    {'$proc': ['git', 'add'], 'input': {'all': True}}

    >>> proc(["git", "hasChanges"]).name("changes").ref
    {'$proc': ['git', 'hasChanges'], 'input': {}, '$name': 'changes'}

    >>> proc(["git", "add"]).when("$parent").ref
    {'$proc': ['git', 'add'], 'input': {}, '$when': '$parent'}
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from procplay.core.refs import NAME_KEY, WHEN_KEY, ProcedurePath, ProcedureRefJson

TInput = TypeVar("TInput")
T = TypeVar("T")


@dataclass(frozen=True)
class ProcBuilder(Generic[TInput]):
    """Builder for a procedure reference.

    Attributes:
        path: Path to the procedure (e.g. ["git", "add"]).
        _input: Input payload.
        _name: Stage name for later ``$ref`` lookups.
        _when: Execution-timing directive.
    """

    path: ProcedurePath
    _input: Any = field(default_factory=dict)
    _name: str | None = None
    _when: str | None = None

    def input(self, input: T) -> ProcBuilder[T]:
        """Return a builder with the input replaced (never merged)."""
        return replace(self, _input=input)  # type: ignore[return-value]

    def name(self, name: str) -> ProcBuilder[TInput]:
        """Return a builder whose stage is named for ``$ref`` lookups."""
        return replace(self, _name=name)

    def when(self, when: str) -> ProcBuilder[TInput]:
        """Return a builder with an execution-timing directive.

        Args:
            when: "$immediate", "$never", "$parent", or a named context.
        """
        return replace(self, _when=when)

    @property
    def ref(self) -> ProcedureRefJson:
        """The procedure reference - a new dict on every access."""
        result: dict[str, Any] = {"$proc": self.path, "input": self._input}
        if self._name:
            result[NAME_KEY] = self._name
        if self._when:
            result[WHEN_KEY] = self._when
        return result  # type: ignore[return-value]


def proc(path: ProcedurePath) -> ProcBuilder[Any]:
    """Create a procedure reference builder.

    Args:
        path: Path to the procedure (e.g. ["git", "add"]).

    Returns:
        Builder with empty input, no name and no timing directive.
    """
    return ProcBuilder(path=path)
