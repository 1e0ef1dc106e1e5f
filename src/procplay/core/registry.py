"""Procedure registry.

A mapping from procedure path to handler. Entries without a handler are
metadata only; they are listed but cannot be called.

Example:
    >>> registry = ProcedureRegistry()
    >>>
    >>> @registry.procedure(["echo"])
    ... async def echo(input, context):
    ...     return input
    >>>
    >>> registry.get(["echo"]).handler is echo
    True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from procplay.core.refs import dotted

logger = logging.getLogger(__name__)

# (input, context) -> result, sync or async
Handler = Callable[..., Any]


@dataclass(frozen=True)
class Procedure:
    """A registered procedure.

    Attributes:
        path: Procedure path; first segment is the service.
        handler: Callable invoked with (input, context). None for metadata entries.
        description: Human-readable summary.
        defer: Top-level input keys whose references are passed to the
            handler unresolved.
    """

    path: tuple[str, ...]
    handler: Handler | None = None
    description: str = ""
    defer: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        """Dotted path, e.g. "dag.traverse"."""
        return dotted(self.path)


class ProcedureRegistry:
    """Registry of procedures keyed by path."""

    def __init__(self) -> None:
        self._procedures: dict[tuple[str, ...], Procedure] = {}

    def register(self, procedure: Procedure) -> Procedure:
        """Register a procedure, replacing any entry at the same path.

        Args:
            procedure: The procedure to register.

        Returns:
            The registered procedure.
        """
        if procedure.path in self._procedures:
            logger.debug("procedure_replaced: path=%s", procedure.name)
        self._procedures[procedure.path] = procedure
        logger.debug("procedure_registered: path=%s", procedure.name)
        return procedure

    def procedure(
        self,
        path: Sequence[str],
        *,
        description: str = "",
        defer: Sequence[str] = (),
    ) -> Callable[[Handler], Handler]:
        """Decorator registering a function as a procedure handler.

        Args:
            path: Procedure path.
            description: Human-readable summary (defaults to the docstring).
            defer: Input keys passed to the handler unresolved.
        """

        def decorator(fn: Handler) -> Handler:
            self.register(
                Procedure(
                    path=tuple(path),
                    handler=fn,
                    description=description or (fn.__doc__ or "").strip().split("\n")[0],
                    defer=tuple(defer),
                )
            )
            return fn

        return decorator

    def get(self, path: Sequence[str]) -> Procedure | None:
        """Look up a procedure by path.

        Returns:
            The procedure, or None if not found.
        """
        return self._procedures.get(tuple(path))

    def get_all(self) -> list[Procedure]:
        """List all registered procedures in registration order."""
        return list(self._procedures.values())

    def unregister(self, path: Sequence[str]) -> bool:
        """Remove a procedure.

        Returns:
            True if a procedure was removed.
        """
        return self._procedures.pop(tuple(path), None) is not None

    def clear(self) -> None:
        """Remove all procedures."""
        self._procedures.clear()

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (list, tuple)):
            return False
        return tuple(path) in self._procedures

    def __len__(self) -> int:
        return len(self._procedures)

    def __iter__(self) -> Iterator[Procedure]:
        return iter(self.get_all())

    def __repr__(self) -> str:
        return f"ProcedureRegistry({[p.name for p in self._procedures.values()]})"


# Global registry; built-in procedures register here on import of procplay.procedures
PROCEDURE_REGISTRY = ProcedureRegistry()
procedure = PROCEDURE_REGISTRY.procedure
