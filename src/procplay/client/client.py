"""Client - walks a call graph and resolves references.

Execution of one root reference:

1. Scan the graph for declared stage names.
2. Resolve the root's input: output references are replaced by the values
   they point to, nested procedure references run depth-first in
   declaration order (unless their ``$when`` defers them).
3. Call the procedure through the transport.
4. Record the output under its ``$name`` and as ``$last``.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from procplay.core.errors import UnresolvedReferenceError
from procplay.core.refs import (
    NAME_KEY,
    PROC_KEY,
    REF_KEY,
    WHEN_IMMEDIATE,
    WHEN_KEY,
    WHEN_NEVER,
    LastAddress,
    dotted,
    is_output_ref,
    is_procedure_ref,
    lookup_path,
    parse_address,
)
from procplay.transport.protocol import CallMeta, Method

if TYPE_CHECKING:
    from procplay.core.refs import ProcedureRefJson
    from procplay.core.registry import ProcedureRegistry
    from procplay.transport.protocol import Transport

logger = logging.getLogger(__name__)

_MISSING = object()


def iter_stage_names(value: Any) -> Iterator[str]:
    """Yield every ``$name`` declared anywhere in a graph, deferred parts included."""
    if isinstance(value, Mapping):
        if is_procedure_ref(value) and isinstance(value.get(NAME_KEY), str):
            yield value[NAME_KEY]
        for item in value.values():
            yield from iter_stage_names(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_stage_names(item)


@dataclass
class ResolutionScope:
    """Completed stage outputs for one execution.

    Attributes:
        declared: Stage names found anywhere in the graph.
    """

    declared: frozenset[str] = frozenset()
    _stages: dict[str, Any] = field(default_factory=dict)
    _last: Any = _MISSING

    @property
    def completed(self) -> list[str]:
        """Names of completed stages, in completion order."""
        return list(self._stages.keys())

    def record(self, name: str | None, output: Any) -> None:
        """Record a completed stage. ``$last`` always moves."""
        self._last = output
        if name is not None:
            if name in self._stages:
                logger.debug("stage_replaced: name=%s", name)
                del self._stages[name]
            self._stages[name] = output

    def resolve(self, path: str) -> Any:
        """Resolve an output reference path.

        Args:
            path: The ``$ref`` string.

        Returns:
            The referenced value.

        Raises:
            UnresolvedReferenceError: Unknown or not yet completed stage,
                ``$last`` before any stage, or a missing property.
        """
        address = parse_address(path)
        if isinstance(address, LastAddress):
            if self._last is _MISSING:
                raise UnresolvedReferenceError(path, "no stage has completed yet")
            target = self._last
        elif address.name in self._stages:
            target = self._stages[address.name]
        elif address.name in self.declared:
            raise UnresolvedReferenceError(path, f"stage '{address.name}' has not completed yet")
        else:
            raise UnresolvedReferenceError(path, f"unknown stage '{address.name}'")

        return lookup_path(target, address.segments, path)


class ReferenceExecutor:
    """Executes procedure references against one resolution scope."""

    def __init__(
        self,
        transport: Transport,
        scope: ResolutionScope,
        registry: ProcedureRegistry | None = None,
    ) -> None:
        self.transport = transport
        self.scope = scope
        self.registry = registry

    async def execute(self, reference: ProcedureRefJson) -> Any:
        """Run one procedure reference regardless of its ``$when``.

        Args:
            reference: The procedure reference.

        Returns:
            The procedure's output.
        """
        path = reference[PROC_KEY]
        name = reference.get(NAME_KEY)
        method = Method.from_path(path)

        payload = await self._resolve_input(reference.get("input", {}), self._deferred_keys(path))

        metadata: dict[str, Any] = {}
        if name is not None:
            metadata["stage"] = name
        if reference.get(WHEN_KEY) is not None:
            metadata["when"] = reference[WHEN_KEY]

        logger.debug("stage_started: proc=%s name=%s", dotted(path), name)
        start_time = time.monotonic()

        output = await self.transport.call(method, payload, CallMeta(executor=self, metadata=metadata))

        logger.debug(
            "stage_completed: proc=%s name=%s duration_ms=%.1f",
            dotted(path),
            name,
            (time.monotonic() - start_time) * 1000,
        )
        self.scope.record(name, output)
        return output

    async def evaluate(self, value: Any) -> Any:
        """Evaluate a value that was handed to a handler unresolved.

        Procedure references run unless ``$never``; everything else is
        resolved like input.
        """
        if is_procedure_ref(value):
            if value.get(WHEN_KEY) == WHEN_NEVER:
                return None
            return await self.execute(value)
        return await self.resolve(value)

    async def resolve(self, value: Any) -> Any:
        """Resolve references nested anywhere in a value.

        Procedure references without ``$when`` (or with ``$immediate``) run
        now; ``$never``, ``$parent`` and named contexts are kept as data.
        """
        if is_output_ref(value):
            return self.scope.resolve(value[REF_KEY])
        if is_procedure_ref(value):
            when = value.get(WHEN_KEY)
            if when is None or when == WHEN_IMMEDIATE:
                return await self.execute(value)
            logger.debug("stage_deferred: proc=%s when=%s", dotted(value[PROC_KEY]), when)
            return value
        if isinstance(value, Mapping):
            return {key: await self.resolve(item) for key, item in value.items()}
        if isinstance(value, list):
            return [await self.resolve(item) for item in value]
        if isinstance(value, tuple):
            return tuple([await self.resolve(item) for item in value])
        return value

    async def _resolve_input(self, input: Any, deferred: tuple[str, ...]) -> Any:
        if not deferred or not isinstance(input, Mapping):
            return await self.resolve(input)
        return {
            key: item if key in deferred else await self.resolve(item)
            for key, item in input.items()
        }

    def _deferred_keys(self, path: Any) -> tuple[str, ...]:
        if self.registry is None:
            return ()
        procedure = self.registry.get(path)
        return procedure.defer if procedure is not None else ()


@dataclass
class Client:
    """Executes call graphs over a transport.

    Example:
        >>> client = Client(transport=transport, registry=PROCEDURE_REGISTRY)
        >>> result = await client.exec(proc(["echo"]).input({"v": 1}).ref)
    """

    transport: Transport
    registry: ProcedureRegistry | None = None

    async def exec(self, root: ProcedureRefJson) -> Any:
        """Execute a root procedure reference.

        Args:
            root: The root of the call graph.

        Returns:
            The root procedure's output (None if the root is ``$never``).
        """
        names = Counter(iter_stage_names(root))
        for name, count in names.items():
            if count > 1:
                logger.warning("duplicate_stage_name: name=%s count=%d", name, count)

        if root.get(WHEN_KEY) == WHEN_NEVER:
            logger.info("root_skipped: proc=%s when=$never", dotted(root[PROC_KEY]))
            return None

        executor = ReferenceExecutor(
            transport=self.transport,
            scope=ResolutionScope(declared=frozenset(names)),
            registry=self.registry,
        )
        return await executor.execute(root)
