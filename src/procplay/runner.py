"""Execution driver - run one call graph end to end.

``run`` builds a fresh LocalTransport, installs every registered handler on
it, executes the root reference through a Client and optionally prints the
result. Nothing is caught: any failure propagates to the caller.

Example:
    >>> from procplay import proc, ref, run_sync
    >>>
    >>> run_sync(
    ...     proc(["dag", "traverse"]).input({
    ...         "visit": [
    ...             proc(["git", "hasChanges"]).name("changes").ref,
    ...             proc(["client", "conditional"]).input({
    ...                 "condition": ref("changes.value"),
    ...                 "then": proc(["git", "add"]).input({"all": True}).ref,
    ...             }).ref,
    ...         ],
    ...     }).ref
    ... )
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from procplay.core.builder import ProcBuilder

if TYPE_CHECKING:
    from procplay.core.refs import ProcedureRefJson
    from procplay.core.registry import Procedure, ProcedureRegistry
    from procplay.transport.protocol import CallMeta, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    """Options for running a procedure reference.

    Attributes:
        print: Whether to print the result.
        format: Output format ("json" or "text").
    """

    print: bool = True
    format: Literal["json", "text"] = "json"


def _method_handler(procedure: Procedure, registry: ProcedureRegistry) -> Any:
    from procplay.client.context import CallContext, invoke_handler

    handler = procedure.handler
    assert handler is not None

    async def method_handler(payload: Any, meta: CallMeta) -> Any:
        context = CallContext.create(
            path=procedure.path,
            registry=registry,
            executor=meta.executor,
            metadata=meta.metadata,
        )
        return await invoke_handler(handler, payload, context)

    return method_handler


def sync_registry(registry: ProcedureRegistry, transport: Transport) -> int:
    """Install every registered handler as a transport method.

    Entries without a handler are skipped; calling them fails with
    ProcedureNotFoundError.

    Args:
        registry: Source registry.
        transport: Transport to install on.

    Returns:
        Number of installed methods.
    """
    from procplay.transport.protocol import Method

    installed = 0
    for procedure in registry.get_all():
        if procedure.handler is None:
            logger.debug("procedure_skipped: path=%s reason=no_handler", procedure.name)
            continue
        transport.register(Method.from_path(procedure.path), _method_handler(procedure, registry))
        installed += 1

    logger.debug("registry_synced: installed=%d total=%d", installed, len(registry))
    return installed


def print_result(result: Any, format: Literal["json", "text"] = "json") -> None:
    """Print a result as pretty JSON or as its string form."""
    from procplay.frontends.cli.output import output_json, output_text

    if format == "json":
        output_json(result)
    else:
        output_text(result)


async def run(
    procedure_ref: ProcedureRefJson | ProcBuilder[Any],
    options: RunOptions | Mapping[str, Any] | None = None,
    *,
    registry: ProcedureRegistry | None = None,
) -> Any:
    """Run a procedure reference.

    Args:
        procedure_ref: Root of the call graph (a builder is accepted too).
        options: Print/format options, as RunOptions or a mapping such as
            ``{"print": False}``. Defaults to printing JSON.
        registry: Registry to install. Defaults to PROCEDURE_REGISTRY.

    Returns:
        The resolved result, printed or not.
    """
    # Deferred so that importing procplay only loads the reference model
    from procplay.client.client import Client
    from procplay.transport.in_process import LocalTransport

    if registry is None:
        import procplay.procedures  # noqa: F401  (registers built-ins)
        from procplay.core.registry import PROCEDURE_REGISTRY

        registry = PROCEDURE_REGISTRY

    if options is None:
        options = RunOptions()
    elif isinstance(options, Mapping):
        options = RunOptions(**options)

    if isinstance(procedure_ref, ProcBuilder):
        procedure_ref = procedure_ref.ref

    transport = LocalTransport()
    sync_registry(registry, transport)

    client = Client(transport=transport, registry=registry)
    result = await client.exec(procedure_ref)

    if options.print:
        print_result(result, options.format)

    return result


def run_sync(
    procedure_ref: ProcedureRefJson | ProcBuilder[Any],
    options: RunOptions | Mapping[str, Any] | None = None,
    *,
    registry: ProcedureRegistry | None = None,
) -> Any:
    """Blocking ``run`` for scripts without an event loop."""
    return asyncio.run(run(procedure_ref, options, registry=registry))
