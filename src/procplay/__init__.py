"""Procplay - typed procedure call graphs.

Describe calls with a fluent builder, wire stages together with output
references, then run the graph through an in-process transport.

Layers:
    core/        Reference model, builder, registry (no execution)
    transport/   Method dispatch (LocalTransport)
    client/      Graph walk and reference resolution
    procedures/  Built-ins: dag.traverse, client.conditional
    runner       Registry-to-transport adapter and ``run`` driver
    frontends/   CLI

Quick Start:
    >>> from procplay import proc, procedure, ref, run_sync
    >>>
    >>> @procedure(["git", "hasChanges"])
    ... async def has_changes(input, context):
    ...     return {"value": True}
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

from procplay.__version__ import __version__
from procplay.core import (
    LAST,
    PROCEDURE_REGISTRY,
    WHEN_IMMEDIATE,
    WHEN_NEVER,
    WHEN_PARENT,
    OutputRef,
    ProcBuilder,
    Procedure,
    ProcedureNotFoundError,
    ProcedurePath,
    ProcedureRefJson,
    ProcedureRegistry,
    ProcplayError,
    UnresolvedReferenceError,
    proc,
    ref,
)
from procplay.core.registry import procedure
from procplay.procedures import register_builtins
from procplay.runner import RunOptions, run, run_sync, sync_registry

__all__ = [
    "__version__",
    # Building
    "proc",
    "ref",
    "ProcBuilder",
    "OutputRef",
    "ProcedurePath",
    "ProcedureRefJson",
    "LAST",
    "WHEN_IMMEDIATE",
    "WHEN_NEVER",
    "WHEN_PARENT",
    # Registry
    "procedure",
    "Procedure",
    "ProcedureRegistry",
    "PROCEDURE_REGISTRY",
    "register_builtins",
    # Running
    "run",
    "run_sync",
    "RunOptions",
    "sync_registry",
    # Errors
    "ProcplayError",
    "ProcedureNotFoundError",
    "UnresolvedReferenceError",
]
