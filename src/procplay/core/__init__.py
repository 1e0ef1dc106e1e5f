"""Core - reference model, builder and registry.

No transport or execution knowledge lives here:

    refs        OutputRef / ProcedureRefJson value types and address parsing
    builder     Fluent, immutable ProcBuilder (``proc``)
    registry    Procedure registry (path -> handler)
    errors      ProcedureNotFoundError, UnresolvedReferenceError

Example:
    >>> from procplay.core import proc, ref
    >>>
    >>> proc(["client", "conditional"]).input({
    ...     "condition": ref("changes.value"),
    ...     "then": proc(["git", "add"]).input({"all": True}).ref,
    ... }).ref
"""

from procplay.core.builder import ProcBuilder, proc
from procplay.core.errors import (
    ProcedureNotFoundError,
    ProcplayError,
    UnresolvedReferenceError,
)
from procplay.core.refs import (
    LAST,
    WHEN_IMMEDIATE,
    WHEN_NEVER,
    WHEN_PARENT,
    LastAddress,
    OutputRef,
    ProcedurePath,
    ProcedureRefJson,
    StageAddress,
    is_output_ref,
    is_procedure_ref,
    parse_address,
    ref,
)
from procplay.core.registry import PROCEDURE_REGISTRY, Procedure, ProcedureRegistry

__all__ = [
    # Reference model
    "OutputRef",
    "ProcedurePath",
    "ProcedureRefJson",
    "StageAddress",
    "LastAddress",
    "LAST",
    "WHEN_IMMEDIATE",
    "WHEN_NEVER",
    "WHEN_PARENT",
    "ref",
    "parse_address",
    "is_output_ref",
    "is_procedure_ref",
    # Builder
    "ProcBuilder",
    "proc",
    # Registry
    "Procedure",
    "ProcedureRegistry",
    "PROCEDURE_REGISTRY",
    # Errors
    "ProcplayError",
    "ProcedureNotFoundError",
    "UnresolvedReferenceError",
]
