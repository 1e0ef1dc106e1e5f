"""Built-in procedures.

    dag.traverse         Run a ``visit`` list of stages in order
    client.conditional   Evaluate ``then`` or ``else`` from a condition

Importing this package registers them on ``PROCEDURE_REGISTRY``.
"""

from __future__ import annotations

from procplay.core.registry import PROCEDURE_REGISTRY, Procedure, ProcedureRegistry
from procplay.procedures.conditional import CONDITIONAL_PATH, conditional
from procplay.procedures.dag import TRAVERSE_PATH, traverse

BUILTIN_PROCEDURES = (
    Procedure(
        path=TRAVERSE_PATH,
        handler=traverse,
        description="Run a list of stages in order",
        defer=("visit",),
    ),
    Procedure(
        path=CONDITIONAL_PATH,
        handler=conditional,
        description="Evaluate then/else from a condition",
        defer=("then", "else"),
    ),
)


def register_builtins(registry: ProcedureRegistry) -> ProcedureRegistry:
    """Register the built-in procedures on a registry.

    Returns:
        The registry, for chaining.
    """
    for builtin in BUILTIN_PROCEDURES:
        registry.register(builtin)
    return registry


register_builtins(PROCEDURE_REGISTRY)

__all__ = [
    "BUILTIN_PROCEDURES",
    "register_builtins",
    "traverse",
    "conditional",
]
