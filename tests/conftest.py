"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from procplay.core.registry import PROCEDURE_REGISTRY, ProcedureRegistry
from procplay.procedures import register_builtins


@pytest.fixture
def registry() -> ProcedureRegistry:
    """Fresh registry with the built-in procedures."""
    return register_builtins(ProcedureRegistry())


@pytest.fixture
def echo_registry(registry: ProcedureRegistry) -> ProcedureRegistry:
    """Registry with an ``echo`` procedure returning its input unchanged."""

    @registry.procedure(["echo"])
    async def echo(input, context):
        return input

    return registry


@pytest.fixture
def global_registry():
    """Restore the global registry after a test that registers on it."""
    saved = PROCEDURE_REGISTRY.get_all()
    yield PROCEDURE_REGISTRY
    PROCEDURE_REGISTRY.clear()
    for procedure in saved:
        PROCEDURE_REGISTRY.register(procedure)
