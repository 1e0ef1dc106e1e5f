"""CallContext - what a handler sees besides its input.

One context is built per handler invocation and dropped when the handler
returns. Its ``client`` can call other procedures by path (registry lookup,
no reference resolution) and execute deferred references in the active
resolution scope.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from procplay.core.errors import ProcedureNotFoundError

if TYPE_CHECKING:
    from procplay.client.client import ReferenceExecutor
    from procplay.core.registry import Handler, ProcedureRegistry

logger = logging.getLogger(__name__)


async def invoke_handler(handler: Handler, input: Any, context: CallContext) -> Any:
    """Call a handler, awaiting the result if it is awaitable."""
    result = handler(input, context)
    if inspect.isawaitable(result):
        result = await result
    return result


@dataclass
class ContextClient:
    """Restricted client handed to handlers through their context.

    Attributes:
        registry: Registry the enclosing run was built from.
        executor: Executor for the active resolution scope (None outside a run).
    """

    registry: ProcedureRegistry
    executor: ReferenceExecutor | None = None
    _context: CallContext | None = field(default=None, repr=False)

    async def call(self, path: Sequence[str], input: Any = None) -> Any:
        """Call another procedure by path with the same context.

        The input is passed as-is; references inside it are not resolved.

        Args:
            path: Procedure path.
            input: Input payload.

        Returns:
            The handler's result.

        Raises:
            ProcedureNotFoundError: If the path is unknown or has no handler.
        """
        procedure = self.registry.get(path)
        if procedure is None or procedure.handler is None:
            raise ProcedureNotFoundError(path)

        assert self._context is not None
        logger.debug("nested_call: caller=%s path=%s", ".".join(self._context.path), procedure.name)
        return await invoke_handler(procedure.handler, input, self._context)

    async def exec(self, value: Any) -> Any:
        """Evaluate a deferred value in the active resolution scope.

        Procedure references run (unless ``$never``), output references
        resolve, anything else has its nested references resolved.

        Raises:
            RuntimeError: If there is no active execution.
        """
        if self.executor is None:
            raise RuntimeError("No active execution for this context")
        return await self.executor.evaluate(value)


@dataclass(frozen=True)
class CallContext:
    """Context passed to a procedure handler.

    Attributes:
        metadata: Invocation metadata (e.g. the stage name).
        path: Path of the procedure being invoked.
        client: Capability to call other procedures.
    """

    metadata: dict[str, Any]
    path: tuple[str, ...]
    client: ContextClient

    @classmethod
    def create(
        cls,
        *,
        path: Sequence[str],
        registry: ProcedureRegistry,
        executor: ReferenceExecutor | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> CallContext:
        """Build a context whose client is bound back to it."""
        client = ContextClient(registry=registry, executor=executor)
        context = cls(metadata=dict(metadata or {}), path=tuple(path), client=client)
        client._context = context
        return context
