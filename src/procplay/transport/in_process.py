"""In-process transport - direct calls without IPC.

Useful for:
- Playground scripts
- Testing
- Embedding procplay in an application
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from procplay.core.errors import ProcedureNotFoundError
from procplay.transport.protocol import CallMeta, Method, MethodHandler

logger = logging.getLogger(__name__)


@dataclass
class LocalTransport:
    """In-process transport - handlers are awaited directly.

    One instance is built per ``run`` call and discarded afterwards.

    Example:
        >>> transport = LocalTransport()
        >>> transport.register(Method("echo"), handler)
        >>> result = await transport.call(Method("echo"), {"v": 1}, CallMeta())
    """

    _handlers: dict[Method, MethodHandler] = field(default_factory=dict)

    def register(self, method: Method, handler: MethodHandler) -> None:
        """Install a handler, replacing any previous one for the method.

        Args:
            method: Method identity.
            handler: Async callable taking (payload, meta).
        """
        self._handlers[method] = handler

    def has(self, method: Method) -> bool:
        """Whether a handler is installed for the method."""
        return method in self._handlers

    def methods(self) -> list[Method]:
        """List installed method identities."""
        return list(self._handlers.keys())

    async def call(self, method: Method, payload: Any, meta: CallMeta) -> Any:
        """Invoke a method.

        Args:
            method: Method identity.
            payload: Resolved input payload.
            meta: Per-call data.

        Returns:
            The handler's result.

        Raises:
            ProcedureNotFoundError: If no handler is installed for the method.
        """
        handler = self._handlers.get(method)
        if handler is None:
            raise ProcedureNotFoundError(method.path)

        logger.debug("transport_call: method=%s", method)
        return await handler(payload, meta)
