"""Transport protocol definitions.

A transport maps method identities to async handlers and dispatches calls
to them. The client only depends on this protocol.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from procplay.client.client import ReferenceExecutor


@dataclass(frozen=True)
class Method:
    """Transport-level method identity.

    Attributes:
        service: First path segment.
        operation: Remaining path segments joined by ".".
    """

    service: str
    operation: str = ""

    @classmethod
    def from_path(cls, path: Sequence[str]) -> Method:
        """Derive the method identity for a procedure path.

        Raises:
            ValueError: If the path is empty.
        """
        if not path:
            raise ValueError("Procedure path must not be empty")
        service, *rest = path
        return cls(service=service, operation=".".join(rest))

    @property
    def path(self) -> tuple[str, ...]:
        if not self.operation:
            return (self.service,)
        return (self.service, *self.operation.split("."))

    def __str__(self) -> str:
        if not self.operation:
            return self.service
        return f"{self.service}.{self.operation}"


@dataclass(frozen=True)
class CallMeta:
    """Per-call data passed alongside the payload.

    Attributes:
        executor: Executor bound to the active resolution scope.
        metadata: Invocation metadata forwarded to the call context.
    """

    executor: ReferenceExecutor | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


MethodHandler = Callable[[Any, CallMeta], Awaitable[Any]]


class Transport(Protocol):
    """Dispatches method calls to registered handlers."""

    def register(self, method: Method, handler: MethodHandler) -> None:
        """Install a handler for a method identity."""
        ...

    async def call(self, method: Method, payload: Any, meta: CallMeta) -> Any:
        """Invoke a method and wait for its result."""
        ...
