"""Transport - dispatch of resolved calls to handlers.

Available transports:
    LocalTransport: Direct in-process calls (no IPC).

Example:
    >>> from procplay.transport import CallMeta, LocalTransport, Method
    >>>
    >>> transport = LocalTransport()
    >>> transport.register(Method("git", "add"), handler)
    >>> result = await transport.call(Method("git", "add"), {"all": True}, CallMeta())
"""

from procplay.transport.in_process import LocalTransport
from procplay.transport.protocol import CallMeta, Method, MethodHandler, Transport

__all__ = [
    # Protocols
    "Transport",
    "MethodHandler",
    # Types
    "Method",
    "CallMeta",
    # Implementations
    "LocalTransport",
]
