"""Client - graph execution and reference resolution.

Classes:
    Client: Executes a root procedure reference over a transport.
    ResolutionScope: Completed stage outputs plus the rolling ``$last``.
    ReferenceExecutor: Runs references against one scope.
    CallContext: Passed to every handler invocation.
"""

from procplay.client.client import Client, ReferenceExecutor, ResolutionScope
from procplay.client.context import CallContext, ContextClient, invoke_handler

__all__ = [
    "Client",
    "ReferenceExecutor",
    "ResolutionScope",
    "CallContext",
    "ContextClient",
    "invoke_handler",
]
