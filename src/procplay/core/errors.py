"""Error types for procedure resolution.

Handler exceptions are never wrapped: they propagate unchanged through the
call context and transport. Only the two conditions raised by procplay itself
live here.
"""

from __future__ import annotations

from collections.abc import Sequence


class ProcplayError(Exception):
    """Base error for procplay."""


class ProcedureNotFoundError(ProcplayError, LookupError):
    """No registered procedure (with a handler) exists at a path.

    Raised when:
    - A nested call through the call context names an unknown path
    - A reference is executed against a transport method that was never installed
    """

    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__(f"Procedure not found: {'.'.join(self.path)}")


class UnresolvedReferenceError(ProcplayError, LookupError):
    """An output reference could not be resolved.

    Raised when:
    - The head is neither ``$last`` nor a completed stage name
    - The head names a stage that has not completed yet
    - A property segment does not exist on the stage output
    """

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Unresolved reference '{address}': {reason}")
