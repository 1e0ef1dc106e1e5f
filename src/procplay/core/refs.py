"""Reference model - output references and procedure references.

Two wire-level value types, both plain JSON-compatible dicts:

    OutputRef        {"$ref": "stage.value"}
    ProcedureRefJson {"$proc": ["git", "add"], "input": {...}, "$name"?: str, "$when"?: str}

An output reference address has the grammar ``<head>[.<segment>]*`` where the
head is a stage name or ``$last``. Construction never validates an address;
``parse_address`` turns it into a tagged variant at resolution time.

Example:
    >>> ref("changes.value")
    {'$ref': 'changes.value'}
    >>> parse_address("$last.success")
    LastAddress(segments=('success',))
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict

from procplay.core.errors import UnresolvedReferenceError

LAST = "$last"

# Execution-timing directives
WHEN_IMMEDIATE = "$immediate"
WHEN_NEVER = "$never"
WHEN_PARENT = "$parent"

RESERVED_WHEN = frozenset({WHEN_IMMEDIATE, WHEN_NEVER, WHEN_PARENT})

REF_KEY = "$ref"
PROC_KEY = "$proc"
NAME_KEY = "$name"
WHEN_KEY = "$when"

ProcedurePath = Sequence[str]


# Functional TypedDict form: "$ref" and friends are not valid identifiers
OutputRef = TypedDict("OutputRef", {"$ref": str})

ProcedureRefJson = TypedDict(
    "ProcedureRefJson",
    {
        "$proc": ProcedurePath,
        "input": Any,
        "$name": NotRequired[str],
        "$when": NotRequired[str],
    },
)


def ref(path: str) -> OutputRef:
    """Create an output reference.

    The path is wrapped verbatim - no escaping, no validation.

    Args:
        path: Reference path (e.g. "changes.value", "$last", "$last.success").

    Returns:
        Output reference dict.
    """
    return {"$ref": path}


def is_output_ref(value: Any) -> bool:
    """Check whether a value is an output reference ({"$ref": str} only)."""
    return (
        isinstance(value, Mapping)
        and len(value) == 1
        and isinstance(value.get(REF_KEY), str)
    )


def is_procedure_ref(value: Any) -> bool:
    """Check whether a value is a procedure reference."""
    return isinstance(value, Mapping) and PROC_KEY in value


def dotted(path: ProcedurePath) -> str:
    """Render a procedure path as ``service.operation``."""
    return ".".join(path)


# =============================================================================
# Parsed addresses
# =============================================================================


@dataclass(frozen=True)
class StageAddress:
    """Address rooted at a named stage.

    Attributes:
        name: Stage name (the ``$name`` of a procedure reference).
        segments: Property path into the stage output.
    """

    name: str
    segments: tuple[str, ...] = ()


@dataclass(frozen=True)
class LastAddress:
    """Address rooted at the most recently completed stage."""

    segments: tuple[str, ...] = ()


Address = StageAddress | LastAddress


def parse_address(path: str) -> Address:
    """Parse an output reference path into a tagged variant.

    Args:
        path: Raw ``$ref`` string.

    Returns:
        LastAddress when the head is ``$last``, StageAddress otherwise.
    """
    head, *rest = path.split(".")
    if head == LAST:
        return LastAddress(segments=tuple(rest))
    return StageAddress(name=head, segments=tuple(rest))


def lookup_path(value: Any, segments: Sequence[str], address: str) -> Any:
    """Walk property segments into a stage output.

    Each segment is tried as a mapping key, then as an integer index for
    sequences, then as an attribute.

    Args:
        value: Stage output to start from.
        segments: Property segments.
        address: Full address, used in error messages.

    Returns:
        The value at the end of the path.

    Raises:
        UnresolvedReferenceError: If a segment does not exist.
    """
    current = value
    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                raise UnresolvedReferenceError(address, f"no property '{segment}'")
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                raise UnresolvedReferenceError(address, f"no index '{segment}'") from None
        elif segment and not segment.startswith("_") and hasattr(current, segment):
            current = getattr(current, segment)
        else:
            raise UnresolvedReferenceError(address, f"no property '{segment}'")
    return current
