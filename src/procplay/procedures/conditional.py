"""client.conditional - pick a branch from a resolved condition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from procplay.client.context import CallContext

CONDITIONAL_PATH = ("client", "conditional")


async def conditional(input: dict[str, Any], context: CallContext) -> dict[str, Any]:
    """Evaluate ``then`` when ``condition`` is truthy, ``else`` otherwise.

    Only the selected branch is evaluated. A missing branch yields None.
    """
    branch = "then" if input.get("condition") else "else"
    value = None
    if branch in input:
        value = await context.client.exec(input[branch])
    return {"branch": branch, "value": value}
