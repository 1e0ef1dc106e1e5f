"""dag.traverse - run a list of stages in order."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from procplay.core.refs import (
    PROC_KEY,
    RESERVED_WHEN,
    WHEN_KEY,
    WHEN_NEVER,
    dotted,
    is_procedure_ref,
)

if TYPE_CHECKING:
    from procplay.client.context import CallContext

logger = logging.getLogger(__name__)

TRAVERSE_PATH = ("dag", "traverse")


def should_visit(item: Any, context_name: str | None) -> bool:
    """Whether a visit item runs in this traversal.

    ``$never`` is skipped. A named context only runs when it matches the
    traversal's ``context``; the reserved tokens and unset ``$when`` always run.
    """
    if not is_procedure_ref(item):
        return True
    when = item.get(WHEN_KEY)
    if when is None or when in RESERVED_WHEN:
        return when != WHEN_NEVER
    return when == context_name


async def traverse(input: dict[str, Any], context: CallContext) -> dict[str, Any]:
    """Visit procedure and output references in declaration order.

    Input:
        visit: List of procedure references, output references or literals.
        context: Optional named context; stages whose ``$when`` names a
            different context are skipped.

    Returns:
        {"results": [...], "last": <output of the last visited item>}
    """
    visit = input.get("visit") or []
    if not isinstance(visit, list):
        raise TypeError(f"dag.traverse 'visit' must be a list, got {type(visit).__name__}")
    context_name = input.get("context")

    results: list[Any] = []
    for index, item in enumerate(visit):
        if not should_visit(item, context_name):
            logger.debug(
                "visit_skipped: index=%d proc=%s when=%s",
                index,
                dotted(item[PROC_KEY]),
                item.get(WHEN_KEY),
            )
            continue
        results.append(await context.client.exec(item))

    return {"results": results, "last": results[-1] if results else None}
