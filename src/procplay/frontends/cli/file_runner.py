"""Loading call graphs from playground files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from procplay.core.builder import ProcBuilder
from procplay.core.refs import is_procedure_ref


def script_namespace() -> dict[str, Any]:
    """Names pre-bound inside a playground script.

    Scripts run outside any event loop, so ``run`` is the blocking
    ``run_sync``; the coroutine form is available as ``run_async``.
    """
    import procplay.procedures  # noqa: F401  (registers built-ins)
    from procplay.core.builder import proc
    from procplay.core.refs import ref
    from procplay.core.registry import PROCEDURE_REGISTRY, procedure
    from procplay.runner import RunOptions, run, run_sync

    return {
        "proc": proc,
        "ref": ref,
        "run": run_sync,
        "run_sync": run_sync,
        "run_async": run,
        "RunOptions": RunOptions,
        "procedure": procedure,
        "PROCEDURE_REGISTRY": PROCEDURE_REGISTRY,
        "__name__": "__procplay_script__",
    }


def _as_reference(value: Any, source: str) -> dict[str, Any]:
    if isinstance(value, ProcBuilder):
        return value.ref  # type: ignore[return-value]
    if not is_procedure_ref(value):
        raise ValueError(f"{source} is not a procedure reference (missing '$proc')")
    return value


def load_graph_from_file(filepath: str) -> dict[str, Any] | None:
    """Load a call graph from a playground file.

    ``.json`` files hold a serialized procedure reference. Any other file is
    executed as a Python script with ``proc``, ``ref``, a blocking ``run`` and
    friends pre-bound; its ``graph`` variable (reference or builder) is returned.

    Args:
        filepath: Path to the playground file.

    Returns:
        The root procedure reference, or None if a script defines no
        ``graph`` (it is assumed to have run itself).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds something other than a procedure reference.
    """
    path = Path(filepath)
    code = path.read_text()

    if path.suffix == ".json":
        return _as_reference(json.loads(code), filepath)

    namespace = script_namespace()
    exec(compile(code, filepath, "exec"), namespace)

    if "graph" not in namespace:
        return None
    return _as_reference(namespace["graph"], f"'graph' in {filepath}")
