"""Tests for dag.traverse and client.conditional."""

import pytest

from procplay.core.builder import proc
from procplay.core.errors import UnresolvedReferenceError
from procplay.core.refs import ref
from procplay.procedures.dag import should_visit
from procplay.runner import RunOptions, run

QUIET = RunOptions(print=False)


@pytest.fixture
def git_registry(registry):
    """Registry with fake git procedures that record their calls."""
    calls: list[str] = []

    @registry.procedure(["git", "hasChanges"])
    async def has_changes(input, context):
        calls.append("hasChanges")
        return {"value": input.get("changes", True)}

    @registry.procedure(["git", "add"])
    async def add(input, context):
        calls.append("add")
        return {"added": input.get("all", False)}

    @registry.procedure(["git", "reset"])
    async def reset(input, context):
        calls.append("reset")
        return {"reset": True}

    registry.calls = calls
    return registry


class TestShouldVisit:
    """Tests for the traversal timing filter."""

    @pytest.mark.parametrize("when", [None, "$immediate", "$parent"])
    def test_runs(self, when):
        item = proc(["x"]).ref if when is None else proc(["x"]).when(when).ref
        assert should_visit(item, None)

    def test_never(self):
        assert not should_visit(proc(["x"]).when("$never").ref, None)

    def test_named_context(self):
        item = proc(["x"]).when("deploy").ref
        assert should_visit(item, "deploy")
        assert not should_visit(item, "build")
        assert not should_visit(item, None)

    def test_non_procedures_always_run(self):
        assert should_visit(ref("$last"), None)
        assert should_visit(5, None)


class TestTraverse:
    """Tests for dag.traverse."""

    @pytest.mark.asyncio
    async def test_visits_in_order(self, git_registry):
        result = await run(
            proc(["dag", "traverse"]).input({
                "visit": [
                    proc(["git", "hasChanges"]).name("changes").ref,
                    proc(["git", "add"]).input({"all": True}).ref,
                    ref("changes.value"),
                    "literal",
                ],
            }).ref,
            QUIET,
            registry=git_registry,
        )

        assert git_registry.calls == ["hasChanges", "add"]
        assert result == {
            "results": [{"value": True}, {"added": True}, True, "literal"],
            "last": "literal",
        }

    @pytest.mark.asyncio
    async def test_last_refers_to_previous_stage(self, git_registry):
        result = await run(
            proc(["dag", "traverse"]).input({
                "visit": [
                    proc(["git", "add"]).input({"all": True}).ref,
                    proc(["git", "hasChanges"]).input({"changes": ref("$last.added")}).ref,
                ],
            }).ref,
            QUIET,
            registry=git_registry,
        )

        assert result["last"] == {"value": True}

    @pytest.mark.asyncio
    async def test_skips_never_and_other_contexts(self, git_registry):
        result = await run(
            proc(["dag", "traverse"]).input({
                "context": "deploy",
                "visit": [
                    proc(["git", "add"]).when("$never").ref,
                    proc(["git", "reset"]).when("cleanup").ref,
                    proc(["git", "hasChanges"]).when("deploy").ref,
                ],
            }).ref,
            QUIET,
            registry=git_registry,
        )

        assert git_registry.calls == ["hasChanges"]
        assert result["results"] == [{"value": True}]

    @pytest.mark.asyncio
    async def test_empty_visit(self, registry):
        result = await run(proc(["dag", "traverse"]).ref, QUIET, registry=registry)
        assert result == {"results": [], "last": None}

    @pytest.mark.asyncio
    async def test_visit_must_be_list(self, registry):
        with pytest.raises(TypeError, match="must be a list"):
            await run(
                proc(["dag", "traverse"]).input({"visit": "nope"}).ref,
                QUIET,
                registry=registry,
            )


class TestConditional:
    """Tests for client.conditional."""

    def _graph(self, changes: bool) -> dict:
        return proc(["dag", "traverse"]).input({
            "visit": [
                proc(["git", "hasChanges"]).input({"changes": changes}).name("changes").ref,
                proc(["client", "conditional"]).input({
                    "condition": ref("changes.value"),
                    "then": proc(["git", "add"]).input({"all": True}).ref,
                    "else": proc(["git", "reset"]).ref,
                }).ref,
            ],
        }).ref

    @pytest.mark.asyncio
    async def test_then_branch(self, git_registry):
        result = await run(self._graph(True), QUIET, registry=git_registry)

        assert git_registry.calls == ["hasChanges", "add"]
        assert result["last"] == {"branch": "then", "value": {"added": True}}

    @pytest.mark.asyncio
    async def test_else_branch(self, git_registry):
        result = await run(self._graph(False), QUIET, registry=git_registry)

        assert git_registry.calls == ["hasChanges", "reset"]
        assert result["last"] == {"branch": "else", "value": {"reset": True}}

    @pytest.mark.asyncio
    async def test_missing_branch(self, registry):
        result = await run(
            proc(["client", "conditional"]).input({"condition": False, "then": 1}).ref,
            QUIET,
            registry=registry,
        )

        assert result == {"branch": "else", "value": None}

    @pytest.mark.asyncio
    async def test_literal_and_reference_branches(self, git_registry):
        result = await run(
            proc(["dag", "traverse"]).input({
                "visit": [
                    proc(["git", "add"]).input({"all": True}).name("added").ref,
                    proc(["client", "conditional"]).input({
                        "condition": True,
                        "then": {"was": ref("added.added")},
                    }).ref,
                ],
            }).ref,
            QUIET,
            registry=git_registry,
        )

        assert result["last"] == {"branch": "then", "value": {"was": True}}

    @pytest.mark.asyncio
    async def test_never_branch_is_not_run(self, git_registry):
        result = await run(
            proc(["client", "conditional"]).input({
                "condition": True,
                "then": proc(["git", "add"]).when("$never").ref,
            }).ref,
            QUIET,
            registry=git_registry,
        )

        assert git_registry.calls == []
        assert result == {"branch": "then", "value": None}

    @pytest.mark.asyncio
    async def test_unknown_stage_in_condition(self, git_registry):
        with pytest.raises(UnresolvedReferenceError, match="unknown stage 'missing'"):
            await run(
                proc(["client", "conditional"]).input({
                    "condition": ref("missing.value"),
                    "then": proc(["git", "add"]).ref,
                }).ref,
                QUIET,
                registry=git_registry,
            )
        assert git_registry.calls == []
