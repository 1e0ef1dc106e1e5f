"""Tests for the procplay CLI."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from procplay.frontends.cli.main import cli, list_command, run_command


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from replacing pytest's root log handlers."""
    with patch("procplay.core.logging_config.configure_logging"):
        yield


class TestCLIDefinition:
    """Tests for command definitions."""

    def test_run_has_format_option(self):
        param_names = [p.name for p in run_command.params]
        assert "output_format" in param_names
        assert "quiet" in param_names

    def test_list_has_json_option(self):
        assert "json_output" in [p.name for p in list_command.params]


class TestRunCommand:
    """Tests for `procplay run`."""

    def test_run_json_file(self, runner, tmp_path, global_registry):
        @global_registry.procedure(["test", "echo"])
        async def echo(input, context):
            return input

        graph = tmp_path / "graph.json"
        graph.write_text(json.dumps({"$proc": ["test", "echo"], "input": {"v": 1}}))

        result = runner.invoke(cli, ["run", str(graph)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"v": 1}

    def test_run_script_with_graph(self, runner, tmp_path, global_registry):
        script = tmp_path / "agg.play.py"
        script.write_text(
            "@procedure(['test', 'answer'])\n"
            "async def answer(input, context):\n"
            "    return {'value': 42}\n"
            "\n"
            "graph = proc(['dag', 'traverse']).input({\n"
            "    'visit': [\n"
            "        proc(['test', 'answer']).name('a').ref,\n"
            "        ref('a.value'),\n"
            "    ],\n"
            "})\n"
        )

        result = runner.invoke(cli, ["run", str(script), "--format", "text"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "{'results': [{'value': 42}, 42], 'last': 42}"

    def test_run_script_without_graph(self, runner, tmp_path):
        script = tmp_path / "noop.py"
        script.write_text("x = 1\n")

        result = runner.invoke(cli, ["run", str(script)])

        assert result.exit_code == 0
        assert result.output == ""

    def test_run_script_calling_run_directly(self, runner, tmp_path, global_registry):
        """A top-level `run(...)` call in a script executes the graph."""
        marker = tmp_path / "touched"
        script = tmp_path / "touch.play.py"
        script.write_text(
            "@procedure(['test', 'touch'])\n"
            "def touch(input, context):\n"
            "    open(input['path'], 'w').close()\n"
            "    return {'touched': True}\n"
            "\n"
            f"run(proc(['test', 'touch']).input({{'path': {str(marker)!r}}}).ref)\n"
        )

        result = runner.invoke(cli, ["run", str(script)])

        assert result.exit_code == 0, result.output
        assert marker.exists()
        assert json.loads(result.output) == {"touched": True}

    def test_quiet(self, runner, tmp_path):
        graph = tmp_path / "graph.json"
        graph.write_text(json.dumps({"$proc": ["dag", "traverse"], "input": {"visit": []}}))

        result = runner.invoke(cli, ["run", str(graph), "--quiet"])

        assert result.exit_code == 0
        assert result.output == ""

    def test_unknown_procedure_exits_1(self, runner, tmp_path):
        graph = tmp_path / "graph.json"
        graph.write_text(json.dumps({"$proc": ["nope"], "input": {}}))

        result = runner.invoke(cli, ["run", str(graph)])

        assert result.exit_code == 1
        assert "Error: Procedure not found: nope" in result.output

    def test_missing_file_exits_1(self, runner, tmp_path):
        result = runner.invoke(cli, ["run", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_not_a_reference(self, runner, tmp_path):
        graph = tmp_path / "graph.json"
        graph.write_text(json.dumps({"input": {}}))

        result = runner.invoke(cli, ["run", str(graph)])

        assert result.exit_code == 1
        assert "not a procedure reference" in result.output


class TestListCommand:
    """Tests for `procplay list`."""

    def test_table(self, runner):
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0
        assert "dag.traverse" in result.output
        assert "client.conditional" in result.output

    def test_json(self, runner):
        result = runner.invoke(cli, ["list", "--json"])

        assert result.exit_code == 0
        paths = [entry["path"] for entry in json.loads(result.output)]
        assert ["dag", "traverse"] in paths
