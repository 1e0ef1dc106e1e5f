"""CLI entry point."""

from __future__ import annotations

import asyncio

import rich_click as click

from procplay.frontends.cli.output import error_exit, output_json, print_table

# Configure rich-click styling
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.MAX_WIDTH = 100


@click.group()
@click.version_option(package_name="procplay")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: PROCPLAY_LOG_LEVEL or WARNING)",
)
def cli(log_level: str | None) -> None:
    """Procplay - build and run procedure call graphs.

    **Examples:**

        procplay run my-agg.play.py

        procplay run graph.json --format text

        procplay list
    """
    from procplay.core.logging_config import configure_logging

    configure_logging(level=log_level)


@cli.command("run")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="json",
    help="Output format for the result",
)
@click.option("--quiet", "-q", is_flag=True, help="Don't print the result")
def run_command(file: str, output_format: str, quiet: bool) -> None:
    """Run a playground script or a JSON call graph.

    A **.json** file holds one procedure reference. Any other file is run
    as Python with `proc`, `ref`, a blocking `run` and `procedure`
    pre-bound; if it defines a `graph` variable, that graph is executed.
    """
    from procplay.frontends.cli.file_runner import load_graph_from_file
    from procplay.runner import RunOptions, run

    try:
        graph = load_graph_from_file(file)
        if graph is None:
            return
        asyncio.run(run(graph, RunOptions(print=not quiet, format=output_format)))  # type: ignore[arg-type]
    except Exception as e:
        error_exit(str(e))


@cli.command("list")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
def list_command(json_output: bool) -> None:
    """List registered procedures."""
    import procplay.procedures  # noqa: F401  (registers built-ins)
    from procplay.core.registry import PROCEDURE_REGISTRY

    procedures = PROCEDURE_REGISTRY.get_all()
    if json_output:
        output_json(
            [
                {
                    "path": list(p.path),
                    "handler": p.handler is not None,
                    "description": p.description,
                }
                for p in procedures
            ]
        )
        return

    print_table(
        ["PATH", "HANDLER", "DESCRIPTION"],
        [[p.name, "yes" if p.handler else "no", p.description] for p in procedures],
    )


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
