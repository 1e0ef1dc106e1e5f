"""Output formatting for results and CLI commands."""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import rich_click as click


def echo(message: str, err: bool = False) -> None:
    """Write a line to stdout (or stderr). Single sink for all printed output."""
    click.echo(message, err=err)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    separator_width: int = 70,
) -> None:
    """Print rows under headers, columns padded to their widest cell.

    Args:
        headers: Column header strings
        rows: List of rows, each row is a list of cell values
        separator_width: Width of the separator line
    """
    widths = [
        max([len(headers[i])] + [len(row[i]) for row in rows if i < len(row)])
        for i in range(len(headers))
    ]
    # Last column doesn't need padding
    fmt = " ".join([f"{{:<{width}}}" for width in widths[:-1]] + ["{}"])

    echo(fmt.format(*headers))
    echo("-" * separator_width)

    for row in rows:
        padded_row = list(row) + [""] * (len(headers) - len(row))
        echo(fmt.format(*padded_row[: len(headers)]))


def output_json(data: Any, indent: int = 2) -> None:
    """Output data as formatted JSON; non-JSON values are rendered with str()."""
    echo(json.dumps(data, indent=indent, default=str))


def output_text(data: Any) -> None:
    """Output the default string form of a value."""
    echo(str(data))


def error_exit(message: str, code: int = 1) -> NoReturn:
    """Print error message and exit with code."""
    echo(f"Error: {message}", err=True)
    sys.exit(code)
