"""CLI frontend for procplay.

Commands:
    procplay run FILE    Run a playground script (.py) or a JSON graph (.json)
    procplay list        List registered procedures

Example:
    $ procplay run my-agg.play.py
    $ procplay run graph.json --format text
    $ procplay list --json
"""

from procplay.frontends.cli.main import main

__all__ = ["main"]
