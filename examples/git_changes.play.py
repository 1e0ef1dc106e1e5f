"""Stage, then commit only if there is something to commit.

Run with: procplay run examples/git_changes.play.py
"""

import subprocess


@procedure(["git", "hasChanges"])
def has_changes(input, context):
    """Whether the working tree has uncommitted changes."""
    status = subprocess.run(
        ["git", "status", "--porcelain"], capture_output=True, text=True, check=True
    )
    return {"value": bool(status.stdout.strip())}


@procedure(["git", "add"])
def add(input, context):
    """Stage changes."""
    args = ["git", "add", "--all"] if input.get("all") else ["git", "add", *input.get("paths", [])]
    subprocess.run(args, check=True)
    return {"success": True}


graph = proc(["dag", "traverse"]).input({
    "visit": [
        proc(["git", "hasChanges"]).name("changes").ref,
        proc(["client", "conditional"]).input({
            "condition": ref("changes.value"),
            "then": proc(["git", "add"]).input({"all": True}).ref,
        }).ref,
    ],
})
