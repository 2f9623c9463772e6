"""rvp diff command - show local changes as change blocks."""

import json
from pathlib import Path

import click

from reviewplane.cli.utils import load_review


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def diff_command(path: Path, as_json: bool) -> None:
    """Show uncommitted changes split into change blocks.

    PATH is any directory inside the repository (default: current directory).
    """
    git_root, files, _ = load_review(path)

    if as_json:
        click.echo(json.dumps({"files": [f.to_dict() for f in files], "git_root": str(git_root)}))
        return

    if not files:
        click.echo("No local changes.")
        return

    for file in files:
        click.echo(file.summary)
        for index, block in enumerate(file.change_blocks):
            span = (
                str(block.start_line)
                if block.start_line == block.end_line
                else f"{block.start_line}-{block.end_line}"
            )
            click.echo(f"    @@ change_block {index} @@ {block.kind} {span}")
