"""rvp comments command - list stored local review comments."""

import json
from pathlib import Path

import click

from reviewplane.cli.utils import find_repo_root, load_cli_config
from reviewplane.review.comments_file import CommentsFile


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def comments_command(path: Path, as_json: bool) -> None:
    """List comments stored in the repository's comments file."""
    repo_root = find_repo_root(path)
    config = load_cli_config(repo_root)
    comments_file = CommentsFile.at_root(repo_root, config.comments.file_name)
    entries = comments_file.read()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"path": e.path, "line": e.line, "start_line": e.start_line, "body": e.body}
                    for e in entries
                ]
            )
        )
        return

    if not entries:
        click.echo(f"No comments in {comments_file.path.name}.")
        return

    for entry in entries:
        click.echo(f"{entry.path}:{entry.line_spec}")
        for line in entry.body.splitlines():
            click.echo(f"    {line}")
