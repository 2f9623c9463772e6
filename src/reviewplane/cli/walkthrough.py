"""rvp walkthrough command - ask the reviewer for a guided walkthrough."""

import asyncio
import json
from pathlib import Path

import click

from reviewplane.cli.utils import load_review
from reviewplane.core.errors import ReviewerError
from reviewplane.core.progress import pluralize, spinner, status
from reviewplane.review.session import SessionManager
from reviewplane.walkthrough.models import Walkthrough
from reviewplane.walkthrough.reviewer import CommandReviewer
from reviewplane.walkthrough.service import WalkthroughService


def _print_walkthrough(walkthrough: Walkthrough) -> None:
    click.echo(walkthrough.overview.strip() or "(no overview)")
    for number, step in enumerate(walkthrough.steps, start=1):
        click.echo("")
        click.echo(f"{number}. {step.title}")
        if step.explanation:
            click.echo(f"   {step.explanation}")
        for ref in step.change_block_refs:
            click.echo(f"   - {ref.file} @@ change_block {ref.change_block_index} @@")


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def walkthrough_command(path: Path, as_json: bool) -> None:
    """Generate a walkthrough of uncommitted changes.

    Every change block is covered by at least one step.
    """
    git_root, files, config = load_review(path)
    if not files:
        click.echo("No local changes.")
        return

    manager = SessionManager()
    manager.start_local(git_root, files, comments_file_name=config.comments.file_name)
    service = WalkthroughService(manager, CommandReviewer(config.reviewer, cwd=git_root))
    try:
        with spinner(f"Running {config.reviewer.command} on {pluralize(len(files), 'file')}"):
            walkthrough = asyncio.run(service.generate())
    except ReviewerError as e:
        raise click.ClickException(e.message) from e
    finally:
        manager.end()

    if walkthrough is None:
        raise click.ClickException("Review session ended before the walkthrough was ready")

    if as_json:
        click.echo(json.dumps(walkthrough.to_dict()))
        return

    status(f"Walkthrough ready: {pluralize(len(walkthrough.steps), 'step')}", style="success")
    _print_walkthrough(walkthrough)
