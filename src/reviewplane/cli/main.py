"""ReviewPlane CLI - rvp command."""

import click

from reviewplane.cli.comments import comments_command
from reviewplane.cli.diff import diff_command
from reviewplane.cli.walkthrough import walkthrough_command
from reviewplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="rvp")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ReviewPlane - change blocks, navigation and AI walkthroughs for code review."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(diff_command, name="diff")
cli.add_command(walkthrough_command, name="walkthrough")
cli.add_command(comments_command, name="comments")


if __name__ == "__main__":
    cli()
