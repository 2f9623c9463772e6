"""CLI utilities."""

from pathlib import Path

import click

from reviewplane.config.loader import load_config
from reviewplane.config.models import ReviewPlaneConfig
from reviewplane.core.errors import ConfigError
from reviewplane.core.logging import configure_logging
from reviewplane.diff.models import ReviewFile
from reviewplane.git.errors import GitError
from reviewplane.git.ops import load_local_review, open_repository


def find_repo_root(start_path: Path | None = None) -> Path:
    """Find the git working tree root containing ``start_path``.

    Raises:
        click.ClickException: If not inside a git repository
    """
    start_path = start_path or Path.cwd()
    try:
        repo = open_repository(start_path)
    except GitError as e:
        raise click.ClickException(
            f"{e}\nReviewPlane commands must be run from within a git repository."
        ) from e
    return Path(repo.workdir).resolve()


def load_cli_config(repo_root: Path) -> ReviewPlaneConfig:
    """Load config for ``repo_root`` and apply its logging section.

    The group's ``-v`` flag raises the root level to DEBUG.
    """
    try:
        config = load_config(repo_root)
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    logging_config = config.logging
    ctx = click.get_current_context(silent=True)
    if ctx is not None and (ctx.find_root().obj or {}).get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    return config


def load_review(path: Path) -> tuple[Path, list[ReviewFile], ReviewPlaneConfig]:
    """Git root, parsed local changes and config for ``path``."""
    repo_root = find_repo_root(path)
    config = load_cli_config(repo_root)
    try:
        git_root, files = load_local_review(repo_root, config.review_diff)
    except GitError as e:
        raise click.ClickException(str(e)) from e
    return git_root, files, config
