"""Local diff source via pygit2.

Produces the same text as ``git diff HEAD``: committed tree against the
working tree, staged changes included.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pygit2

from reviewplane.config.models import ReviewDiffConfig
from reviewplane.core.logging import get_logger
from reviewplane.diff.models import ReviewFile
from reviewplane.diff.parser import parse_git_diff
from reviewplane.git.errors import BareRepositoryError, NotARepositoryError

log = get_logger("git.ops")


@dataclass(frozen=True, slots=True)
class LocalDiff:
    """Unified diff of uncommitted changes, rooted at the repository workdir."""

    git_root: Path
    patch: str


def open_repository(repo_path: Path | str) -> pygit2.Repository:
    """Open the repository containing ``repo_path``."""
    path = Path(repo_path).resolve()
    try:
        discovered = pygit2.discover_repository(str(path))
    except pygit2.GitError as e:
        raise NotARepositoryError(str(path)) from e
    if discovered is None:
        raise NotARepositoryError(str(path))
    try:
        repo = pygit2.Repository(discovered)
    except pygit2.GitError as e:
        raise NotARepositoryError(str(path)) from e
    if repo.workdir is None:
        raise BareRepositoryError(str(path))
    return repo


def _head_tree(repo: pygit2.Repository) -> pygit2.Tree:
    if repo.head_is_unborn:
        # Nothing committed yet: everything staged counts as added
        empty_oid = repo.TreeBuilder().write()
        return repo.get(empty_oid)  # type: ignore[return-value]
    return repo.head.peel(pygit2.Tree)


def read_local_diff(repo_path: Path | str) -> LocalDiff:
    """Diff HEAD against the working tree of the repository at ``repo_path``."""
    repo = open_repository(repo_path)
    staged = _head_tree(repo).diff_to_index(repo.index)
    unstaged = repo.diff()
    staged.merge(unstaged)
    staged.find_similar()
    patch = staged.patch or ""
    git_root = Path(repo.workdir)
    log.debug("local_diff_read", git_root=str(git_root), files=len(staged), bytes=len(patch))
    return LocalDiff(git_root=git_root, patch=patch)


def load_local_review(
    repo_path: Path | str, config: ReviewDiffConfig | None = None
) -> tuple[Path, list[ReviewFile]]:
    """Read the local diff and parse it into review files.

    Noise files (lock files by default) are dropped unless disabled in config.
    """
    config = config or ReviewDiffConfig()
    local = read_local_diff(repo_path)
    skip = config.noise_files if config.skip_noise_files else ()
    files = parse_git_diff(local.patch, skip_files=frozenset(skip))
    log.info("local_review_loaded", git_root=str(local.git_root), files=len(files))
    return local.git_root, files
