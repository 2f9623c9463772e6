"""Git module exports."""

from reviewplane.git.errors import BareRepositoryError, GitError, NotARepositoryError
from reviewplane.git.ops import LocalDiff, load_local_review, open_repository, read_local_diff

__all__ = [
    "GitError",
    "NotARepositoryError",
    "BareRepositoryError",
    "LocalDiff",
    "open_repository",
    "read_local_diff",
    "load_local_review",
]
