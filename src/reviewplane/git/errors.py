"""Git module error types."""


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """Path is not inside a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class BareRepositoryError(GitError):
    """Repository has no working tree to review."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Repository has no working tree: {path}")
        self.path = path
