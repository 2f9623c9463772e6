"""Markdown persistence for local review comments.

Format::

    # Review Comments

    ## file=src/app.py:line=12
    Body text, possibly over
    several lines.

    ## file=src/app.py:line=20-24
    Range comment.

The whole file is rewritten on every mutation so it always matches the
session's comments.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from reviewplane.core.logging import get_logger
from reviewplane.review.models import Comment

log = get_logger("review.comments_file")

HEADER = "# Review Comments\n\n"
_ENTRY_RE = re.compile(r"^## file=(?P<path>.+):line=(?P<start>\d+)(?:-(?P<end>\d+))?$")


@dataclass(frozen=True, slots=True)
class CommentEntry:
    """One comment as stored on disk."""

    path: str
    line: int
    body: str
    start_line: int | None = None

    @property
    def line_spec(self) -> str:
        if self.start_line is not None and self.start_line != self.line:
            return f"{self.start_line}-{self.line}"
        return str(self.line)

    @classmethod
    def from_comment(cls, comment: Comment) -> CommentEntry:
        return cls(
            path=comment.path,
            line=comment.line,
            body=comment.body,
            start_line=comment.start_line,
        )


def render(entries: Iterable[CommentEntry]) -> str:
    parts = [HEADER]
    for entry in entries:
        parts.append(f"## file={entry.path}:line={entry.line_spec}\n")
        parts.append(entry.body + "\n\n")
    return "".join(parts)


def parse(text: str) -> list[CommentEntry]:
    """Parse comments file text. Lines before the first entry are ignored."""
    entries: list[CommentEntry] = []
    current: re.Match[str] | None = None
    body: list[str] = []

    def flush() -> None:
        if current is None:
            return
        while body and not body[-1].strip():
            body.pop()
        start = int(current.group("start"))
        end = current.group("end")
        entries.append(
            CommentEntry(
                path=current.group("path"),
                line=int(end) if end is not None else start,
                body="\n".join(body),
                start_line=start if end is not None else None,
            )
        )

    for line in text.splitlines():
        match = _ENTRY_RE.match(line)
        if match is not None:
            flush()
            current = match
            body = []
        elif current is not None:
            body.append(line)
    flush()
    return entries


class CommentsFile:
    """Comments file at a git root."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @classmethod
    def at_root(cls, git_root: Path, file_name: str = "REVIEW_COMMENTS.md") -> CommentsFile:
        return cls(git_root / file_name)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> list[CommentEntry]:
        if not self._path.exists():
            return []
        return parse(self._path.read_text(encoding="utf-8"))

    def write(self, comments: Iterable[Comment]) -> None:
        """Rewrite the file from the given comments, in order."""
        entries = [CommentEntry.from_comment(c) for c in comments]
        self._path.write_text(render(entries), encoding="utf-8")
        log.debug("comments_file_written", path=str(self._path), comments=len(entries))

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
