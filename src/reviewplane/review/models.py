"""Review session data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from reviewplane.diff.mapping import Side


@dataclass(frozen=True, slots=True)
class PullRequest:
    """Pull request metadata shown to the reviewer."""

    number: int
    title: str
    author: str | None = None
    description: str | None = None
    url: str | None = None


@dataclass(frozen=True, slots=True)
class Comment:
    """Review comment.

    ``line`` is the anchor (end of range for multi-line comments). LEFT
    comments are anchored to old-file lines and must be mapped before display.
    Replies point at their thread root through ``in_reply_to_id``.
    """

    id: int
    path: str
    line: int
    side: Side
    body: str
    author: str
    created_at: datetime
    start_line: int | None = None
    start_side: Side | None = None
    in_reply_to_id: int | None = None
    html_url: str | None = None

    @property
    def is_root(self) -> bool:
        return self.in_reply_to_id is None

    @property
    def line_spec(self) -> str:
        """``N`` for single lines, ``N-M`` for ranges."""
        if self.start_line is not None and self.start_line != self.line:
            return f"{self.start_line}-{self.line}"
        return str(self.line)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "line": self.line,
            "start_line": self.start_line,
            "side": self.side,
            "start_side": self.start_side,
            "body": self.body,
            "author": self.author,
            "created_at": self.created_at.isoformat(),
            "in_reply_to_id": self.in_reply_to_id,
            "html_url": self.html_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Comment:
        """Build from a GitHub-style review comment payload."""
        created = data.get("created_at")
        if isinstance(created, str):
            created_at = datetime.fromisoformat(created.replace("Z", "+00:00"))
        elif isinstance(created, datetime):
            created_at = created
        else:
            created_at = datetime.now(UTC)
        # Outdated GitHub comments carry "line": null and keep "original_line"
        line = data.get("line")
        if line is None:
            line = data.get("original_line")
        if line is None:
            raise ValueError(f"Comment {data.get('id')}: no line or original_line")
        author = data.get("author")
        if author is None and isinstance(data.get("user"), dict):
            author = data["user"].get("login")
        return cls(
            id=int(data["id"]),
            path=str(data["path"]),
            line=int(line),
            side=data.get("side") or "RIGHT",
            body=str(data.get("body", "")),
            author=author or "",
            created_at=created_at,
            start_line=data.get("start_line"),
            start_side=data.get("start_side"),
            in_reply_to_id=data.get("in_reply_to_id"),
            html_url=data.get("html_url"),
        )


@dataclass(frozen=True, slots=True)
class NavAnchor:
    """Last position reached by change navigation."""

    file: str
    change_block_index: int
    line: int


@dataclass(frozen=True, slots=True)
class Cursor:
    """Caller's current location. ``file`` is None outside review files."""

    file: str | None
    line: int


@dataclass(frozen=True, slots=True)
class NavTarget:
    """Where navigation should move the cursor."""

    file: str
    line: int
    change_block_index: int | None = None
    wrapped: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "change_block_index": self.change_block_index,
            "wrapped": self.wrapped,
        }
