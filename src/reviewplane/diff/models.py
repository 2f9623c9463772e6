"""Diff data models: hunks in, change blocks out."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ChangeKind = Literal["add", "delete", "change"]
FileStatus = Literal["added", "deleted", "modified", "renamed"]

_CHANGE_KINDS: frozenset[str] = frozenset({"add", "delete", "change"})
_FILE_STATUSES: frozenset[str] = frozenset({"added", "deleted", "modified", "renamed"})
_STATUS_ICONS = {"added": "+", "deleted": "-", "modified": "~", "renamed": "R"}


def derive_kind(has_added: bool, has_deleted: bool) -> ChangeKind | None:
    """Kind of a run from what it contains. None for an empty run."""
    if has_added and has_deleted:
        return "change"
    if has_added:
        return "add"
    if has_deleted:
        return "delete"
    return None


@dataclass(frozen=True, slots=True)
class DeletedEntry:
    """One deleted line, anchored at a new-file position."""

    content: str
    anchor: int
    old_line: int | None = None


@dataclass(frozen=True, slots=True)
class Hunk:
    """Raw diff hunk in new-file coordinates.

    ``deleted_entries`` keeps original file order. ``context_breaks`` holds
    positions that start a new change block even when they are adjacent to
    the previous change.
    """

    start_line: int
    line_count: int
    kind: ChangeKind
    added_lines: tuple[int, ...] = ()
    deleted_entries: tuple[DeletedEntry, ...] = ()
    context_breaks: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Hunk:
        """Build from the external JSON hunk shape.

        ``old_lines``, ``deleted_at`` and ``deleted_old_lines`` are parallel
        arrays. A missing ``deleted_at`` anchors every deletion at ``start``.

        Raises:
            ValueError: If the parallel arrays disagree in length or the kind
                is unknown.
        """
        start = int(data["start"])
        old_lines = [str(line) for line in data.get("old_lines") or []]
        deleted_at = data.get("deleted_at")
        if deleted_at is not None:
            anchors = [int(a) for a in deleted_at]
        else:
            anchors = [start] * len(old_lines)
        if len(anchors) != len(old_lines):
            raise ValueError(
                f"Hunk at line {start}: {len(old_lines)} old_lines"
                f" but {len(anchors)} deleted_at anchors"
            )

        old_numbers_raw = data.get("deleted_old_lines")
        if old_numbers_raw is None:
            old_numbers: list[int | None] = [None] * len(old_lines)
        else:
            old_numbers = [int(n) if n is not None else None for n in old_numbers_raw]
            if len(old_numbers) != len(old_lines):
                raise ValueError(
                    f"Hunk at line {start}: {len(old_lines)} old_lines but "
                    f"{len(old_numbers)} deleted_old_lines"
                )

        kind = data.get("kind") or data.get("hunk_type")
        if kind not in _CHANGE_KINDS:
            raise ValueError(f"Hunk at line {start}: unknown kind {kind!r}")

        return cls(
            start_line=start,
            line_count=int(data.get("count", 0)),
            kind=kind,
            added_lines=tuple(dict.fromkeys(int(n) for n in data.get("added_lines") or [])),
            deleted_entries=tuple(
                DeletedEntry(content=c, anchor=a, old_line=n)
                for c, a, n in zip(old_lines, anchors, old_numbers, strict=True)
            ),
            context_breaks=frozenset(int(n) for n in data.get("context_breaks") or []),
        )


@dataclass(frozen=True, slots=True)
class DeletionGroup:
    """Consecutive deleted lines sharing one anchor."""

    anchor_line: int
    old_lines: tuple[str, ...]
    old_line_numbers: tuple[int | None, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "anchor_line": self.anchor_line,
            "old_lines": list(self.old_lines),
            "old_line_numbers": list(self.old_line_numbers),
        }


@dataclass(frozen=True, slots=True)
class LineMapping:
    """Original line number of a deleted line and its new-file anchor."""

    old_line: int
    new_line: int


@dataclass(frozen=True, slots=True)
class ChangeBlock:
    """Contiguous run of changes in new-file coordinates (end inclusive)."""

    start_line: int
    end_line: int
    kind: ChangeKind
    added_lines: tuple[int, ...] = ()
    changed_lines: tuple[int, ...] = ()
    deletion_groups: tuple[DeletionGroup, ...] = ()
    old_to_new: tuple[LineMapping, ...] = ()

    @property
    def nav_line(self) -> int:
        """Line navigation jumps to: the earliest added line or deletion anchor."""
        candidates = []
        if self.added_lines:
            candidates.append(self.added_lines[0])
        if self.deletion_groups:
            candidates.append(self.deletion_groups[0].anchor_line)
        return min(candidates) if candidates else self.start_line

    def contains(self, line: int) -> bool:
        """Whether a new-file line belongs to this block.

        Pure deletions have no lines of their own; they match their anchor and
        the line right above it.
        """
        if self.kind == "delete":
            return line in (self.start_line, self.start_line - 1)
        return self.start_line <= line <= self.end_line

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_line": self.start_line,
            "end_line": self.end_line,
            "kind": self.kind,
            "added_lines": list(self.added_lines),
            "changed_lines": list(self.changed_lines),
            "deletion_groups": [g.to_dict() for g in self.deletion_groups],
            "old_to_new": [
                {"old_line": m.old_line, "new_line": m.new_line} for m in self.old_to_new
            ],
        }


@dataclass(frozen=True, slots=True)
class ReviewFile:
    """A changed file under review."""

    path: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    change_blocks: tuple[ChangeBlock, ...] = ()
    content: str | None = None

    @property
    def summary(self) -> str:
        """One-line listing: status icon, path and line counts."""
        icon = _STATUS_ICONS.get(self.status, "?")
        return f"[{icon}] {self.path} (+{self.additions}/-{self.deletions})"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReviewFile:
        """Build from ``{path, status, hunks}``; counts default to the block totals."""
        from reviewplane.diff.builder import build_change_blocks

        status = data.get("status", "modified")
        if status not in _FILE_STATUSES:
            raise ValueError(f"{data.get('path')}: unknown status {status!r}")
        hunks = [Hunk.from_dict(h) for h in data.get("hunks") or []]
        blocks = build_change_blocks(hunks)
        additions = sum(len(b.added_lines) for b in blocks)
        deletions = sum(len(g.old_lines) for b in blocks for g in b.deletion_groups)
        return cls(
            path=str(data["path"]),
            status=status,
            additions=int(data.get("additions", additions)),
            deletions=int(data.get("deletions", deletions)),
            change_blocks=tuple(blocks),
            content=data.get("content"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status,
            "additions": self.additions,
            "deletions": self.deletions,
            "change_blocks": [b.to_dict() for b in self.change_blocks],
        }
