"""Unified diff parsing.

Turns ``git diff`` text into hunks and review files. Deleted lines are
anchored at the new-file line they precede, so a deletion at the end of a
file anchors one past the last line.
"""

from __future__ import annotations

import re
from collections.abc import Collection
from pathlib import PurePosixPath

from reviewplane.core.logging import get_logger
from reviewplane.diff.builder import build_change_blocks
from reviewplane.diff.models import DeletedEntry, FileStatus, Hunk, ReviewFile, derive_kind

log = get_logger("diff.parser")

_HUNK_HEADER_RE = re.compile(r"^@@\s*-(\d+)(?:,(\d+))?\s*\+(\d+)(?:,(\d+))?\s*@@")
_FILE_HEADER_RE = re.compile(r"^diff --git a/(.+) b/(.+)$")
_STATUS_MARKERS: tuple[tuple[str, FileStatus], ...] = (
    ("new file", "added"),
    ("deleted file", "deleted"),
    ("rename from", "renamed"),
    ("renamed", "renamed"),
)


def _is_boundary(line: str) -> bool:
    return line.startswith("@@") or line.startswith("diff ")


def parse_patch(patch: str) -> list[Hunk]:
    """Parse the hunks of a single-file patch.

    Context-only hunks produce nothing. The first change after a context line
    is recorded as a context break so adjacent-but-separated edits stay in
    separate change blocks.
    """
    hunks: list[Hunk] = []
    lines = patch.splitlines()
    i = 0
    while i < len(lines):
        match = _HUNK_HEADER_RE.match(lines[i])
        i += 1
        if match is None:
            continue

        old_line = int(match.group(1))
        new_start = int(match.group(3))
        new_count = int(match.group(4)) if match.group(4) is not None else 1
        new_line = new_start

        added: list[int] = []
        deleted: list[DeletedEntry] = []
        breaks: set[int] = set()
        after_context = False

        while i < len(lines) and not _is_boundary(lines[i]):
            line = lines[i]
            i += 1
            if line.startswith("\\"):
                # "\ No newline at end of file"
                continue
            if line.startswith("-"):
                if after_context:
                    breaks.add(new_line)
                    after_context = False
                deleted.append(DeletedEntry(content=line[1:], anchor=new_line, old_line=old_line))
                old_line += 1
            elif line.startswith("+"):
                if after_context:
                    breaks.add(new_line)
                    after_context = False
                added.append(new_line)
                new_line += 1
            elif line == "" or line.startswith(" "):
                after_context = True
                new_line += 1
                old_line += 1

        kind = derive_kind(bool(added), bool(deleted))
        if kind is None:
            continue
        hunks.append(
            Hunk(
                start_line=new_start,
                line_count=new_count,
                kind=kind,
                added_lines=tuple(added),
                deleted_entries=tuple(deleted),
                context_breaks=frozenset(breaks),
            )
        )
    return hunks


def parse_git_diff(diff_text: str, *, skip_files: Collection[str] = ()) -> list[ReviewFile]:
    """Split a multi-file ``git diff`` into review files.

    Files without any change block (mode-only changes, binary files) are
    dropped, as are files whose basename is in ``skip_files``.
    """
    files: list[ReviewFile] = []
    skipped: list[str] = []
    lines = diff_text.splitlines()
    i = 0
    while i < len(lines):
        header = _FILE_HEADER_RE.match(lines[i])
        i += 1
        if header is None:
            continue

        path = header.group(2)
        status: FileStatus = "modified"
        while i < len(lines) and not lines[i].startswith(("diff --git", "@@")):
            for marker, marker_status in _STATUS_MARKERS:
                if lines[i].startswith(marker):
                    status = marker_status
                    break
            i += 1

        patch_start = i
        while i < len(lines) and not lines[i].startswith("diff --git"):
            i += 1

        if PurePosixPath(path).name in skip_files:
            skipped.append(path)
            continue

        hunks = parse_patch("\n".join(lines[patch_start:i]))
        blocks = build_change_blocks(hunks)
        if not blocks:
            continue
        files.append(
            ReviewFile(
                path=path,
                status=status,
                additions=sum(len(h.added_lines) for h in hunks),
                deletions=sum(len(h.deleted_entries) for h in hunks),
                change_blocks=tuple(blocks),
            )
        )

    if skipped:
        log.debug("noise_files_skipped", paths=skipped)
    log.debug("git_diff_parsed", files=len(files))
    return files
