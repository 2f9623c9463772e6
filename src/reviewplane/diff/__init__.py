"""Diff module exports."""

from reviewplane.diff.builder import build_change_blocks
from reviewplane.diff.mapping import (
    DisplayPosition,
    Side,
    clamp_to_buffer,
    find_block_at,
    is_live,
    map_old_to_new,
    resolve_comment_line,
)
from reviewplane.diff.models import (
    ChangeBlock,
    ChangeKind,
    DeletedEntry,
    DeletionGroup,
    FileStatus,
    Hunk,
    LineMapping,
    ReviewFile,
)
from reviewplane.diff.parser import parse_git_diff, parse_patch

__all__ = [
    # Models
    "ChangeBlock",
    "ChangeKind",
    "DeletedEntry",
    "DeletionGroup",
    "FileStatus",
    "Hunk",
    "LineMapping",
    "ReviewFile",
    # Building
    "build_change_blocks",
    "parse_git_diff",
    "parse_patch",
    # Mapping
    "DisplayPosition",
    "Side",
    "clamp_to_buffer",
    "find_block_at",
    "is_live",
    "map_old_to_new",
    "resolve_comment_line",
]
