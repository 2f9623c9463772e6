"""Position mapping between old and new file coordinates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from reviewplane.core.logging import get_logger
from reviewplane.diff.models import ChangeBlock

log = get_logger("diff.mapping")

Side = Literal["LEFT", "RIGHT"]


@dataclass(frozen=True, slots=True)
class DisplayPosition:
    """A buffer line to render at.

    ``render_after`` is set when the requested line lies past the end of the
    buffer and the content belongs below the last line rather than above it.
    """

    line: int
    render_after: bool = False


def map_old_to_new(change_blocks: Sequence[ChangeBlock], old_line: int) -> int | None:
    """Anchor line for a deleted old-file line, or None if no block records it.

    First match wins. Well-formed diffs never map one old line from two
    blocks; when that happens it is logged.
    """
    found: int | None = None
    for block in change_blocks:
        for mapping in block.old_to_new:
            if mapping.old_line != old_line:
                continue
            if found is None:
                found = mapping.new_line
            elif mapping.new_line != found:
                log.warning(
                    "duplicate_old_line_mapping",
                    old_line=old_line,
                    kept=found,
                    ignored=mapping.new_line,
                )
    return found


def is_live(change_blocks: Sequence[ChangeBlock], old_line: int) -> bool:
    """Whether a deleted old line still has a deletion record."""
    return any(m.old_line == old_line for block in change_blocks for m in block.old_to_new)


def resolve_comment_line(
    comment_line: int, side: Side, change_blocks: Sequence[ChangeBlock]
) -> int | None:
    """Display line for a comment. None means the LEFT anchor no longer exists."""
    if side == "RIGHT":
        return comment_line
    return map_old_to_new(change_blocks, comment_line)


def clamp_to_buffer(line: int, line_count: int) -> DisplayPosition:
    """Clamp a resolved line into ``[1, line_count]``.

    A line past the end (deletions at end of file) resolves to the last line
    with ``render_after`` set.
    """
    last = max(line_count, 1)
    if line > last:
        return DisplayPosition(line=last, render_after=line_count > 0)
    return DisplayPosition(line=max(line, 1))


def find_block_at(change_blocks: Sequence[ChangeBlock], line: int) -> int | None:
    """Index of the block containing ``line``."""
    for index, block in enumerate(change_blocks):
        if block.contains(line):
            return index
    return None
