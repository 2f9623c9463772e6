"""Change block construction from hunks."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from reviewplane.core.logging import get_logger
from reviewplane.diff.models import (
    ChangeBlock,
    DeletedEntry,
    DeletionGroup,
    Hunk,
    LineMapping,
    derive_kind,
)

log = get_logger("diff.builder")


def _runs(positions: Iterable[int], breaks: frozenset[int]) -> list[tuple[int, int]]:
    """Merge sorted positions into maximal consecutive runs, splitting at breaks."""
    runs: list[tuple[int, int]] = []
    start = end = None
    for pos in sorted(set(positions)):
        if start is None:
            start = end = pos
        elif pos == end + 1 and pos not in breaks:
            end = pos
        else:
            runs.append((start, end))
            start = end = pos
    if start is not None:
        runs.append((start, end))
    return runs


def _group_deletions(entries: Sequence[DeletedEntry]) -> tuple[DeletionGroup, ...]:
    groups: list[DeletionGroup] = []
    for entry in entries:
        if groups and groups[-1].anchor_line == entry.anchor:
            last = groups[-1]
            groups[-1] = DeletionGroup(
                anchor_line=last.anchor_line,
                old_lines=(*last.old_lines, entry.content),
                old_line_numbers=(*last.old_line_numbers, entry.old_line),
            )
        else:
            groups.append(
                DeletionGroup(
                    anchor_line=entry.anchor,
                    old_lines=(entry.content,),
                    old_line_numbers=(entry.old_line,),
                )
            )
    return tuple(groups)


def build_change_blocks(hunks: Sequence[Hunk]) -> list[ChangeBlock]:
    """Convert one file's hunks into ordered, non-overlapping change blocks.

    Every added line and every deletion anchor is an interesting position.
    Positions are merged into consecutive runs (split at context breaks) and
    each run becomes one block. Deletions are grouped by anchor in their
    original order; ``changed_lines`` are added lines that share a position
    with a deletion anchor.

    Pure: the same hunks always produce equal blocks.
    """
    added = [line for hunk in hunks for line in hunk.added_lines]
    deleted = [entry for hunk in hunks for entry in hunk.deleted_entries]
    breaks = frozenset().union(*(hunk.context_breaks for hunk in hunks))

    blocks: list[ChangeBlock] = []
    for start, end in _runs([*added, *(e.anchor for e in deleted)], breaks):
        run_added = tuple(dict.fromkeys(line for line in added if start <= line <= end))
        run_deleted = [e for e in deleted if start <= e.anchor <= end]
        groups = _group_deletions(run_deleted)

        kind = derive_kind(bool(run_added), bool(groups))
        if kind is None:
            continue

        anchors = {e.anchor for e in run_deleted}
        blocks.append(
            ChangeBlock(
                start_line=start,
                end_line=end,
                kind=kind,
                added_lines=run_added,
                changed_lines=tuple(line for line in run_added if line in anchors),
                deletion_groups=groups,
                old_to_new=tuple(
                    LineMapping(old_line=e.old_line, new_line=e.anchor)
                    for e in run_deleted
                    if e.old_line is not None
                ),
            )
        )

    log.debug(
        "change_blocks_built",
        hunks=len(hunks),
        blocks=len(blocks),
        added=len(added),
        deleted=len(deleted),
    )
    return blocks
