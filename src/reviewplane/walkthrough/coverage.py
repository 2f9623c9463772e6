"""Walkthrough coverage reconciliation.

Every change block must be referenced by at least one walkthrough step. Gaps
get exactly one follow-up request scoped to the missing blocks; whatever is
still uncovered afterwards gets a placeholder step per block.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

from reviewplane.core.errors import ResponseParseError, ReviewerError
from reviewplane.core.logging import get_logger
from reviewplane.diff.models import ReviewFile
from reviewplane.walkthrough.models import BlockRef, Walkthrough, WalkthroughStep

log = get_logger("walkthrough.coverage")

PLACEHOLDER_EXPLANATION = (
    "The walkthrough did not cover this change. Review it directly in the diff."
)

FollowUp = Callable[[list[BlockRef]], Awaitable[Walkthrough]]


def all_block_refs(files: Sequence[ReviewFile]) -> list[BlockRef]:
    """Every real block, in file order then block order."""
    return [
        BlockRef(file=f.path, change_block_index=i)
        for f in files
        for i in range(len(f.change_blocks))
    ]


def covered_refs(files: Sequence[ReviewFile], walkthrough: Walkthrough) -> set[BlockRef]:
    """Referenced blocks that exist. Out-of-range references are ignored."""
    real = set(all_block_refs(files))
    return {ref for ref in walkthrough.refs() if ref in real}


def missing_refs(files: Sequence[ReviewFile], walkthrough: Walkthrough) -> list[BlockRef]:
    covered = covered_refs(files, walkthrough)
    return [ref for ref in all_block_refs(files) if ref not in covered]


def placeholder_step(ref: BlockRef) -> WalkthroughStep:
    return WalkthroughStep(
        title=f"Uncovered change: {ref.file}",
        explanation=PLACEHOLDER_EXPLANATION,
        change_block_refs=(ref,),
    )


def with_placeholders(walkthrough: Walkthrough, missing: Sequence[BlockRef]) -> Walkthrough:
    return walkthrough.with_steps([placeholder_step(ref) for ref in missing])


class CoverageReconciler:
    """Brings a walkthrough to full coverage.

    ``follow_up`` receives the missing refs and returns the reviewer's extra
    steps. It is awaited at most once per reconciliation.
    """

    def __init__(self, follow_up: FollowUp) -> None:
        self._follow_up = follow_up

    async def ensure_full_coverage(
        self, files: Sequence[ReviewFile], walkthrough: Walkthrough
    ) -> Walkthrough:
        missing = missing_refs(files, walkthrough)
        if not missing:
            log.debug("walkthrough_fully_covered", steps=len(walkthrough.steps))
            return walkthrough

        log.info("walkthrough_incomplete", missing=len(missing), steps=len(walkthrough.steps))
        merged = walkthrough
        try:
            extra = await self._follow_up(missing)
        except (ReviewerError, ResponseParseError) as e:
            log.warning("follow_up_failed", error=e.error_name, message=e.message)
        else:
            merged = walkthrough.with_steps(extra.steps)
            log.debug("follow_up_merged", added_steps=len(extra.steps))

        still_missing = missing_refs(files, merged)
        if still_missing:
            log.info("placeholder_steps_added", count=len(still_missing))
        return with_placeholders(merged, still_missing)
