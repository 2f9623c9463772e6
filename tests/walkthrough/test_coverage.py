"""Tests for walkthrough coverage reconciliation."""

from __future__ import annotations

import random

import pytest

from reviewplane.core.errors import ResponseParseError, ReviewerError
from reviewplane.diff.models import ChangeBlock, ReviewFile
from reviewplane.walkthrough.coverage import (
    PLACEHOLDER_EXPLANATION,
    CoverageReconciler,
    all_block_refs,
    covered_refs,
    missing_refs,
    placeholder_step,
)
from reviewplane.walkthrough.models import BlockRef, Walkthrough, WalkthroughStep


def _files() -> list[ReviewFile]:
    block = ChangeBlock(start_line=1, end_line=1, kind="add", added_lines=(1,))
    return [
        ReviewFile(path="a.py", status="modified", change_blocks=(block, block)),
        ReviewFile(path="b.py", status="added", change_blocks=(block,)),
    ]


def _step(title: str, *refs: BlockRef) -> WalkthroughStep:
    return WalkthroughStep(title=title, explanation="", change_block_refs=refs)


class TestRefs:
    def test_all_block_refs_in_file_order(self) -> None:
        assert all_block_refs(_files()) == [
            BlockRef("a.py", 0),
            BlockRef("a.py", 1),
            BlockRef("b.py", 0),
        ]

    def test_out_of_range_refs_do_not_count(self) -> None:
        walkthrough = Walkthrough(steps=(_step("s", BlockRef("a.py", 5), BlockRef("c.py", 0)),))

        assert covered_refs(_files(), walkthrough) == set()

    def test_missing_refs(self) -> None:
        walkthrough = Walkthrough(steps=(_step("s", BlockRef("a.py", 1)),))

        assert missing_refs(_files(), walkthrough) == [BlockRef("a.py", 0), BlockRef("b.py", 0)]

    def test_placeholder_step(self) -> None:
        step = placeholder_step(BlockRef("b.py", 0))

        assert step.title == "Uncovered change: b.py"
        assert step.explanation == PLACEHOLDER_EXPLANATION
        assert step.change_block_refs == (BlockRef("b.py", 0),)


class TestCoverageReconciler:
    """Follow-up and placeholder behavior."""

    @pytest.mark.asyncio
    async def test_fully_covered_skips_follow_up(self) -> None:
        calls: list[list[BlockRef]] = []

        async def follow_up(missing: list[BlockRef]) -> Walkthrough:
            calls.append(missing)
            return Walkthrough()

        walkthrough = Walkthrough(
            overview="o",
            steps=(_step("all", *all_block_refs(_files())),),
        )

        result = await CoverageReconciler(follow_up).ensure_full_coverage(_files(), walkthrough)

        assert result == walkthrough
        assert calls == []

    @pytest.mark.asyncio
    async def test_follow_up_steps_appended(self) -> None:
        """A three-block review covered by one step plus a follow-up."""
        calls: list[list[BlockRef]] = []

        async def follow_up(missing: list[BlockRef]) -> Walkthrough:
            calls.append(missing)
            return Walkthrough(overview="ignored", steps=(_step("rest", *missing),))

        walkthrough = Walkthrough(overview="o", steps=(_step("first", BlockRef("a.py", 0)),))

        result = await CoverageReconciler(follow_up).ensure_full_coverage(_files(), walkthrough)

        assert calls == [[BlockRef("a.py", 1), BlockRef("b.py", 0)]]
        assert result.overview == "o"
        assert [s.title for s in result.steps] == ["first", "rest"]
        assert missing_refs(_files(), result) == []

    @pytest.mark.asyncio
    async def test_partial_follow_up_gets_placeholders(self) -> None:
        async def follow_up(missing: list[BlockRef]) -> Walkthrough:
            return Walkthrough(steps=(_step("one more", missing[0]),))

        result = await CoverageReconciler(follow_up).ensure_full_coverage(_files(), Walkthrough())

        assert [s.title for s in result.steps] == [
            "one more",
            "Uncovered change: a.py",
            "Uncovered change: b.py",
        ]
        assert missing_refs(_files(), result) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ReviewerError.timeout("codex", 1),
            ResponseParseError.no_json(),
        ],
    )
    async def test_failed_follow_up_falls_back_to_placeholders(self, error: Exception) -> None:
        calls = 0

        async def follow_up(missing: list[BlockRef]) -> Walkthrough:
            nonlocal calls
            calls += 1
            raise error

        walkthrough = Walkthrough(steps=(_step("first", BlockRef("b.py", 0)),))

        result = await CoverageReconciler(follow_up).ensure_full_coverage(_files(), walkthrough)

        assert calls == 1
        assert [s.change_block_refs for s in result.steps[1:]] == [
            (BlockRef("a.py", 0),),
            (BlockRef("a.py", 1),),
        ]


def _wide_files() -> list[ReviewFile]:
    block = ChangeBlock(start_line=1, end_line=1, kind="add", added_lines=(1,))
    return [
        ReviewFile(path=f"{name}.py", status="modified", change_blocks=(block,) * count)
        for name, count in (("a", 4), ("b", 1), ("c", 3), ("d", 2))
    ]


HALLUCINATED = (BlockRef("a.py", 4), BlockRef("ghost.py", 0), BlockRef("d.py", -1))


class TestPlaceholdersAreTheComplement:
    """For any covered subset, placeholders cover exactly the rest, in file order."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(20))
    async def test_random_subsets(self, seed: int) -> None:
        rng = random.Random(seed)
        files = _wide_files()
        every = all_block_refs(files)
        initial = rng.sample(every, rng.randint(0, len(every)))
        answered = rng.sample(every, rng.randint(0, len(every)))
        hallucinated = rng.sample(HALLUCINATED, rng.randint(0, len(HALLUCINATED)))

        async def follow_up(missing: list[BlockRef]) -> Walkthrough:
            refs = [ref for ref in answered if ref in missing] + hallucinated
            return Walkthrough(steps=(_step("follow-up", *refs),) if refs else ())

        walkthrough = Walkthrough(steps=(_step("first", *initial, *hallucinated),))

        result = await CoverageReconciler(follow_up).ensure_full_coverage(files, walkthrough)

        expected = [ref for ref in every if ref not in set(initial) | set(answered)]
        placeholders = [s for s in result.steps if s.explanation == PLACEHOLDER_EXPLANATION]
        assert [s.change_block_refs for s in placeholders] == [(ref,) for ref in expected]
        assert covered_refs(files, result) == set(every)
        assert result.steps[0].change_block_refs == (*initial, *hallucinated)
