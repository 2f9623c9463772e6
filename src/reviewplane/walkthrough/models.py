"""Walkthrough data models."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True, order=True)
class BlockRef:
    """Reference to one change block: file path plus 0-based block index."""

    file: str
    change_block_index: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "change_block_index": self.change_block_index}


@dataclass(frozen=True, slots=True)
class WalkthroughStep:
    """One narrative step over a set of change blocks."""

    title: str
    explanation: str
    change_block_refs: tuple[BlockRef, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "explanation": self.explanation,
            "change_blocks": [ref.to_dict() for ref in self.change_block_refs],
        }


@dataclass(frozen=True, slots=True)
class Walkthrough:
    """Reviewer-produced overview and ordered steps.

    Coverage is always computed against the review files, never stored here.
    """

    overview: str = ""
    steps: tuple[WalkthroughStep, ...] = ()

    def refs(self) -> Iterator[BlockRef]:
        """All block references in step order, duplicates included."""
        for step in self.steps:
            yield from step.change_block_refs

    def with_steps(self, extra: Sequence[WalkthroughStep]) -> Walkthrough:
        """Copy with ``extra`` appended after the existing steps."""
        return Walkthrough(overview=self.overview, steps=(*self.steps, *extra))

    def to_dict(self) -> dict[str, Any]:
        return {"overview": self.overview, "steps": [step.to_dict() for step in self.steps]}
