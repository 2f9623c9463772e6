"""Walkthrough module exports."""

from reviewplane.walkthrough.coverage import (
    CoverageReconciler,
    all_block_refs,
    covered_refs,
    missing_refs,
    with_placeholders,
)
from reviewplane.walkthrough.models import BlockRef, Walkthrough, WalkthroughStep
from reviewplane.walkthrough.parser import parse_response
from reviewplane.walkthrough.prompt import build_missing_prompt, build_prompt
from reviewplane.walkthrough.reviewer import CommandReviewer, Reviewer, build_reviewer_command
from reviewplane.walkthrough.service import WalkthroughService

__all__ = [
    # Models
    "BlockRef",
    "Walkthrough",
    "WalkthroughStep",
    # Coverage
    "CoverageReconciler",
    "all_block_refs",
    "covered_refs",
    "missing_refs",
    "with_placeholders",
    # Reviewer
    "CommandReviewer",
    "Reviewer",
    "WalkthroughService",
    "build_missing_prompt",
    "build_prompt",
    "build_reviewer_command",
    "parse_response",
]
