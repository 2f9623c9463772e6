"""Shared review fixtures."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from reviewplane.diff.models import ChangeBlock, DeletionGroup, LineMapping, ReviewFile
from reviewplane.review.session import ReviewSession, SessionManager


def make_files() -> tuple[ReviewFile, ...]:
    """Two files: a.py with blocks at 3, 10 and 20; b.py with one block at 1."""
    a_py = ReviewFile(
        path="a.py",
        status="modified",
        additions=3,
        deletions=2,
        change_blocks=(
            ChangeBlock(start_line=3, end_line=4, kind="add", added_lines=(3, 4)),
            ChangeBlock(
                start_line=10,
                end_line=10,
                kind="change",
                added_lines=(10,),
                changed_lines=(10,),
                deletion_groups=(
                    DeletionGroup(anchor_line=10, old_lines=("x = 1",), old_line_numbers=(10,)),
                ),
                old_to_new=(LineMapping(old_line=10, new_line=10),),
            ),
            ChangeBlock(
                start_line=20,
                end_line=20,
                kind="delete",
                deletion_groups=(
                    DeletionGroup(anchor_line=20, old_lines=("gone()",), old_line_numbers=(19,)),
                ),
                old_to_new=(LineMapping(old_line=19, new_line=20),),
            ),
        ),
    )
    b_py = ReviewFile(
        path="b.py",
        status="added",
        additions=5,
        change_blocks=(
            ChangeBlock(start_line=1, end_line=5, kind="add", added_lines=(1, 2, 3, 4, 5)),
        ),
    )
    return (a_py, b_py)


@pytest.fixture
def manager() -> Generator[SessionManager, None, None]:
    manager = SessionManager()
    yield manager
    manager.end()


@pytest.fixture
def review_files() -> tuple[ReviewFile, ...]:
    return make_files()


@pytest.fixture
def session(manager: SessionManager, review_files: tuple[ReviewFile, ...]) -> ReviewSession:
    return manager.start(review_files)
