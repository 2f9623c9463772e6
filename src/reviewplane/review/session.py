"""Review session lifecycle.

One session is active at a time. It owns the review files, comments, the
optional walkthrough and the navigation anchor; ending it drops all of them.

Mutations (comments, walkthrough) assume a single writer. The host layer
serializes calls; nothing here locks.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from reviewplane.core.errors import SessionError
from reviewplane.core.logging import bind_session_id, clear_session_id, get_logger
from reviewplane.diff.mapping import Side
from reviewplane.diff.models import ReviewFile
from reviewplane.review.comments_file import CommentsFile
from reviewplane.review.models import Comment, NavAnchor, PullRequest
from reviewplane.walkthrough.models import Walkthrough

log = get_logger("review.session")

LOCAL_AUTHOR = "local"


@dataclass
class ReviewSession:
    """State for the active review."""

    files: tuple[ReviewFile, ...]
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    git_root: Path | None = None
    pr: PullRequest | None = None
    viewer: str | None = None
    comments_file: CommentsFile | None = None
    comments: dict[int, Comment] = field(default_factory=dict)
    walkthrough: Walkthrough | None = None
    nav_anchor: NavAnchor | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_local(self) -> bool:
        return self.pr is None

    @property
    def author(self) -> str:
        return self.viewer or LOCAL_AUTHOR

    # =========================================================================
    # Files
    # =========================================================================

    def file_index(self, path: str | None) -> int | None:
        if path is None:
            return None
        for i, f in enumerate(self.files):
            if f.path == path:
                return i
        return None

    def file(self, path: str | None) -> ReviewFile | None:
        index = self.file_index(path)
        return self.files[index] if index is not None else None

    # =========================================================================
    # Comments
    # =========================================================================

    def comments_for(self, path: str) -> list[Comment]:
        """Comments on a file, oldest first."""
        return sorted((c for c in self.comments.values() if c.path == path), key=lambda c: c.id)

    def root_comments(self, path: str) -> list[Comment]:
        return [c for c in self.comments_for(path) if c.is_root]

    def thread(self, root_id: int) -> list[Comment]:
        """Root comment followed by its replies in creation order."""
        root = self._require_comment(root_id)
        replies = sorted(
            (c for c in self.comments.values() if c.in_reply_to_id == root.id),
            key=lambda c: c.id,
        )
        return [root, *replies]

    def load_comments(self, comments: Iterable[Comment]) -> None:
        """Seed comments fetched at review start."""
        for comment in comments:
            self.comments[comment.id] = comment
        log.debug("comments_loaded", count=len(self.comments))

    def add_comment(
        self,
        path: str,
        line: int,
        body: str,
        *,
        side: Side = "RIGHT",
        start_line: int | None = None,
        start_side: Side | None = None,
    ) -> Comment:
        comment = Comment(
            id=self._next_id(),
            path=path,
            line=line,
            side=side,
            body=body,
            author=self.author,
            created_at=datetime.now(UTC),
            start_line=start_line,
            start_side=start_side,
        )
        self.comments[comment.id] = comment
        self._persist()
        log.info(
            "comment_added", comment_id=comment.id, path=path, line=comment.line_spec, side=side
        )
        return comment

    def reply(self, comment_id: int, body: str) -> Comment:
        """Reply to a comment. Replies to replies join the root's thread."""
        target = self._require_comment(comment_id)
        root_id = target.in_reply_to_id if target.in_reply_to_id is not None else target.id
        comment = Comment(
            id=self._next_id(),
            path=target.path,
            line=target.line,
            side=target.side,
            body=body,
            author=self.author,
            created_at=datetime.now(UTC),
            in_reply_to_id=root_id,
        )
        self.comments[comment.id] = comment
        self._persist()
        log.info("comment_replied", comment_id=comment.id, root_id=root_id)
        return comment

    def edit_comment(self, comment_id: int, body: str) -> Comment:
        """Replace a comment's body. Only its author may edit it."""
        comment = self._require_own_comment(comment_id)
        updated = Comment(
            id=comment.id,
            path=comment.path,
            line=comment.line,
            side=comment.side,
            body=body,
            author=comment.author,
            created_at=comment.created_at,
            start_line=comment.start_line,
            start_side=comment.start_side,
            in_reply_to_id=comment.in_reply_to_id,
            html_url=comment.html_url,
        )
        self.comments[comment_id] = updated
        self._persist()
        log.info("comment_edited", comment_id=comment_id)
        return updated

    def delete_comment(self, comment_id: int) -> None:
        """Delete a comment. Deleting a root drops its replies too."""
        comment = self._require_own_comment(comment_id)
        doomed = [comment_id]
        if comment.is_root:
            doomed.extend(c.id for c in self.comments.values() if c.in_reply_to_id == comment_id)
        for cid in doomed:
            del self.comments[cid]
        self._persist()
        log.info("comment_deleted", comment_id=comment_id, removed=len(doomed))

    def _next_id(self) -> int:
        return max(self.comments, default=0) + 1

    def _require_comment(self, comment_id: int) -> Comment:
        comment = self.comments.get(comment_id)
        if comment is None:
            raise SessionError.comment_not_found(comment_id)
        return comment

    def _require_own_comment(self, comment_id: int) -> Comment:
        comment = self._require_comment(comment_id)
        if comment.author != self.author:
            raise SessionError.not_author(comment_id, self.author)
        return comment

    def _persist(self) -> None:
        if self.comments_file is not None:
            self.comments_file.write(sorted(self.comments.values(), key=lambda c: c.id))

    # =========================================================================
    # Walkthrough
    # =========================================================================

    def set_walkthrough(self, walkthrough: Walkthrough | None) -> None:
        self.walkthrough = walkthrough
        self.nav_anchor = None
        log.debug(
            "walkthrough_set",
            steps=len(walkthrough.steps) if walkthrough is not None else 0,
        )


class SessionManager:
    """Holds at most one active review session."""

    def __init__(self) -> None:
        self._current: ReviewSession | None = None

    @property
    def current(self) -> ReviewSession | None:
        return self._current

    def is_current(self, session_id: str) -> bool:
        """Whether ``session_id`` still names the active session."""
        return self._current is not None and self._current.session_id == session_id

    def require(self) -> ReviewSession:
        if self._current is None:
            raise SessionError.no_active()
        return self._current

    def start(
        self,
        files: Sequence[ReviewFile],
        *,
        git_root: Path | None = None,
        pr: PullRequest | None = None,
        viewer: str | None = None,
        comments: Iterable[Comment] = (),
        comments_file: CommentsFile | None = None,
    ) -> ReviewSession:
        """Start a review. Fails if one is already active."""
        if self._current is not None:
            raise SessionError.already_active(self._current.session_id)
        session = ReviewSession(
            files=tuple(files),
            git_root=git_root,
            pr=pr,
            viewer=viewer,
            comments_file=comments_file,
        )
        session.load_comments(comments)
        self._current = session
        bind_session_id(session.session_id)
        log.info(
            "review_started",
            files=len(session.files),
            local=session.is_local,
            pr=pr.number if pr is not None else None,
        )
        return session

    def start_local(
        self,
        git_root: Path,
        files: Sequence[ReviewFile],
        *,
        comments_file_name: str = "REVIEW_COMMENTS.md",
        viewer: str | None = None,
    ) -> ReviewSession:
        """Start a review of uncommitted changes with comments kept on disk."""
        return self.start(
            files,
            git_root=git_root,
            viewer=viewer,
            comments_file=CommentsFile.at_root(git_root, comments_file_name),
        )

    def end(self) -> None:
        """Tear down the active session, if any."""
        if self._current is None:
            return
        session_id = self._current.session_id
        self._current = None
        log.info("review_ended", ended_session=session_id)
        clear_session_id()
