"""Review module exports."""

from reviewplane.review.comments_file import CommentEntry, CommentsFile
from reviewplane.review.models import Comment, Cursor, NavAnchor, NavTarget, PullRequest
from reviewplane.review.navigation import Navigator, build_ai_nav_list
from reviewplane.review.session import ReviewSession, SessionManager

__all__ = [
    "Comment",
    "CommentEntry",
    "CommentsFile",
    "Cursor",
    "NavAnchor",
    "NavTarget",
    "Navigator",
    "PullRequest",
    "ReviewSession",
    "SessionManager",
    "build_ai_nav_list",
]
