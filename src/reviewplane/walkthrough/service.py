"""Walkthrough generation for the active review session.

Reviewer calls are sequential: the initial request, then at most one
follow-up computed from the initial result. Each run is tagged with the
session it was started for; if that session is gone when a reply arrives,
the result is dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reviewplane.core.errors import ResponseParseError
from reviewplane.core.logging import get_logger
from reviewplane.walkthrough.coverage import CoverageReconciler
from reviewplane.walkthrough.models import BlockRef, Walkthrough
from reviewplane.walkthrough.parser import parse_response
from reviewplane.walkthrough.prompt import build_missing_prompt, build_prompt
from reviewplane.walkthrough.reviewer import Reviewer

if TYPE_CHECKING:
    from reviewplane.review.session import ReviewSession, SessionManager

log = get_logger("walkthrough.service")


class WalkthroughService:
    """Generates a fully covered walkthrough and attaches it to the session."""

    def __init__(self, manager: SessionManager, reviewer: Reviewer) -> None:
        self._manager = manager
        self._reviewer = reviewer

    async def generate(self) -> Walkthrough | None:
        """Run the reviewer for the active session.

        Returns the walkthrough, or None when the session ended (or was
        replaced) while the reviewer was running.

        Raises:
            SessionError: No active session.
            ReviewerError: The initial reviewer call failed.
        """
        session = self._manager.require()
        session_id = session.session_id
        git_root = session.git_root or "."

        prompt = build_prompt(session.files, git_root=git_root, pr=session.pr)
        log.info("walkthrough_requested", files=len(session.files), prompt_chars=len(prompt))
        output = await self._reviewer.review(prompt)
        if not self._manager.is_current(session_id):
            log.info("walkthrough_discarded", stale_session=session_id, stage="initial")
            return None

        try:
            walkthrough = parse_response(output)
        except ResponseParseError as e:
            log.warning("walkthrough_response_invalid", error=e.error_name, message=e.message)
            walkthrough = Walkthrough()

        reconciler = CoverageReconciler(lambda missing: self._follow_up(session, missing))
        walkthrough = await reconciler.ensure_full_coverage(session.files, walkthrough)
        if not self._manager.is_current(session_id):
            log.info("walkthrough_discarded", stale_session=session_id, stage="follow_up")
            return None

        session.set_walkthrough(walkthrough)
        log.info("walkthrough_ready", steps=len(walkthrough.steps))
        return walkthrough

    async def _follow_up(self, session: ReviewSession, missing: list[BlockRef]) -> Walkthrough:
        prompt = build_missing_prompt(
            session.files, missing, git_root=session.git_root or ".", pr=session.pr
        )
        log.info("follow_up_requested", missing=len(missing))
        return parse_response(await self._reviewer.review(prompt))
