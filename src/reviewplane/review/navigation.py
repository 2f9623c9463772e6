"""Change and comment navigation across review files.

Position is never stored as an index. Each call re-derives it from the
caller's cursor and falls back to the session's nav anchor, so navigation
keeps working after the cursor moved by other means.

Two change orders exist. The walkthrough order (when the session has one)
visits blocks in step order; otherwise blocks are visited file by file, top
to bottom. The first order in ``CHANGE_ORDERS`` that applies wins.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Literal, Protocol, TypeVar

from reviewplane.config.models import NavigationConfig
from reviewplane.core.errors import InternalError
from reviewplane.core.logging import get_logger
from reviewplane.diff.mapping import resolve_comment_line
from reviewplane.diff.models import ReviewFile
from reviewplane.review.models import Cursor, NavAnchor, NavTarget
from reviewplane.review.session import ReviewSession

log = get_logger("review.navigation")

Direction = Literal["next", "prev"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class NavItem:
    """A navigation stop."""

    file: str
    line: int
    change_block_index: int | None = None

    def target(self, *, wrapped: bool = False) -> NavTarget:
        return NavTarget(
            file=self.file,
            line=self.line,
            change_block_index=self.change_block_index,
            wrapped=wrapped,
        )


def first_some(strategies: Sequence[Callable[[], T | None]]) -> T | None:
    """Run strategies in order; the first non-None result wins."""
    for strategy in strategies:
        result = strategy()
        if result is not None:
            return result
    return None


# =============================================================================
# Stops
# =============================================================================


def block_stops(file: ReviewFile) -> list[NavItem]:
    """One stop per change block at its first change, sorted, one per line."""
    seen: set[int] = set()
    stops: list[NavItem] = []
    for index, block in enumerate(file.change_blocks):
        line = block.nav_line
        if line in seen:
            continue
        seen.add(line)
        stops.append(NavItem(file=file.path, line=line, change_block_index=index))
    return sorted(stops, key=lambda item: item.line)


def comment_stops(session: ReviewSession, file: ReviewFile) -> list[NavItem]:
    """Display lines of root comments, sorted and de-duplicated.

    LEFT comments whose deleted anchor no longer maps are skipped.
    """
    lines: set[int] = set()
    for comment in session.root_comments(file.path):
        line = resolve_comment_line(comment.line, comment.side, file.change_blocks)
        if line is not None:
            lines.add(line)
    return [NavItem(file=file.path, line=line) for line in sorted(lines)]


def build_ai_nav_list(session: ReviewSession) -> list[NavItem]:
    """Flatten walkthrough steps into navigation stops.

    Each block is kept at its first reference. References to files or
    indices that do not exist are dropped, as are blocks whose stop line
    repeats an earlier stop in the same file.
    """
    if session.walkthrough is None:
        return []
    seen_refs: set[tuple[str, int]] = set()
    seen_lines: set[tuple[str, int]] = set()
    items: list[NavItem] = []
    for ref in session.walkthrough.refs():
        key = (ref.file, ref.change_block_index)
        if key in seen_refs:
            continue
        seen_refs.add(key)
        file = session.file(ref.file)
        if file is None or not 0 <= ref.change_block_index < len(file.change_blocks):
            continue
        line = file.change_blocks[ref.change_block_index].nav_line
        if (ref.file, line) in seen_lines:
            continue
        seen_lines.add((ref.file, line))
        items.append(NavItem(file=ref.file, line=line, change_block_index=ref.change_block_index))
    return items


# =============================================================================
# Orders
# =============================================================================


class NavOrder(Protocol):
    name: str

    def step(self, cursor: Cursor, direction: Direction, wrap: bool) -> NavTarget | None: ...

    def edge(self, direction: Direction) -> NavTarget | None: ...


class ScanOrder:
    """File-then-line scan over per-file stops."""

    def __init__(
        self,
        session: ReviewSession,
        stops: Callable[[ReviewFile], list[NavItem]],
        *,
        name: str,
        use_anchor: bool,
    ) -> None:
        self._session = session
        self._stops = stops
        self._use_anchor = use_anchor
        self.name = name

    def _locate(self, cursor: Cursor) -> tuple[int, int] | None:
        index = self._session.file_index(cursor.file)
        if index is not None:
            return index, cursor.line
        anchor = self._session.nav_anchor
        if self._use_anchor and anchor is not None:
            index = self._session.file_index(anchor.file)
            if index is not None:
                return index, anchor.line
        return None

    def edge(self, direction: Direction) -> NavTarget | None:
        files = self._session.files
        ordered = files if direction == "next" else tuple(reversed(files))
        for file in ordered:
            stops = self._stops(file)
            if stops:
                return (stops[0] if direction == "next" else stops[-1]).target()
        return None

    def step(self, cursor: Cursor, direction: Direction, wrap: bool) -> NavTarget | None:
        located = self._locate(cursor)
        if located is None:
            target = self.edge(direction)
        else:
            target = self._scan_from(*located, direction)
        if target is not None:
            return target
        if wrap:
            edge = self.edge(direction)
            if edge is not None:
                return replace(edge, wrapped=True)
        return None

    def _scan_from(self, file_index: int, line: int, direction: Direction) -> NavTarget | None:
        files = self._session.files
        stops = self._stops(files[file_index])
        if direction == "next":
            for item in stops:
                if item.line > line:
                    return item.target()
            for file in files[file_index + 1 :]:
                later = self._stops(file)
                if later:
                    return later[0].target()
        else:
            for item in reversed(stops):
                if item.line < line:
                    return item.target()
            for file in reversed(files[:file_index]):
                earlier = self._stops(file)
                if earlier:
                    return earlier[-1].target()
        return None


class AiOrder:
    """Walkthrough step order over de-duplicated block references."""

    name = "ai"

    def __init__(self, session: ReviewSession, items: list[NavItem]) -> None:
        self._session = session
        self._items = items

    @property
    def items(self) -> list[NavItem]:
        return self._items

    def position(self, cursor: Cursor) -> int | None:
        """Index of the current item: containing block, then exact line, then anchor."""
        return first_some(
            (
                lambda: self._position_by_block(cursor),
                lambda: self._position_by_line(cursor),
                self._position_by_anchor,
            )
        )

    def _position_by_block(self, cursor: Cursor) -> int | None:
        """Containing block; a block whose stop is the cursor line beats a neighbor.

        A pure deletion also claims the line above its anchor, which can be
        the stop of the next deletion down.
        """
        file = self._session.file(cursor.file)
        if file is None:
            return None
        containing = [
            i
            for i, item in enumerate(self._items)
            if item.file == cursor.file
            and item.change_block_index is not None
            and file.change_blocks[item.change_block_index].contains(cursor.line)
        ]
        for i in containing:
            if self._items[i].line == cursor.line:
                return i
        return containing[0] if containing else None

    def _position_by_line(self, cursor: Cursor) -> int | None:
        if cursor.file is None:
            return None
        for i, item in enumerate(self._items):
            if item.file == cursor.file and item.line == cursor.line:
                return i
        return None

    def _position_by_anchor(self) -> int | None:
        anchor = self._session.nav_anchor
        if anchor is None:
            return None
        for i, item in enumerate(self._items):
            if item.file == anchor.file and item.change_block_index == anchor.change_block_index:
                return i
        return None

    def edge(self, direction: Direction) -> NavTarget | None:
        if not self._items:
            return None
        return (self._items[0] if direction == "next" else self._items[-1]).target()

    def step(self, cursor: Cursor, direction: Direction, wrap: bool) -> NavTarget | None:
        pos = self.position(cursor)
        target: NavTarget | None = None
        if pos is not None:
            neighbor = pos + 1 if direction == "next" else pos - 1
            if 0 <= neighbor < len(self._items):
                target = self._items[neighbor].target()
        else:
            target = self._first_beyond(cursor, direction)
        if target is not None:
            return target
        if wrap and self._items:
            item = self._items[0] if direction == "next" else self._items[-1]
            return item.target(wrapped=True)
        return None

    def _first_beyond(self, cursor: Cursor, direction: Direction) -> NavTarget | None:
        """Without a position: first item not at/before (or at/after) the cursor."""
        ordered = self._items if direction == "next" else list(reversed(self._items))
        for item in ordered:
            if cursor.file is None or item.file != cursor.file:
                return item.target()
            if (item.line > cursor.line) if direction == "next" else (item.line < cursor.line):
                return item.target()
        return None


def ai_order(session: ReviewSession) -> NavOrder | None:
    items = build_ai_nav_list(session)
    return AiOrder(session, items) if items else None


def file_order(session: ReviewSession) -> NavOrder | None:
    return ScanOrder(session, block_stops, name="file", use_anchor=True)


CHANGE_ORDERS: tuple[Callable[[ReviewSession], NavOrder | None], ...] = (ai_order, file_order)


# =============================================================================
# Navigator
# =============================================================================


class Navigator:
    """Navigation entry points for the host UI.

    Every method returns a ``NavTarget`` or None when there is nowhere to go.
    Successful change navigation moves the session's nav anchor.
    """

    def __init__(self, session: ReviewSession, *, wrap: bool = True) -> None:
        self._session = session
        self._wrap = wrap

    @classmethod
    def from_config(cls, session: ReviewSession, config: NavigationConfig) -> Navigator:
        return cls(session, wrap=config.wrap)

    def change_order(self) -> NavOrder:
        for factory in CHANGE_ORDERS:
            order = factory(self._session)
            if order is not None:
                return order
        raise InternalError.unexpected("no change order applies")

    def next_change(self, cursor: Cursor, wrap: bool | None = None) -> NavTarget | None:
        return self._change(cursor, "next", wrap)

    def prev_change(self, cursor: Cursor, wrap: bool | None = None) -> NavTarget | None:
        return self._change(cursor, "prev", wrap)

    def first_change(self) -> NavTarget | None:
        return self._land(self.change_order().edge("next"), kind="change", order="edge")

    def last_change(self) -> NavTarget | None:
        return self._land(self.change_order().edge("prev"), kind="change", order="edge")

    def next_comment(self, cursor: Cursor, wrap: bool | None = None) -> NavTarget | None:
        return self._comment(cursor, "next", wrap)

    def prev_comment(self, cursor: Cursor, wrap: bool | None = None) -> NavTarget | None:
        return self._comment(cursor, "prev", wrap)

    def _change(self, cursor: Cursor, direction: Direction, wrap: bool | None) -> NavTarget | None:
        order = self.change_order()
        if isinstance(order, AiOrder):
            pos = order.position(cursor)
            if pos is not None:
                self._set_anchor(order.items[pos].target())
        target = order.step(cursor, direction, self._wrap if wrap is None else wrap)
        return self._land(target, kind="change", order=order.name, direction=direction)

    def _comment(self, cursor: Cursor, direction: Direction, wrap: bool | None) -> NavTarget | None:
        order = ScanOrder(
            self._session,
            lambda f: comment_stops(self._session, f),
            name="comments",
            use_anchor=False,
        )
        target = order.step(cursor, direction, self._wrap if wrap is None else wrap)
        return self._land(target, kind="comment", order=order.name, direction=direction)

    def _set_anchor(self, target: NavTarget) -> None:
        if target.change_block_index is not None:
            self._session.nav_anchor = NavAnchor(
                file=target.file,
                change_block_index=target.change_block_index,
                line=target.line,
            )

    def _land(
        self,
        target: NavTarget | None,
        *,
        kind: str,
        order: str,
        direction: Direction | None = None,
    ) -> NavTarget | None:
        if target is None:
            log.debug("navigation_exhausted", kind=kind, order=order, direction=direction)
            return None
        if kind == "change":
            self._set_anchor(target)
        if target.wrapped:
            log.info("navigation_wrapped", kind=kind, order=order, direction=direction)
        log.debug("navigation_target", kind=kind, **target.to_dict())
        return target
