"""Navigator state and the reducer that drives it.

Every input reaches the navigator as one of four messages (resize, key
action, timer tick, refresh result).  ``reduce`` turns the current state plus
one message into the next state and a list of follow-up requests for the
host to carry out (fetch a snapshot, quit).  It never touches the input
state, never blocks and never does I/O.
"""

from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Dict, List, Optional, Tuple, Union

from .entries import CollapseState, DrawerRow, Entry, build_entries, build_rows
from .issues import (
    STATUS_BLOCKED,
    STATUS_IN_PROGRESS,
    STATUS_OPEN,
    STATUS_READY,
    Issue,
    Snapshot,
    StatusSummary,
    parse_timestamp,
)
from .layout import compute_layout, entry_capacity, row_height
from .selection import ListSelection
from .tree import IssueTree, build_tree

logger = logging.getLogger(__name__)

LIST_FUTURE = "Future Work"
LIST_COMPLETED = "Completed Work"

# ── Actions ───────────────────────────────────────────────

ACTION_MOVE_UP = "move_up"
ACTION_MOVE_DOWN = "move_down"
ACTION_NEXT_LIST = "next_list"
ACTION_PREV_LIST = "prev_list"
ACTION_FOLD = "fold"
ACTION_UNFOLD = "unfold"
ACTION_REFRESH = "refresh"
ACTION_TOGGLE_HELP = "toggle_help"
ACTION_CLOSE_HELP = "close_help"
ACTION_QUIT = "quit"

ACTIONS = (
    ACTION_MOVE_UP,
    ACTION_MOVE_DOWN,
    ACTION_NEXT_LIST,
    ACTION_PREV_LIST,
    ACTION_FOLD,
    ACTION_UNFOLD,
    ACTION_REFRESH,
    ACTION_TOGGLE_HELP,
    ACTION_CLOSE_HELP,
    ACTION_QUIT,
)


# ── Messages and requests ─────────────────────────────────


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class KeyAction:
    action: str


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class RefreshResult:
    snapshot: Optional[Snapshot] = None
    error: str = ""
    received_at: Optional[datetime] = None


Message = Union[Resize, KeyAction, Tick, RefreshResult]


@dataclass(frozen=True)
class FetchSnapshot:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Request = Union[FetchSnapshot, Quit]


# ── State ─────────────────────────────────────────────────


@dataclass
class IssueList:
    title: str
    tree: IssueTree = field(default_factory=IssueTree)
    selection: ListSelection = field(default_factory=ListSelection)

    def entries(self, collapsed):
        # type: (CollapseState) -> List[Entry]
        return build_entries(self.tree, collapsed)

    def rows(self, collapsed):
        # type: (CollapseState) -> List[DrawerRow]
        return build_rows(self.tree, self.entries(collapsed), collapsed)

    def copy(self):
        # type: () -> IssueList
        return IssueList(title=self.title, tree=self.tree, selection=self.selection.copy())


@dataclass
class NavigatorState:
    width: int = 0
    height: int = 0
    refresh_seconds: float = 0.0
    limit: int = 0
    lists: List[IssueList] = field(
        default_factory=lambda: [IssueList(LIST_FUTURE), IssueList(LIST_COMPLETED)]
    )
    active: int = 0
    collapsed: CollapseState = field(default_factory=CollapseState)
    show_help: bool = False
    summary: Optional[StatusSummary] = None
    last_updated: Optional[datetime] = None
    error_message: str = ""

    def copy(self):
        # type: () -> NavigatorState
        return NavigatorState(
            width=self.width,
            height=self.height,
            refresh_seconds=self.refresh_seconds,
            limit=self.limit,
            lists=[issue_list.copy() for issue_list in self.lists],
            active=self.active,
            collapsed=self.collapsed.copy(),
            show_help=self.show_help,
            summary=self.summary,
            last_updated=self.last_updated,
            error_message=self.error_message,
        )

    def active_list(self):
        # type: () -> IssueList
        return self.lists[self.active]

    def selected_issue(self):
        # type: () -> Optional[Issue]
        issue_list = self.active_list()
        entry = issue_list.selection.selected_entry(issue_list.entries(self.collapsed))
        return entry.issue if entry is not None else None


def initial_state(refresh_seconds=0.0, limit=0):
    # type: (float, int) -> NavigatorState
    return NavigatorState(refresh_seconds=refresh_seconds, limit=limit)


def initial_requests(state):
    # type: (NavigatorState) -> List[Request]
    return [FetchSnapshot()]


# ── Column partition ──────────────────────────────────────


def _by_priority(issues, limit):
    # type: (List[Issue], int) -> List[Issue]
    ordered = sorted(issues, key=lambda issue: issue.priority)
    if limit > 0:
        ordered = ordered[:limit]
    return ordered


def partition_issues(issues, limit=0):
    # type: (List[Issue], int) -> Tuple[List[Issue], List[Issue]]
    """Split a snapshot into (future, completed) issue lists."""
    by_status = {}  # type: Dict[str, List[Issue]]
    for issue in issues:
        by_status.setdefault(issue.status, []).append(issue)

    ready = [issue for issue in issues if issue.status in (STATUS_OPEN, STATUS_READY)]
    future = (
        _by_priority(ready, limit)
        + _by_priority(by_status.get(STATUS_IN_PROGRESS, []), limit)
        + _by_priority(by_status.get(STATUS_BLOCKED, []), limit)
    )

    closed = sorted(
        [issue for issue in issues if not issue.is_open()],
        key=lambda issue: _updated_key(issue),
        reverse=True,
    )
    if limit > 0:
        closed = closed[:limit]
    return future, closed


def _updated_key(issue):
    # type: (Issue) -> float
    parsed = parse_timestamp(issue.updated_at)
    if parsed is None:
        return float("-inf")
    return parsed.timestamp()


# ── Reducer ───────────────────────────────────────────────


def list_capacity(state, issue_list):
    # type: (NavigatorState, IssueList) -> int
    """How many rows of ``issue_list`` fit in the drawer right now."""
    layout = compute_layout(state.width, state.height)
    if layout.width <= 0:
        # No size yet; wrapping at zero width would be meaningless.
        return entry_capacity(layout.list_height, 1)
    rows = issue_list.rows(state.collapsed)
    return entry_capacity(layout.list_height, row_height(rows, layout.drawer_inner_width))


def ensure_visible(state):
    # type: (NavigatorState) -> None
    for issue_list in state.lists:
        entries = issue_list.entries(state.collapsed)
        issue_list.selection.ensure_visible(entries, list_capacity(state, issue_list))


def apply_snapshot(state, snapshot):
    # type: (NavigatorState, Snapshot) -> None
    # Capture ids against the old trees before anything is rebuilt.
    previous = {}  # type: Dict[str, str]
    for issue_list in state.lists:
        entry = issue_list.selection.selected_entry(issue_list.entries(state.collapsed))
        if entry is not None:
            previous[issue_list.title] = entry.issue.id

    future, completed = partition_issues(snapshot.issues, state.limit)
    state.lists[0].tree = build_tree(future, snapshot.edges)
    state.lists[1].tree = build_tree(completed, snapshot.edges)
    state.summary = snapshot.summary

    for issue_list in state.lists:
        issue_list.selection.selected_id = previous.get(issue_list.title, "")
        issue_list.selection.relocate(issue_list.entries(state.collapsed))


def _set_fold(state, fold):
    # type: (NavigatorState, bool) -> None
    issue = state.selected_issue()
    if issue is None or not issue.is_epic():
        return
    if fold:
        state.collapsed.fold(issue.id)
    else:
        state.collapsed.unfold(issue.id)
    for issue_list in state.lists:
        issue_list.selection.relocate(issue_list.entries(state.collapsed))


def _reduce_key(state, action):
    # type: (NavigatorState, str) -> List[Request]
    if action not in ACTIONS:
        raise ValueError("unknown action: %r" % action)
    if action == ACTION_QUIT:
        return [Quit()]
    if state.show_help:
        if action in (ACTION_TOGGLE_HELP, ACTION_CLOSE_HELP):
            state.show_help = False
        return []

    if action == ACTION_TOGGLE_HELP:
        state.show_help = True
    elif action == ACTION_CLOSE_HELP:
        pass
    elif action in (ACTION_MOVE_UP, ACTION_MOVE_DOWN):
        issue_list = state.active_list()
        delta = -1 if action == ACTION_MOVE_UP else 1
        issue_list.selection.move(issue_list.entries(state.collapsed), delta)
    elif action == ACTION_NEXT_LIST:
        state.active = (state.active + 1) % len(state.lists)
    elif action == ACTION_PREV_LIST:
        state.active = (state.active - 1) % len(state.lists)
    elif action == ACTION_FOLD:
        _set_fold(state, True)
    elif action == ACTION_UNFOLD:
        _set_fold(state, False)
    elif action == ACTION_REFRESH:
        return [FetchSnapshot()]
    ensure_visible(state)
    return []


def reduce(state, message):
    # type: (NavigatorState, Message) -> Tuple[NavigatorState, List[Request]]
    state = state.copy()

    if isinstance(message, Resize):
        state.width = max(0, message.width)
        state.height = max(0, message.height)
        ensure_visible(state)
        return state, []

    if isinstance(message, KeyAction):
        return state, _reduce_key(state, message.action)

    if isinstance(message, Tick):
        if state.refresh_seconds > 0:
            return state, [FetchSnapshot()]
        return state, []

    if isinstance(message, RefreshResult):
        if message.snapshot is None:
            # Keep the last good data on screen.
            state.error_message = message.error or "refresh failed"
            logger.warning("refresh failed: %s", state.error_message)
            return state, []
        state.error_message = ""
        state.last_updated = message.received_at or datetime.now()
        apply_snapshot(state, message.snapshot)
        ensure_visible(state)
        logger.debug(
            "applied snapshot: %d issues, %d edges",
            len(message.snapshot.issues),
            len(message.snapshot.edges),
        )
        return state, []

    raise TypeError("unsupported message: %r" % (message,))
