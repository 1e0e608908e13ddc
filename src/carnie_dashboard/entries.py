"""Fold state and the visible entry list derived from an ``IssueTree``."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from .issues import Issue
from .tree import IssueTree

BRANCH_MID = "├─ "
BRANCH_LAST = "└─ "
BRANCH_PIPE = "│  "
BRANCH_BLANK = "   "


# ── Collapse state ────────────────────────────────────────


@dataclass
class CollapseState:
    """Ids of folded epics.  Keyed by id so it survives data refreshes."""

    folded: Set[str] = field(default_factory=set)

    def fold(self, issue_id):
        # type: (str) -> None
        self.folded.add(issue_id)

    def unfold(self, issue_id):
        # type: (str) -> None
        self.folded.discard(issue_id)

    def is_folded(self, issue_id):
        # type: (str) -> bool
        return issue_id in self.folded

    def __contains__(self, issue_id):
        # type: (object) -> bool
        return issue_id in self.folded

    def copy(self):
        # type: () -> CollapseState
        return CollapseState(folded=set(self.folded))


def _ancestors(issue_id, parent_of):
    # type: (str, Dict[str, str]) -> Iterable[str]
    """Yield ancestors nearest first; stops if the parent map loops."""
    seen = {issue_id}
    parent_id = parent_of.get(issue_id, "")
    while parent_id and parent_id not in seen:
        yield parent_id
        seen.add(parent_id)
        parent_id = parent_of.get(parent_id, "")


def is_hidden(issue_id, parent_of, issues_by_id, collapsed):
    # type: (str, Dict[str, str], Dict[str, Issue], CollapseState) -> bool
    for ancestor_id in _ancestors(issue_id, parent_of):
        ancestor = issues_by_id.get(ancestor_id)
        if ancestor is not None and ancestor.is_epic() and ancestor_id in collapsed:
            return True
    return False


# ── Entries ───────────────────────────────────────────────


@dataclass(frozen=True)
class Entry:
    issue: Issue
    level: int


@dataclass(frozen=True)
class DrawerRow:
    entry: Entry
    prefix: str
    is_last: bool
    has_children: bool
    folded: bool

    @property
    def issue(self):
        # type: () -> Issue
        return self.entry.issue

    @property
    def foldable(self):
        # type: () -> bool
        return self.entry.issue.is_epic() and self.has_children


def build_entries(tree, collapsed):
    # type: (IssueTree, CollapseState) -> List[Entry]
    if not tree.ordered:
        return []
    issues_by_id = tree.issues_by_id()
    entries = []  # type: List[Entry]
    for issue in tree.ordered:
        if is_hidden(issue.id, tree.parent_of, issues_by_id, collapsed):
            continue
        entries.append(Entry(issue=issue, level=tree.depth_of.get(issue.id, 0)))
    return entries


def index_of(entries, issue_id):
    # type: (List[Entry], str) -> Optional[int]
    if not issue_id:
        return None
    for idx, entry in enumerate(entries):
        if entry.issue.id == issue_id:
            return idx
    return None


def build_tree_prefix(issue_id, level, parent_of, is_last_by_id):
    # type: (str, int, Dict[str, str], Dict[str, bool]) -> str
    if level <= 0:
        return ""
    ancestors = list(_ancestors(issue_id, parent_of))
    parts = []  # type: List[str]
    # Roots draw no branch, so the outermost ancestor owns no column.
    for ancestor_id in reversed(ancestors[:-1]):
        parts.append(BRANCH_BLANK if is_last_by_id.get(ancestor_id) else BRANCH_PIPE)
    parts.append(BRANCH_LAST if is_last_by_id.get(issue_id) else BRANCH_MID)
    return "".join(parts)


def build_rows(tree, entries, collapsed):
    # type: (IssueTree, List[Entry], CollapseState) -> List[DrawerRow]
    child_counts = tree.child_counts()
    seen_by_parent = {}  # type: Dict[str, int]
    is_last_by_id = {}  # type: Dict[str, bool]
    for entry in entries:
        parent_id = tree.parent_of.get(entry.issue.id, "")
        seen_by_parent[parent_id] = seen_by_parent.get(parent_id, 0) + 1
        is_last_by_id[entry.issue.id] = (
            seen_by_parent[parent_id] >= child_counts.get(parent_id, 0)
        )

    rows = []  # type: List[DrawerRow]
    for entry in entries:
        issue_id = entry.issue.id
        rows.append(
            DrawerRow(
                entry=entry,
                prefix=build_tree_prefix(
                    issue_id, entry.level, tree.parent_of, is_last_by_id
                ),
                is_last=is_last_by_id[issue_id],
                has_children=child_counts.get(issue_id, 0) > 0,
                folded=issue_id in collapsed,
            )
        )
    return rows
