"""Turn a flat issue list plus dependency edges into an ordered forest.

Epics are the roots of the display hierarchy::

    epic                      depth=0
      ├─ task                 depth=1
      │  └─ sub-task          depth=2
      └─ task                 depth=1
    orphan task               depth=0

Only ``parent-child`` edges shape the tree.  Edges pointing at ids missing
from the snapshot are dropped, cycles are cut and every input issue is
emitted exactly once, so ``build_tree`` never raises on bad data.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from .issues import Dependency, Issue


@dataclass(frozen=True)
class IssueTree:
    ordered: List[Issue] = field(default_factory=list)
    parent_of: Dict[str, str] = field(default_factory=dict)  # "" means root
    depth_of: Dict[str, int] = field(default_factory=dict)

    def __len__(self):
        # type: () -> int
        return len(self.ordered)

    def issues_by_id(self):
        # type: () -> Dict[str, Issue]
        return {issue.id: issue for issue in self.ordered}

    def child_counts(self):
        # type: () -> Dict[str, int]
        """Number of children per parent id, roots counted under ``""``."""
        counts = {}  # type: Dict[str, int]
        for issue in self.ordered:
            parent_id = self.parent_of.get(issue.id, "")
            counts[parent_id] = counts.get(parent_id, 0) + 1
        return counts


def build_tree(issues, edges):
    # type: (List[Issue], List[Dependency]) -> IssueTree
    by_id = {}  # type: Dict[str, Issue]
    for issue in issues:
        by_id.setdefault(issue.id, issue)

    parent_of = {}  # type: Dict[str, str]
    children_of = {}  # type: Dict[str, List[str]]
    for edge in edges:
        if not edge.is_parent_child():
            continue
        child_id = edge.issue_id
        parent_id = edge.depends_on_id
        if child_id not in by_id or parent_id not in by_id:
            continue
        # First edge wins; later claims on the same child are ignored.
        if parent_of.get(child_id):
            continue
        parent_of[child_id] = parent_id
        children_of.setdefault(parent_id, []).append(child_id)

    # Children follow the snapshot's issue order, not edge order.
    for parent_id, children in children_of.items():
        if len(children) < 2:
            continue
        wanted = set(children)
        ordered_children = []  # type: List[str]
        seen = set()  # type: Set[str]
        for issue in issues:
            if issue.id in wanted and issue.id not in seen:
                ordered_children.append(issue.id)
                seen.add(issue.id)
        children_of[parent_id] = ordered_children

    ordered = []  # type: List[Issue]
    depth_of = {}  # type: Dict[str, int]
    added = set()  # type: Set[str]
    in_progress = set()  # type: Set[str]

    def _traverse(root_id):
        # type: (str) -> None
        # (id, depth, parent reached from, leaving?)
        stack = [(root_id, 0, "", False)]  # type: List[Tuple[str, int, str, bool]]
        while stack:
            node_id, depth, via, leaving = stack.pop()
            if leaving:
                in_progress.discard(node_id)
                continue
            if via and not parent_of.get(node_id):
                parent_of[node_id] = via
            if node_id in added or node_id in in_progress:
                continue
            in_progress.add(node_id)
            added.add(node_id)
            ordered.append(by_id[node_id])
            depth_of[node_id] = depth
            stack.append((node_id, depth, via, True))
            for child_id in reversed(children_of.get(node_id, [])):
                stack.append((child_id, depth + 1, node_id, False))

    for issue in issues:
        if issue.is_epic() and issue.id not in added:
            _traverse(issue.id)

    for issue in issues:
        if issue.id not in added:
            _traverse(issue.id)

    for issue_id in by_id:
        parent_of.setdefault(issue_id, "")
        depth_of.setdefault(issue_id, 0)

    return IssueTree(ordered=ordered, parent_of=parent_of, depth_of=depth_of)
