"""Issue data model.

Plain value types for one refresh cycle.  Every refresh produces brand new
``Issue`` values; the only identity that survives across refreshes is the
issue id string, which is also what equality and hashing are based on.
"""

from dataclasses import dataclass, field
from datetime import datetime
import re
from typing import Any, Dict, List, Optional

# ── Statuses ────────────────────────────────────────────

STATUS_OPEN = "open"
STATUS_READY = "ready"
STATUS_IN_PROGRESS = "in_progress"
STATUS_BLOCKED = "blocked"
STATUS_CLOSED = "closed"

STATUS_BADGES = {
    STATUS_OPEN: "OPEN",
    STATUS_READY: "READY",
    STATUS_IN_PROGRESS: "WIP",
    STATUS_BLOCKED: "BLKD",
    STATUS_CLOSED: "DONE",
}

TYPE_EPIC = "epic"
TYPE_TASK = "task"

DEP_PARENT_CHILD = "parent-child"


# ── Data models ───────────────────────────────────────────


@dataclass(frozen=True, eq=False)
class Issue:
    id: str
    title: str
    description: str = ""
    status: str = STATUS_OPEN
    priority: int = 0
    issue_type: str = TYPE_TASK
    owner: str = ""
    created_at: str = ""  # ISO-8601
    updated_at: str = ""  # ISO-8601

    def __eq__(self, other):
        # type: (object) -> bool
        if not isinstance(other, Issue):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        # type: () -> int
        return hash(self.id)

    def is_open(self):
        # type: () -> bool
        return self.status != STATUS_CLOSED

    def is_epic(self):
        # type: () -> bool
        return self.issue_type == TYPE_EPIC

    @classmethod
    def from_dict(cls, d):
        # type: (Dict[str, Any]) -> Issue
        try:
            priority = int(d.get("priority") or 0)
        except (TypeError, ValueError):
            priority = 0
        return cls(
            id=str(d.get("id", "")),
            title=str(d.get("title") or ""),
            description=str(d.get("description") or ""),
            status=str(d.get("status") or STATUS_OPEN),
            priority=priority,
            issue_type=str(d.get("issue_type") or TYPE_TASK),
            owner=str(d.get("owner") or ""),
            created_at=str(d.get("created_at") or ""),
            updated_at=str(d.get("updated_at") or ""),
        )


@dataclass(frozen=True)
class Dependency:
    issue_id: str
    depends_on_id: str
    type: str

    def is_parent_child(self):
        # type: () -> bool
        return self.type == DEP_PARENT_CHILD

    @classmethod
    def from_dict(cls, d, owner_id=""):
        # type: (Dict[str, Any], str) -> Dependency
        """Tracker exports nest dependencies under the issue that owns them,
        so ``issue_id`` falls back to the owning issue."""
        return cls(
            issue_id=str(d.get("issue_id") or owner_id),
            depends_on_id=str(d.get("depends_on_id") or ""),
            type=str(d.get("type") or ""),
        )


@dataclass(frozen=True)
class StatusSummary:
    total: int = 0
    open: int = 0
    ready: int = 0
    in_progress: int = 0
    blocked: int = 0
    deferred: int = 0
    closed: int = 0

    @classmethod
    def from_dict(cls, d):
        # type: (Dict[str, Any]) -> StatusSummary
        def _count(key):
            # type: (str) -> int
            try:
                return int(d.get(key) or 0)
            except (TypeError, ValueError):
                return 0

        return cls(
            total=_count("total_issues"),
            open=_count("open_issues"),
            ready=_count("ready_issues"),
            in_progress=_count("in_progress_issues"),
            blocked=_count("blocked_issues"),
            deferred=_count("deferred_issues"),
            closed=_count("closed_issues"),
        )

    @classmethod
    def from_issues(cls, issues):
        # type: (List[Issue]) -> StatusSummary
        counts = {}  # type: Dict[str, int]
        for issue in issues:
            counts[issue.status] = counts.get(issue.status, 0) + 1
        return cls(
            total=len(issues),
            open=counts.get(STATUS_OPEN, 0),
            ready=counts.get(STATUS_READY, 0),
            in_progress=counts.get(STATUS_IN_PROGRESS, 0),
            blocked=counts.get(STATUS_BLOCKED, 0),
            deferred=counts.get("deferred", 0),
            closed=counts.get(STATUS_CLOSED, 0),
        )


@dataclass(frozen=True)
class Snapshot:
    """One complete flat dataset fetched in a single refresh cycle."""

    issues: List[Issue] = field(default_factory=list)
    edges: List[Dependency] = field(default_factory=list)
    summary: StatusSummary = field(default_factory=StatusSummary)


# ── Helpers ───────────────────────────────────────────────

_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d\d:\d\d$|$)")


def parse_timestamp(value):
    # type: (str) -> Optional[datetime]
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_timestamp(value):
    # type: (str) -> str
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.strftime("%b %d %H:%M")
