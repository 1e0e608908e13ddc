"""Small builders shared by the test modules."""

from carnie_dashboard.issues import Dependency, Issue, Snapshot, StatusSummary


def issue(issue_id, title=None, status="open", priority=0, issue_type="task", **kwargs):
    return Issue(
        id=issue_id,
        title=title if title is not None else "Issue %s" % issue_id,
        status=status,
        priority=priority,
        issue_type=issue_type,
        **kwargs
    )


def epic(issue_id, title=None, **kwargs):
    return issue(issue_id, title=title, issue_type="epic", **kwargs)


def child_of(child_id, parent_id):
    return Dependency(issue_id=child_id, depends_on_id=parent_id, type="parent-child")


def blocks(issue_id, depends_on_id):
    return Dependency(issue_id=issue_id, depends_on_id=depends_on_id, type="blocks")


def snapshot(issues, edges=()):
    issues = list(issues)
    return Snapshot(issues=issues, edges=list(edges), summary=StatusSummary.from_issues(issues))
