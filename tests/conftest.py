"""Pytest configuration for carnie-dashboard tests."""

import json
import logging

import pytest

from factories import child_of, epic, issue


@pytest.fixture(autouse=True)
def _quiet_package_logger():
    log = logging.getLogger("carnie_dashboard")
    handlers = list(log.handlers)
    level = log.level
    yield
    log.setLevel(level)
    for handler in log.handlers:
        if handler not in handlers:
            handler.close()
    log.handlers[:] = handlers
    log.propagate = True


@pytest.fixture()
def board_issues():
    """An epic with two tasks, one nested sub-task and an unrelated orphan."""
    return [
        epic("e1", "Launch the carnival", priority=1),
        issue("t1", "Book the ferris wheel", priority=2),
        issue("t2", "Hire clowns", priority=2, status="in_progress"),
        issue("s1", "Negotiate clown rates", priority=3),
        issue("o1", "Fix the popcorn machine", priority=1),
    ]


@pytest.fixture()
def board_edges():
    return [child_of("t1", "e1"), child_of("t2", "e1"), child_of("s1", "t2")]


@pytest.fixture()
def issues_jsonl(tmp_path):
    """A bd-style export: one JSON object per line, dependencies nested."""
    records = [
        {"id": "e1", "title": "Launch the carnival", "issue_type": "epic", "status": "open", "priority": 1},
        {
            "id": "t1",
            "title": "Book the ferris wheel",
            "status": "open",
            "priority": 2,
            "dependencies": [{"depends_on_id": "e1", "type": "parent-child"}],
        },
        {
            "id": "c1",
            "title": "Paint the booth",
            "status": "closed",
            "updated_at": "2024-05-01T10:00:00Z",
        },
    ]
    path = tmp_path / "issues.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
    return path
