from datetime import datetime

from carnie_dashboard.entries import CollapseState, build_entries, build_rows
from carnie_dashboard.issues import StatusSummary
from carnie_dashboard.layout import compute_layout
from carnie_dashboard.navigator import KeyAction, RefreshResult, Resize, initial_state, reduce
from carnie_dashboard.render import (
    default_styles,
    render_detail,
    render_drawer,
    render_navbar,
    render_row,
    render_stats,
)
from carnie_dashboard.tree import build_tree

from factories import child_of, epic, issue, snapshot

STYLES = default_styles()


def _state(issues=(), edges=(), width=120, height=30):
    state, _ = reduce(initial_state(6, 0), Resize(width, height))
    if issues:
        state, _ = reduce(
            state,
            RefreshResult(snapshot=snapshot(issues, edges), received_at=datetime(2024, 1, 2, 3, 4, 5)),
        )
    return state


class TestNavbar:
    def test_stand_by_before_data(self):
        line = render_navbar(_state(), 60, STYLES)

        assert line.plain.startswith(" CARNIE DASHBOARD")
        assert line.plain.endswith("Stand by...")
        assert line.cell_len == 60

    def test_updated_time(self):
        line = render_navbar(_state([issue("a")]), 60, STYLES)

        assert line.plain.endswith("Updated 03:04:05")

    def test_error_replaces_status(self):
        state, _ = reduce(_state([issue("a")]), RefreshResult(error="bd status failed: boom\ndetail"))
        line = render_navbar(state, 80, STYLES)

        assert "bd status failed: boom" in line.plain
        assert "detail" not in line.plain


class TestStats:
    def test_loading_placeholder(self):
        assert render_stats(None, 80, STYLES).plain == "Loading beads data..."

    def test_tags(self):
        summary = StatusSummary(total=9, open=3, ready=1, in_progress=2, blocked=1, deferred=0, closed=2)
        text = render_stats(summary, 200, STYLES).plain

        assert "Total 9" in text
        assert "In Progress 2" in text
        assert "Closed 2" in text

    def test_tags_that_do_not_fit_are_dropped(self):
        text = render_stats(StatusSummary(total=1), 20, STYLES).plain

        assert "Total 1" in text
        assert "Closed" not in text


class TestDrawer:
    def test_empty_list_placeholder(self):
        state = _state()
        text = render_drawer(state, compute_layout(state.width, state.height), STYLES).plain

        assert "Future Work (0)" in text
        assert "(none)" in text

    def test_rows_and_tab_counts(self):
        state = _state(
            [epic("e1", "Big top"), issue("t1", "Tickets"), issue("c1", "Old", status="closed")],
            [child_of("t1", "e1")],
        )
        text = render_drawer(state, compute_layout(state.width, state.height), STYLES).plain

        assert "Future Work (2)" in text
        assert "Completed Work (1)" in text
        assert "Big top" in text
        assert "└─ Tickets" in text
        assert "Old" not in text.split("\n", 1)[1]

    def test_only_window_rows_are_drawn(self):
        issues = [issue("i%d" % n, "Task %d" % n) for n in range(10)]
        state = _state(issues, height=13)
        for _ in range(6):
            state, _ = reduce(state, KeyAction("move_down"))
        text = render_drawer(state, compute_layout(state.width, state.height), STYLES).plain

        assert "Task 6" in text
        assert "Task 4" in text
        assert "Task 3" not in text
        assert "Task 7" not in text

    def test_row_badges_are_right_aligned(self):
        tree = build_tree([issue("a", "Short", priority=2)], [])
        collapsed = CollapseState()
        (row,) = build_rows(tree, build_entries(tree, collapsed), collapsed)
        lines = render_row(row, 30, STYLES)

        assert len(lines) == 1
        assert lines[0].plain.endswith(" P2   OPEN ")
        assert lines[0].cell_len == 30

    def test_selected_row_uses_selected_style(self):
        tree = build_tree([issue("a", "Short")], [])
        collapsed = CollapseState()
        (row,) = build_rows(tree, build_entries(tree, collapsed), collapsed)

        (plain,) = render_row(row, 30, STYLES)
        (selected,) = render_row(row, 30, STYLES, selected=True)

        assert plain.plain == selected.plain
        assert selected.style == STYLES.selected


class TestDetail:
    def test_placeholder(self):
        assert render_detail(None, 40, 10, STYLES).plain == "Select an issue to see details."

    def test_fields(self):
        item = issue(
            "t1",
            "Tickets",
            priority=2,
            owner="pat",
            updated_at="2024-03-05T14:07:00Z",
            description="Print them.\nSell them.",
        )
        text = render_detail(item, 40, 20, STYLES).plain.split("\n")

        assert text[0] == "t1 Tickets"
        assert "Status: open" in text
        assert "Priority: P2" in text
        assert "Owner: pat" in text
        assert "Updated: Mar 05 14:07" in text
        assert text[-2:] == ["Print them.", "Sell them."]

    def test_height_cuts_lines(self):
        item = issue("t1", "Tickets", description="x " * 200)

        assert len(render_detail(item, 20, 5, STYLES).plain.split("\n")) == 5
