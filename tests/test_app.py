"""Pilot tests for the Textual host: keys and fetch results reach the reducer."""

import pytest

from carnie_dashboard.app import DashboardApp
from carnie_dashboard.config import DashboardConfig
from carnie_dashboard.data import DataFetchError, DataProvider, JsonlDataProvider

from factories import child_of, epic, issue, snapshot


class StubProvider(DataProvider):
    """Hands out queued results in order, repeating the last one."""

    def __init__(self, *results):
        self._results = list(results)
        self.calls = 0

    def fetch_snapshot(self):
        result = self._results[min(self.calls, len(self._results) - 1)]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result


BOARD = snapshot(
    [
        epic("e1", "Big top"),
        issue("t1", "Tickets"),
        issue("t2", "Popcorn"),
        issue("c1", "Old", status="closed"),
    ],
    [child_of("t1", "e1"), child_of("t2", "e1")],
)


def _visible(app):
    state = app.state
    return [entry.issue.id for entry in state.active_list().entries(state.collapsed)]


def _selected(app):
    selected = app.state.selected_issue()
    return selected.id if selected is not None else None


async def _settle(app, pilot):
    await app.workers.wait_for_complete()
    await pilot.pause()


def _app(*results):
    return DashboardApp(StubProvider(*results), DashboardConfig(refresh_seconds=0))


@pytest.mark.asyncio
async def test_startup_fetches_and_selects_first_row():
    app = _app(BOARD)
    async with app.run_test(size=(120, 40)) as pilot:
        await _settle(app, pilot)

        assert app._provider.calls == 1
        assert _visible(app) == ["e1", "t1", "t2"]
        assert _selected(app) == "e1"
        assert app.state.width == 120


@pytest.mark.asyncio
async def test_keys_move_fold_and_switch_lists():
    app = _app(BOARD)
    async with app.run_test(size=(120, 40)) as pilot:
        await _settle(app, pilot)

        await pilot.press("j", "j")
        assert _selected(app) == "t2"

        await pilot.press("k", "k", "left")
        assert _visible(app) == ["e1"]

        await pilot.press("right")
        assert _visible(app) == ["e1", "t1", "t2"]

        await pilot.press("tab")
        assert app.state.active_list().title == "Completed Work"
        assert _selected(app) == "c1"

        await pilot.press("shift+tab")
        assert app.state.active_list().title == "Future Work"


@pytest.mark.asyncio
async def test_failed_refresh_keeps_data():
    app = _app(BOARD, DataFetchError("bd status --json failed: exit status 1"))
    async with app.run_test(size=(120, 40)) as pilot:
        await _settle(app, pilot)
        await pilot.press("j")

        await pilot.press("r")
        await _settle(app, pilot)

        assert app._provider.calls == 2
        assert app.state.error_message.startswith("bd status")
        assert _visible(app) == ["e1", "t1", "t2"]
        assert _selected(app) == "t1"


@pytest.mark.asyncio
async def test_help_overlay_toggles():
    app = _app(BOARD)
    async with app.run_test(size=(120, 40)) as pilot:
        await _settle(app, pilot)
        overlay = app.query_one("#help-overlay")

        await pilot.press("h")
        assert overlay.has_class("visible")

        await pilot.press("j")
        assert _selected(app) == "e1"

        await pilot.press("escape")
        assert not overlay.has_class("visible")


@pytest.mark.asyncio
async def test_narrow_terminal_hides_detail():
    app = _app(BOARD)
    async with app.run_test(size=(22, 30)) as pilot:
        await _settle(app, pilot)

        assert app.query_one("#detail-panel").has_class("hidden")

    app = _app(BOARD)
    async with app.run_test(size=(120, 30)) as pilot:
        await _settle(app, pilot)

        assert not app.query_one("#detail-panel").has_class("hidden")


@pytest.mark.asyncio
async def test_undecodable_issues_file_is_reported_not_fatal(tmp_path):
    path = tmp_path / "issues.jsonl"
    path.write_bytes(b'{"id": "a", "title": "caf\xe9"}\n')
    app = DashboardApp(JsonlDataProvider(str(path)), DashboardConfig(refresh_seconds=0))
    async with app.run_test(size=(120, 40)) as pilot:
        await _settle(app, pilot)

        assert app.is_running
        assert app.state.error_message.startswith("load beads issues")
        assert _visible(app) == []
