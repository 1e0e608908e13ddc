from datetime import datetime
import logging
from typing import Optional

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Static

from .config import DashboardConfig
from .data import DataFetchError, DataProvider
from .layout import compute_layout
from .navigator import (
    FetchSnapshot,
    KeyAction,
    Message,
    NavigatorState,
    Quit,
    RefreshResult,
    Request,
    Resize,
    Tick,
    initial_requests,
    initial_state,
    reduce,
)
from .render import (
    FOOTER_HINTS,
    DashboardStyles,
    default_styles,
    render_detail,
    render_drawer,
    render_help,
    render_navbar,
    render_stats,
)

logger = logging.getLogger(__name__)


class DashboardApp(App[None]):
    """Textual host for the navigator.

    The app owns no navigation logic.  Keys, resizes, timer ticks and fetch
    results are turned into navigator messages, ``reduce`` produces the next
    state, and the app carries out whatever requests come back before
    repainting every pane from that state.
    """

    CSS_PATH = "app.tcss"
    BINDINGS = [
        Binding("q", "nav('quit')", "Quit"),
        Binding("r", "nav('refresh')", "Refresh"),
        Binding("j", "nav('move_down')", "Down", show=False),
        Binding("down", "nav('move_down')", "Down", show=False),
        Binding("k", "nav('move_up')", "Up", show=False),
        Binding("up", "nav('move_up')", "Up", show=False),
        Binding("tab", "nav('next_list')", "Switch", priority=True),
        Binding("l", "nav('next_list')", "Switch", show=False),
        Binding("shift+tab", "nav('prev_list')", "Switch", show=False, priority=True),
        Binding("left", "nav('fold')", "Fold"),
        Binding("right", "nav('unfold')", "Unfold"),
        Binding("h", "nav('toggle_help')", "Help"),
        Binding("question_mark", "nav('toggle_help')", "Help", show=False),
        Binding("escape", "nav('close_help')", "Close", show=False),
    ]

    def __init__(self, provider, config=None, styles=None):
        # type: (DataProvider, Optional[DashboardConfig], Optional[DashboardStyles]) -> None
        super().__init__()
        self._provider = provider
        self._config = config or DashboardConfig()
        self._styles = styles or default_styles()
        self._state = initial_state(
            refresh_seconds=self._config.refresh_seconds,
            limit=self._config.limit,
        )
        self._panes_ready = False

    @property
    def state(self):
        # type: () -> NavigatorState
        return self._state

    def compose(self) -> ComposeResult:
        yield Static("", id="topbar")
        yield Static("", id="stats")
        with Container(id="main-row"):
            with Container(id="drawer-panel"):
                yield Static("", id="drawer-body")
            with Container(id="detail-panel"):
                yield Static(" ISSUE DETAILS", classes="panel-title")
                yield Static("", id="detail-body")
        yield Static("", id="help-overlay")
        yield Static(" %s" % FOOTER_HINTS, id="footerbar")

    def on_mount(self) -> None:
        self._panes_ready = True
        self._dispatch(Resize(self.size.width, self.size.height))
        for request in initial_requests(self._state):
            self._perform(request)
        if self._config.refresh_seconds > 0:
            self.set_interval(self._config.refresh_seconds, self._tick)

    def on_resize(self, event) -> None:
        self._dispatch(Resize(event.size.width, event.size.height))

    def _tick(self) -> None:
        self._dispatch(Tick())

    # ── Actions ────────────────────────────────────────────────────────

    def action_nav(self, action):
        # type: (str) -> None
        self._dispatch(KeyAction(action))

    # ── Reducer plumbing ───────────────────────────────────────────────

    def _dispatch(self, message):
        # type: (Message) -> None
        self._state, requests = reduce(self._state, message)
        for request in requests:
            self._perform(request)
        self._render_all()

    def _perform(self, request):
        # type: (Request) -> None
        if isinstance(request, FetchSnapshot):
            _ = self.refresh_snapshot()
        elif isinstance(request, Quit):
            self.exit()

    # ── Data ───────────────────────────────────────────────────────────

    @work(thread=True)
    def refresh_snapshot(self) -> None:
        logger.debug("refresh started")
        try:
            snapshot = self._provider.fetch_snapshot()
        except DataFetchError as exc:
            result = RefreshResult(error=str(exc), received_at=datetime.now())
        else:
            result = RefreshResult(snapshot=snapshot, received_at=datetime.now())
        self.call_from_thread(self._dispatch, result)

    # ── Rendering ──────────────────────────────────────────────────────

    def _render_all(self) -> None:
        if not self._panes_ready:
            return
        state = self._state
        layout = compute_layout(state.width, state.height)

        self.query_one("#topbar", Static).update(
            render_navbar(state, state.width, self._styles)
        )
        self.query_one("#stats", Static).update(
            render_stats(state.summary, state.width, self._styles)
        )

        drawer = self.query_one("#drawer-panel", Container)
        drawer.styles.width = layout.drawer_width
        self.query_one("#drawer-body", Static).update(
            render_drawer(state, layout, self._styles)
        )

        detail = self.query_one("#detail-panel", Container)
        if layout.show_detail:
            detail.remove_class("hidden")
            self.query_one("#detail-body", Static).update(
                render_detail(
                    state.selected_issue(),
                    max(1, layout.detail_width - 2),
                    layout.list_height,
                    self._styles,
                )
            )
        else:
            detail.add_class("hidden")

        help_overlay = self.query_one("#help-overlay", Static)
        if state.show_help:
            help_overlay.update(render_help(self._styles))
            help_overlay.add_class("visible")
        else:
            help_overlay.remove_class("visible")


def run_app(provider, config):
    # type: (DataProvider, DashboardConfig) -> None
    app = DashboardApp(provider, config)
    app.run()

