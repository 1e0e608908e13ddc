"""Pure render functions: navigator state in, Rich ``Text`` out.

Nothing here reads global state; the colour table is a ``DashboardStyles``
value built once by the app and handed to every call.
"""

from dataclasses import dataclass
from typing import List, Optional

from rich.cells import cell_len
from rich.style import Style
from rich.text import Text

from .entries import DrawerRow
from .issues import Issue, StatusSummary, format_timestamp
from .layout import (
    PaneLayout,
    badge_width,
    entry_capacity,
    layout_row,
    row_height,
    truncate,
    wrap_lines,
)
from .navigator import NavigatorState

TITLE = "CARNIE DASHBOARD"
FOOTER_HINTS = "h/? help  tab switch  j/k move  left/right fold  r refresh  q quit"
HELP_KEYS = "q quit  tab switch list  j/k move  left/right fold  r refresh  h/? close"
HELP_TIPS = "Use left/right to fold epics; tab switches Future/Completed; j/k moves selection."


@dataclass(frozen=True)
class DashboardStyles:
    navbar: Style
    navbar_meta: Style
    error: Style
    dim: Style
    tag: Style
    tab_active: Style
    tab_inactive: Style
    item: Style
    epic: Style
    selected: Style
    panel_title: Style
    help_title: Style
    badge_priority: Style
    badge_default: Style
    badge_ready: Style
    badge_progress: Style
    badge_blocked: Style
    badge_closed: Style

    def badge(self, label):
        # type: (str) -> Style
        if label.startswith("P") and label[1:].isdigit():
            return self.badge_priority
        if label in ("OPEN", "READY"):
            return self.badge_ready
        if label == "WIP":
            return self.badge_progress
        if label == "BLKD":
            return self.badge_blocked
        if label == "DONE":
            return self.badge_closed
        return self.badge_default


def default_styles():
    # type: () -> DashboardStyles
    return DashboardStyles(
        navbar=Style.parse("bold color(230) on color(124)"),
        navbar_meta=Style.parse("bold color(229) on color(124)"),
        error=Style.parse("bold color(196)"),
        dim=Style.parse("color(178)"),
        tag=Style.parse("bold color(52) on color(220)"),
        tab_active=Style.parse("bold underline color(214)"),
        tab_inactive=Style.parse("color(130)"),
        item=Style.parse("color(254)"),
        epic=Style.parse("bold color(214)"),
        selected=Style.parse("bold color(15) on color(196)"),
        panel_title=Style.parse("bold color(214)"),
        help_title=Style.parse("bold color(220)"),
        badge_priority=Style.parse("bold color(230) on color(130)"),
        badge_default=Style.parse("bold color(230) on color(238)"),
        badge_ready=Style.parse("bold color(232) on color(70)"),
        badge_progress=Style.parse("bold color(232) on color(33)"),
        badge_blocked=Style.parse("bold color(232) on color(160)"),
        badge_closed=Style.parse("bold color(232) on color(28)"),
    )


def _pad(text, width):
    # type: (Text, int) -> Text
    gap = width - text.cell_len
    if gap > 0:
        text.append(" " * gap)
    return text


# ── Top of the screen ─────────────────────────────────────


def render_navbar(state, width, styles):
    # type: (NavigatorState, int, DashboardStyles) -> Text
    if width <= 0:
        return Text("")
    if state.error_message:
        right = state.error_message.splitlines()[0]
        right_style = styles.navbar + styles.error
    elif state.last_updated is not None:
        right = "Updated %s" % state.last_updated.strftime("%H:%M:%S")
        right_style = styles.navbar_meta
    else:
        right = "Stand by..."
        right_style = styles.navbar_meta

    max_right = max(10, width // 3) if state.error_message == "" else max(10, width // 2)
    max_right = min(max_right, max(1, width - 1))
    right = truncate(right, max_right)
    left = truncate(" %s" % TITLE, max(0, width - cell_len(right) - 1))

    line = Text(left, style=styles.navbar)
    gap = max(1, width - cell_len(left) - cell_len(right))
    line.append(" " * gap, style=styles.navbar)
    line.append(right, style=right_style)
    return line


def render_stats(summary, width, styles):
    # type: (Optional[StatusSummary], int, DashboardStyles) -> Text
    if summary is None:
        return Text(truncate("Loading beads data...", width), style=styles.dim)
    tags = [
        "Total %d" % summary.total,
        "Open %d" % summary.open,
        "Ready %d" % summary.ready,
        "In Progress %d" % summary.in_progress,
        "Blocked %d" % summary.blocked,
        "Deferred %d" % summary.deferred,
        "Closed %d" % summary.closed,
    ]
    line = Text(no_wrap=True, overflow="crop")
    for tag in tags:
        if line.cell_len + len(tag) + 3 > width:
            break
        if line.cell_len:
            line.append(" ")
        line.append(" %s " % tag, style=styles.tag)
    return line


# ── Drawer ────────────────────────────────────────────────


def render_tabs(state, width, styles):
    # type: (NavigatorState, int, DashboardStyles) -> Text
    line = Text(no_wrap=True, overflow="crop")
    for idx, issue_list in enumerate(state.lists):
        if idx:
            line.append("  ")
        label = "%s (%d)" % (issue_list.title, len(issue_list.entries(state.collapsed)))
        style = styles.tab_active if idx == state.active else styles.tab_inactive
        line.append(label, style=style)
    line.truncate(width)
    return line


def render_row(row, width, styles, selected=False):
    # type: (DrawerRow, int, DashboardStyles, bool) -> List[Text]
    row_layout = layout_row(row, width)
    if row_layout.width <= 0:
        return [Text("")]
    base = styles.epic if row.issue.is_epic() else styles.item
    if selected:
        base = styles.selected

    left = row_layout.prefix + row_layout.title_lines[0]
    badges_w = badge_width(row_layout.badges)
    if row_layout.badges:
        gap = width - cell_len(left) - badges_w
        if gap < 1:
            left = truncate(left, max(1, width - badges_w - 1))
            gap = max(1, width - cell_len(left) - badges_w)
        first = Text(left + " " * gap, style=base)
        for idx, label in enumerate(row_layout.badges):
            if idx:
                first.append(" ", style=base)
            first.append(" %s " % label, style=styles.badge(label))
    else:
        first = _pad(Text(left, style=base), width)

    lines = [first]
    indent = " " * cell_len(row_layout.prefix)
    for title_line in row_layout.title_lines[1:]:
        lines.append(_pad(Text(indent + title_line, style=base), width))
    return lines


def render_drawer(state, layout, styles):
    # type: (NavigatorState, PaneLayout, DashboardStyles) -> Text
    width = layout.drawer_inner_width
    issue_list = state.active_list()
    entries = issue_list.entries(state.collapsed)
    rows = issue_list.rows(state.collapsed)

    out = [render_tabs(state, width, styles), Text("")]
    if not rows:
        out.append(Text("(none)", style=styles.dim))
        return Text("\n", no_wrap=True, overflow="crop").join(out)

    per_row = row_height(rows, width)
    capacity = entry_capacity(layout.list_height, per_row)
    selected = issue_list.selection.index_in(entries)
    start = max(0, issue_list.selection.offset)
    end = min(len(rows), start + capacity)
    for idx in range(start, end):
        lines = render_row(rows[idx], width, styles, selected=idx == selected)
        while len(lines) < per_row:
            lines.append(Text(" " * width))
        out.extend(lines[:per_row])
    return Text("\n", no_wrap=True, overflow="crop").join(out)


# ── Detail pane ───────────────────────────────────────────


def render_detail(issue, width, height, styles):
    # type: (Optional[Issue], int, int, DashboardStyles) -> Text
    if width <= 0:
        return Text("")
    lines = []  # type: List[Text]
    if issue is None:
        lines.append(Text(truncate("Select an issue to see details.", width), style=styles.dim))
        return Text("\n").join(lines)

    lines.append(
        Text(truncate("%s %s" % (issue.id, issue.title), width), style=styles.panel_title)
    )
    lines.append(Text(truncate("Status: %s" % issue.status, width), style=styles.dim))
    lines.append(Text(truncate("Priority: P%d" % issue.priority, width), style=styles.dim))
    if issue.owner:
        lines.append(Text(truncate("Owner: %s" % issue.owner, width), style=styles.dim))
    if issue.updated_at:
        lines.append(
            Text(
                truncate("Updated: %s" % format_timestamp(issue.updated_at), width),
                style=styles.dim,
            )
        )
    lines.append(Text(""))
    if issue.description:
        lines.append(Text(truncate("Notes", width), style=styles.panel_title))
        for line in wrap_lines(issue.description, width):
            lines.append(Text(truncate(line, width), style=styles.item))

    if height > 0:
        lines = lines[:height]
    return Text("\n").join(lines)


# ── Help ──────────────────────────────────────────────────


def render_help(styles):
    # type: (DashboardStyles) -> Text
    return Text("\n").join(
        [
            Text("Dashboard Help", style=styles.help_title),
            Text("%-6s %s" % ("Keys:", HELP_KEYS), style=styles.item),
            Text("%-6s %s" % ("Tips:", HELP_TIPS), style=styles.item),
        ]
    )
