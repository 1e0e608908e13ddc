"""Pane geometry and row wrapping for the drawer.

Everything here works on plain strings and cell widths; colours are added
later by ``render``.  Widths are measured in terminal cells with
``rich.cells.cell_len`` so box-drawing glyphs and wide characters count
correctly.
"""

from dataclasses import dataclass
from typing import List

from rich.cells import cell_len

from .entries import DrawerRow
from .issues import STATUS_BADGES, Issue

CHROME_ROWS = 10
MIN_LIST_HEIGHT = 3

DRAWER_MIN_WIDTH = 26
DRAWER_MAX_WIDTH = 40
DRAWER_FLOOR_WIDTH = 20
DETAIL_MIN_WIDTH = 12
PANE_GAP = 2
DRAWER_BORDER = 2

FOLD_OPEN = "▾ "
FOLD_CLOSED = "▸ "
FOLDED_MARKER = "◆ "
ELLIPSIS = "..."


@dataclass(frozen=True)
class PaneLayout:
    width: int
    height: int
    drawer_width: int
    detail_width: int  # 0 when the detail pane does not fit
    list_height: int

    @property
    def drawer_inner_width(self):
        # type: () -> int
        return max(1, self.drawer_width - DRAWER_BORDER)

    @property
    def show_detail(self):
        # type: () -> bool
        return self.detail_width > 0


@dataclass(frozen=True)
class RowLayout:
    prefix: str
    title_lines: List[str]
    badges: List[str]
    width: int

    @property
    def line_count(self):
        # type: () -> int
        return len(self.title_lines)


# ── Pane geometry ─────────────────────────────────────────


def available_list_height(height):
    # type: (int) -> int
    return max(MIN_LIST_HEIGHT, height - CHROME_ROWS)


def drawer_width_for(width):
    # type: (int) -> int
    drawer = width // 3
    drawer = max(DRAWER_MIN_WIDTH, min(drawer, DRAWER_MAX_WIDTH))
    if drawer > width - DETAIL_MIN_WIDTH - PANE_GAP:
        drawer = width - DETAIL_MIN_WIDTH - PANE_GAP
    if drawer < DRAWER_FLOOR_WIDTH:
        drawer = min(DRAWER_FLOOR_WIDTH, width)
    return max(0, drawer)


def compute_layout(width, height):
    # type: (int, int) -> PaneLayout
    width = max(0, width)
    height = max(0, height)
    drawer = drawer_width_for(width)
    if width - drawer - PANE_GAP < DETAIL_MIN_WIDTH:
        drawer = width
        detail = 0
    else:
        detail = width - drawer - PANE_GAP
    return PaneLayout(
        width=width,
        height=height,
        drawer_width=drawer,
        detail_width=detail,
        list_height=available_list_height(height),
    )


# ── Text helpers ──────────────────────────────────────────


def truncate(value, width):
    # type: (str, int) -> str
    if width <= 0:
        return ""
    if cell_len(value) <= width:
        return value
    if width <= len(ELLIPSIS):
        return _cut(value, width)
    return _cut(value, width - len(ELLIPSIS)) + ELLIPSIS


def _cut(value, width):
    # type: (str, int) -> str
    out = []  # type: List[str]
    used = 0
    for char in value:
        w = cell_len(char)
        if used + w > width:
            break
        out.append(char)
        used += w
    return "".join(out)


def wrap_title(title, first_width, rest_width):
    # type: (str, int, int) -> List[str]
    """Greedy word wrap where the first line may be narrower than the rest.

    Always returns at least one line.  Words wider than a line are split.
    """
    first_width = max(1, first_width)
    rest_width = max(1, rest_width)
    lines = []  # type: List[str]
    current = ""

    def _budget():
        # type: () -> int
        return first_width if not lines else rest_width

    for word in title.split():
        if current and cell_len(current) + 1 + cell_len(word) <= _budget():
            current = current + " " + word
            continue
        if current:
            lines.append(current)
            current = ""
        while cell_len(word) > _budget():
            head = _cut(word, _budget()) or word[:1]
            lines.append(head)
            word = word[len(head):]
        current = word
    if current or not lines:
        lines.append(current)
    return lines


def wrap_lines(text, width):
    # type: (str, int) -> List[str]
    """Wrap free text paragraph by paragraph (blank lines kept)."""
    out = []  # type: List[str]
    for paragraph in text.splitlines() or [""]:
        out.extend(wrap_title(paragraph, width, width))
    return out


# ── Drawer rows ───────────────────────────────────────────


def badge_labels(issue):
    # type: (Issue) -> List[str]
    labels = []  # type: List[str]
    if issue.priority > 0:
        labels.append("P%d" % issue.priority)
    status = STATUS_BADGES.get(issue.status, "")
    if status:
        labels.append(status)
    return labels


def badge_width(labels):
    # type: (List[str]) -> int
    """Rendered width: one cell of padding each side, one space between."""
    if not labels:
        return 0
    return sum(cell_len(label) + 2 for label in labels) + len(labels) - 1


def row_prefix(row):
    # type: (DrawerRow) -> str
    if not row.foldable:
        return row.prefix
    return row.prefix + (FOLD_CLOSED if row.folded else FOLD_OPEN)


def row_title(row):
    # type: (DrawerRow) -> str
    if row.foldable and row.folded:
        return FOLDED_MARKER + row.issue.title
    return row.issue.title


def layout_row(row, width):
    # type: (DrawerRow, int) -> RowLayout
    if width <= 0:
        return RowLayout(prefix="", title_lines=[""], badges=[], width=0)
    badges = badge_labels(row.issue)
    available = width
    if badges:
        available = max(1, width - badge_width(badges) - 1)
    prefix = row_prefix(row)
    prefix_width = cell_len(prefix)
    first_width = max(1, available - prefix_width)
    rest_width = max(1, width - prefix_width)
    return RowLayout(
        prefix=prefix,
        title_lines=wrap_title(row_title(row), first_width, rest_width),
        badges=badges,
        width=width,
    )


def row_line_count(row, width):
    # type: (DrawerRow, int) -> int
    return layout_row(row, width).line_count


def row_height(rows, width):
    # type: (List[DrawerRow], int) -> int
    """Rows share one height: the tallest row's line count."""
    tallest = 1
    if width <= 0:
        return tallest
    for row in rows:
        tallest = max(tallest, row_line_count(row, width))
    return tallest


def entry_capacity(list_height, height_per_row):
    # type: (int, int) -> int
    return max(1, list_height // max(1, height_per_row))
