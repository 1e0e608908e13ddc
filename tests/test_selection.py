from carnie_dashboard.entries import CollapseState, build_entries
from carnie_dashboard.selection import ListSelection
from carnie_dashboard.tree import build_tree

from factories import issue


def _entries(*ids):
    tree = build_tree([issue(i) for i in ids], [])
    return build_entries(tree, CollapseState())


def test_move_clamps_at_both_ends():
    entries = _entries("a", "b", "c")
    sel = ListSelection()

    sel.move(entries, -1)
    assert sel.selected_id == "a"
    sel.move(entries, 5)
    assert sel.selected_id == "c"
    sel.move(entries, 1)
    assert sel.selected_id == "c"


def test_move_on_empty_list_resets():
    sel = ListSelection(selected_id="a", offset=3)
    sel.move([], 1)

    assert sel == ListSelection()


def test_relocate_keeps_id_when_it_moved():
    sel = ListSelection(selected_id="b", offset=1)
    sel.relocate(_entries("x", "y", "b"))

    assert sel.selected_id == "b"
    assert sel.index_in(_entries("x", "y", "b")) == 2


def test_relocate_falls_back_to_first_row():
    sel = ListSelection(selected_id="gone", offset=4)
    sel.relocate(_entries("a", "b"))

    assert sel.selected_id == "a"
    assert sel.offset == 0


def test_relocate_empty_resets():
    sel = ListSelection(selected_id="a", offset=2)
    sel.relocate([])

    assert sel.selected_id == ""
    assert sel.offset == 0


def test_ensure_visible_scrolls_down_and_up():
    entries = _entries(*"abcdefghij")
    sel = ListSelection(selected_id="h")

    sel.ensure_visible(entries, 3)
    assert sel.offset == 5  # h is index 7; window [5, 7]

    sel.selected_id = "b"
    sel.ensure_visible(entries, 3)
    assert sel.offset == 1


def test_ensure_visible_leaves_offset_when_already_visible():
    entries = _entries(*"abcdef")
    sel = ListSelection(selected_id="c", offset=1)
    sel.ensure_visible(entries, 4)

    assert sel.offset == 1


def test_ensure_visible_clamps_stale_offset():
    entries = _entries("a", "b")
    sel = ListSelection(selected_id="a", offset=9)
    sel.ensure_visible(entries, 5)

    assert sel.offset == 0


def test_selected_entry_defaults_to_first():
    entries = _entries("a", "b")

    assert ListSelection().selected_entry(entries).issue.id == "a"
    assert ListSelection().selected_entry([]) is None


def test_ensure_visible_is_idempotent():
    entries = _entries(*"abcdefghij")
    once = ListSelection(selected_id="i", offset=0)
    once.ensure_visible(entries, 4)
    twice = once.copy()
    twice.ensure_visible(entries, 4)

    assert twice == once
