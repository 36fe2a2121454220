import pytest

from scopview.textedit_motion import (
    FindState,
    clamp,
    click,
    cut,
    delete,
    delete_selection,
    drag,
    find_charpos,
    insert_text,
    locate_coord,
    move_to_first,
    move_to_last,
    move_word_left,
    move_word_right,
    paste,
    prep_selection_at_cursor,
    sort_selection,
)
from scopview.textedit_state import EditableText, TextEditState, initialize_state, redo, undo

TWO_LINES = "abc\ndef"


def make(content, single_line=False, max_length=None):
    text = EditableText(content, max_length=max_length)
    state = TextEditState()
    initialize_state(state, single_line)
    return text, state


def test_locate_below_text_returns_end():
    text, _ = make(TWO_LINES)
    assert locate_coord(text, 0.0, 50.0) == len(TWO_LINES)


def test_locate_above_text_returns_start():
    text, _ = make(TWO_LINES)
    assert locate_coord(text, 2.0, -5.0) == 0


def test_locate_past_line_end_stops_at_newline():
    text, _ = make(TWO_LINES)
    assert locate_coord(text, 40.0, 0.5) == TWO_LINES.index("\n")


def test_locate_before_row_start_returns_row_start():
    text, _ = make(TWO_LINES)
    assert locate_coord(text, -3.0, 1.5) == TWO_LINES.index("\n") + 1


def test_locate_rounds_to_nearest_boundary():
    text, _ = make(TWO_LINES)
    left = locate_coord(text, 1.2, 0.5)
    right = locate_coord(text, 1.8, 0.5)
    assert right == left + 1


def test_click_collapses_selection():
    text, state = make(TWO_LINES)
    state.select_start, state.select_end = 1, 3
    state.has_preferred_x = True
    click(text, state, 2.0, 1.5)
    assert state.cursor == state.select_start == state.select_end
    assert state.cursor == locate_coord(text, 2.0, 1.5)
    assert not state.has_preferred_x


def test_drag_extends_selection_from_click():
    text, state = make(TWO_LINES)
    click(text, state, 0.0, 0.5)
    anchor = state.cursor
    drag(text, state, 2.0, 1.5)
    assert state.select_start == anchor
    assert state.select_end == state.cursor == locate_coord(text, 2.0, 1.5)


def test_single_line_click_ignores_y():
    text, state = make("hello", single_line=True)
    click(text, state, 2.0, 100.0)
    assert state.cursor == locate_coord(text, 2.0, 0.0)


def test_find_charpos_on_second_row():
    text, _ = make(TWO_LINES)
    row_start = TWO_LINES.index("\n") + 1
    n = row_start + 2
    found = find_charpos(text, n, False)
    assert found.first_char == row_start
    assert found.prev_first == 0
    assert found.length == len(TWO_LINES) - row_start
    assert found.x == (n - row_start) * text.char_width
    assert found.y == text.line_height


def test_find_charpos_single_line_end():
    text, _ = make("hello", single_line=True)
    found = find_charpos(text, len(text), True)
    assert found == FindState(
        x=len("hello") * text.char_width, y=0.0, height=text.line_height,
        first_char=0, length=len("hello"), prev_first=0,
    )


def test_clamp_brings_cursor_inside():
    text, state = make("abc")
    state.cursor = 100
    state.select_start, state.select_end = 50, 60
    clamp(text, state)
    assert state.cursor == len(text)
    assert state.select_start == state.select_end == len(text)


def test_delete_then_undo_round_trip():
    text, state = make("hello world")
    delete(text, state, 0, 6)
    assert str(text) == "world"
    undo(text, state)
    assert str(text) == "hello world"
    redo(text, state)
    assert str(text) == "world"


def test_delete_reversed_selection():
    text, state = make("hello world")
    state.select_start, state.select_end = 8, 2
    delete_selection(text, state)
    assert str(text) == "hello world"[:2] + "hello world"[8:]
    assert state.cursor == state.select_start == state.select_end == 2


def test_sort_selection_orders_bounds():
    _, state = make("")
    state.select_start, state.select_end = 7, 3
    sort_selection(state)
    assert (state.select_start, state.select_end) == (3, 7)


def test_move_to_first_and_last():
    text, state = make("hello world")
    state.select_start, state.select_end = 7, 3
    move_to_first(state)
    assert state.cursor == state.select_start == state.select_end == 3

    state.select_start, state.select_end = 7, 3
    move_to_last(text, state)
    assert state.cursor == state.select_start == state.select_end == 7


def test_word_motion():
    content = "hello world"
    text, _ = make(content)
    assert move_word_right(text, 0) == content.index("w")
    assert move_word_right(text, content.index("w")) == len(content)
    assert move_word_left(text, len(content)) == content.index("w")
    assert move_word_left(text, content.index("w")) == 0


def test_prep_selection_at_cursor():
    _, state = make("")
    state.cursor = 4
    prep_selection_at_cursor(state)
    assert state.select_start == state.select_end == 4
    state.select_start, state.select_end = 1, 6
    prep_selection_at_cursor(state)
    assert state.cursor == 6


def test_cut_needs_selection():
    text, state = make("hello")
    assert cut(text, state) is False
    assert str(text) == "hello"
    state.select_start, state.select_end = 1, 4
    assert cut(text, state) is True
    assert str(text) == "h" + "o"


def test_paste_replaces_selection_and_undoes():
    text, state = make("hello world")
    state.select_start, state.select_end = 0, 5
    assert paste(text, state, "howdy") is True
    assert str(text) == "howdy world"
    assert state.cursor == len("howdy")
    undo(text, state)
    undo(text, state)
    assert str(text) == "hello world"


def test_paste_rejected_when_too_long():
    text, state = make("abc", max_length=4)
    assert paste(text, state, "xyz") is False
    assert str(text) == "abc"


def test_insert_text_ignores_newline_in_single_line():
    text, state = make("abc", single_line=True)
    insert_text(text, state, "\n")
    assert str(text) == "abc"
    assert state.cursor == 0


def test_insert_text_inserts_at_cursor():
    text, state = make("ac")
    state.cursor = 1
    insert_text(text, state, "b")
    assert str(text) == "abc"
    assert state.cursor == 2
    undo(text, state)
    assert str(text) == "ac"


def test_insert_mode_overwrites():
    text, state = make("abc")
    state.insert_mode = True
    insert_text(text, state, "x")
    assert str(text) == "xbc"
    undo(text, state)
    assert str(text) == "abc"


@pytest.mark.parametrize("content", ["", "one", "a\nb\n", TWO_LINES])
def test_locate_stays_in_bounds(content):
    text, _ = make(content)
    for x in (-1.0, 0.4, 2.6, 9.0):
        for y in (-1.0, 0.5, 1.5, 9.0):
            assert 0 <= locate_coord(text, x, y) <= len(content)