"""Keyboard handling for an editable text: cursor motion, selection and edits.

A key press is either a ``Key`` code, optionally combined with ``Key.SHIFT``,
a Unicode code point, or a string of characters to type.
"""

from __future__ import annotations

import enum
from collections.abc import Callable

from scopview.textedit_motion import (
    clamp,
    delete,
    delete_selection,
    find_charpos,
    insert_text,
    move_to_first,
    move_to_last,
    move_word_left,
    move_word_right,
    prep_selection_at_cursor,
)
from scopview.textedit_state import (
    NEWLINE,
    NEWLINE_WIDTH,
    EditableText,
    TextEditState,
    redo,
    undo,
)

_MAX_CODE_POINT = 0x10FFFF


class Key(enum.IntEnum):
    """Editing keys. Codes lie above the Unicode range; ``SHIFT`` is a flag bit."""

    LEFT = 0x200001
    RIGHT = 0x200002
    UP = 0x200003
    DOWN = 0x200004
    PGUP = 0x200005
    PGDOWN = 0x200006
    LINESTART = 0x200007
    LINEEND = 0x200008
    TEXTSTART = 0x200009
    TEXTEND = 0x20000A
    DELETE = 0x20000B
    BACKSPACE = 0x20000C
    UNDO = 0x20000D
    REDO = 0x20000E
    INSERT = 0x20000F
    WORDLEFT = 0x200010
    WORDRIGHT = 0x200011
    SHIFT = 0x400000


_UNSHIFTABLE = frozenset({Key.UNDO, Key.REDO, Key.INSERT})

Handler = Callable[[EditableText, TextEditState, bool], None]


def _undo(text: EditableText, state: TextEditState, shifted: bool) -> None:
    undo(text, state)
    state.has_preferred_x = False


def _redo(text: EditableText, state: TextEditState, shifted: bool) -> None:
    redo(text, state)
    state.has_preferred_x = False


def _toggle_insert(text: EditableText, state: TextEditState, shifted: bool) -> None:
    state.insert_mode = not state.insert_mode


def _left(text: EditableText, state: TextEditState, shifted: bool) -> None:
    if shifted:
        clamp(text, state)
        prep_selection_at_cursor(state)
        if state.select_end > 0:
            state.select_end -= 1
        state.cursor = state.select_end
    elif state.has_selection:
        move_to_first(state)
    elif state.cursor > 0:
        state.cursor -= 1
    state.has_preferred_x = False


def _right(text: EditableText, state: TextEditState, shifted: bool) -> None:
    if shifted:
        prep_selection_at_cursor(state)
        state.select_end += 1
        clamp(text, state)
        state.cursor = state.select_end
    else:
        if state.has_selection:
            move_to_last(text, state)
        else:
            state.cursor += 1
        clamp(text, state)
    state.has_preferred_x = False


def _word(mover: Callable[[EditableText, int], int], backwards: bool) -> Handler:
    def handler(text: EditableText, state: TextEditState, shifted: bool) -> None:
        if shifted:
            if not state.has_selection:
                prep_selection_at_cursor(state)
            state.cursor = mover(text, state.cursor)
            state.select_end = state.cursor
            clamp(text, state)
        elif state.has_selection:
            if backwards:
                move_to_first(state)
            else:
                move_to_last(text, state)
        else:
            state.cursor = mover(text, state.cursor)
            clamp(text, state)

    return handler


def _seek_in_row(text: EditableText, state: TextEditState, row_start: int, goal_x: float) -> int:
    """Advance the cursor from ``row_start`` along its row up to ``goal_x``; return the row length."""
    state.cursor = row_start
    row = text.layout_row(row_start)
    x = row.x0
    for offset in range(row.num_chars):
        dx = text.width(row_start, offset)
        if dx == NEWLINE_WIDTH:
            break
        x += dx
        if x > goal_x:
            break
        state.cursor += 1
    clamp(text, state)
    state.has_preferred_x = True
    state.preferred_x = goal_x
    return row.num_chars


def _vertical(down: bool, page: bool) -> Handler:
    def handler(text: EditableText, state: TextEditState, shifted: bool) -> None:
        row_count = state.row_count_per_page if page else 1
        if shifted:
            prep_selection_at_cursor(state)
        elif state.has_selection:
            if down:
                move_to_last(text, state)
            else:
                move_to_first(state)

        clamp(text, state)
        find = find_charpos(text, state.cursor, state.single_line)

        for _ in range(row_count):
            goal_x = state.preferred_x if state.has_preferred_x else find.x
            if down:
                if find.length == 0:
                    break
                if text.char_at(find.first_char + find.length - 1) != NEWLINE:
                    break
                start = find.first_char + find.length
                length = _seek_in_row(text, state, start, goal_x)
                if shifted:
                    state.select_end = state.cursor
                find.first_char = start
                find.length = length
            else:
                if find.prev_first == find.first_char:
                    break
                _seek_in_row(text, state, find.prev_first, goal_x)
                if shifted:
                    state.select_end = state.cursor
                prev_scan = find.prev_first - 1 if find.prev_first > 0 else 0
                while prev_scan > 0 and text.char_at(prev_scan - 1) != NEWLINE:
                    prev_scan -= 1
                find.first_char = find.prev_first
                find.prev_first = prev_scan

    return handler


def _delete(text: EditableText, state: TextEditState, shifted: bool) -> None:
    if state.has_selection:
        delete_selection(text, state)
    elif state.cursor < len(text):
        delete(text, state, state.cursor, 1)
    state.has_preferred_x = False


def _backspace(text: EditableText, state: TextEditState, shifted: bool) -> None:
    if state.has_selection:
        delete_selection(text, state)
    else:
        clamp(text, state)
        if state.cursor > 0:
            previous = state.cursor - 1
            delete(text, state, previous, 1)
            state.cursor = previous
    state.has_preferred_x = False


def _text_start(text: EditableText, state: TextEditState, shifted: bool) -> None:
    if shifted:
        prep_selection_at_cursor(state)
        state.cursor = state.select_end = 0
    else:
        state.cursor = state.select_start = state.select_end = 0
    state.has_preferred_x = False


def _text_end(text: EditableText, state: TextEditState, shifted: bool) -> None:
    if shifted:
        prep_selection_at_cursor(state)
        state.cursor = state.select_end = len(text)
    else:
        state.cursor = len(text)
        state.select_start = state.select_end = 0
    state.has_preferred_x = False


def _line_start(text: EditableText, state: TextEditState, shifted: bool) -> None:
    clamp(text, state)
    if shifted:
        prep_selection_at_cursor(state)
    else:
        move_to_first(state)
    if state.single_line:
        state.cursor = 0
    else:
        while state.cursor > 0 and text.char_at(state.cursor - 1) != NEWLINE:
            state.cursor -= 1
    if shifted:
        state.select_end = state.cursor
    state.has_preferred_x = False


def _line_end(text: EditableText, state: TextEditState, shifted: bool) -> None:
    n = len(text)
    clamp(text, state)
    if shifted:
        prep_selection_at_cursor(state)
    else:
        move_to_first(state)
    if state.single_line:
        state.cursor = n
    else:
        while state.cursor < n and text.char_at(state.cursor) != NEWLINE:
            state.cursor += 1
    if shifted:
        state.select_end = state.cursor
    state.has_preferred_x = False


_HANDLERS: dict[Key, Handler] = {
    Key.UNDO: _undo,
    Key.REDO: _redo,
    Key.INSERT: _toggle_insert,
    Key.LEFT: _left,
    Key.RIGHT: _right,
    Key.WORDLEFT: _word(move_word_left, backwards=True),
    Key.WORDRIGHT: _word(move_word_right, backwards=False),
    Key.DOWN: _vertical(down=True, page=False),
    Key.PGDOWN: _vertical(down=True, page=True),
    Key.UP: _vertical(down=False, page=False),
    Key.PGUP: _vertical(down=False, page=True),
    Key.DELETE: _delete,
    Key.BACKSPACE: _backspace,
    Key.TEXTSTART: _text_start,
    Key.TEXTEND: _text_end,
    Key.LINESTART: _line_start,
    Key.LINEEND: _line_end,
}


def key(text: EditableText, state: TextEditState, pressed: int | str) -> None:
    """Apply one key press to ``text`` and ``state``.

    Strings are typed as they are; integers are either ``Key`` codes (possibly
    with ``Key.SHIFT``) or code points of characters to type. Anything else
    is ignored.
    """
    if isinstance(pressed, str):
        if pressed:
            insert_text(text, state, pressed)
        return

    pressed = int(pressed)
    while True:
        shifted = bool(pressed & Key.SHIFT)
        try:
            code = Key(pressed & ~Key.SHIFT)
        except ValueError:
            code = None
        if code is None or code is Key.SHIFT or (shifted and code in _UNSHIFTABLE):
            if 0 < pressed <= _MAX_CODE_POINT:
                insert_text(text, state, chr(pressed))
            return
        if code in (Key.UP, Key.DOWN) and state.single_line:
            # Up and down in a single line behave like left and right.
            replacement = Key.LEFT if code is Key.UP else Key.RIGHT
            pressed = replacement | (pressed & Key.SHIFT)
            continue
        _HANDLERS[code](text, state, shifted)
        return