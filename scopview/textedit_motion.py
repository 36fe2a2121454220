"""Cursor placement, selection handling and basic edits on an editable text.

Every edit that changes the text is recorded in the state's undo history.
"""

from __future__ import annotations

from dataclasses import dataclass

from scopview.textedit_state import (
    NEWLINE,
    EditableText,
    TextEditState,
    TextRow,
    make_undo_delete,
    make_undo_insert,
    make_undo_replace,
)


@dataclass
class FindState:
    """Where a character sits: its position, the height of its row, the row's
    first character and length, and the first character of the row above."""

    x: float = 0.0
    y: float = 0.0
    height: float = 0.0
    first_char: int = 0
    length: int = 0
    prev_first: int = 0


def _is_space(char: str) -> bool:
    return char.isspace()


def locate_coord(text: EditableText, x: float, y: float) -> int:
    """Index of the character boundary nearest to the display position (x, y)."""
    n = len(text)
    base_y = 0.0
    i = 0
    row = TextRow()

    while i < n:
        row = text.layout_row(i)
        if row.num_chars <= 0:
            return n
        if i == 0 and y < base_y + row.ymin:
            return 0
        if y < base_y + row.ymax:
            break
        i += row.num_chars
        base_y += row.baseline_y_delta

    if i >= n:
        return n

    if x < row.x0:
        return i

    if x < row.x1:
        prev_x = row.x0
        for k in range(row.num_chars):
            width = text.width(i, k)
            if x < prev_x + width:
                if x < prev_x + width / 2:
                    return i + k
                return i + k + 1
            prev_x += width

    last = i + row.num_chars - 1
    if text.char_at(last) == NEWLINE:
        return last
    return i + row.num_chars


def _single_line_y(text: EditableText) -> float:
    return text.layout_row(0).ymin


def click(text: EditableText, state: TextEditState, x: float, y: float) -> None:
    """Move the cursor to the clicked position and clear the selection."""
    if state.single_line:
        y = _single_line_y(text)
    state.cursor = locate_coord(text, x, y)
    state.select_start = state.cursor
    state.select_end = state.cursor
    state.has_preferred_x = False


def drag(text: EditableText, state: TextEditState, x: float, y: float) -> None:
    """Move the cursor and the selection end to the dragged position."""
    if state.single_line:
        y = _single_line_y(text)
    if state.select_start == state.select_end:
        state.select_start = state.cursor
    position = locate_coord(text, x, y)
    state.cursor = position
    state.select_end = position


def find_charpos(text: EditableText, n: int, single_line: bool) -> FindState:
    """Locate character ``n`` and the row that holds it."""
    z = len(text)

    if n == z and single_line:
        row = text.layout_row(0)
        return FindState(
            x=row.x1,
            y=0.0,
            height=row.ymax - row.ymin,
            first_char=0,
            length=z,
            prev_first=0,
        )

    y = 0.0
    i = 0
    prev_start = 0
    while True:
        row = text.layout_row(i)
        if n < i + row.num_chars:
            break
        if i + row.num_chars == z and z > 0 and text.char_at(z - 1) != NEWLINE:
            break
        prev_start = i
        i += row.num_chars
        y += row.baseline_y_delta
        if i == z:
            row.num_chars = 0
            break

    first = i
    x = row.x0
    offset = 0
    while first + offset < n:
        x += text.width(first, offset)
        offset += 1

    return FindState(
        x=x,
        y=y,
        height=row.ymax - row.ymin,
        first_char=first,
        length=row.num_chars,
        prev_first=prev_start,
    )


def clamp(text: EditableText, state: TextEditState) -> None:
    """Bring the cursor and selection back inside the text."""
    n = len(text)
    if state.has_selection:
        state.select_start = min(state.select_start, n)
        state.select_end = min(state.select_end, n)
        if state.select_start == state.select_end:
            state.cursor = state.select_start
    state.cursor = min(state.cursor, n)


def delete(text: EditableText, state: TextEditState, where: int, length: int) -> None:
    """Delete ``length`` characters at ``where``, recording the edit."""
    make_undo_delete(text, state, where, length)
    text.delete(where, length)
    state.has_preferred_x = False


def delete_selection(text: EditableText, state: TextEditState) -> None:
    """Delete the selected characters, leaving the cursor where they were."""
    clamp(text, state)
    if not state.has_selection:
        return
    if state.select_start < state.select_end:
        delete(text, state, state.select_start, state.select_end - state.select_start)
        state.select_end = state.cursor = state.select_start
    else:
        delete(text, state, state.select_end, state.select_start - state.select_end)
        state.select_start = state.cursor = state.select_end
    state.has_preferred_x = False


def sort_selection(state: TextEditState) -> None:
    """Order the selection so that its start does not follow its end."""
    if state.select_end < state.select_start:
        state.select_start, state.select_end = state.select_end, state.select_start


def move_to_first(state: TextEditState) -> None:
    """Collapse the selection onto its first character."""
    if state.has_selection:
        sort_selection(state)
        state.cursor = state.select_start
        state.select_end = state.select_start
        state.has_preferred_x = False


def move_to_last(text: EditableText, state: TextEditState) -> None:
    """Collapse the selection onto its end."""
    if state.has_selection:
        sort_selection(state)
        clamp(text, state)
        state.cursor = state.select_end
        state.select_start = state.select_end
        state.has_preferred_x = False


def _is_word_boundary(text: EditableText, index: int) -> bool:
    if index <= 0:
        return True
    return _is_space(text.char_at(index - 1)) and not _is_space(text.char_at(index))


def move_word_left(text: EditableText, index: int) -> int:
    """Start of the word before ``index``; always moves at least one place."""
    index -= 1
    while index >= 0 and not _is_word_boundary(text, index):
        index -= 1
    return max(index, 0)


def move_word_right(text: EditableText, index: int) -> int:
    """Start of the next word after ``index``, or the end of the text."""
    length = len(text)
    index += 1
    while index < length and not _is_word_boundary(text, index):
        index += 1
    return min(index, length)


def prep_selection_at_cursor(state: TextEditState) -> None:
    """Start an empty selection at the cursor, or put the cursor at the selection end."""
    if not state.has_selection:
        state.select_start = state.select_end = state.cursor
    else:
        state.cursor = state.select_end


def cut(text: EditableText, state: TextEditState) -> bool:
    """Delete the selection; return whether there was one."""
    if state.has_selection:
        delete_selection(text, state)
        state.has_preferred_x = False
        return True
    return False


def paste(text: EditableText, state: TextEditState, chars: str) -> bool:
    """Replace the selection with ``chars``; return whether they could be inserted.

    If the insertion fails the selection stays deleted; undo brings it back.
    """
    clamp(text, state)
    delete_selection(text, state)
    if text.insert(state.cursor, chars):
        make_undo_insert(state, state.cursor, len(chars))
        state.cursor += len(chars)
        state.has_preferred_x = False
        return True
    return False


def insert_text(text: EditableText, state: TextEditState, chars: str) -> None:
    """Type ``chars`` at the cursor, overwriting one character in insert mode."""
    if chars[:1] == NEWLINE and state.single_line:
        return

    if state.insert_mode and not state.has_selection and state.cursor < len(text):
        make_undo_replace(text, state, state.cursor, 1, 1)
        text.delete(state.cursor, 1)
        if text.insert(state.cursor, chars):
            state.cursor += len(chars)
            state.has_preferred_x = False
    else:
        delete_selection(text, state)
        if text.insert(state.cursor, chars):
            make_undo_insert(state, state.cursor, len(chars))
            state.cursor += len(chars)
            state.has_preferred_x = False