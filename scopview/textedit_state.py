"""Text editing state, the edited text and the undo/redo history.

The undo history keeps a bounded number of records and a bounded character
store. Undo records grow from the start of both stores, redo records from
their end. When space runs out the oldest entries are dropped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

UNDO_STATE_COUNT = 99
UNDO_CHAR_COUNT = 999
NEWLINE = "\n"
NEWLINE_WIDTH = -1.0


@dataclass
class UndoRecord:
    """One reversible edit: at ``where``, insert ``insert_length`` stored
    characters (found at ``char_storage``, or -1 if none) after deleting
    ``delete_length`` characters."""

    where: int = 0
    insert_length: int = 0
    delete_length: int = 0
    char_storage: int = -1


@dataclass
class UndoState:
    """Bounded undo and redo history sharing one record table and one character store."""

    state_count: int = UNDO_STATE_COUNT
    char_count: int = UNDO_CHAR_COUNT
    records: list[UndoRecord] = field(init=False)
    chars: list[str] = field(init=False)
    undo_point: int = field(init=False, default=0)
    redo_point: int = field(init=False)
    undo_char_point: int = field(init=False, default=0)
    redo_char_point: int = field(init=False)

    def __post_init__(self) -> None:
        if self.state_count < 1 or self.char_count < 1:
            raise ValueError("undo capacities must be positive")
        self.records = [UndoRecord() for _ in range(self.state_count)]
        self.chars = [""] * self.char_count
        self.reset()

    def reset(self) -> None:
        """Forget every undo and redo entry."""
        self.undo_point = 0
        self.undo_char_point = 0
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def flush_redo(self) -> None:
        """Drop every redo entry."""
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def discard_undo(self) -> None:
        """Drop the oldest undo entry, compacting the character store."""
        if self.undo_point <= 0:
            return
        first = self.records[0]
        if first.char_storage >= 0:
            n = first.insert_length
            self.undo_char_point -= n
            self.chars[0:self.undo_char_point] = self.chars[n:n + self.undo_char_point]
            for record in self.records[:self.undo_point]:
                if record.char_storage >= 0:
                    record.char_storage -= n
        self.undo_point -= 1
        count = self.undo_point
        self.records[0:count] = [replace(record) for record in self.records[1:count + 1]]

    def discard_redo(self) -> None:
        """Drop the oldest redo entry, moving the remaining redo data towards the end."""
        k = self.state_count - 1
        if self.redo_point > k:
            return
        last = self.records[k]
        if last.char_storage >= 0:
            n = last.insert_length
            self.redo_char_point += n
            start = self.redo_char_point
            self.chars[start:self.char_count] = self.chars[start - n:self.char_count - n]
            for record in self.records[self.redo_point:k]:
                if record.char_storage >= 0:
                    record.char_storage += n
        begin = self.redo_point
        moved = [replace(record) for record in self.records[begin:k]]
        self.records[begin + 1:k + 1] = moved
        self.redo_point += 1

    def _create_record(self, numchars: int) -> UndoRecord | None:
        self.flush_redo()
        if self.undo_point == self.state_count:
            self.discard_undo()
        if numchars > self.char_count:
            self.undo_point = 0
            self.undo_char_point = 0
            return None
        while self.undo_char_point + numchars > self.char_count:
            self.discard_undo()
        record = self.records[self.undo_point]
        self.undo_point += 1
        return record

    def create_undo(self, where: int, insert_length: int, delete_length: int) -> int | None:
        """Record an edit; return where its ``insert_length`` characters must be
        stored in ``chars``, or ``None`` if nothing is to be stored."""
        record = self._create_record(insert_length)
        if record is None:
            return None
        record.where = where
        record.insert_length = insert_length
        record.delete_length = delete_length
        if insert_length == 0:
            record.char_storage = -1
            return None
        record.char_storage = self.undo_char_point
        self.undo_char_point += insert_length
        return record.char_storage


@dataclass
class TextEditState:
    """Cursor, selection and history of one text field."""

    cursor: int = 0
    select_start: int = 0
    select_end: int = 0
    insert_mode: bool = False
    row_count_per_page: int = 0
    cursor_at_end_of_line: bool = False
    initialized: bool = False
    has_preferred_x: bool = False
    single_line: bool = False
    preferred_x: float = 0.0
    undo_state: UndoState = field(default_factory=UndoState)

    @property
    def has_selection(self) -> bool:
        return self.select_start != self.select_end


@dataclass
class TextRow:
    """Layout of one displayed row."""

    x0: float = 0.0
    x1: float = 0.0
    baseline_y_delta: float = 0.0
    ymin: float = 0.0
    ymax: float = 0.0
    num_chars: int = 0


class EditableText:
    """A string being edited, laid out with fixed-width characters.

    Rows end after each newline. ``max_length`` limits insertions; ``None``
    means no limit.
    """

    def __init__(
        self,
        text: str = "",
        char_width: float = 1.0,
        line_height: float = 1.0,
        max_length: int | None = None,
    ) -> None:
        self._chars = list(text)
        self.char_width = char_width
        self.line_height = line_height
        self.max_length = max_length

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return "".join(self._chars)

    def char_at(self, index: int) -> str:
        """Character at ``index``."""
        return self._chars[index]

    def delete(self, where: int, length: int) -> None:
        """Remove ``length`` characters starting at ``where``."""
        del self._chars[where:where + length]

    def insert(self, where: int, chars: Iterable[str]) -> bool:
        """Insert characters at ``where``; return False if they do not fit."""
        new = list("".join(chars))
        if self.max_length is not None and len(self._chars) + len(new) > self.max_length:
            return False
        self._chars[where:where] = new
        return True

    def width(self, row_start: int, offset: int) -> float:
        """Advance of the character ``offset`` places after ``row_start``."""
        if self._chars[row_start + offset] == NEWLINE:
            return NEWLINE_WIDTH
        return self.char_width

    def layout_row(self, start: int) -> TextRow:
        """Lay out the row beginning at ``start``, newline included."""
        count = 0
        visible = 0
        for char in self._chars[start:]:
            count += 1
            if char == NEWLINE:
                break
            visible += 1
        return TextRow(
            x0=0.0,
            x1=visible * self.char_width,
            baseline_y_delta=self.line_height,
            ymin=0.0,
            ymax=self.line_height,
            num_chars=count,
        )


def undo(text: EditableText, state: TextEditState) -> None:
    """Revert the latest edit and turn it into a redo entry."""
    s = state.undo_state
    if s.undo_point == 0:
        return
    u = replace(s.records[s.undo_point - 1])
    r = s.records[s.redo_point - 1]
    r.char_storage = -1
    r.insert_length = u.delete_length
    r.delete_length = u.insert_length
    r.where = u.where

    if u.delete_length:
        if s.undo_char_point + u.delete_length >= s.char_count:
            r.insert_length = 0
        else:
            while s.undo_char_point + u.delete_length > s.redo_char_point:
                if s.redo_point == s.state_count:
                    return
                s.discard_redo()
            r = s.records[s.redo_point - 1]
            r.char_storage = s.redo_char_point - u.delete_length
            s.redo_char_point = r.char_storage
            for i in range(u.delete_length):
                s.chars[r.char_storage + i] = text.char_at(u.where + i)
        text.delete(u.where, u.delete_length)

    if u.insert_length:
        stored = s.chars[u.char_storage:u.char_storage + u.insert_length]
        text.insert(u.where, stored)
        s.undo_char_point -= u.insert_length

    state.cursor = u.where + u.insert_length
    s.undo_point -= 1
    s.redo_point -= 1


def redo(text: EditableText, state: TextEditState) -> None:
    """Reapply the latest undone edit and turn it back into an undo entry."""
    s = state.undo_state
    if s.redo_point == s.state_count:
        return
    u = s.records[s.undo_point]
    r = replace(s.records[s.redo_point])
    u.delete_length = r.insert_length
    u.insert_length = r.delete_length
    u.where = r.where
    u.char_storage = -1

    if r.delete_length:
        if s.undo_char_point + u.insert_length > s.redo_char_point:
            u.insert_length = 0
            u.delete_length = 0
        else:
            u.char_storage = s.undo_char_point
            s.undo_char_point += u.insert_length
            for i in range(u.insert_length):
                s.chars[u.char_storage + i] = text.char_at(u.where + i)
        text.delete(r.where, r.delete_length)

    if r.insert_length:
        stored = s.chars[r.char_storage:r.char_storage + r.insert_length]
        text.insert(r.where, stored)
        s.redo_char_point += r.insert_length

    state.cursor = r.where + r.insert_length
    s.undo_point += 1
    s.redo_point += 1


def make_undo_insert(state: TextEditState, where: int, length: int) -> None:
    """Record that ``length`` characters were inserted at ``where``."""
    state.undo_state.create_undo(where, 0, length)


def make_undo_delete(text: EditableText, state: TextEditState, where: int, length: int) -> None:
    """Record, before it happens, the deletion of ``length`` characters at ``where``."""
    offset = state.undo_state.create_undo(where, length, 0)
    if offset is not None:
        for i in range(length):
            state.undo_state.chars[offset + i] = text.char_at(where + i)


def make_undo_replace(
    text: EditableText,
    state: TextEditState,
    where: int,
    old_length: int,
    new_length: int,
) -> None:
    """Record, before it happens, replacing ``old_length`` characters by ``new_length``."""
    offset = state.undo_state.create_undo(where, old_length, new_length)
    if offset is not None:
        for i in range(old_length):
            state.undo_state.chars[offset + i] = text.char_at(where + i)


def initialize_state(state: TextEditState, single_line: bool) -> None:
    """Reset ``state`` to an empty history with the cursor at the start."""
    state.undo_state.reset()
    state.select_start = 0
    state.select_end = 0
    state.cursor = 0
    state.has_preferred_x = False
    state.preferred_x = 0.0
    state.cursor_at_end_of_line = False
    state.initialized = True
    state.single_line = bool(single_line)
    state.insert_mode = False
    state.row_count_per_page = 0