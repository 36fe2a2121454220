import pytest

from scopview.textedit_keys import Key, key
from scopview.textedit_state import EditableText, TextEditState, initialize_state


def make(content: str, cursor: int = 0, single_line: bool = False):
    text = EditableText(content)
    state = TextEditState()
    initialize_state(state, single_line)
    state.cursor = cursor
    return text, state


def test_typing_then_undo_and_redo_round_trip():
    typed = "abc"
    text, state = make("")
    for char in typed:
        key(text, state, char)
    assert str(text) == typed
    assert state.cursor == len(typed)
    for _ in typed:
        key(text, state, Key.UNDO)
    assert str(text) == ""
    for _ in typed:
        key(text, state, Key.REDO)
    assert str(text) == typed


def test_code_point_is_typed():
    text, state = make("")
    key(text, state, ord("x"))
    assert str(text) == "x"
    assert state.cursor == 1


def test_unknown_key_code_is_ignored():
    sample = "hello"
    text, state = make(sample, 2)
    key(text, state, Key.SHIFT)
    key(text, state, Key.UNDO | Key.SHIFT)
    assert str(text) == sample
    assert state.cursor == 2


def test_left_and_right_move_and_clamp():
    sample = "hello"
    text, state = make(sample, len(sample))
    key(text, state, Key.LEFT)
    assert state.cursor == len(sample) - 1
    key(text, state, Key.RIGHT)
    key(text, state, Key.RIGHT)
    assert state.cursor == len(sample)


def test_left_at_start_stays():
    text, state = make("abc", 0)
    key(text, state, Key.LEFT)
    assert state.cursor == 0


def test_shift_left_selects_and_backspace_deletes_selection():
    sample = "hello world"
    text, state = make(sample, len(sample))
    key(text, state, Key.LEFT | Key.SHIFT)
    key(text, state, Key.LEFT | Key.SHIFT)
    assert state.select_start == len(sample)
    assert state.select_end == len(sample) - 2
    key(text, state, Key.BACKSPACE)
    assert str(text) == sample[:-2]
    assert state.cursor == len(sample) - 2
    key(text, state, Key.UNDO)
    assert str(text) == sample


def test_shift_right_selection_is_clamped():
    sample = "ab"
    text, state = make(sample, 1)
    key(text, state, Key.RIGHT | Key.SHIFT)
    key(text, state, Key.RIGHT | Key.SHIFT)
    assert state.select_start == 1
    assert state.select_end == len(sample)
    assert state.cursor == len(sample)


def test_delete_removes_character_under_cursor():
    sample = "hello"
    text, state = make(sample, 0)
    key(text, state, Key.DELETE)
    assert str(text) == sample[1:]
    key(text, state, Key.UNDO)
    assert str(text) == sample


def test_backspace_at_start_does_nothing():
    sample = "hello"
    text, state = make(sample, 0)
    key(text, state, Key.BACKSPACE)
    assert str(text) == sample
    assert state.cursor == 0


def test_text_start_and_end():
    sample = "one\ntwo"
    text, state = make(sample, 2)
    key(text, state, Key.TEXTEND)
    assert state.cursor == len(sample)
    key(text, state, Key.TEXTSTART)
    assert state.cursor == 0


def test_shift_text_end_selects_all_and_typing_replaces():
    sample = "one\ntwo"
    text, state = make(sample, 0)
    key(text, state, Key.TEXTEND | Key.SHIFT)
    assert (state.select_start, state.select_end) == (0, len(sample))
    key(text, state, "z")
    assert str(text) == "z"


def test_line_start_and_line_end():
    sample = "hello world\nsecond line"
    second = sample.index("\n") + 1
    text, state = make(sample, second + 3)
    key(text, state, Key.LINESTART)
    assert state.cursor == second
    key(text, state, Key.LINEEND)
    assert state.cursor == len(sample)
    state.cursor = 2
    key(text, state, Key.LINEEND)
    assert state.cursor == sample.index("\n")


def test_shift_line_start_selects_to_line_start():
    sample = "first\nsecond"
    second = sample.index("\n") + 1
    text, state = make(sample, len(sample))
    key(text, state, Key.LINESTART | Key.SHIFT)
    assert state.select_start == len(sample)
    assert state.select_end == second
    assert state.cursor == second


def test_single_line_line_start_goes_to_zero():
    sample = "abc def"
    text, state = make(sample, 5, single_line=True)
    key(text, state, Key.LINESTART)
    assert state.cursor == 0
    key(text, state, Key.LINEEND)
    assert state.cursor == len(sample)


def test_down_and_up_keep_preferred_column():
    sample = "abcdef\nab\nabcdef"
    second = sample.index("\n") + 1
    third = sample.index("\n", second) + 1
    text, state = make(sample, 5)
    key(text, state, Key.DOWN)
    assert state.cursor == third - 1
    key(text, state, Key.DOWN)
    assert state.cursor == third + 5
    key(text, state, Key.UP)
    assert state.cursor == third - 1
    key(text, state, Key.UP)
    assert state.cursor == 5


def test_down_on_last_line_does_not_move():
    sample = "abc\ndef"
    text, state = make(sample, len(sample) - 1)
    key(text, state, Key.DOWN)
    assert state.cursor == len(sample) - 1


def test_up_on_first_line_does_not_move():
    text, state = make("abc\ndef", 2)
    key(text, state, Key.UP)
    assert state.cursor == 2


def test_page_down_moves_several_rows():
    sample = "a\nb\nc\nd"
    text, state = make(sample, 0)
    state.row_count_per_page = 2
    key(text, state, Key.PGDOWN)
    assert state.cursor == sample.index("c")
    key(text, state, Key.PGUP)
    assert state.cursor == 0


def test_single_line_down_behaves_like_right():
    text, state = make("abc", 1, single_line=True)
    key(text, state, Key.DOWN)
    assert state.cursor == 2
    key(text, state, Key.UP)
    assert state.cursor == 1


def test_shift_down_extends_selection():
    sample = "abc\ndef"
    text, state = make(sample, 1)
    key(text, state, Key.DOWN | Key.SHIFT)
    assert state.select_start == 1
    assert state.select_end == sample.index("\n") + 2
    assert state.cursor == state.select_end


def test_word_right_and_left():
    sample = "hello world"
    text, state = make(sample, 0)
    key(text, state, Key.WORDRIGHT)
    assert state.cursor == sample.index("w")
    key(text, state, Key.WORDRIGHT)
    assert state.cursor == len(sample)
    key(text, state, Key.WORDLEFT)
    assert state.cursor == sample.index("w")
    key(text, state, Key.WORDLEFT)
    assert state.cursor == 0


def test_shift_word_right_selects_word():
    sample = "hello world"
    text, state = make(sample, 0)
    key(text, state, Key.WORDRIGHT | Key.SHIFT)
    assert (state.select_start, state.select_end) == (0, sample.index("w"))


def test_insert_mode_overwrites_and_undo_restores():
    sample = "abc"
    text, state = make(sample, 0)
    key(text, state, Key.INSERT)
    assert state.insert_mode is True
    key(text, state, "x")
    assert str(text) == "x" + sample[1:]
    key(text, state, Key.UNDO)
    assert str(text) == sample
    key(text, state, Key.INSERT)
    assert state.insert_mode is False


def test_newline_is_not_typed_in_single_line_mode():
    sample = "abc"
    text, state = make(sample, 1, single_line=True)
    key(text, state, "\n")
    assert str(text) == sample


@pytest.mark.parametrize("code", [Key.LEFT, Key.RIGHT, Key.TEXTEND, Key.LINEEND])
def test_motion_keys_never_change_text(code):
    sample = "one two\nthree"
    text, state = make(sample, 4)
    key(text, state, code)
    key(text, state, code | Key.SHIFT)
    assert str(text) == sample
    assert 0 <= state.cursor <= len(sample)