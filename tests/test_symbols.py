# tests/test_symbols.py
from markov_chatter.core.symbols import END, NULL, START, is_char, make_token, symbol_sequence


def test_symbol_sequence_wraps_text():
    assert list(symbol_sequence("ab")) == [START, "a", "b", END]
    assert list(symbol_sequence("")) == [START, END]


def test_make_token_pads_on_the_left():
    assert make_token([START], 3) == (NULL, NULL, START)
    assert make_token([], 2) == (NULL, NULL)


def test_make_token_keeps_last_n():
    assert make_token([START, "a", "b", "c"], 3) == ("a", "b", "c")
    assert make_token([START, "a", "b", "c"], 1) == ("c",)


def test_tokens_compare_by_every_position():
    a = make_token([START, "x"], 3)
    b = make_token([START, "x"], 3)
    c = make_token(["x"], 3)
    assert a == b and hash(a) == hash(b)
    # same trailing symbol, different padding
    assert a != c
    assert len({a, b, c}) == 2


def test_only_characters_are_chars():
    assert is_char("a")
    assert is_char(" ")
    assert not any(is_char(s) for s in (START, END, NULL))
