import pytest

from minish.splitting import split_keep_separator, split_out_quotes, strip_quotes


def test_strip_empty_single_quotes():
    assert strip_quotes("''") == ""


def test_strip_quoted_space_prefix():
    assert strip_quotes("' 'abc") == " "


def test_strip_double_quotes():
    assert strip_quotes('"hello"') == "hello"


def test_strip_keeps_other_quote_inside():
    assert strip_quotes("'a\"b'") == 'a"b'
    assert strip_quotes("\"it's\"") == "it's"


def test_strip_unclosed_quote():
    assert strip_quotes("'abc") == "abc"


@pytest.mark.parametrize("text", ["", "plain", "a b c", "$HOME/x"])
def test_strip_without_quotes_is_identity(text):
    assert strip_quotes(text) == text


def test_split_out_quotes_joined_quote():
    line = '"e então" naquele dia"o jorge aconteceu"'
    assert split_out_quotes(line, " ") == ["e então", "naquele", "diao jorge aconteceu"]


def test_split_out_quotes_separate_quote():
    line = '"e entao" naquele dia "o jorge aconteceu"'
    assert split_out_quotes(line, " ") == ["e entao", "naquele", "dia", "o jorge aconteceu"]


@pytest.mark.parametrize("text", ["a b c", "  lead and trail  ", "one", "x   y"])
def test_split_out_quotes_matches_plain_split(text):
    assert split_out_quotes(text, " ") == text.split()


def test_split_out_quotes_other_separator():
    assert split_out_quotes("a:'b:c':d", ":") == ["a", "b:c", "d"]


def test_split_out_quotes_quoted_space():
    assert split_out_quotes("' ' x", " ") == [" ", "x"]


@pytest.mark.parametrize("text", ["", "    "])
def test_split_out_quotes_nothing_to_split(text):
    assert split_out_quotes(text, " ") == []


def test_split_out_quotes_bad_separator():
    with pytest.raises(ValueError):
        split_out_quotes("a b", "ab")


def test_split_keep_separator_documented_example():
    text = "e___entao__naquele___dia__o_jorge__aconteceu"
    assert split_keep_separator(text, "___") == [
        "e", "___", "entao__naquele", "___", "dia__o_jorge__aconteceu",
    ]


@pytest.mark.parametrize("text", ["a|b", "a|b|c", "one|two|three|four"])
def test_split_keep_separator_rejoins(text):
    pieces = split_keep_separator(text, "|")
    assert "".join(pieces) == text
    assert pieces[1::2] == ["|"] * (len(pieces) // 2)


def test_split_keep_separator_leading_separator():
    assert split_keep_separator("___a", "___") == ["___", "a"]


def test_split_keep_separator_trailing_separator_dropped():
    assert split_keep_separator("a___", "___") == ["a"]


@pytest.mark.parametrize("text", ["word", "two words"])
def test_split_keep_separator_without_separator(text):
    assert split_keep_separator(text, "|") == [text]


def test_split_keep_separator_empty_text():
    assert split_keep_separator("", "|") == []


def test_split_keep_separator_empty_separator():
    with pytest.raises(ValueError):
        split_keep_separator("abc", "")