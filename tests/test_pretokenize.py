import pytest

from forgebpe.tokenizer.pretokenize import char_class, is_whitespace_segment, pretokenize


@pytest.mark.parametrize("text, expected", [
    ("", []),
    ("hi, you  2", ["hi", ",", " ", "you", "  ", "2"]),
    ("hi🙂", ["hi", "🙂"]),
    ("don't!!", ["don", "'", "t", "!!"]),
    ("a\n\tb", ["a", "\n\t", "b"]),
    ("foo_bar", ["foo", "_", "bar"]),
    ("abc123", ["abc123"]),
])
def test_pretokenize(text, expected):
    assert pretokenize(text) == expected


def test_segments_cover_input():
    text = "Hello, world!  It's 2024...\n"
    assert "".join(pretokenize(text)) == text


def test_char_class():
    assert char_class("é") == "word"
    assert char_class(" ") == "space"
    assert char_class("-") == "punct"
    assert is_whitespace_segment(" \t")
    assert not is_whitespace_segment("")
    assert not is_whitespace_segment("a ")
