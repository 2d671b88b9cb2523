import pytest

from videopipe.textutil import (
    align_blank,
    alphabet_equal,
    begin_with,
    end_with,
    join_dims,
    pattern_match,
    replace_string,
    split_string,
    upbound,
)


def test_begin_and_end_with():
    assert begin_with("hello.png", "hello")
    assert not begin_with("he", "hello")
    assert end_with("hello.png", ".png")
    assert not end_with("g", ".png")
    assert begin_with("abc", "")


def test_split_string_drops_empty_pieces():
    assert split_string("a,,b,", ",") == ["a", "b"]
    assert split_string("", ",") == []
    assert split_string("abc", "") == ["abc"]
    assert split_string("abc", ";") == ["abc"]
    assert split_string("::", "::") == []


def test_split_multichar_separator():
    assert split_string("1<>2<>3", "<>") == ["1", "2", "3"]


def test_replace_all():
    result, count = replace_string("a.b.c", ".", "/")
    assert result == "a/b/c"
    assert count == 2


def test_replace_limited():
    result, count = replace_string("a.b.c", ".", "/", 1)
    assert result == "a/b.c"
    assert count == 1


def test_replace_zero_keeps_text():
    assert replace_string("a.b", ".", "/", 0) == ("a.b", 0)


def test_replace_longer_value_and_missing_token():
    result, count = replace_string("xx", "x", "yyy")
    assert result == "yyy" * 2
    assert count == 2
    assert replace_string("abc", "z", "q") == ("abc", 0)


def test_align_blank():
    assert align_blank("ab", 5) == "ab   "
    assert align_blank("ab", 4, "-") == "ab--"
    assert align_blank("abcdef", 3) == "abcdef"


def test_alphabet_equal():
    assert alphabet_equal("b", "B", True)
    assert not alphabet_equal("b", "B", False)
    assert alphabet_equal("x", "x", False)


@pytest.mark.parametrize(
    "text, matcher, expected",
    [
        ("abcdefg.pnga", "*.png", False),
        ("abcdefg.png", "*.png", True),
        ("abcdefg.png", "a?cdefg.png", True),
        ("photo.jpg", "*.png;*.jpg", True),
        ("photo.gif", "*.png;*.jpg", False),
        ("anything", "*", True),
        ("", "*", False),
        ("abc", "", False),
        ("abc", "abc", True),
        ("abcd", "abc", False),
    ],
)
def test_pattern_match(text, matcher, expected):
    assert pattern_match(text, matcher) is expected


def test_pattern_match_case():
    assert pattern_match("FILE.PNG", "*.png")
    assert not pattern_match("FILE.PNG", "*.png", False)


def test_upbound():
    for n in range(1, 200):
        value = upbound(n)
        assert value % 32 == 0
        assert n <= value < n + 32
    assert upbound(64) == 64
    assert upbound(10, 8) % 8 == 0


def test_join_dims():
    assert join_dims([1, 3, 640, 640]) == "1 x 3 x 640 x 640"
    assert join_dims([7]) == "7"
    assert join_dims([]) == ""