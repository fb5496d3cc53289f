import pytest

from stxkit import strings
from stxkit.strings import CStringView, String


def test_default_string_is_empty():
    s = String()
    assert s.size == 0
    assert len(s) == 0
    assert s.is_empty()
    assert s == ""


def test_static_and_made_strings_compare_with_text():
    a = strings.make_static("hello")
    b = strings.make("waddup")
    assert a == "hello"
    assert b == "waddup"
    assert a != "hell"


def test_join_variadic():
    assert strings.join(" ", "Hello,", "Beautiful", "World!") == "Hello, Beautiful World!"
    assert strings.join("???", "Hello,", "World!") == "Hello,???World!"


def test_join_empty_pieces():
    assert strings.join("???", "", "", "") == strings.make_static("??????")
    assert strings.join("", "", "", "") == strings.make_static("")


def test_upper_and_lower():
    assert strings.upper("Hello, World!") == "HELLO, WORLD!"
    assert strings.lower("hello, world!") == "hello, world!"
    assert strings.lower("MiXeD 123") == "mixed 123"


def test_upper_leaves_non_ascii_unchanged():
    assert strings.upper("straße é") == "STRAßE é"


def test_join_all_with_mixed_items():
    views = [String("Hello,"), strings.make_static("Beautiful"), strings.make_static("World!")]
    assert strings.join_all(" ", views) == "Hello, Beautiful World!"


def test_join_all_empty_sequence():
    assert strings.join_all(", ", []) == ""


def test_copy_equals_original():
    a = strings.make_static("hello")
    c = a.copy()
    assert c == a
    assert c is not a


def test_string_prefix_and_suffix():
    s = String("hello world")
    assert s.starts_with("hello")
    assert s.starts_with("h")
    assert s.starts_with(String("hell"))
    assert not s.starts_with("world")
    assert not s.starts_with("hello world!!")
    assert s.ends_with("world")
    assert s.ends_with("d")
    assert not s.ends_with("x")


def test_empty_string_prefix_checks():
    s = String()
    assert not s.starts_with("a")
    assert not s.ends_with("a")
    assert s.starts_with("")


def test_string_at_and_index():
    s = String("abc")
    assert s.at(0) == "a"
    assert s.at(2) == "c"
    assert s.at(3) is None
    assert s.at(-1) is None
    assert s[1] == "b"
    with pytest.raises(IndexError):
        s[3]


def test_string_view_round_trip():
    s = String("payload")
    v = s.view()
    assert v == "payload"
    assert v == s
    assert list(v) == list("payload")


def test_cstring_view_basics():
    v = CStringView("hello")
    assert v.size == 5
    assert not v.is_empty()
    assert v == "hello"
    assert v.starts_with("he")
    assert v.ends_with("lo")
    assert v.ends_with("o")
    assert v.at(4) == "o"
    assert v.at(5) is None


def test_cstring_view_with_size():
    v = CStringView("hello", 3)
    assert v == "hel"
    assert v.size == 3
    assert v.ends_with("l")


def test_cstring_view_size_too_large():
    with pytest.raises(ValueError):
        CStringView("hi", 5)


def test_default_cstring_view_is_empty():
    v = CStringView()
    assert v.is_empty()
    assert v == ""


def test_equal_strings_hash_equally():
    assert hash(String("x")) == hash(strings.make("x"))
    assert {String("x"), strings.make_static("x")} == {String("x")}