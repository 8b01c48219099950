"""Tests for the ?/* matcher behind ${var/pat} and ${var#pat}."""

import pytest
from just_expand.interpreter.pattern import (
    Pattern,
    compile_pattern,
    remove_prefix,
    remove_suffix,
    replace_all,
    replace_first,
    replace_prefix,
    replace_suffix,
)


class TestCompile:
    def test_tokens(self):
        assert compile_pattern("a?*") == [("literal", "a"), ("any", ""), ("star", "")]

    def test_adjacent_stars_collapse(self):
        assert compile_pattern("**x") == [("star", ""), ("literal", "x")]

    def test_escapes(self):
        assert compile_pattern("\\*\\?") == [("literal", "*"), ("literal", "?")]

    def test_trailing_backslash_is_literal(self):
        assert compile_pattern("a\\") == [("literal", "a"), ("literal", "\\")]

    def test_bracket_is_literal(self):
        assert compile_pattern("[a]") == [("literal", "["), ("literal", "a"), ("literal", "]")]


class TestMatching:
    @pytest.mark.parametrize(
        "pattern,text,expected",
        [
            ("abc", "abc", True),
            ("a?c", "abc", True),
            ("a*", "a", True),
            ("*", "", True),
            ("?", "", False),
            ("a*c", "abbbc", True),
            ("a*c", "abbbd", False),
            ("*.*", "a.b.c", True),
            ("\\*", "*", True),
            ("\\*", "x", False),
        ],
    )
    def test_fullmatch(self, pattern, text, expected):
        assert Pattern(pattern).fullmatch(text) is expected

    def test_match_ends_in_order(self):
        assert list(Pattern("a*").match_ends("aaa", 0)) == [1, 2, 3]

    def test_longest_and_shortest(self):
        pattern = Pattern("b*")
        assert pattern.match_shortest("abcb", 1) == 2
        assert pattern.match_longest("abcb", 1) == 4
        assert pattern.match_longest("abcb", 0) == -1

    def test_search_is_leftmost_longest(self):
        assert Pattern("b*c").search("abcbc") == (1, 5)
        assert Pattern("z").search("abc") is None

    def test_repr(self):
        assert repr(Pattern("a*")) == "Pattern('a*')"


class TestReplace:
    @pytest.mark.parametrize(
        "func,value,pattern,replacement,expected",
        [
            (replace_first, "abcd", "b?", "BC", "aBCd"),
            (replace_first, "abcd", "?", "X", "Xbcd"),
            (replace_first, "abcd", "zz", "X", "abcd"),
            (replace_first, "", "a", "X", ""),
            (replace_first, "abcd", "", "X", "abcd"),
            (replace_all, "abcd", "?", "X", "XXXX"),
            (replace_all, "aaaa", "aa", "b", "bb"),
            (replace_all, "a.b.c", ".", "", "abc"),
            (replace_all, "abc", "*", "X", "X"),
            (replace_prefix, "abab", "ab", "X", "Xab"),
            (replace_prefix, "abab", "b", "X", "abab"),
            (replace_prefix, "abab", "a*", "X", "X"),
            (replace_prefix, "abc", "", "X", "Xabc"),
            (replace_prefix, "", "", "X", "X"),
            (replace_suffix, "abab", "ab", "X", "abX"),
            (replace_suffix, "abab", "*b", "X", "X"),
            (replace_suffix, "abab", "a", "X", "abab"),
            (replace_suffix, "abc", "", "X", "abcX"),
            (replace_suffix, "", "", "X", "X"),
        ],
    )
    def test_replace(self, func, value, pattern, replacement, expected):
        assert func(value, pattern, replacement) == expected


class TestRemove:
    @pytest.mark.parametrize(
        "func,value,pattern,greedy,expected",
        [
            (remove_prefix, "/usr/local/bin", "*/", False, "usr/local/bin"),
            (remove_prefix, "/usr/local/bin", "*/", True, "bin"),
            (remove_prefix, "abc", "x", True, "abc"),
            (remove_prefix, "abc", "*", False, "abc"),
            (remove_prefix, "abc", "*", True, ""),
            (remove_suffix, "a.tar.gz", ".*", False, "a.tar"),
            (remove_suffix, "a.tar.gz", ".*", True, "a"),
            (remove_suffix, "abc", "*", False, "abc"),
            (remove_suffix, "abc", "*", True, ""),
            (remove_suffix, "", "*", True, ""),
        ],
    )
    def test_remove(self, func, value, pattern, greedy, expected):
        assert func(value, pattern, greedy) == expected
