# tests/test_expander.py
"""Tests for grouped pattern expansion and exclusion handling."""

import pytest

from fpr.core.patterns import ExpansionPair, expand_group_pattern, expand_pairs, looks_like_glob
from fpr.exceptions import PatternError, UnmatchedParenthesisError


class TestBasicExpansion:
    """Literal text around groups is applied to every alternative."""

    def test_prefix_and_suffix_wrap_each_alternative(self):
        assert expand_group_pattern("a(b,c)d") == ["abd", "acd"]

    def test_directory_prefix(self):
        assert expand_group_pattern("src/(foo.txt, bar.txt)") == ["src/foo.txt", "src/bar.txt"]

    def test_nested_directory_group(self):
        assert expand_group_pattern("util/(fs, time)") == ["util/fs", "util/time"]

    def test_nested_groups_flatten_in_order(self):
        assert expand_group_pattern("a(b,(c,d))") == ["ab", "ac", "ad"]

    def test_consecutive_groups_form_cartesian_product(self):
        assert expand_group_pattern("(a,b)(1,2)") == ["a1", "a2", "b1", "b2"]

    def test_pattern_without_groups_is_returned_unchanged(self):
        assert expand_group_pattern("plain/path.txt") == ["plain/path.txt"]

    def test_empty_pattern(self):
        assert expand_group_pattern("") == [""]

    def test_whitespace_around_segments_is_ignored(self):
        assert expand_group_pattern("(a, b)") == expand_group_pattern("(a,b)") == ["a", "b"]
        assert expand_group_pattern("(  a  ,\tb )") == ["a", "b"]

    def test_whitespace_inside_segment_is_kept(self):
        assert expand_group_pattern("(my file.txt, b)") == ["my file.txt", "b"]

    def test_glob_characters_pass_through(self):
        assert expand_group_pattern("src/(*.py, docs/**/*.md)") == ["src/*.py", "src/docs/**/*.md"]

    def test_duplicates_are_kept(self):
        assert expand_group_pattern("(a,a)") == ["a", "a"]


class TestExclusions:
    """Segments marked with '-' or '^' remove strings from the result."""

    def test_dash_excludes_segment(self):
        assert expand_group_pattern("src/(keep.txt, -drop.txt)") == ["src/keep.txt"]

    def test_caret_excludes_segment(self):
        assert expand_group_pattern("src/(keep.txt, ^drop.txt)") == ["src/keep.txt"]

    def test_marker_checked_after_trimming(self):
        assert expand_group_pattern("( -a , b )") == ["b"]

    def test_exclusion_wins_over_inclusion_of_same_string(self):
        assert expand_group_pattern("(a, -a)") == []
        assert expand_group_pattern("(-a, a, b)") == ["b"]

    def test_exclusion_propagates_into_nested_group(self):
        assert expand_group_pattern("x/(a, b, -(a, c))") == ["x/b"]

    def test_exclusion_propagates_across_concatenation(self):
        assert expand_group_pattern("(-a, b)/(c, d)") == ["b/c", "b/d"]

    def test_exclusion_found_deeper_is_kept(self):
        assert expand_group_pattern("(a(1, -2))") == ["a1"]

    def test_excluded_empty_nested_group_contributes_nothing(self):
        assert expand_group_pattern("a(-(), b)") == ["ab"]

    def test_only_one_marker_is_stripped(self):
        assert expand_pairs("(--x)") == [ExpansionPair("-x", True)]

    def test_dash_outside_a_group_is_literal(self):
        assert expand_group_pattern("-a(b)") == ["-ab"]

    def test_dash_in_middle_of_segment_is_literal(self):
        assert expand_group_pattern("(my-file, b)") == ["my-file", "b"]

    def test_lone_marker_excludes_the_bare_prefix(self):
        assert expand_pairs("x(-)") == [ExpansionPair("x", True)]
        assert expand_group_pattern("x(-)") == []
        assert expand_group_pattern("(x, -)") == ["x"]

    def test_pairs_report_flags_before_filtering(self):
        assert expand_pairs("a(b,-c)") == [ExpansionPair("ab", False), ExpansionPair("ac", True)]


class TestPermissiveInput:
    """Odd-looking but balanced input is accepted."""

    def test_empty_group_yields_nothing(self):
        assert expand_group_pattern("a()") == []
        assert expand_group_pattern("a( , )b") == []

    def test_empty_segments_are_dropped(self):
        assert expand_group_pattern("(a,,b)") == ["a", "b"]
        assert expand_group_pattern("(a, ,b,)") == ["a", "b"]

    def test_stray_closing_paren_is_literal(self):
        assert expand_group_pattern("a)b") == ["a)b"]
        assert expand_group_pattern("a(b))c") == ["ab)c"]

    def test_comma_outside_group_is_literal(self):
        assert expand_group_pattern("a,b") == ["a,b"]


class TestUnmatchedParenthesis:
    def test_unclosed_group_raises(self):
        with pytest.raises(UnmatchedParenthesisError):
            expand_group_pattern("a(b,c")

    def test_error_is_a_pattern_error_with_position(self):
        with pytest.raises(PatternError) as exc_info:
            expand_group_pattern("x/(a, (b, c)")
        assert exc_info.value.position == 2
        assert exc_info.value.pattern == "x/(a, (b, c)"
        assert "Unmatched '('" in str(exc_info.value)

    def test_unclosed_group_after_complete_group(self):
        with pytest.raises(UnmatchedParenthesisError) as exc_info:
            expand_group_pattern("(a,b)/(c")
        assert exc_info.value.position == 6

    def test_lone_open_paren(self):
        with pytest.raises(UnmatchedParenthesisError):
            expand_group_pattern("(")


class TestResultInvariants:
    PATTERNS = [
        "src/(main.rs, lib.rs, util/(fs, time), -tests)",
        "(a, -a, b, ^(b, c), d(1, -2))",
        "(-x, y)/(x, -y, z)",
        "a(b,(c,-d))e",
    ]

    @pytest.mark.parametrize("pattern", PATTERNS)
    def test_no_result_is_in_exclude_set(self, pattern):
        excluded = {p.text for p in expand_pairs(pattern) if p.excluded}
        result = expand_group_pattern(pattern)
        assert not excluded.intersection(result)

    @pytest.mark.parametrize("pattern", PATTERNS)
    def test_filtering_is_idempotent(self, pattern):
        pairs = expand_pairs(pattern)
        excluded = {p.text for p in pairs if p.excluded}
        once = [p.text for p in pairs if not p.excluded and p.text not in excluded]
        twice = [t for t in once if t not in excluded]
        assert once == twice == expand_group_pattern(pattern)

    def test_readme_example(self):
        assert expand_group_pattern("src/(main.rs, lib.rs, util/(fs, time), -tests)") == [
            "src/main.rs", "src/lib.rs", "src/util/fs", "src/util/time",
        ]


class TestLooksLikeGlob:
    @pytest.mark.parametrize("value", ["*.py", "src/?.rs", "file[0-9].txt", "**/x"])
    def test_glob_characters(self, value):
        assert looks_like_glob(value)

    @pytest.mark.parametrize("value", ["src/main.rs", "", "dir/"])
    def test_plain_paths(self, value):
        assert not looks_like_glob(value)
