import os
import re
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import vmre
from vmre import EngineConfig, MatchResult, NO_MATCH, Regexp
from vmre.errors import PatternSyntaxError, ThreadOverflowError

# Patterns whose loop bodies never match the empty string, so Python's
# backtracking `re` agrees with leftmost-first priority and can act as oracle.
ORACLE_PATTERNS = [
    "abc",
    "a|ab",
    "ab|a",
    "(a|b)*c",
    "a+b",
    "(ab)+",
    "a?b",
    "x(y|z)?w",
    "(a|b)+(c|d)",
    ".a.",
    "a.*b",
    "(a*)b",
    "((a|b)c)*d",
    "ba+",
    "a(bc|b)c?",
    "(ab|a)(bc|c)?",
]

SUBJECTS = [
    "",
    "a",
    "ab",
    "abc",
    "aabab",
    "xzw",
    "xw",
    "acbd",
    "bbbc",
    "zzab",
    "abcc",
    "baaab",
    "cacbcd",
]


def span(pattern, text, **config):
    return vmre.compile(pattern, EngineConfig(**config)).match(text).span


def test_leftmost_match_scanning():
    result = vmre.compile("a+").match("baaab")
    assert result == MatchResult(matched=True, start=1, end=4)
    assert result.span == (1, 4)
    assert result.length == 3


def test_no_match_reports_no_span():
    result = vmre.compile("ab").match("ac")
    assert result is NO_MATCH
    assert not result
    assert result.span == (-1, -1)
    assert result.length == 0


@pytest.mark.parametrize("text", ["", "a", "xyz", "hello world"])
def test_empty_pattern_matches_everything_at_zero(text):
    assert vmre.compile("").match(text).span == (0, 0)


@pytest.mark.parametrize(
    "pattern,text",
    [
        ("abc", "xxabcxx"),
        ("abc", "abab"),
        ("hello", "say hello"),
        ("aab", "aaab"),
        ("a b", "a  a b"),
        ("xyz", ""),
    ],
)
def test_literal_patterns_find_substrings(pattern, text):
    index = text.find(pattern)
    result = vmre.compile(pattern).match(text)
    if index == -1:
        assert not result
    else:
        assert result.span == (index, index + len(pattern))


def test_union_prefers_first_operand():
    assert vmre.compile("a|ab").match("ab").span == (0, 1)
    assert vmre.compile("ab|a").match("ab").span == (0, 2)
    # Both alternatives accept, regardless of order.
    assert vmre.compile("x|y").is_match("y")
    assert vmre.compile("y|x").is_match("y")


def test_star_matches_zero_or_more():
    regexp = vmre.compile("ba*c")
    assert regexp.match("bc").span == (0, 2)
    assert regexp.match("bac").span == (0, 3)
    assert regexp.match("baaac").span == (0, 5)


def test_plus_requires_at_least_one():
    regexp = vmre.compile("ba+c")
    assert not regexp.match("bc")
    assert regexp.match("bac").span == (0, 3)
    assert regexp.match("baaac").span == (0, 5)


def test_question_matches_zero_or_one():
    regexp = vmre.compile("ba?c")
    assert regexp.match("bc").span == (0, 2)
    assert regexp.match("bac").span == (0, 3)
    assert not regexp.match("baac")


def test_match_from_start_offset():
    regexp = vmre.compile("a")
    assert regexp.match("aba", 1).span == (2, 3)
    assert not regexp.match("aba", 3)


def test_match_rejects_negative_start():
    regexp = vmre.compile("b?")
    with pytest.raises(ValueError):
        regexp.match("bb", -1)
    assert regexp.match("bb", 0).span == (0, 1)


def test_anchored_queries():
    regexp = vmre.compile("ab")
    assert regexp.match_at("xab", 1)
    assert not regexp.match_at("xab", 0)
    assert regexp.end_at("xab", 1) == 3
    assert regexp.end_at("xab", 0) == -1


@pytest.mark.parametrize("pattern", ORACLE_PATTERNS)
@pytest.mark.parametrize("text", SUBJECTS)
def test_agrees_with_python_re(pattern, text):
    expected = re.search(pattern, text)
    result = vmre.compile(pattern).match(text)
    if expected is None:
        assert not result
    else:
        assert result.span == expected.span()


@pytest.mark.parametrize("pattern", ORACLE_PATTERNS + ["()*", "(a|)+b", "(a*)*", "a*|b"])
@pytest.mark.parametrize("text", SUBJECTS)
def test_optimization_preserves_results(pattern, text):
    assert span(pattern, text, optimize=False) == span(pattern, text)


def test_syntax_error_produces_no_regexp():
    with pytest.raises(PatternSyntaxError):
        vmre.compile("a(b")


def test_deeply_nested_optional_groups_complete():
    pattern = "a"
    for _ in range(30):
        pattern = f"({pattern})?"
    regexp = vmre.compile(pattern)
    assert regexp.match("a" * 200).span == (0, 1)
    assert regexp.match("b" * 200).span == (0, 0)


def test_nested_stars_complete_or_overflow():
    pattern = "a"
    for _ in range(10):
        pattern = f"({pattern})*"
    regexp = vmre.compile(pattern + "b")
    text = "a" * 100 + "b"
    try:
        result = regexp.match(text)
    except ThreadOverflowError:
        return
    assert result.span == (0, 101)


def test_overflow_leaves_regexp_reusable():
    regexp = vmre.compile("a*", EngineConfig(max_threads=5))
    with pytest.raises(ThreadOverflowError):
        regexp.match("a" * 100)
    assert regexp.match("aa").span == (0, 2)


def test_config_validation():
    with pytest.raises(ValueError):
        EngineConfig(max_threads=0)
    with pytest.raises(ValueError):
        EngineConfig(sentinel="")
    with pytest.raises(ValueError):
        EngineConfig(sentinel="ab")


def test_regexp_exposes_pipeline_artifacts():
    regexp = Regexp("a|b")
    assert regexp.pattern == "a|b"
    assert regexp.config == EngineConfig()
    assert len(regexp.program) == 5
    assert regexp.dump().splitlines()[-1] == "04: MATCH"
    assert repr(regexp) == "Regexp('a|b')"
