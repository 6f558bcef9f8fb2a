"""Tests for pattern, flag and value resolution."""

import re

import pytest

from regex_replace.exceptions import (
    InvalidFlags,
    InvalidPattern,
    InvalidPatternType,
    InvalidValueType,
)
from regex_replace.stages import (
    Adapter,
    CompiledPattern,
    Literal,
    PatternSource,
    check_template,
    parse_flags,
    resolve_pattern,
    resolve_stage,
    resolve_value,
)


class TestParseFlags:
    """Test flag string conversion."""

    def test_empty(self):
        assert parse_flags("") == 0

    def test_known_flags(self):
        assert parse_flags("ims") == re.IGNORECASE | re.MULTILINE | re.DOTALL
        assert parse_flags("x") == re.VERBOSE
        assert parse_flags("a") == re.ASCII

    def test_global_and_unicode_are_accepted(self):
        assert parse_flags("gu") == 0
        assert parse_flags("gi") == re.IGNORECASE

    def test_repeated_flag(self):
        assert parse_flags("ii") == re.IGNORECASE

    def test_unknown_flag(self):
        with pytest.raises(InvalidFlags) as exc_info:
            parse_flags("iy", stage_index=3)

        assert "'y'" in str(exc_info.value)
        assert exc_info.value.stage_index == 3

    def test_non_string_flags(self):
        with pytest.raises(InvalidFlags):
            parse_flags(1)


class TestResolvePattern:
    """Test resolution of the 'regex' option."""

    def test_string_is_pattern_source(self):
        assert resolve_pattern(r"\d+") == PatternSource(r"\d+")

    def test_string_ignores_flags(self):
        resolved = resolve_pattern("abc", "i")

        assert resolved == PatternSource("abc")
        assert not resolved.compile().flags & re.IGNORECASE

    def test_compiled_without_flags_is_reused(self):
        pattern = re.compile("abc", re.IGNORECASE)

        assert resolve_pattern(pattern).compile() is pattern

    def test_compiled_is_recompiled_with_flags(self):
        resolved = resolve_pattern(re.compile("abc"), "im")

        assert isinstance(resolved, CompiledPattern)
        assert resolved.pattern.pattern == "abc"
        assert resolved.pattern.flags & re.IGNORECASE
        assert resolved.pattern.flags & re.MULTILINE

    def test_given_flags_replace_existing_flags(self):
        resolved = resolve_pattern(re.compile("abc", re.IGNORECASE), "")

        assert not resolved.pattern.flags & re.IGNORECASE

    def test_compiled_with_bad_flags(self):
        with pytest.raises(InvalidFlags):
            resolve_pattern(re.compile("abc"), "q")

    @pytest.mark.parametrize("regex", [42, None, ["a"], b"abc", re.compile(b"abc")])
    def test_invalid_types(self, regex):
        with pytest.raises(InvalidPatternType):
            resolve_pattern(regex)

    def test_uncompilable_source(self):
        with pytest.raises(InvalidPattern) as exc_info:
            resolve_pattern("[a-")

        assert exc_info.value.option == "regex"


class TestResolveValue:
    """Test resolution of the 'value' option."""

    def test_string_is_literal(self):
        assert resolve_value(r"\1") == Literal(r"\1")

    def test_callable_is_adapter(self):
        resolved = resolve_value(str.upper)

        assert isinstance(resolved, Adapter)
        assert resolved.function is str.upper

    @pytest.mark.parametrize("value", [42, None, 1.5, {"a": 1}])
    def test_invalid_types(self, value):
        with pytest.raises(InvalidValueType):
            resolve_value(value)


class TestResolveStage:
    """Test whole-stage resolution."""

    def test_pattern_is_checked_before_value(self):
        with pytest.raises(InvalidPatternType):
            resolve_stage({"regex": 1, "value": 2})

    def test_resolved_stage(self):
        stage = resolve_stage({"regex": "a", "value": "b", "enable": True}, stage_index=2)

        assert stage.pattern == PatternSource("a")
        assert stage.value == Literal("b")
        assert stage.index == 2

    def test_template_checked_against_pattern(self):
        with pytest.raises(InvalidValueType) as exc_info:
            resolve_stage({"regex": "(a)", "value": r"\2"}, stage_index=4)

        assert exc_info.value.stage_index == 4

    def test_valid_template_resolves(self):
        stage = resolve_stage({"regex": "(?P<x>a)", "value": r"\1\g<x>"})

        assert stage.value == Literal(r"\1\g<x>")


class TestCheckTemplate:
    """Test template parsing against a compiled pattern."""

    def test_valid_templates(self):
        matcher = re.compile(r"(\d+)-(?P<tail>\d+)")

        check_template(matcher, "plain text")
        check_template(matcher, r"\2-\1 \g<tail> \n")

    @pytest.mark.parametrize("template", [r"\3", r"\g<missing>", r"\p", "\\"])
    def test_invalid_templates(self, template):
        with pytest.raises(InvalidValueType):
            check_template(re.compile(r"(\d+)-(\d+)"), template)
