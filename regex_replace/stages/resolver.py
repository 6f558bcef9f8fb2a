"""
Resolution of raw stage options into typed stage variants.

Implements pattern resolution, flag parsing and value resolution. Errors are
raised as StageConfigError subclasses carrying the stage position.
"""

import logging
import re
from typing import Any, Mapping, Optional

from regex_replace.exceptions import (
    InvalidFlags,
    InvalidPattern,
    InvalidPatternType,
    InvalidValueType,
)
from .types import (
    Adapter,
    CompiledPattern,
    Literal,
    PatternSource,
    PatternSpec,
    Stage,
    ValueSpec,
)


logger = logging.getLogger(__name__)


# 'g' and 'u' are accepted for familiarity: substitution is always global
# and str patterns are always Unicode.
FLAG_MAP = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'a': re.ASCII,
    'u': 0,
    'g': 0,
}


def parse_flags(flags: Any, stage_index: Optional[int] = None) -> int:
    """
    Convert a flag string such as 'im' into ``re`` flags.

    Raises:
        InvalidFlags: If flags is not a string or has an unknown character
    """
    if not isinstance(flags, str):
        raise InvalidFlags(
            f'option "flags" must be a string, got {type(flags).__name__}',
            stage_index
        )

    result = 0
    for char in flags:
        if char not in FLAG_MAP:
            raise InvalidFlags(
                f"option \"flags\" has unknown flag '{char}'; "
                f"supported: {''.join(sorted(FLAG_MAP))}",
                stage_index
            )
        result |= FLAG_MAP[char]
    return result


def resolve_pattern(regex: Any, flags: Optional[str] = None,
                    stage_index: Optional[int] = None) -> PatternSpec:
    """
    Resolve the 'regex' option into a pattern variant.

    Args:
        regex: Pattern source string or compiled pattern
        flags: Flag string, applied only when recompiling a compiled pattern
        stage_index: Stage position for error messages

    Returns:
        PatternSource or CompiledPattern

    Raises:
        InvalidPatternType: If regex is neither a string nor a compiled str pattern
        InvalidPattern: If the pattern fails to compile
        InvalidFlags: If flags are malformed
    """
    if isinstance(regex, str):
        if flags is not None:
            logger.debug(f"Ignoring flags '{flags}' for pattern source {regex!r}")
        try:
            re.compile(regex)
        except re.error as e:
            raise InvalidPattern(f'option "regex" failed to compile: {e}', stage_index) from e
        return PatternSource(regex)

    if isinstance(regex, re.Pattern) and isinstance(regex.pattern, str):
        if flags is None:
            return CompiledPattern(regex)
        try:
            return CompiledPattern(re.compile(regex.pattern, parse_flags(flags, stage_index)))
        except re.error as e:
            raise InvalidPattern(f'option "regex" failed to recompile: {e}', stage_index) from e

    raise InvalidPatternType(
        'option "regex" must be a string or a compiled pattern', stage_index
    )


def resolve_value(value: Any, stage_index: Optional[int] = None) -> ValueSpec:
    """
    Resolve the 'value' option into a replacement variant.

    Callables are wrapped into an Adapter; strings become Literal templates.

    Raises:
        InvalidValueType: If value is neither a string nor a callable
    """
    if callable(value):
        return Adapter(value)
    if isinstance(value, str):
        return Literal(value)
    raise InvalidValueType('option "value" must be a string or a function', stage_index)


def check_template(matcher: "re.Pattern[str]", template: str,
                   stage_index: Optional[int] = None) -> None:
    """
    Parse a replacement template against its pattern without matching anything.

    ``re`` parses the template before scanning, so substituting into an
    empty string reports bad escapes and unknown group references. Unknown
    group names surface as IndexError rather than re.error.

    Raises:
        InvalidValueType: If the template is not valid for the pattern
    """
    try:
        matcher.sub(template, '')
    except (re.error, IndexError) as e:
        raise InvalidValueType(
            f'option "value" is not a valid replacement template: {e}', stage_index
        ) from e


def resolve_stage(options: Mapping[str, Any], stage_index: Optional[int] = None) -> Stage:
    """Resolve one stage's options, pattern first then value."""
    pattern = resolve_pattern(options.get('regex'), options.get('flags'), stage_index)
    value = resolve_value(options.get('value'), stage_index)
    if isinstance(value, Literal):
        check_template(pattern.compile(), value.template, stage_index)
    return Stage(pattern=pattern, value=value, index=stage_index)
