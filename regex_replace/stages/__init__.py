"""
Stage types and resolution.
"""

from .types import (
    Adapter,
    CompiledPattern,
    Literal,
    MatchRecord,
    PatternSource,
    Stage,
)
from .resolver import check_template, parse_flags, resolve_pattern, resolve_stage, resolve_value

__all__ = [
    'Adapter',
    'CompiledPattern',
    'Literal',
    'MatchRecord',
    'PatternSource',
    'Stage',
    'check_template',
    'parse_flags',
    'resolve_pattern',
    'resolve_stage',
    'resolve_value',
]
