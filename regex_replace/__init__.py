"""Regex replace: ordered regular-expression substitution stages for text buffers."""

from .engine import SubstitutionEngine, apply
from .exceptions import (
    InvalidFlags,
    InvalidPattern,
    InvalidPatternType,
    InvalidValueType,
    PipelineValidationError,
    StageConfigError,
)
from .stages.types import MatchRecord

__version__ = "1.0.0"

__all__ = [
    'InvalidFlags',
    'InvalidPattern',
    'InvalidPatternType',
    'InvalidValueType',
    'MatchRecord',
    'PipelineValidationError',
    'StageConfigError',
    'SubstitutionEngine',
    'apply',
]
