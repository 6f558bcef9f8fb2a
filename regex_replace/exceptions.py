"""Regex replace exceptions."""

from typing import List, Optional
from dataclasses import dataclass


NAME = "Regex Replace"


class StageConfigError(Exception):
    """Raised when a stage configuration cannot be resolved.

    Every subclass is fatal for the current invocation: the engine aborts
    before returning any text.
    """

    option = ""

    def __init__(self, detail: str, stage_index: Optional[int] = None):
        self.detail = detail
        self.stage_index = stage_index

        location = f" (stage {stage_index})" if stage_index is not None else ""
        super().__init__(f"{NAME}: {detail}{location}")


class InvalidPatternType(StageConfigError):
    """'regex' is neither a pattern source string nor a compiled pattern."""
    option = "regex"


class InvalidValueType(StageConfigError):
    """'value' is neither a template string nor a callable."""
    option = "value"


class InvalidFlags(StageConfigError):
    """'flags' is not a string or contains an unknown flag character."""
    option = "flags"


class InvalidPattern(StageConfigError):
    """A pattern source string failed to compile."""
    option = "regex"


@dataclass
class ValidationError:
    """Single validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class PipelineValidationError(Exception):
    """Raised when a pipeline configuration file fails validation.

    The loader collects every problem in the file before raising, so the
    CLI can report them all at once and map them to an exit code.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            if error.path:
                messages.append(f"Validation error at {error.path}: {error.message}")
            else:
                messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))
