"""
Substitution engine.

Applies an ordered pipeline of regular-expression stages to a text buffer.
The output of each enabled stage is the input of the next one.
"""

import logging
from typing import Any, List, Mapping, Optional, Tuple

from regex_replace.exceptions import StageConfigError
from regex_replace.stages.resolver import resolve_stage
from regex_replace.stages.types import Adapter, Literal, Stage


logger = logging.getLogger(__name__)


class SubstitutionEngine:
    """
    Turns a pipeline configuration into a text transformation.

    The configuration is either a single stage mapping
    (``regex``, ``flags``, ``value``, ``enable``) or ``{'stages': [...]}``.
    The engine holds no state between calls.
    """

    def normalize(self, config: Mapping[str, Any]) -> List[Tuple[Optional[int], Mapping[str, Any]]]:
        """
        Select the stage option mappings that should run, in order.

        A single-stage config runs unless 'enable' is given and falsy.
        Inside 'stages', a stage runs only when its 'enable' is truthy.

        Returns:
            (stage_index, options) pairs; stage_index is None for a single stage

        Raises:
            StageConfigError: If config or a stage is not a mapping
        """
        if not isinstance(config, Mapping):
            raise StageConfigError(f"options must be a mapping, got {type(config).__name__}")

        stages = config.get('stages')
        if not isinstance(stages, (list, tuple)):
            if not config.get('enable', True):
                logger.debug("Skipping disabled stage")
                return []
            return [(None, config)]

        selected = []
        for i, stage in enumerate(stages):
            if not isinstance(stage, Mapping):
                raise StageConfigError(f"stage must be a mapping, got {type(stage).__name__}", i)
            if not stage.get('enable'):
                logger.debug(f"Skipping disabled stage {i}")
                continue
            selected.append((i, stage))
        return selected

    def resolve(self, config: Mapping[str, Any]) -> List[Stage]:
        """
        Resolve every enabled stage before any substitution runs.

        Raises:
            StageConfigError: On the first malformed stage
        """
        return [resolve_stage(options, index) for index, options in self.normalize(config)]

    def apply(self, buffer: str, config: Mapping[str, Any]) -> str:
        """
        Apply the pipeline to a buffer.

        Args:
            buffer: Text to transform
            config: Pipeline configuration

        Returns:
            Transformed text

        Raises:
            StageConfigError: If the configuration is malformed; no partial
                result is returned
        """
        return self.run(buffer, self.resolve(config))

    def run(self, buffer: str, stages: List[Stage]) -> str:
        """Run already-resolved stages in order, each on the previous output."""
        for stage in stages:
            buffer = self.apply_stage(buffer, stage)
        return buffer

    def apply_stage(self, buffer: str, stage: Stage) -> str:
        """Replace every match of one resolved stage, left to right."""
        matcher = stage.pattern.compile()

        if isinstance(stage.value, Adapter):
            result, count = matcher.subn(stage.value, buffer)
        elif isinstance(stage.value, Literal):
            result, count = matcher.subn(stage.value.template, buffer)
        else:
            raise TypeError(f"Unknown replacement variant: {type(stage.value).__name__}")

        label = "stage" if stage.index is None else f"stage {stage.index}"
        logger.debug(f"Applied {label} /{matcher.pattern}/: {count} replacement(s)")
        return result


def apply(buffer: str, config: Mapping[str, Any]) -> str:
    """Apply a pipeline configuration to a buffer and return the result."""
    return SubstitutionEngine().apply(buffer, config)
