"""Pipeline configuration loader and strict validation for YAML files."""

import importlib
import re
from pathlib import Path
from typing import Any, Dict, List
import yaml
from yaml.constructor import ConstructorError

from regex_replace.exceptions import (
    InvalidFlags,
    InvalidValueType,
    PipelineValidationError,
    ValidationError,
)
from regex_replace.stages.resolver import FLAG_MAP, check_template, parse_flags


class PipelineYamlLoader(yaml.SafeLoader):
    """Safe YAML loader that understands the !regex and !callable tags."""
    pass


def _construct_regex(loader: yaml.SafeLoader, node: yaml.Node) -> "re.Pattern[str]":
    """Build a compiled pattern from `!regex src` or `!regex {source: src, flags: im}`."""
    if isinstance(node, yaml.MappingNode):
        spec = loader.construct_mapping(node)
        source = spec.get('source')
        flags = spec.get('flags', '')
    else:
        source = loader.construct_scalar(node)
        flags = ''

    if not isinstance(source, str):
        raise ConstructorError(
            None, None, "!regex requires a string source", node.start_mark
        )
    try:
        return re.compile(source, parse_flags(flags))
    except (re.error, InvalidFlags) as e:
        raise ConstructorError(
            None, None, f"!regex {source!r} is invalid: {e}", node.start_mark
        )


def _construct_callable(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    """Import a replacement function from `!callable "package.module:function"`."""
    target = loader.construct_scalar(node)
    module_name, _, attribute = str(target).partition(':')
    if not module_name or not attribute:
        raise ConstructorError(
            None, None, f"!callable expects 'module:attribute', got {target!r}", node.start_mark
        )
    try:
        obj = importlib.import_module(module_name)
        for part in attribute.split('.'):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise ConstructorError(
            None, None, f"!callable {target!r} cannot be imported: {e}", node.start_mark
        )
    if not callable(obj):
        raise ConstructorError(
            None, None, f"!callable {target!r} is not callable", node.start_mark
        )
    return obj


PipelineYamlLoader.add_constructor('!regex', _construct_regex)
PipelineYamlLoader.add_constructor('!callable', _construct_callable)


class PipelineLoader:
    """Loads and validates pipeline configuration with strict field checks."""

    STAGE_FIELDS = {'regex', 'flags', 'value', 'enable'}

    def __init__(self):
        """Initialize loader with an empty error list."""
        self.errors: List[ValidationError] = []

    def load(self, config_path: Path) -> Dict[str, Any]:
        """Load and validate a pipeline YAML file."""
        self.errors = []
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.load(f, Loader=PipelineYamlLoader)
        except Exception as e:
            self._add_error(f"Failed to load pipeline config: {e}")
            self._raise_validation_errors()

        return self.validate(config)

    def validate(self, config: Any) -> Dict[str, Any]:
        """
        Validate an already-parsed pipeline configuration.

        Returns:
            The configuration, unchanged, ready for the engine

        Raises:
            PipelineValidationError: With every problem found
        """
        self.errors = []

        if config is None or not isinstance(config, dict):
            self._add_error("Pipeline config must be a YAML object/dictionary")
            self._raise_validation_errors()

        if 'stages' in config:
            mixed = sorted(k for k in config if k in self.STAGE_FIELDS)
            if mixed:
                self._add_error(f"'stages' cannot be combined with stage fields {mixed}")
            unknown = sorted(str(k) for k in config if k != 'stages' and k not in self.STAGE_FIELDS)
            for key in unknown:
                self._add_error(f"Unknown field '{key}'")
            self._validate_stages(config['stages'])
        else:
            self._validate_stage(config, path="", enable_required=False)

        if self.errors:
            self._raise_validation_errors()

        return config

    def _validate_stages(self, stages: Any):
        """Validate the 'stages' list."""
        if not isinstance(stages, list):
            self._add_error("'stages' must be a list")
            return
        if not stages:
            self._add_error("'stages' must not be empty")
            return

        for i, stage in enumerate(stages):
            path = f"stages[{i}]"
            if not isinstance(stage, dict):
                self._add_error("Stage must be a dictionary", path)
                continue
            self._validate_stage(stage, path, enable_required=True)

    def _validate_stage(self, stage: Dict[str, Any], path: str, enable_required: bool):
        """Validate one stage mapping."""
        for key in stage.keys():
            if key not in self.STAGE_FIELDS:
                self._add_error(f"Unknown field '{key}'", path)

        # Enable
        if 'enable' in stage:
            if not isinstance(stage['enable'], bool):
                self._add_error(f"'enable' must be a boolean, got {type(stage['enable']).__name__}", path)
        elif enable_required:
            self._add_error("Missing required 'enable' field", path)

        # Regex
        regex = stage.get('regex')
        matcher = None
        if 'regex' not in stage:
            self._add_error("Missing required 'regex' field", path)
        elif isinstance(regex, str):
            try:
                matcher = re.compile(regex)
            except re.error as e:
                self._add_error(f"'regex' failed to compile: {e}", path)
        elif isinstance(regex, re.Pattern) and isinstance(regex.pattern, str):
            matcher = regex
        else:
            self._add_error(
                f"'regex' must be a string or a !regex pattern, got {type(regex).__name__}", path
            )

        # Flags only apply when recompiling a compiled pattern
        if 'flags' in stage:
            self._validate_flags(stage['flags'], path)
            if isinstance(regex, str):
                self._add_error("'flags' requires a !regex pattern; string patterns ignore flags", path)

        # Value
        if 'value' not in stage:
            self._add_error("Missing required 'value' field", path)
        elif not isinstance(stage['value'], str) and not callable(stage['value']):
            self._add_error(
                f"'value' must be a string or a !callable function, got {type(stage['value']).__name__}",
                path
            )
        elif isinstance(stage['value'], str) and matcher is not None:
            try:
                check_template(matcher, stage['value'])
            except InvalidValueType as e:
                self._add_error(f"'value' is not a valid replacement template: {e.__cause__}", path)

    def _validate_flags(self, flags: Any, path: str):
        """Validate a flag string."""
        if not isinstance(flags, str):
            self._add_error(f"'flags' must be a string, got {type(flags).__name__}", path)
            return
        unknown = sorted(set(flags) - set(FLAG_MAP))
        if unknown:
            self._add_error(f"Unknown flags {unknown}. Supported: {''.join(sorted(FLAG_MAP))}", path)

    def _add_error(self, message: str, path: str = "", exit_code: int = 2):
        """Add validation error."""
        self.errors.append(ValidationError(message, path, exit_code))

    def _raise_validation_errors(self):
        """Raise PipelineValidationError with accumulated errors."""
        raise PipelineValidationError(self.errors)
