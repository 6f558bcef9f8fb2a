"""Apply command implementation."""

import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, List

from regex_replace.engine import SubstitutionEngine
from regex_replace.exceptions import PipelineValidationError, StageConfigError
from regex_replace.loader import PipelineLoader


logger = logging.getLogger(__name__)


def configure_logging(args: Namespace) -> None:
    """Set the root log level from the command line switches."""
    level_name = 'WARNING' if args.log_level == 'warn' else args.log_level.upper()
    log_level = getattr(logging, level_name)
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def read_inputs(files: List[str], encoding: str) -> List[str]:
    """
    Read every input file, or stdin when no files are given.

    Stdin is decoded with the same encoding as files when it exposes a
    binary buffer.

    Raises:
        FileNotFoundError: If an input file is missing
        ValueError: If an input is not valid in the given encoding
    """
    if not files:
        stream = getattr(sys.stdin, 'buffer', None)
        if stream is None:
            return [sys.stdin.read()]
        try:
            return [stream.read().decode(encoding)]
        except UnicodeDecodeError as e:
            raise ValueError(f"stdin is not valid {encoding}: {e}") from e

    buffers = []
    for name in files:
        path = Path(name)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        try:
            buffers.append(path.read_text(encoding=encoding))
        except UnicodeDecodeError as e:
            raise ValueError(f"Input file {path} is not valid {encoding}: {e}") from e
    return buffers


def apply_pipeline(args: Namespace) -> int:
    """
    Load a pipeline config and apply it to each input.

    Exit codes: 0 on success, 1 for missing or undecodable inputs and
    unexpected errors, 2 for validation and stage configuration errors.
    """
    configure_logging(args)

    try:
        config_path = Path(args.config).resolve()
        if not config_path.exists():
            logger.error(f"Pipeline config not found: {config_path}")
            return 1

        logger.info(f"Loading pipeline config: {config_path}")
        loader = PipelineLoader()
        try:
            config: Dict[str, Any] = loader.load(config_path)
        except PipelineValidationError as e:
            for error in e.errors:
                location = f" at {error.path}" if error.path else ""
                logger.error(f"Validation error{location}: {error.message}")
            return e.exit_code

        engine = SubstitutionEngine()
        stages = engine.resolve(config)

        if args.dry_run:
            logger.info(f"[DRY RUN] Pipeline valid, {len(stages)} enabled stage(s)")
            return 0

        if args.output and len(args.files) > 1:
            logger.error("--output can only be used with a single input")
            return 2

        buffers = read_inputs(args.files, args.encoding)
        results = [engine.run(buffer, stages) for buffer in buffers]

        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(results[0], encoding=args.encoding)
            logger.info(f"Wrote {output_path}")
        else:
            for result in results:
                sys.stdout.write(result)

        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Input error: {e}")
        return 1
    except StageConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
