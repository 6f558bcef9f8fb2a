"""Main CLI entry point for regex-replace."""

import argparse
import sys
from typing import Optional

from .commands import apply_pipeline


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the regex-replace CLI."""
    parser = argparse.ArgumentParser(
        prog='regex-replace',
        description='Apply regular-expression substitution stages to text'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Apply command
    apply_parser = subparsers.add_parser('apply', help='Apply a pipeline to files or stdin')
    apply_parser.add_argument(
        'config',
        type=str,
        help='Path to pipeline YAML file'
    )
    apply_parser.add_argument(
        'files',
        nargs='*',
        metavar='FILE',
        help='Input files (reads stdin when omitted)'
    )
    apply_parser.add_argument(
        '--output', '-o',
        type=str,
        metavar='PATH',
        help='Write the result to PATH instead of stdout (single input only)'
    )
    apply_parser.add_argument(
        '--encoding',
        type=str,
        default='utf-8',
        help='Text encoding for input files, stdin and --output (stdout uses the terminal encoding)'
    )
    apply_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate the pipeline config without transforming anything'
    )
    apply_parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    apply_parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    apply_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    apply_parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='warn',
        help='Set log level'
    )

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'apply':
        return apply_pipeline(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
