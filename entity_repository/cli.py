#!/usr/bin/env python
"""
Command line entry point.

Usage:
    entity-repository make:repository User
    entity-repository make:repository Invoice --base-path src/app --namespace app
    entity-repository --help
"""

import argparse
import logging
import sys
from typing import List, Optional

from entity_repository.commands import COMMANDS
from entity_repository.utils.logger import setup_logging


def build_parser(commands=None) -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per registered command."""
    parser = argparse.ArgumentParser(
        prog="entity-repository",
        description="Repository pattern tooling for SQLAlchemy models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("\n\n")[1]
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    for command_class in commands or COMMANDS:
        command = command_class()
        sub = subparsers.add_parser(command.name, help=command.help, description=command.help)
        command.configure(sub)
        sub.set_defaults(handler=command.handle)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the selected command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else None)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
