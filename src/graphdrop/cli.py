#!/usr/bin/env python3
"""graphdrop CLI - drag-and-drop mutations for a jj revision graph."""

import asyncio
import sys

from pydantic import ValidationError
from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from graphdrop.command.check import CheckCommand, GestureFileError
from graphdrop.command.drop import DropCommand
from graphdrop.core.config import State
from graphdrop.core.log import logger


class CliState(State):
    """Classify and carry out drag-and-drop gestures on a revision graph.

    A gesture file names the dragged operand ('from') and the operand
    it is dropped on ('to'). 'check' shows what the graph would
    display; 'drop' submits the mutation.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.dispatch.executor jj)
    2. Environment variables
       (GRAPHDROP_CONFIG__DISPATCH__EXECUTOR=jj)
    3. .env file
    4. graphdrop.yaml in the current directory, user config, defaults
    """

    check: CliSubCommand[CheckCommand]
    drop: CliSubCommand[DropCommand]

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        with logger:
            try:
                exit_code = asyncio.run(subcommand.run_workflow(self))
            except ValidationError as e:
                logger.error("Invalid gesture file", errors=e.errors())
                print(f"invalid gesture: {e}", file=sys.stderr)
                exit_code = 2
            except GestureFileError as e:
                logger.error("Unreadable gesture file", error=str(e))
                print(f"invalid gesture: {e}", file=sys.stderr)
                exit_code = 2
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
