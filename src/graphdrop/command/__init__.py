"""CLI command modules for graphdrop."""

from graphdrop.command.check import CheckCommand, GestureFileError
from graphdrop.command.drop import DropCommand

__all__ = ["CheckCommand", "DropCommand", "GestureFileError"]
