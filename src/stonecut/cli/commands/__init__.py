"""CLI command implementations for the stonecut application.

This package contains subcommands for the stonecut CLI, including:
- validate: Validate a job file
"""

from stonecut.cli.commands.validate import validate_command

__all__ = ["validate_command"]
