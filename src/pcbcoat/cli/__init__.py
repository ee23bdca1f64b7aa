"""Command-line interface for pcbcoat.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bar fed by the generation progress callback
- Verbose/quiet output modes
- Dry-run mode for inspecting a project
- Detailed error reporting
"""

from pcbcoat.cli.app import cli, main

__all__ = ["cli", "main"]
