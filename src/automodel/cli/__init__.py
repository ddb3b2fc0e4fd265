"""automodel CLI module.

This module provides the command-line interface for automodel, built with
Typer for the CLI framework and Rich for terminal output.
"""

from automodel.cli.main import app

__all__ = ["app"]
