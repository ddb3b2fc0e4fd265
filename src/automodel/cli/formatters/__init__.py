"""Rich formatters for CLI output.

This module provides a shared Console instance for consistent terminal
output across the automodel CLI.

Semantic Colors:
- green: success
- yellow: warning
- red: error
- blue: info
"""

from rich.console import Console
from rich.theme import Theme

AUTOMODEL_THEME = Theme(
    {
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "info": "blue",
        "muted": "dim",
        "highlight": "bold cyan",
    }
)

# Shared Console instance for all CLI modules
console = Console(theme=AUTOMODEL_THEME, force_terminal=True)

__all__ = ["console", "AUTOMODEL_THEME"]
