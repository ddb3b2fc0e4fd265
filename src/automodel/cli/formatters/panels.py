"""Rich panels for important messages.

Provides panel templates for displaying info, warning, error, and success
messages with consistent styling. Message text is escaped, so reasoning
lines and config errors that contain square brackets print verbatim.
"""

from rich.markup import escape
from rich.panel import Panel

from automodel.cli.formatters import console

_PANEL_STYLES = {
    "info": "blue",
    "warning": "yellow",
    "error": "red",
    "success": "green",
}


def _panel(message: str, title: str, kind: str, *, expand: bool) -> Panel:
    color = _PANEL_STYLES[kind]
    return Panel(
        f"[{kind}]{escape(message)}[/]",
        title=f"[bold {color}]{escape(title)}[/]",
        border_style=color,
        expand=expand,
    )


def info_panel(message: str, title: str = "Info", *, expand: bool = False) -> Panel:
    """Create an info panel with blue styling."""
    return _panel(message, title, "info", expand=expand)


def warning_panel(message: str, title: str = "Warning", *, expand: bool = False) -> Panel:
    """Create a warning panel with yellow styling."""
    return _panel(message, title, "warning", expand=expand)


def error_panel(message: str, title: str = "Error", *, expand: bool = False) -> Panel:
    """Create an error panel with red styling."""
    return _panel(message, title, "error", expand=expand)


def success_panel(message: str, title: str = "Success", *, expand: bool = False) -> Panel:
    """Create a success panel with green styling."""
    return _panel(message, title, "success", expand=expand)


def print_info(message: str, title: str = "Info") -> None:
    """Print an info message in a panel."""
    console.print(info_panel(message, title))


def print_warning(message: str, title: str = "Warning") -> None:
    """Print a warning message in a panel."""
    console.print(warning_panel(message, title))


def print_error(message: str, title: str = "Error") -> None:
    """Print an error message in a panel."""
    console.print(error_panel(message, title))


def print_success(message: str, title: str = "Success") -> None:
    """Print a success message in a panel."""
    console.print(success_panel(message, title))


__all__ = [
    "info_panel",
    "warning_panel",
    "error_panel",
    "success_panel",
    "print_info",
    "print_warning",
    "print_error",
    "print_success",
]
