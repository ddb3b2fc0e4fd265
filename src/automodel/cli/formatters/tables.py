"""Rich tables for structured data display.

Provides table formatting utilities with consistent styling for displaying
selection results and configuration summaries.
"""

from typing import Any

from rich.table import Table
from rich.text import Text

from automodel.cli.formatters import console


def create_table(
    title: str | None = None,
    *,
    show_header: bool = True,
    show_lines: bool = False,
    border_style: str = "blue",
    header_style: str = "bold cyan",
    row_styles: list[str] | None = None,
) -> Table:
    """Create a Rich Table with consistent automodel styling.

    Args:
        title: Optional table title.
        show_header: Whether to show the header row.
        show_lines: Whether to show lines between rows.
        border_style: Style for table borders.
        header_style: Style for header row.
        row_styles: Alternating row styles (default: subtle alternation).

    Returns:
        Configured Rich Table instance.
    """
    if row_styles is None:
        row_styles = ["", "dim"]

    return Table(
        title=title,
        show_header=show_header,
        show_lines=show_lines,
        border_style=border_style,
        header_style=header_style,
        row_styles=row_styles,
    )


def create_key_value_table(
    data: dict[str, Any],
    title: str | None = None,
    *,
    key_style: str = "cyan",
    value_style: str = "",
) -> Table:
    """Create a two-column table for key-value data.

    Values are rendered as plain text, so model identifiers and regex
    patterns containing brackets are shown verbatim.

    Example:
        table = create_key_value_table({"Strategy": "balanced"}, "Selection")
        print_table(table)
    """
    table = create_table(title, show_header=False)
    table.add_column("Key", style=key_style, no_wrap=True)
    table.add_column("Value", style=value_style)

    for key, value in data.items():
        table.add_row(str(key), _plain(value))

    return table


def create_matrix_table(
    strategy: str,
    rows: dict[str, dict[Any, Any]],
    tiers: list[str],
) -> Table:
    """Create a TaskType x Tier table for one strategy of the matrix.

    Cells with a fallback list show the primary model followed by the
    number of fallbacks; empty cells show a dash.
    """
    table = create_table(f"Strategy: {strategy}")
    table.add_column("Task type", style="cyan", no_wrap=True)
    for tier in tiers:
        table.add_column(tier)

    for task_type, cells in rows.items():
        by_name = {getattr(k, "value", k): v for k, v in cells.items()}
        rendered = []
        for tier in tiers:
            selection = by_name.get(tier)
            if selection is None:
                rendered.append("-")
            elif isinstance(selection, str):
                rendered.append(selection)
            else:
                extra = f" (+{len(selection) - 1})" if len(selection) > 1 else ""
                rendered.append(f"{selection[0]}{extra}")
        table.add_row(task_type, *(_plain(cell) for cell in rendered))

    return table


def _plain(value: Any) -> Text:
    return Text(str(value))


def print_table(table: Table) -> None:
    """Print a Rich Table to the shared console."""
    console.print(table)


__all__ = [
    "create_table",
    "create_key_value_table",
    "create_matrix_table",
    "print_table",
]
