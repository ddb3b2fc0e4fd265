"""Config command group for automodel.

Create, inspect and validate configuration documents.
"""

from pathlib import Path
from typing import Annotated

import typer

from automodel.cli.formatters import console
from automodel.cli.formatters.panels import print_error, print_success, print_warning
from automodel.cli.formatters.tables import (
    create_key_value_table,
    create_matrix_table,
    print_table,
)
from automodel.config.loader import (
    config_to_yaml,
    create_default_config,
    find_config_file,
    load_config,
    load_config_or_default,
)
from automodel.core.errors import ConfigError
from automodel.core.types import ComplexityTier

app = typer.Typer(
    name="config",
    help="Manage automodel configuration.",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Configuration document (default: discovery)."),
]


@app.command()
def init(
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Directory to write config.yaml into."),
    ] = None,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace an existing config.yaml."),
    ] = False,
) -> None:
    """Initialize automodel configuration.

    Writes the built-in defaults to config.yaml (default: ~/.config/automodel/).
    """
    try:
        written = create_default_config(path, overwrite=overwrite)
    except ConfigError as e:
        print_error(f"{e.message}\nUse --overwrite to replace it.", title="Config Exists")
        raise typer.Exit(1) from e

    print_success(f"Default configuration written to {written}")


@app.command()
def show(
    config_path: ConfigOption = None,
    as_yaml: Annotated[
        bool,
        typer.Option("--yaml", help="Print the full configuration as YAML."),
    ] = False,
) -> None:
    """Display the active configuration.

    Shows a summary and the strategy matrix; --yaml prints everything.
    """
    source = config_path or find_config_file()
    try:
        config = load_config_or_default(config_path)
    except ConfigError as e:
        print_error(e.message, title="Configuration Error")
        raise typer.Exit(1) from e

    if as_yaml:
        typer.echo(config_to_yaml(config), nl=False)
        return

    summary = {
        "Source": str(source) if source else "built-in defaults",
        "Enabled": config.enabled,
        "Log level": config.log_level,
        "Default model": config.default_model,
        "Default strategy": config.default_strategy,
        "Strategies": ", ".join(config.strategies),
        "Task types": ", ".join(config.task_type_indicators),
        "Agent strategies": ", ".join(f"{a}={s}" for a, s in config.agent_strategies.items())
        or "-",
        "Active agents": ", ".join(config.active_agents) or "all",
        "File overrides": len(config.file_pattern_overrides),
        "Global fallback": ", ".join(config.fallback) or "-",
    }
    print_table(create_key_value_table(summary, "Current Configuration"))

    tiers = [tier.value for tier in ComplexityTier.ordered()]
    for name, rows in config.strategies.items():
        console.print(create_matrix_table(name, rows, tiers))


@app.command()
def validate(config_path: ConfigOption = None) -> None:
    """Validate a configuration document.

    Checks the schema and every cross-reference (strategies, general rows,
    override task types) without changing anything.
    """
    path = config_path or find_config_file()
    if path is None:
        print_warning("No configuration file found; built-in defaults are in use.")
        return

    try:
        config = load_config(path)
    except ConfigError as e:
        print_error(e.message, title=f"Invalid: {path}")
        raise typer.Exit(1) from e

    print_success(
        f"{path} is valid: {len(config.strategies)} strategies, "
        f"{len(config.task_type_indicators)} task types, "
        f"{len(config.file_pattern_overrides)} file overrides"
    )


__all__ = ["app"]
