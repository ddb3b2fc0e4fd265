"""Check command for automodel.

Runs one model selection and shows which model would serve a prompt, why,
and what the fallback chain is.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from automodel.cli.formatters.panels import print_error, print_info
from automodel.cli.formatters.tables import create_key_value_table, print_table
from automodel.config.loader import load_config_or_default
from automodel.core.errors import ConfigError
from automodel.observability.logging import (
    apply_verbosity,
    is_console_logging_enabled,
    set_console_logging,
)
from automodel.routing.engine import ModelSelector, SelectionRequest, SelectionResult


def _complexity_label(result: SelectionResult) -> str:
    if result.base_complexity is result.final_complexity:
        return result.final_complexity.value
    return f"{result.base_complexity.value} -> {result.final_complexity.value}"


def _print_result(result: SelectionResult) -> None:
    data = {
        "Strategy": result.strategy,
        "Task type": result.task_type,
        "Complexity": _complexity_label(result),
        "Primary model": result.primary_model,
        "Fallbacks": ", ".join(result.fallback_models) or "-",
        "Token estimate": result.token_estimate,
        "Plan detected": "yes" if result.has_plan else "no",
        "Subtask": "yes" if result.is_subtask else "no",
    }
    if result.override_reason:
        data["Override"] = result.override_reason

    print_table(create_key_value_table(data, "Model Selection"))
    print_info("\n".join(f"- {line}" for line in result.reasoning), title="Reasoning")


def check(
    prompt: Annotated[str, typer.Argument(help="Task description to classify.")],
    strategy: Annotated[
        str | None,
        typer.Option("--strategy", "-s", help="Strategy to select under."),
    ] = None,
    agent: Annotated[
        str | None,
        typer.Option("--agent", "-a", help="Host agent name, mapped to a strategy."),
    ] = None,
    context_tokens: Annotated[
        int,
        typer.Option("--context-tokens", "-t", help="Estimated tokens already in the session."),
    ] = 0,
    files: Annotated[
        list[str] | None,
        typer.Option("--file", "-f", help="File the task touches. Repeatable."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration document to use."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON."),
    ] = False,
) -> None:
    """Show which model would be selected for a prompt.

    Example: [bold cyan]automodel check "refactor the auth module" -s cost-optimized[/]
    """
    console_logging = is_console_logging_enabled()
    if as_json:
        set_console_logging(False)

    try:
        try:
            config = load_config_or_default(config_path)
        except ConfigError as e:
            if as_json:
                typer.echo(json.dumps({"error": e.message}), err=True)
            else:
                print_error(e.message, title="Configuration Error")
            raise typer.Exit(1) from e

        apply_verbosity(config.log_level)
        selector = ModelSelector.from_config(config)
        result = selector.select(
            SelectionRequest(
                prompt=prompt,
                strategy=strategy,
                agent=agent,
                session_context_tokens=context_tokens,
                touched_files=tuple(files or ()),
            )
        )
    finally:
        set_console_logging(console_logging)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)


__all__ = ["check"]
