"""Complexity tier helpers and strategy matrix lookup.

The tier order itself lives on ComplexityTier. This module adds parsing of
host-supplied tier names and lookup of a single Strategy x TaskType x Tier
cell of the strategy matrix.

Usage:
    from automodel.routing.tiers import get_models_for_cell, parse_tier

    tier = parse_tier("complex").unwrap()
    result = get_models_for_cell(config, "balanced", "debugging", tier)
    if result.is_ok:
        print(result.value)  # ["anthropic/claude-sonnet-4-5", ...]
"""

from automodel.config.models import EngineConfig, ModelSelection
from automodel.core.errors import ConfigError, ValidationError
from automodel.core.types import ComplexityTier, ModelId, Result, StrategyName, TaskType
from automodel.observability.logging import get_logger

log = get_logger(__name__)


def parse_tier(value: str | ComplexityTier) -> Result[ComplexityTier, ValidationError]:
    """Parse a tier name, case-insensitively.

    Returns:
        Result containing the tier, or a ValidationError for unknown names.
    """
    if isinstance(value, ComplexityTier):
        return Result.ok(value)
    try:
        return Result.ok(ComplexityTier(str(value).strip().lower()))
    except ValueError:
        return Result.err(
            ValidationError(
                f"Unknown complexity tier; expected one of "
                f"{[t.value for t in ComplexityTier.ordered()]}",
                field="tier",
                value=value,
            )
        )


def as_model_list(selection: ModelSelection) -> list[ModelId]:
    """Return a selection as an ordered list, primary first."""
    if isinstance(selection, str):
        return [selection]
    return list(selection)


def get_models_for_cell(
    config: EngineConfig,
    strategy: StrategyName,
    task_type: TaskType,
    tier: ComplexityTier,
) -> Result[list[ModelId], ConfigError]:
    """Look up one cell of the strategy matrix.

    The matrix is sparse, so a missing strategy, row or cell is an expected
    outcome. The resolver falls back on Err.

    Returns:
        Result containing the ordered model list for the cell, or a
        ConfigError naming the missing key.
    """
    rows = config.strategies.get(strategy)
    if rows is None:
        return Result.err(
            ConfigError(
                f"Strategy '{strategy}' not found in configuration",
                config_key=f"strategies.{strategy}",
                details={"available_strategies": list(config.strategies)},
            )
        )

    cells = rows.get(task_type)
    if cells is None:
        return Result.err(
            ConfigError(
                f"Strategy '{strategy}' has no row for task type '{task_type}'",
                config_key=f"strategies.{strategy}.{task_type}",
            )
        )

    selection = cells.get(tier)
    if selection is None:
        return Result.err(
            ConfigError(
                f"Strategy '{strategy}' has no '{tier.value}' model for '{task_type}'",
                config_key=f"strategies.{strategy}.{task_type}.{tier.value}",
            )
        )

    models = as_model_list(selection)
    log.debug(
        "selection.cell.resolved",
        strategy=strategy,
        task_type=task_type,
        tier=tier.value,
        model_count=len(models),
    )
    return Result.ok(models)
