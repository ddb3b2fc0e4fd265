"""Strategy resolution with file-pattern overrides.

Turns (strategy, task type, tier) into an ordered model list by walking a
three-step chain over the sparse strategy matrix:

1. ``strategies[strategy][task_type][tier]``
2. ``strategies[strategy]["general"][tier]``
3. ``[default_model]``

When the host reports which files a task touches, the first configured
override whose pattern matches any of them is applied on top:

- ``model``: the whole selection is replaced by that one model
- ``task_type_override``: the chain is re-run with that task type
- ``min_complexity``: the tier is raised to at least that level and the
  chain is re-run

Usage:
    from automodel.routing.resolver import resolve

    resolution = resolve("balanced", "debugging", ComplexityTier.COMPLEX, [], config)
    print(resolution.models)
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
import posixpath

from automodel.config.models import GENERAL_TASK_TYPE, EngineConfig, FilePatternOverride
from automodel.core.types import ComplexityTier, ModelId, StrategyName, TaskType
from automodel.observability.logging import get_logger
from automodel.routing.tiers import get_models_for_cell

log = get_logger(__name__)

_WILDCARDS = frozenset("*?[")


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of strategy resolution.

    Attributes:
        models: Ordered model list, primary first. Never empty.
        task_type: Task type the models were resolved for (after overrides).
        tier: Tier the models were resolved for (after overrides).
        reasoning: Trace of the lookup and any override.
        override: The file-pattern override that applied, if any.
        matched_file: The touched file that triggered the override.
    """

    models: list[ModelId]
    task_type: TaskType
    tier: ComplexityTier
    reasoning: list[str] = field(default_factory=list)
    override: FilePatternOverride | None = None
    matched_file: str | None = None

    @property
    def override_reason(self) -> str | None:
        if self.override is None:
            return None
        return self.override.reason or f"Files matching {self.override.pattern}"


def _normalize_path(path: str) -> str:
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def match_file_pattern(pattern: str, path: str) -> bool:
    """Match a path against a glob-like override pattern.

    ``*`` matches any run of characters including ``/``, a leading ``**/``
    also matches zero directories, a pattern without ``/`` matches the file
    name, and a pattern without wildcards matches as a substring.
    """
    pattern = _normalize_path(pattern)
    path = _normalize_path(path)
    if not pattern or not path:
        return False

    if fnmatchcase(path, pattern):
        return True
    if pattern.startswith("**/") and fnmatchcase(path, pattern[3:]):
        return True
    if "/" not in pattern and fnmatchcase(posixpath.basename(path), pattern):
        return True
    if not _WILDCARDS.intersection(pattern):
        return pattern in path
    return False


def find_override(
    touched_files: Sequence[str],
    overrides: Sequence[FilePatternOverride],
) -> tuple[FilePatternOverride, str] | None:
    """Return the first override matching any touched file, with that file."""
    for override in overrides:
        for path in touched_files:
            if isinstance(path, str) and match_file_pattern(override.pattern, path):
                return override, path
    return None


def _lookup(
    config: EngineConfig,
    strategy: StrategyName,
    task_type: TaskType,
    tier: ComplexityTier,
) -> tuple[list[ModelId], str]:
    cell = get_models_for_cell(config, strategy, task_type, tier)
    if cell.is_ok:
        return cell.value, f"Matrix {strategy}/{task_type}/{tier.value} -> {', '.join(cell.value)}"

    if task_type != GENERAL_TASK_TYPE:
        general = get_models_for_cell(config, strategy, GENERAL_TASK_TYPE, tier)
        if general.is_ok:
            return general.value, (
                f"No {tier.value} model for {task_type} in {strategy}; "
                f"using general row -> {', '.join(general.value)}"
            )

    return [config.default_model], (
        f"No {tier.value} model for {task_type} in {strategy}; "
        f"using default model -> {config.default_model}"
    )


def resolve(
    strategy: StrategyName,
    task_type: TaskType,
    tier: ComplexityTier,
    touched_files: Sequence[str],
    config: EngineConfig,
) -> Resolution:
    """Resolve the ordered model list for a classified prompt.

    Never raises for a validated configuration: the chain always ends at
    ``default_model``.

    Args:
        strategy: Strategy to resolve under.
        task_type: Classified task type.
        tier: Adjusted complexity tier.
        touched_files: Paths the task touches. May be empty.
        config: Configuration snapshot.

    Returns:
        Resolution with a non-empty model list.
    """
    models, note = _lookup(config, strategy, task_type, tier)
    reasoning = [note]

    if not touched_files or not config.file_pattern_overrides:
        return Resolution(models=models, task_type=task_type, tier=tier, reasoning=reasoning)

    found = find_override(touched_files, config.file_pattern_overrides)
    if found is None:
        return Resolution(models=models, task_type=task_type, tier=tier, reasoning=reasoning)

    override, path = found
    label = override.reason or override.pattern

    if override.model is not None:
        models = [override.model]
        reasoning.append(
            f"Override '{override.pattern}' matched {path}: {label} -> {override.model}"
        )
    elif override.task_type_override is not None:
        task_type = override.task_type_override
        models, note = _lookup(config, strategy, task_type, tier)
        reasoning.append(
            f"Override '{override.pattern}' matched {path}: {label} -> task type {task_type}"
        )
        reasoning.append(note)
    elif override.min_complexity is not None:
        raised = tier.at_least(override.min_complexity)
        reasoning.append(
            f"Override '{override.pattern}' matched {path}: {label} -> "
            f"complexity at least {override.min_complexity.value}"
        )
        if raised is not tier:
            tier = raised
            models, note = _lookup(config, strategy, task_type, tier)
            reasoning.append(note)

    log.info(
        "selection.override.applied",
        pattern=override.pattern,
        file=path,
        task_type=task_type,
        tier=tier.value,
    )
    return Resolution(
        models=models,
        task_type=task_type,
        tier=tier,
        reasoning=reasoning,
        override=override,
        matched_file=path,
    )
