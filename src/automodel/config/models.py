"""Pydantic models for automodel configuration.

This module defines the configuration schema using Pydantic v2. Every
section is frozen, so a validated EngineConfig is an immutable snapshot that
classification can read from any thread.

Documents may use either snake_case keys or the camelCase keys of the
older host-plugin documents (``defaultModel``, ``taskTypeIndicators``, ...).

Classes:
    TaskTypeIndicator: Keywords and regex patterns identifying a task type
    ComplexityIndicator: Keywords, patterns and ranges identifying a tier
    PlanAwarenessConfig: Plan marker detection
    SubtaskDetectionConfig: Subtask phrase detection
    ContextSizeConfig: Session context size thresholds
    ContextAwareConfig: Context adjuster rules
    DetectionConfig: Scoring feature toggles
    ScoringWeights: Scoring constants
    FilePatternOverride: Per-path override rule
    EngineConfig: Top-level configuration
"""

from pathlib import Path
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    conlist,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from automodel.core.types import ComplexityTier

GENERAL_TASK_TYPE = "general"
DEFAULT_STRATEGY = "balanced"

ModelIdentifier = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^[^/\s]+/\S+$"),
]
"""A ``provider/model`` identifier. Only the shape is checked."""

ModelSelection = ModelIdentifier | conlist(ModelIdentifier, min_length=1)
"""A single identifier or an ordered, non-empty fallback list (primary first)."""

StrategyMatrix = dict[str, dict[str, dict[ComplexityTier, ModelSelection]]]
"""Strategy -> TaskType -> ComplexityTier -> ModelSelection. May be sparse."""


def _normalize_literals(values: tuple[str, ...]) -> tuple[str, ...]:
    """Lower-case literals and drop empty ones.

    An empty literal would match every prompt as a substring.
    """
    return tuple(v.lower() for v in values if v and v.strip())


class _Section(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TokenRange(_Section):
    """Inclusive token-count range for a complexity tier."""

    min: int = Field(default=0, ge=0)
    max: int = Field(default=999_999, ge=0)

    @model_validator(mode="after")
    def validate_bounds(self) -> "TokenRange":
        if self.min > self.max:
            msg = f"token range min ({self.min}) must be <= max ({self.max})"
            raise ValueError(msg)
        return self

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


class CountRange(TokenRange):
    """Inclusive file-count range for a complexity tier."""


class TaskTypeIndicator(_Section):
    """Signals that identify a task type.

    Attributes:
        keywords: Literals matched case-insensitively as substrings.
        patterns: Regular expressions searched case-insensitively in the
            raw prompt. Malformed patterns never match.
    """

    keywords: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _normalize_literals(v)


class ComplexityIndicator(TaskTypeIndicator):
    """Signals that identify a complexity tier.

    Attributes:
        token_range: Inclusive range of estimated prompt tokens.
        file_count: Optional inclusive range of files mentioned in the prompt.
    """

    token_range: TokenRange = Field(default_factory=TokenRange)
    file_count: CountRange | None = None


class PlanAwarenessConfig(_Section):
    """Detect prompts that already carry an explicit multi-step plan.

    Attributes:
        enabled: Whether the plan pass runs.
        plan_indicators: Literal step markers; every occurrence is counted.
        min_steps_for_reduction: Total occurrences needed to lower the tier.
    """

    enabled: bool = True
    plan_indicators: tuple[str, ...] = ()
    min_steps_for_reduction: int = Field(default=3, ge=1)

    @field_validator("plan_indicators")
    @classmethod
    def normalize_indicators(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _normalize_literals(v)


class SubtaskDetectionConfig(_Section):
    """Detect prompts that execute one item of an existing plan."""

    enabled: bool = True
    subtask_indicators: tuple[str, ...] = ()

    @field_validator("subtask_indicators")
    @classmethod
    def normalize_indicators(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _normalize_literals(v)


class ContextSizeConfig(_Section):
    """Session context size thresholds, in estimated tokens.

    Attributes:
        enabled: Whether the context-size pass runs.
        small: Contexts strictly below this lower the tier. None disables.
        large: Contexts strictly above this raise the tier. None disables.
    """

    enabled: bool = True
    small: int | None = Field(default=None, ge=0)
    large: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_thresholds(self) -> "ContextSizeConfig":
        if self.small is not None and self.large is not None and self.small > self.large:
            msg = f"context size small ({self.small}) must be <= large ({self.large})"
            raise ValueError(msg)
        return self


class ContextAwareConfig(_Section):
    """Rules for the context adjuster."""

    enabled: bool = True
    plan_awareness: PlanAwarenessConfig = Field(default_factory=PlanAwarenessConfig)
    subtask_detection: SubtaskDetectionConfig = Field(default_factory=SubtaskDetectionConfig)
    context_size: ContextSizeConfig = Field(default_factory=ContextSizeConfig)


class DetectionConfig(_Section):
    """Toggles for the individual scoring signals."""

    use_keywords: bool = True
    use_patterns: bool = True
    use_token_count: bool = True
    use_file_count: bool = True
    context_aware: ContextAwareConfig = Field(default_factory=ContextAwareConfig)


class ScoringWeights(_Section):
    """Scoring constants.

    The defaults are empirical. They are exposed so operators can tune them;
    classification is reproducible for any fixed set of weights.
    """

    keyword: int = Field(default=10, ge=0)
    pattern: int = Field(default=15, ge=0)
    token_range: int = Field(default=20, ge=0)
    file_count: int = Field(default=25, ge=0)
    chars_per_token: int = Field(default=4, ge=1)


class FilePatternOverride(_Section):
    """Override applied when the host reports touching a matching file.

    Exactly how the override acts depends on which field is set, checked in
    this order: ``model`` replaces the whole selection, ``task_type_override``
    re-resolves under another task type, ``min_complexity`` re-resolves with
    the tier raised to at least that level.

    Attributes:
        pattern: Glob-like path pattern ("**/security/**", "*.sql").
        model: Hard override model identifier.
        task_type_override: Task type to resolve with instead of the detected one.
        min_complexity: Lowest tier allowed for matching files.
        reason: Human-readable explanation surfaced in the reasoning trace.
    """

    pattern: str = Field(min_length=1)
    model: ModelIdentifier | None = None
    task_type_override: str | None = None
    min_complexity: ComplexityTier | None = None
    reason: str = ""

    @model_validator(mode="after")
    def validate_action(self) -> "FilePatternOverride":
        if self.model is None and self.task_type_override is None and self.min_complexity is None:
            msg = (
                f"file pattern override '{self.pattern}' needs one of "
                "model, task_type_override or min_complexity"
            )
            raise ValueError(msg)
        return self


class EngineConfig(_Section):
    """Top-level automodel configuration.

    Attributes:
        enabled: When False the engine always answers with default_model.
        log_level: Engine verbosity (silent, minimal, normal, verbose).
        default_model: Terminal fallback when no matrix cell resolves.
        default_strategy: Strategy used when the request names none or an
            unknown one.
        agent_strategies: Host agent name -> strategy.
        active_agents: When non-empty, only these agents get routed; any
            other request answers with default_model.
        strategies: The Strategy x TaskType x Complexity matrix.
        task_type_indicators: Task type detection table, in priority order.
        complexity_indicators: Complexity detection table.
        detection: Scoring toggles and context adjuster rules.
        scoring: Scoring weights.
        file_pattern_overrides: Path override rules, first match wins.
        fallback: Global chain appended after every resolved selection.
    """

    enabled: bool = True
    log_level: Literal["silent", "minimal", "normal", "verbose"] = "normal"
    default_model: ModelIdentifier
    default_strategy: str = DEFAULT_STRATEGY
    agent_strategies: dict[str, str] = Field(default_factory=dict)
    active_agents: tuple[str, ...] = ()
    strategies: StrategyMatrix = Field(min_length=1)
    task_type_indicators: dict[str, TaskTypeIndicator] = Field(
        default_factory=lambda: {GENERAL_TASK_TYPE: TaskTypeIndicator()}
    )
    complexity_indicators: dict[ComplexityTier, ComplexityIndicator] = Field(default_factory=dict)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)
    file_pattern_overrides: tuple[FilePatternOverride, ...] = ()
    fallback: tuple[ModelIdentifier, ...] = ()

    @model_validator(mode="after")
    def validate_references(self) -> "EngineConfig":
        """Check cross-section references that field types cannot express."""
        if GENERAL_TASK_TYPE not in self.task_type_indicators:
            msg = f"task_type_indicators must define '{GENERAL_TASK_TYPE}'"
            raise ValueError(msg)

        if self.default_strategy not in self.strategies:
            msg = (
                f"default_strategy '{self.default_strategy}' is not one of "
                f"{sorted(self.strategies)}"
            )
            raise ValueError(msg)

        for agent, strategy in self.agent_strategies.items():
            if strategy not in self.strategies:
                msg = f"agent '{agent}' maps to unknown strategy '{strategy}'"
                raise ValueError(msg)

        for strategy in self.reachable_strategies():
            if GENERAL_TASK_TYPE not in self.strategies[strategy]:
                msg = f"strategy '{strategy}' must define a '{GENERAL_TASK_TYPE}' row"
                raise ValueError(msg)

        known = self.known_task_types()
        for override in self.file_pattern_overrides:
            if override.task_type_override is not None and override.task_type_override not in known:
                msg = (
                    f"file pattern override '{override.pattern}' names unknown task type "
                    f"'{override.task_type_override}'"
                )
                raise ValueError(msg)

        return self

    def reachable_strategies(self) -> list[str]:
        """Strategies a request can end up using, in declaration order."""
        reachable = {self.default_strategy, *self.agent_strategies.values()}
        return [name for name in self.strategies if name in reachable]

    def known_task_types(self) -> set[str]:
        """Task types named by the detection table or any matrix row."""
        names = set(self.task_type_indicators)
        for rows in self.strategies.values():
            names.update(rows)
        return names


def get_default_config() -> EngineConfig:
    """Get the built-in automodel configuration.

    Used whenever no configuration document is found, so a host never fails
    to start for lack of a config file.

    Returns:
        EngineConfig with the default strategy matrix and indicator tables.
    """
    glm = "zai-coding-plan/glm-4.6"
    haiku = "anthropic/claude-haiku-4-5"
    sonnet = "anthropic/claude-sonnet-4-5"
    codex_medium = "openai/gpt-5-codex-medium"
    codex_high = "openai/gpt-5-codex-high"

    return EngineConfig.model_validate(
        {
            "enabled": True,
            "log_level": "normal",
            "default_model": sonnet,
            "default_strategy": DEFAULT_STRATEGY,
            "agent_strategies": {
                "auto-optimized": "cost-optimized",
                "auto-performance": "performance-optimized",
                "build": "cost-optimized",
                "general": "balanced",
            },
            "strategies": {
                "cost-optimized": {
                    "coding-simple": {
                        "simple": glm,
                        "medium": glm,
                        "complex": [sonnet, glm],
                        "advanced": [codex_high, sonnet, glm],
                    },
                    "coding-complex": {
                        "simple": glm,
                        "medium": [haiku, glm],
                        "complex": [sonnet, glm],
                        "advanced": [codex_high, sonnet],
                    },
                    "planning": {
                        "simple": haiku,
                        "medium": [codex_medium, sonnet],
                        "complex": [codex_high, sonnet],
                        "advanced": codex_high,
                    },
                    "debugging": {
                        "simple": glm,
                        "medium": [haiku, glm],
                        "complex": [sonnet, codex_medium],
                        "advanced": [codex_high, sonnet],
                    },
                    "review": {
                        "simple": haiku,
                        "medium": haiku,
                        "complex": [sonnet, haiku],
                        "advanced": sonnet,
                    },
                    "documentation": {
                        "simple": glm,
                        "medium": glm,
                        "complex": [haiku, glm],
                        "advanced": sonnet,
                    },
                    "general": {
                        "simple": glm,
                        "medium": glm,
                        "complex": [haiku, glm],
                        "advanced": sonnet,
                    },
                },
                "performance-optimized": {
                    "coding-simple": {
                        "simple": haiku,
                        "medium": haiku,
                        "complex": [sonnet, codex_medium, haiku],
                        "advanced": [codex_high, sonnet],
                    },
                    "coding-complex": {
                        "simple": haiku,
                        "medium": [sonnet, codex_medium],
                        "complex": [codex_high, sonnet],
                        "advanced": codex_high,
                    },
                    "planning": {
                        "simple": sonnet,
                        "medium": [codex_medium, sonnet],
                        "complex": [codex_high, sonnet],
                        "advanced": codex_high,
                    },
                    "debugging": {
                        "simple": haiku,
                        "medium": [sonnet, codex_medium],
                        "complex": [codex_high, sonnet],
                        "advanced": codex_high,
                    },
                    "review": {
                        "simple": haiku,
                        "medium": sonnet,
                        "complex": sonnet,
                        "advanced": [codex_high, sonnet],
                    },
                    "documentation": {
                        "simple": haiku,
                        "medium": haiku,
                        "complex": sonnet,
                        "advanced": sonnet,
                    },
                    "general": {
                        "simple": haiku,
                        "medium": haiku,
                        "complex": sonnet,
                        "advanced": sonnet,
                    },
                },
                "balanced": {
                    "coding-simple": {
                        "simple": glm,
                        "medium": [haiku, glm],
                        "complex": [sonnet, haiku],
                        "advanced": [codex_high, sonnet],
                    },
                    "coding-complex": {
                        "simple": haiku,
                        "medium": [sonnet, haiku],
                        "complex": [sonnet, codex_medium],
                        "advanced": [codex_high, sonnet],
                    },
                    "planning": {
                        "simple": haiku,
                        "medium": [sonnet, codex_medium],
                        "complex": [codex_high, sonnet],
                        "advanced": codex_high,
                    },
                    "debugging": {
                        "simple": haiku,
                        "medium": [sonnet, haiku],
                        "complex": [sonnet, codex_medium],
                        "advanced": [codex_high, sonnet],
                    },
                    "review": {
                        "simple": haiku,
                        "medium": sonnet,
                        "complex": sonnet,
                        "advanced": sonnet,
                    },
                    "documentation": {
                        "simple": glm,
                        "medium": haiku,
                        "complex": haiku,
                        "advanced": sonnet,
                    },
                    "general": {
                        "simple": glm,
                        "medium": haiku,
                        "complex": sonnet,
                        "advanced": sonnet,
                    },
                },
            },
            "task_type_indicators": {
                "coding-simple": {
                    "keywords": [
                        "fix typo",
                        "typo",
                        "rename",
                        "update text",
                        "change variable",
                        "simple change",
                    ],
                    "patterns": [r"\b(fix|correct)\b.*\btypos?\b"],
                },
                "coding-complex": {
                    "keywords": [
                        "refactor",
                        "implement",
                        "algorithm",
                        "optimize performance",
                        "migrate",
                        "redesign",
                    ],
                    "patterns": [
                        r"\b(implement|create|add)\b.*\b(function|class|component|module)\b"
                    ],
                },
                "planning": {
                    "keywords": ["plan", "design", "architecture", "strategy", "approach"],
                    "patterns": [r"\bplan\b", r"\bdesign\b.*\barchitecture\b"],
                },
                "debugging": {
                    "keywords": [
                        "debug",
                        "fix bug",
                        "error",
                        "bug",
                        "crash",
                        "not working",
                        "stack trace",
                    ],
                    "patterns": [r"\b(fix|debug)\b.*\b(bug|error|crash)\b"],
                },
                "review": {
                    "keywords": ["review", "audit", "analyze", "assess", "check"],
                    "patterns": [r"\breview\b.*\bcode\b"],
                },
                "documentation": {
                    "keywords": ["document", "readme", "docs", "docstring", "comment", "explain"],
                    "patterns": [r"\b(add|write|update)\b.*\bdocumentation\b"],
                },
                "general": {
                    "keywords": ["what", "how", "why", "show", "list"],
                    "patterns": [r"^(what|how|why)\b"],
                },
            },
            "complexity_indicators": {
                "simple": {
                    "keywords": ["typo", "quick fix", "minor", "small change", "rename", "what is"],
                    "patterns": [r"^(what|where|when)\s"],
                    "token_range": {"min": 0, "max": 100},
                },
                "medium": {
                    "keywords": ["add feature", "update", "modify", "implement"],
                    "patterns": [r"\b(implement|create)\b"],
                    "token_range": {"min": 101, "max": 400},
                },
                "complex": {
                    "keywords": ["refactor", "redesign", "multiple files", "optimize", "migrate"],
                    "patterns": [r"\b(design|architect)\b"],
                    "token_range": {"min": 401, "max": 1200},
                    "file_count": {"min": 3, "max": 10},
                },
                "advanced": {
                    "keywords": [
                        "architecture",
                        "system-wide",
                        "major refactor",
                        "from scratch",
                        "microservices",
                        "full system",
                    ],
                    "patterns": [r"\b(complete|entire)\b.*\brewrite\b"],
                    "token_range": {"min": 1201, "max": 999_999},
                    "file_count": {"min": 11, "max": 999_999},
                },
            },
            "detection": {
                "context_aware": {
                    "enabled": True,
                    "plan_awareness": {
                        "enabled": True,
                        "plan_indicators": [
                            "step 1",
                            "step 2",
                            "step 3",
                            "phase 1",
                            "## plan",
                            "### step",
                            "- [ ]",
                        ],
                        "min_steps_for_reduction": 3,
                    },
                    "subtask_detection": {
                        "enabled": True,
                        "subtask_indicators": [
                            "implement step",
                            "complete task",
                            "from the plan",
                            "as planned",
                            "following the plan",
                            "next todo",
                            "checklist item",
                        ],
                    },
                    "context_size": {"enabled": True, "small": None, "large": 100_000},
                },
            },
            "file_pattern_overrides": [
                {
                    "pattern": "**/security/**",
                    "model": sonnet,
                    "reason": "Security-sensitive code always gets a capable model",
                },
                {
                    "pattern": "**/migrations/**",
                    "task_type_override": "coding-complex",
                    "reason": "Schema migrations are treated as complex coding",
                },
            ],
        }
    )


def get_config_dir() -> Path:
    """Get the user-level automodel configuration directory.

    Returns:
        Path to ~/.config/automodel/
    """
    return Path.home() / ".config" / "automodel"
