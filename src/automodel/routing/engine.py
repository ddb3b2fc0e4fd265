"""Model selection engine.

Ties the pipeline together: feature extraction, task-type and complexity
classification, context adjustment, strategy resolution with file-pattern
overrides, and fallback chain construction.

Design Principles:
- Stateless: the selector holds only a reference to a ConfigStore. Each
  call reads the store's snapshot exactly once, so a concurrent reload never
  produces a decision from a mix of two configurations.
- Total: any prompt, including None or "", yields a non-empty model list.
  Unknown strategies, malformed patterns and negative context sizes degrade
  to defaults and show up in the reasoning trace instead of raising.
- Deterministic: the same request against the same snapshot always yields
  the same result.

Usage:
    from automodel.routing.engine import ModelSelector, SelectionRequest

    selector = ModelSelector()
    result = selector.select(SelectionRequest(prompt="fix typo in readme"))
    print(result.primary_model, result.fallback_models)

    # Alternatively, use the convenience function
    from automodel.routing.engine import select_model
    result = select_model("fix typo in readme", strategy="cost-optimized")
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from automodel.config.models import GENERAL_TASK_TYPE, EngineConfig
from automodel.config.store import ConfigStore, get_config_store
from automodel.core.types import ComplexityTier, HostPayload, ModelId, ModelRef, StrategyName
from automodel.observability.logging import bound_context, get_logger
from automodel.routing.adjuster import adjust_complexity
from automodel.routing.complexity import DEFAULT_COMPLEXITY, classify_complexity
from automodel.routing.fallback import build_fallback_chain
from automodel.routing.features import extract_features, extract_prompt_text
from automodel.routing.resolver import resolve
from automodel.routing.task_type import classify_task_type

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SelectionRequest:
    """Input to one model selection.

    Attributes:
        prompt: The task description. May be None or empty.
        strategy: Requested strategy. Unknown names fall back.
        agent: Host agent name, mapped through ``agent_strategies``.
        session_context_tokens: Estimated tokens already in the session.
        touched_files: Paths the task will touch, for file-pattern overrides.
    """

    prompt: str | None = None
    strategy: StrategyName | None = None
    agent: str | None = None
    session_context_tokens: int = 0
    touched_files: tuple[str, ...] = ()

    @classmethod
    def from_host(cls, args: HostPayload | str) -> SelectionRequest:
        """Build a request from a loosely-typed host payload.

        Prompt text is found the same way as extract_prompt_text(). The other
        fields are read from ``strategy``, ``agent``,
        ``sessionContextTokens`` and ``touchedFiles`` (snake_case keys work
        too). Values of the wrong type are ignored.
        """
        if not isinstance(args, Mapping):
            return cls(prompt=extract_prompt_text(args))

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in args:
                    return args[key]
            return None

        strategy = pick("strategy")
        agent = pick("agent")
        tokens = pick("sessionContextTokens", "session_context_tokens")
        files = pick("touchedFiles", "touched_files")

        return cls(
            prompt=extract_prompt_text(args),
            strategy=strategy if isinstance(strategy, str) else None,
            agent=agent if isinstance(agent, str) else None,
            session_context_tokens=tokens if isinstance(tokens, int) else 0,
            touched_files=tuple(f for f in files if isinstance(f, str))
            if isinstance(files, list | tuple)
            else (),
        )


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """Outcome of one model selection.

    Attributes:
        strategy: Strategy the selection ran under.
        task_type: Task type the models were resolved for.
        base_complexity: Tier from the complexity classifier.
        final_complexity: Tier the models were resolved for.
        primary_model: First model to try.
        fallback_models: Models to try next, in order.
        reasoning: Human-readable trace of every decision.
        adjustments: Messages from the context adjuster.
        token_estimate: Character-based prompt token estimate.
        has_plan: Whether the prompt carries an explicit plan.
        is_subtask: Whether the prompt executes one step of a plan.
        override_reason: Reason of the file-pattern override that applied.
    """

    strategy: StrategyName
    task_type: str
    base_complexity: ComplexityTier
    final_complexity: ComplexityTier
    primary_model: ModelId
    fallback_models: list[ModelId] = field(default_factory=list)
    reasoning: list[str] = field(default_factory=list)
    adjustments: list[str] = field(default_factory=list)
    token_estimate: int = 0
    has_plan: bool = False
    is_subtask: bool = False
    override_reason: str | None = None

    @property
    def models(self) -> list[ModelId]:
        """Primary model followed by the fallbacks."""
        return [self.primary_model, *self.fallback_models]

    @property
    def primary_ref(self) -> ModelRef:
        return ModelRef.parse(self.primary_model)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys hosts expect."""
        return {
            "strategy": self.strategy,
            "taskType": self.task_type,
            "baseComplexity": self.base_complexity.value,
            "finalComplexity": self.final_complexity.value,
            "primaryModel": self.primary_model,
            "fallbackModels": list(self.fallback_models),
            "model": self.primary_ref.to_host(),
            "reasoning": list(self.reasoning),
            "adjustments": list(self.adjustments),
            "tokenEstimate": self.token_estimate,
            "hasPlan": self.has_plan,
            "isSubtask": self.is_subtask,
            "overrideReason": self.override_reason,
        }


def _resolve_strategy(
    request: SelectionRequest,
    config: EngineConfig,
) -> tuple[StrategyName, list[str]]:
    notes: list[str] = []

    if request.strategy:
        if request.strategy in config.strategies:
            return request.strategy, [f"Strategy: {request.strategy} (requested)"]
        notes.append(f"Unknown strategy '{request.strategy}' ignored")

    if request.agent:
        mapped = config.agent_strategies.get(request.agent)
        if mapped is not None:
            notes.append(f"Strategy: {mapped} (agent '{request.agent}')")
            return mapped, notes
        notes.append(f"Agent '{request.agent}' has no strategy mapping")

    notes.append(f"Strategy: {config.default_strategy} (default)")
    return config.default_strategy, notes


def _default_result(config: EngineConfig, note: str) -> SelectionResult:
    """Answer with default_model without classifying the prompt."""
    chain = build_fallback_chain([config.default_model], config.fallback)
    return SelectionResult(
        strategy=config.default_strategy,
        task_type=GENERAL_TASK_TYPE,
        base_complexity=DEFAULT_COMPLEXITY,
        final_complexity=DEFAULT_COMPLEXITY,
        primary_model=chain[0],
        fallback_models=chain[1:],
        reasoning=[note],
    )


class ModelSelector:
    """Selects a model and fallback chain for a prompt.

    Example:
        selector = ModelSelector.from_config(get_default_config())
        result = selector.select(SelectionRequest(prompt="debug the login crash"))
    """

    def __init__(self, store: ConfigStore | None = None) -> None:
        """Initialize the selector.

        Args:
            store: Store to read snapshots from. Defaults to the process-wide
                store from get_config_store().
        """
        self._store = store if store is not None else get_config_store()

    @classmethod
    def from_config(cls, config: EngineConfig) -> ModelSelector:
        """Create a selector bound to a fixed configuration."""
        return cls(ConfigStore(config))

    @property
    def store(self) -> ConfigStore:
        return self._store

    def select(self, request: SelectionRequest) -> SelectionResult:
        """Select the model list for a request.

        Args:
            request: The selection request.

        Returns:
            SelectionResult with a non-empty model list.
        """
        config = self._store.snapshot

        if not config.enabled:
            return _default_result(
                config, f"Selection disabled -> default model {config.default_model}"
            )

        gate: list[str] = []
        if config.active_agents:
            if not request.agent:
                return _default_result(config, "No agent detected")
            if request.agent not in config.active_agents:
                return _default_result(config, f"Agent {request.agent} not in active list")
            gate.append(f"Agent {request.agent} is active")

        strategy, notes = _resolve_strategy(request, config)

        with bound_context(strategy=strategy, agent=request.agent):
            return self._run(request, config, strategy, [*gate, *notes])

    def _run(
        self,
        request: SelectionRequest,
        config: EngineConfig,
        strategy: StrategyName,
        reasoning: list[str],
    ) -> SelectionResult:
        features = extract_features(
            request.prompt,
            chars_per_token=config.scoring.chars_per_token,
        )
        if features.is_empty:
            reasoning.append("Empty prompt: using default task type and complexity")

        task = classify_task_type(features, config)
        complexity = classify_complexity(features, config)
        reasoning.append(task.describe())
        reasoning.append(complexity.describe())

        context_tokens = request.session_context_tokens
        if context_tokens < 0:
            reasoning.append(f"Negative session context ({context_tokens}) treated as 0")
            context_tokens = 0

        adjustment = adjust_complexity(
            complexity.tier,
            features.raw,
            context_tokens,
            config.detection.context_aware,
        )
        reasoning.extend(adjustment.adjustments)

        resolution = resolve(
            strategy,
            task.task_type,
            adjustment.tier,
            request.touched_files,
            config,
        )
        reasoning.extend(resolution.reasoning)

        chain = build_fallback_chain(resolution.models, config.fallback)

        log.info(
            "selection.model.selected",
            task_type=resolution.task_type,
            tier=resolution.tier.value,
            model=chain[0],
            fallback_count=len(chain) - 1,
        )

        return SelectionResult(
            strategy=strategy,
            task_type=resolution.task_type,
            base_complexity=complexity.tier,
            final_complexity=resolution.tier,
            primary_model=chain[0],
            fallback_models=chain[1:],
            reasoning=reasoning,
            adjustments=list(adjustment.adjustments),
            token_estimate=features.token_estimate,
            has_plan=adjustment.has_plan,
            is_subtask=adjustment.is_subtask,
            override_reason=resolution.override_reason,
        )


def select_model(
    prompt: str | None,
    *,
    strategy: StrategyName | None = None,
    agent: str | None = None,
    session_context_tokens: int = 0,
    touched_files: Sequence[str] = (),
    config: EngineConfig | None = None,
) -> SelectionResult:
    """Convenience function for one-off selections.

    Args:
        prompt: The task description.
        strategy: Requested strategy.
        agent: Host agent name.
        session_context_tokens: Estimated tokens already in the session.
        touched_files: Paths the task will touch.
        config: Configuration to use. Defaults to the process-wide store.

    Returns:
        SelectionResult with a non-empty model list.
    """
    selector = ModelSelector.from_config(config) if config is not None else ModelSelector()
    request = SelectionRequest(
        prompt=prompt,
        strategy=strategy,
        agent=agent,
        session_context_tokens=session_context_tokens,
        touched_files=tuple(touched_files),
    )
    return selector.select(request)
