"""Context-aware complexity adjustment.

Runs after classification and moves the complexity tier using signals the
lexical scores do not capture. Three passes run in a fixed order, each moving
the tier by at most one step and never past either end of the tier order:

1. Plan detection: a prompt that already spells out a multi-step plan needs
   less reasoning from the model, so the tier drops one step.
2. Subtask detection: a prompt executing one item of an existing plan drops
   one step unless it is already at the minimum.
3. Context size: a small session context drops one step, a large one raises
   one step.

Every pass that changes the tier records a message for the reasoning trace.
"""

from dataclasses import dataclass, field

from automodel.config.models import ContextAwareConfig
from automodel.core.types import ComplexityTier
from automodel.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ComplexityAdjustment:
    """Outcome of the context adjuster.

    Attributes:
        tier: The adjusted tier.
        adjustments: Messages for each pass that moved the tier.
        has_plan: Whether the prompt carries an explicit plan.
        is_subtask: Whether the prompt executes a step of a plan.
        plan_markers: Total plan indicator occurrences counted.
    """

    tier: ComplexityTier
    adjustments: list[str] = field(default_factory=list)
    has_plan: bool = False
    is_subtask: bool = False
    plan_markers: int = 0


def count_plan_markers(normalized: str, indicators: tuple[str, ...]) -> int:
    """Count every occurrence of every indicator in a lower-cased prompt."""
    return sum(normalized.count(indicator) for indicator in indicators if indicator)


def adjust_complexity(
    base_tier: ComplexityTier,
    prompt_text: str | None,
    session_context_tokens: int,
    rules: ContextAwareConfig,
) -> ComplexityAdjustment:
    """Adjust a classified tier for plan structure and session context.

    Args:
        base_tier: Tier from the complexity classifier.
        prompt_text: Raw prompt. None is treated as empty.
        session_context_tokens: Estimated tokens already in the session.
            Negative values count as zero.
        rules: Context adjuster configuration.

    Returns:
        ComplexityAdjustment with the final tier and the trace of moves.
    """
    if not rules.enabled:
        return ComplexityAdjustment(tier=base_tier)

    normalized = (prompt_text or "").lower()
    context_tokens = max(0, session_context_tokens)
    tier = base_tier
    adjustments: list[str] = []
    has_plan = False
    is_subtask = False
    plan_markers = 0

    plan = rules.plan_awareness
    if plan.enabled and normalized:
        plan_markers = count_plan_markers(normalized, plan.plan_indicators)
        if plan_markers >= plan.min_steps_for_reduction:
            has_plan = True
            lowered = tier.lower()
            if lowered is not tier:
                adjustments.append(
                    f"Plan detected ({plan_markers} markers): {tier.value} -> {lowered.value}"
                )
                tier = lowered

    subtask = rules.subtask_detection
    if subtask.enabled and normalized:
        is_subtask = any(ind in normalized for ind in subtask.subtask_indicators)
        if is_subtask and not tier.is_minimum:
            lowered = tier.lower()
            adjustments.append(f"Subtask detected: {tier.value} -> {lowered.value}")
            tier = lowered

    size = rules.context_size
    if size.enabled:
        if size.small is not None and context_tokens < size.small:
            lowered = tier.lower()
            if lowered is not tier:
                adjustments.append(
                    f"Small context ({context_tokens} < {size.small} tokens): "
                    f"{tier.value} -> {lowered.value}"
                )
                tier = lowered
        elif size.large is not None and context_tokens > size.large:
            raised = tier.raise_()
            if raised is not tier:
                adjustments.append(
                    f"Large context ({context_tokens} > {size.large} tokens): "
                    f"{tier.value} -> {raised.value}"
                )
                tier = raised

    if tier is not base_tier:
        log.debug(
            "selection.complexity.adjusted",
            base_tier=base_tier.value,
            tier=tier.value,
            has_plan=has_plan,
            is_subtask=is_subtask,
        )

    return ComplexityAdjustment(
        tier=tier,
        adjustments=adjustments,
        has_plan=has_plan,
        is_subtask=is_subtask,
        plan_markers=plan_markers,
    )
