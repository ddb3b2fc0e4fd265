"""Complexity classification for model selection.

Scores each configured complexity tier against a prompt and picks the
strictly highest. Tier scores combine four signals:

- Keywords: weight per keyword found in the lower-cased prompt (default 10)
- Patterns: weight per regex matching the raw prompt (default 15)
- Token range: bonus when the token estimate falls in the tier's range (default 20)
- File count: bonus when the files mentioned fall in the tier's range (default 25)

Ties go to the tier declared first; a prompt that scores nothing is medium.
An empty prompt is medium without scoring, so it never collects a
token-range bonus from a range starting at zero.

Usage:
    from automodel.routing.complexity import classify_complexity

    result = classify_complexity(features, config)
    print(result.tier, result.breakdown)
"""

from dataclasses import dataclass, field

from automodel.config.models import ComplexityIndicator, EngineConfig
from automodel.core.types import ComplexityTier
from automodel.observability.logging import get_logger
from automodel.routing.features import PromptFeatures
from automodel.routing.scoring import pick_highest, score_indicator

log = get_logger(__name__)

DEFAULT_COMPLEXITY = ComplexityTier.MEDIUM


@dataclass(frozen=True, slots=True)
class ComplexityScore:
    """Outcome of complexity classification.

    Attributes:
        tier: The winning tier.
        scores: Total score per configured tier.
        breakdown: Per-tier list of the signals that contributed.
    """

    tier: ComplexityTier
    scores: dict[ComplexityTier, int] = field(default_factory=dict)
    breakdown: dict[ComplexityTier, list[str]] = field(default_factory=dict)

    @property
    def score(self) -> int:
        return self.scores.get(self.tier, 0)

    def describe(self) -> str:
        if self.score <= 0:
            return f"Complexity: {self.tier.value} (default, no indicators matched)"
        signals = ", ".join(self.breakdown.get(self.tier, []))
        return f"Complexity: {self.tier.value} (score {self.score}: {signals})"


def _score_tier(
    features: PromptFeatures,
    indicator: ComplexityIndicator,
    config: EngineConfig,
) -> tuple[int, list[str]]:
    weights = config.scoring
    detection = config.detection

    match = score_indicator(
        features,
        indicator.keywords,
        indicator.patterns,
        weights=weights,
        detection=detection,
    )
    score = match.score
    signals = [f"keyword '{kw}'" for kw in match.keyword_hits]
    signals.extend(f"pattern /{p}/" for p in match.pattern_hits)

    if detection.use_token_count and indicator.token_range.contains(features.token_estimate):
        score += weights.token_range
        signals.append(f"~{features.token_estimate} tokens")

    if (
        detection.use_file_count
        and features.file_count > 0
        and indicator.file_count is not None
        and indicator.file_count.contains(features.file_count)
    ):
        score += weights.file_count
        signals.append(f"{features.file_count} files")

    return score, signals


def classify_complexity(features: PromptFeatures, config: EngineConfig) -> ComplexityScore:
    """Classify how demanding a prompt is.

    Args:
        features: Extracted prompt features.
        config: Configuration snapshot.

    Returns:
        ComplexityScore. Empty prompts are always DEFAULT_COMPLEXITY.
    """
    if features.is_empty:
        return ComplexityScore(tier=DEFAULT_COMPLEXITY)

    scores: dict[ComplexityTier, int] = {}
    breakdown: dict[ComplexityTier, list[str]] = {}
    for tier, indicator in config.complexity_indicators.items():
        scores[tier], breakdown[tier] = _score_tier(features, indicator, config)

    tier = pick_highest(scores, DEFAULT_COMPLEXITY)

    log.debug(
        "selection.complexity.classified",
        tier=tier.value,
        scores={t.value: s for t, s in scores.items()},
        token_estimate=features.token_estimate,
    )
    return ComplexityScore(tier=tier, scores=scores, breakdown=breakdown)
