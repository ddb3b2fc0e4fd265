"""Task-type classification.

Scores every configured task type against the prompt and picks the strictly
highest. Declaration order of ``task_type_indicators`` breaks ties, and a
prompt that scores nothing anywhere is a ``general`` task.

Usage:
    from automodel.routing.features import extract_features
    from automodel.routing.task_type import classify_task_type

    result = classify_task_type(extract_features("fix typo in readme"), config)
    print(result.task_type, result.scores)
"""

from dataclasses import dataclass, field

from automodel.config.models import GENERAL_TASK_TYPE, EngineConfig
from automodel.core.types import TaskType
from automodel.observability.logging import get_logger
from automodel.routing.features import PromptFeatures
from automodel.routing.scoring import IndicatorMatch, pick_highest, score_indicator

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TaskTypeScore:
    """Outcome of task-type classification.

    Attributes:
        task_type: The winning task type.
        scores: Score per configured task type, in declaration order.
        matches: Keyword and pattern hits per task type.
    """

    task_type: TaskType
    scores: dict[TaskType, int] = field(default_factory=dict)
    matches: dict[TaskType, IndicatorMatch] = field(default_factory=dict)

    @property
    def score(self) -> int:
        return self.scores.get(self.task_type, 0)

    def describe(self) -> str:
        """One-line explanation for the reasoning trace."""
        if self.score <= 0:
            return f"Task type: {self.task_type} (no indicators matched)"
        match = self.matches[self.task_type]
        hits = [*match.keyword_hits, *(f"/{p}/" for p in match.pattern_hits)]
        return f"Task type: {self.task_type} (score {self.score}: {', '.join(hits)})"


def classify_task_type(features: PromptFeatures, config: EngineConfig) -> TaskTypeScore:
    """Classify the kind of work a prompt asks for.

    Args:
        features: Extracted prompt features.
        config: Configuration snapshot.

    Returns:
        TaskTypeScore. Empty prompts are always ``general``.
    """
    if features.is_empty:
        return TaskTypeScore(task_type=GENERAL_TASK_TYPE)

    matches = {
        name: score_indicator(
            features,
            indicator.keywords,
            indicator.patterns,
            weights=config.scoring,
            detection=config.detection,
        )
        for name, indicator in config.task_type_indicators.items()
    }
    scores = {name: match.score for name, match in matches.items()}
    task_type = pick_highest(scores, GENERAL_TASK_TYPE)

    log.debug("selection.task_type.classified", task_type=task_type, scores=scores)
    return TaskTypeScore(task_type=task_type, scores=scores, matches=matches)
