"""Indicator scoring shared by the task-type and complexity classifiers.

An indicator scores a prompt by adding a fixed weight for every keyword found
in the lower-cased prompt and for every regex pattern that matches the raw
prompt. Malformed patterns never match; they are compiled once and reported
at debug level.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
import re
from typing import TypeVar

from automodel.config.models import DetectionConfig, ScoringWeights
from automodel.observability.logging import get_logger
from automodel.routing.features import PromptFeatures

log = get_logger(__name__)

K = TypeVar("K")


@dataclass(frozen=True, slots=True)
class IndicatorMatch:
    """Lexical matches of one indicator against one prompt."""

    score: int
    keyword_hits: tuple[str, ...] = ()
    pattern_hits: tuple[str, ...] = ()


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile a case-insensitive pattern, or return None if it is malformed."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        log.debug("scoring.pattern.invalid", pattern=pattern, error=str(e))
        return None


def score_indicator(
    features: PromptFeatures,
    keywords: Iterable[str],
    patterns: Iterable[str],
    *,
    weights: ScoringWeights,
    detection: DetectionConfig,
) -> IndicatorMatch:
    """Score the lexical part of an indicator.

    Keywords are expected lower-cased (the config models normalize them).
    """
    keyword_hits: tuple[str, ...] = ()
    if detection.use_keywords:
        keyword_hits = tuple(kw for kw in keywords if kw and kw in features.normalized)

    pattern_hits: list[str] = []
    if detection.use_patterns:
        for pattern in patterns:
            compiled = compile_pattern(pattern)
            if compiled is not None and compiled.search(features.raw):
                pattern_hits.append(pattern)

    score = len(keyword_hits) * weights.keyword + len(pattern_hits) * weights.pattern
    return IndicatorMatch(
        score=score,
        keyword_hits=keyword_hits,
        pattern_hits=tuple(pattern_hits),
    )


def pick_highest(scores: Mapping[K, int], default: K) -> K:
    """Return the key with the strictly highest positive score.

    Ties keep the first key in mapping order. With no positive score the
    default is returned.
    """
    best = default
    best_score = 0
    for key, score in scores.items():
        if score > best_score:
            best, best_score = key, score
    return best
