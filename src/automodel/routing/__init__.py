"""Routing module for automodel.

This module handles model selection, including:
- Lexical feature extraction from prompts
- Task-type and complexity classification
- Context-aware complexity adjustment (plans, subtasks, session size)
- Strategy matrix resolution with file-pattern overrides
- Fallback chain construction
"""

from automodel.routing.adjuster import ComplexityAdjustment, adjust_complexity
from automodel.routing.complexity import DEFAULT_COMPLEXITY, ComplexityScore, classify_complexity
from automodel.routing.engine import ModelSelector, SelectionRequest, SelectionResult, select_model
from automodel.routing.fallback import build_fallback_chain
from automodel.routing.features import (
    PromptFeatures,
    estimate_file_count,
    estimate_tokens,
    extract_features,
    extract_prompt_text,
)
from automodel.routing.resolver import Resolution, match_file_pattern, resolve
from automodel.routing.task_type import TaskTypeScore, classify_task_type
from automodel.routing.tiers import get_models_for_cell, parse_tier

__all__ = [
    # Features
    "PromptFeatures",
    "estimate_file_count",
    "estimate_tokens",
    "extract_features",
    "extract_prompt_text",
    # Classification
    "TaskTypeScore",
    "classify_task_type",
    "ComplexityScore",
    "DEFAULT_COMPLEXITY",
    "classify_complexity",
    # Adjustment
    "ComplexityAdjustment",
    "adjust_complexity",
    # Resolution
    "Resolution",
    "get_models_for_cell",
    "match_file_pattern",
    "parse_tier",
    "resolve",
    "build_fallback_chain",
    # Engine
    "ModelSelector",
    "SelectionRequest",
    "SelectionResult",
    "select_model",
]
