"""automodel core module - shared types and errors."""

from automodel.core.errors import AutoModelError, ConfigError, ValidationError
from automodel.core.types import (
    ComplexityTier,
    HostPayload,
    ModelId,
    ModelRef,
    Result,
    StrategyName,
    TaskType,
)

__all__ = [
    # Types
    "Result",
    "ComplexityTier",
    "ModelRef",
    "ModelId",
    "TaskType",
    "StrategyName",
    "HostPayload",
    # Errors
    "AutoModelError",
    "ConfigError",
    "ValidationError",
]
