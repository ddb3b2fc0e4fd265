"""Configuration module for automodel.

Pydantic models for the engine configuration, document loading with schema
adapters, and the snapshot store.
"""

from automodel.config.loader import (
    SchemaVersion,
    build_config,
    config_to_yaml,
    create_default_config,
    detect_schema_version,
    find_config_file,
    load_config,
    load_config_or_default,
    normalize_document,
    parse_document,
)
from automodel.config.models import (
    ComplexityIndicator,
    ContextAwareConfig,
    ContextSizeConfig,
    CountRange,
    DetectionConfig,
    EngineConfig,
    FilePatternOverride,
    PlanAwarenessConfig,
    ScoringWeights,
    SubtaskDetectionConfig,
    TaskTypeIndicator,
    TokenRange,
    get_config_dir,
    get_default_config,
)
from automodel.config.store import ConfigStore, get_config_store, reset_config_store

__all__ = [
    # Models
    "ComplexityIndicator",
    "ContextAwareConfig",
    "ContextSizeConfig",
    "CountRange",
    "DetectionConfig",
    "EngineConfig",
    "FilePatternOverride",
    "PlanAwarenessConfig",
    "ScoringWeights",
    "SubtaskDetectionConfig",
    "TaskTypeIndicator",
    "TokenRange",
    "get_config_dir",
    "get_default_config",
    # Loader
    "SchemaVersion",
    "build_config",
    "config_to_yaml",
    "create_default_config",
    "detect_schema_version",
    "find_config_file",
    "load_config",
    "load_config_or_default",
    "normalize_document",
    "parse_document",
    # Store
    "ConfigStore",
    "get_config_store",
    "reset_config_store",
]
