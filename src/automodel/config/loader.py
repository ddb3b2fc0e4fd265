"""Configuration loading and management for automodel.

This module finds, parses, normalizes and validates configuration documents.

Documents come in several on-disk schemas that grew over the plugin's life.
Each is normalized by a small adapter into the single internal shape that
EngineConfig validates, so no version-specific branching reaches the
classifiers. A document is layered over the built-in defaults: it only has to
spell out what it changes.

Functions:
    find_config_file: Locate the first configuration document
    parse_document: Parse YAML, Markdown frontmatter or JSON text
    detect_schema_version: Identify which on-disk schema a document uses
    normalize_document: Adapt any schema variant to the internal shape
    load_config: Load and validate a configuration document
    load_config_or_default: Load a document if one exists, else the defaults
    create_default_config: Write the default configuration to disk
"""

import copy
from enum import Enum
import json
import os
from pathlib import Path
import re
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel, to_snake
import yaml

# Load .env file from current directory and ~/.config/automodel/
load_dotenv()  # Current directory .env
load_dotenv(Path.home() / ".config" / "automodel" / ".env")  # Global .env

from automodel.config.models import (  # noqa: E402
    GENERAL_TASK_TYPE,
    EngineConfig,
    get_config_dir,
    get_default_config,
)
from automodel.core.errors import ConfigError  # noqa: E402
from automodel.observability.logging import get_logger  # noqa: E402

log = get_logger(__name__)

CONFIG_ENV_VAR = "AUTOMODEL_CONFIG"
PROJECT_CONFIG_DIR = ".automodel"
CONFIG_FILENAMES = ("config.md", "config.yaml", "config.yml", "config.json")

_FRONTMATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

# Sections merged key by key onto the defaults; everything else replaces.
_SHALLOW_MERGED = ("agent_strategies", "strategies")
_DEEP_MERGED = ("detection",)

_LOG_LEVEL_ALIASES = {"quiet": "minimal"}


class SchemaVersion(str, Enum):
    """On-disk configuration schema variants."""

    V1 = "v1"  # models.<tier>.model, indicators, fallback
    V2 = "v2"  # strategies, taskTypeIndicators, indicators
    V3 = "v3"  # defaultModel as {providerID, modelID}, detection.contextAware
    STANDALONE = "standalone"  # complexityIndicators.tokenRanges, overrides.filePatterns
    CURRENT = "current"


def find_config_file(directory: Path | None = None) -> Path | None:
    """Locate the configuration document to use.

    Search order, first hit wins:
        1. $AUTOMODEL_CONFIG
        2. <directory>/.automodel/config.{md,yaml,yml,json}
        3. ~/.config/automodel/config.{md,yaml,yml,json}

    Args:
        directory: Project directory. Defaults to the current directory.

    Returns:
        Path to the document, or None when nothing is found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    base = directory if directory is not None else Path.cwd()
    for config_dir in (base / PROJECT_CONFIG_DIR, get_config_dir()):
        for name in CONFIG_FILENAMES:
            candidate = config_dir / name
            if candidate.is_file():
                return candidate

    return None


def parse_document(content: str, *, suffix: str = ".yaml") -> dict[str, Any]:
    """Parse a configuration document.

    Markdown documents carry YAML between leading ``---`` lines. Any text that
    starts with frontmatter is treated the same way regardless of suffix.

    Args:
        content: Raw document text.
        suffix: File suffix used to pick the parser (".md", ".json", ...).

    Returns:
        The parsed mapping. An empty document yields an empty dict.

    Raises:
        ConfigError: If the text cannot be parsed or is not a mapping.
    """
    text = content
    match = _FRONTMATTER.match(content)
    if match:
        text = match.group(1)
    elif suffix == ".md":
        raise ConfigError("Markdown configuration has no YAML frontmatter")

    try:
        data = json.loads(text) if suffix == ".json" and not match else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(
            f"Failed to parse configuration document: {e}",
            details={"parse_error": str(e)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration document must be a mapping, got {type(data).__name__}",
        )
    return data


def detect_schema_version(raw: dict[str, Any]) -> SchemaVersion:
    """Identify the on-disk schema a document was written against."""
    complexity = raw.get("complexityIndicators") or raw.get("complexity_indicators")
    if isinstance(complexity, dict) and any(
        isinstance(v, dict) and "tokenRanges" in v for v in complexity.values()
    ):
        return SchemaVersion.STANDALONE
    if isinstance(raw.get("overrides"), dict):
        return SchemaVersion.STANDALONE

    models = raw.get("models")
    if isinstance(models, dict) and "strategies" not in raw:
        return SchemaVersion.V1

    detection = raw.get("detection")
    if isinstance(raw.get("defaultModel"), dict) or (
        isinstance(detection, dict) and "contextAware" in detection
    ):
        return SchemaVersion.V3

    if "indicators" in raw or "taskTypeIndicators" in raw or "filePatternOverrides" in raw:
        return SchemaVersion.V2

    return SchemaVersion.CURRENT


def _adapt_v1_models(doc: dict[str, Any]) -> None:
    """Turn ``models.<tier>.model`` and ``taskTypes`` into a balanced strategy."""
    models = doc.pop("models", None)
    task_types = doc.pop("taskTypes", None) or doc.pop("task_types", None)
    if not isinstance(models, dict) or "strategies" in doc:
        return

    general: dict[str, Any] = {}
    for tier in ("simple", "medium", "complex", "advanced"):
        entry = models.get(tier)
        if isinstance(entry, dict) and entry.get("model"):
            general[tier] = entry["model"]
        elif isinstance(entry, str):
            general[tier] = entry

    rows: dict[str, dict[str, Any]] = {GENERAL_TASK_TYPE: general}

    planning = models.get("planning")
    if isinstance(planning, dict):
        simple = planning.get("simple")
        complex_ = planning.get("complex")
        rows["planning"] = {
            tier: model
            for tier, model in (
                ("simple", simple),
                ("medium", simple),
                ("complex", complex_),
                ("advanced", complex_),
            )
            if model
        }

    if isinstance(task_types, dict):
        indicators = doc.setdefault("task_type_indicators", {})
        for name, task in task_types.items():
            if not isinstance(task, dict):
                continue
            indicators[name] = {"keywords": task.get("keywords", [])}
            task_models = task.get("models") or {}
            fallback = task_models.get("default")
            simple = task_models.get("simple") or fallback
            complex_ = task_models.get("complex") or fallback
            row = {
                tier: model
                for tier, model in (
                    ("simple", simple),
                    ("medium", simple),
                    ("complex", complex_),
                    ("advanced", complex_),
                )
                if model
            }
            if row:
                rows[name] = row
        indicators.setdefault(GENERAL_TASK_TYPE, {"keywords": []})

    doc.setdefault("strategies", {})["balanced"] = rows


def _adapt_default_model(doc: dict[str, Any]) -> None:
    """Join a ``{providerID, modelID}`` default model into one identifier."""
    for key in ("defaultModel", "default_model"):
        value = doc.get(key)
        if isinstance(value, dict):
            provider = value.get("providerID") or value.get("provider")
            model = value.get("modelID") or value.get("model")
            doc[key] = f"{provider}/{model}"


def _adapt_complexity_indicators(doc: dict[str, Any]) -> None:
    """Rename ``indicators`` and expand ``tokenRanges: [min, max]``."""
    if "indicators" in doc and "complexityIndicators" not in doc:
        doc["complexityIndicators"] = doc.pop("indicators")

    for key in ("complexityIndicators", "complexity_indicators"):
        table = doc.get(key)
        if not isinstance(table, dict):
            continue
        for entry in table.values():
            if not isinstance(entry, dict):
                continue
            ranges = entry.pop("tokenRanges", None)
            if isinstance(ranges, list) and len(ranges) == 2:
                entry["tokenRange"] = {"min": ranges[0], "max": ranges[1]}


def _adapt_overrides(doc: dict[str, Any]) -> None:
    """Fold ``overrides.filePatterns`` into ``file_pattern_overrides``."""
    overrides = doc.pop("overrides", None)
    if not isinstance(overrides, dict):
        return
    patterns = overrides.get("filePatterns") or []
    existing = list(doc.pop("filePatternOverrides", None) or doc.pop("file_pattern_overrides", []))
    for entry in patterns:
        if isinstance(entry, dict):
            entry = dict(entry)
            entry.setdefault("reason", f"Files matching {entry.get('pattern')}")
            existing.append(entry)
    doc["file_pattern_overrides"] = existing


def _adapt_log_level(doc: dict[str, Any]) -> None:
    for key in ("logLevel", "log_level"):
        value = doc.get(key)
        if isinstance(value, str):
            doc[key] = _LOG_LEVEL_ALIASES.get(value, value)


def _snake_keys(value: Any) -> Any:
    """Recursively snake_case mapping keys of a purely structural subtree."""
    if isinstance(value, dict):
        return {to_snake(str(k)): _snake_keys(v) for k, v in value.items()}
    return value


def _snake_top_level(doc: dict[str, Any]) -> dict[str, Any]:
    aliases = {to_camel(name): name for name in EngineConfig.model_fields}
    result: dict[str, Any] = {}
    for key, value in doc.items():
        name = aliases.get(key, key)
        if name in _DEEP_MERGED:
            value = _snake_keys(value)
        result[name] = value
    return result


def normalize_document(raw: dict[str, Any]) -> dict[str, Any]:
    """Adapt a document of any supported schema to the internal shape.

    Every adapter is idempotent and only touches the keys it knows, so
    documents that mix schema generations normalize cleanly.

    Args:
        raw: Parsed document. Not modified.

    Returns:
        A new mapping with snake_case top-level keys.
    """
    doc = copy.deepcopy(raw)
    version = detect_schema_version(doc)

    _adapt_v1_models(doc)
    _adapt_default_model(doc)
    _adapt_complexity_indicators(doc)
    _adapt_overrides(doc)
    _adapt_log_level(doc)
    doc.pop("costOptimization", None)

    log.debug("config.document.normalized", schema_version=version.value, keys=sorted(doc))
    return _snake_top_level(doc)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_with_defaults(document: dict[str, Any]) -> dict[str, Any]:
    """Layer a normalized document over the built-in defaults.

    ``strategies`` and ``agent_strategies`` merge one level deep, so a
    document replaces whole strategies but keeps the other built-in ones.
    ``detection`` merges recursively. Every other section replaces the
    default outright.
    """
    merged = get_default_config().model_dump(mode="json")
    for key, value in document.items():
        if key in _SHALLOW_MERGED and isinstance(value, dict):
            merged[key] = {**merged.get(key, {}), **value}
        elif key in _DEEP_MERGED and isinstance(value, dict):
            merged[key] = _deep_merge(merged.get(key, {}), value)
        else:
            merged[key] = value
    return merged


def _format_validation_error(e: PydanticValidationError) -> str:
    error_messages = []
    for error in e.errors():
        loc = ".".join(str(x) for x in error["loc"])
        msg = error["msg"]
        error_messages.append(f"  - {loc}: {msg}" if loc else f"  - {msg}")
    return "Configuration validation failed:\n" + "\n".join(error_messages)


def build_config(raw: dict[str, Any], *, config_file: str | None = None) -> EngineConfig:
    """Normalize, merge and validate a parsed document.

    Raises:
        ConfigError: If the document fails validation.
    """
    document = merge_with_defaults(normalize_document(raw))
    try:
        return EngineConfig.model_validate(document)
    except PydanticValidationError as e:
        raise ConfigError(
            _format_validation_error(e),
            config_file=config_file,
            details={"error_count": e.error_count()},
        ) from e


def load_config(config_path: Path | None = None) -> EngineConfig:
    """Load configuration from a document on disk.

    Args:
        config_path: Path to the document. Defaults to the first document
            found by find_config_file().

    Returns:
        Validated EngineConfig instance.

    Raises:
        ConfigError: If no document exists, or it is malformed, or it fails
            validation.
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            raise ConfigError(
                "No configuration file found. "
                "Run `automodel config init` to create default configuration.",
            )

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}. "
            "Run `automodel config init` to create default configuration.",
            config_file=str(config_path),
        )

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            config_file=str(config_path),
        ) from e

    try:
        raw = parse_document(content, suffix=config_path.suffix.lower())
    except ConfigError as e:
        raise ConfigError(e.message, config_file=str(config_path), details=e.details) from e

    config = build_config(raw, config_file=str(config_path))
    log.info("config.file.loaded", path=str(config_path), strategies=len(config.strategies))
    return config


def load_config_or_default(config_path: Path | None = None) -> EngineConfig:
    """Load configuration, falling back to the built-in defaults.

    An explicit path must exist. Without one, a missing document is not an
    error and yields get_default_config(). Malformed documents still raise.

    Raises:
        ConfigError: If the located document is malformed or invalid.
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            log.info("config.defaults.used")
            return get_default_config()
    return load_config(config_path)


def create_default_config(
    config_dir: Path | None = None,
    *,
    overwrite: bool = False,
) -> Path:
    """Write the default configuration as config.yaml.

    Args:
        config_dir: Directory to create the file in. Defaults to
            ~/.config/automodel/
        overwrite: If True, overwrite an existing file. Defaults to False.

    Returns:
        Path to the written file.

    Raises:
        ConfigError: If the file exists and overwrite=False.
    """
    if config_dir is None:
        config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    config_path = config_dir / "config.yaml"
    if config_path.exists() and not overwrite:
        raise ConfigError(
            f"Configuration file already exists: {config_path}",
            config_file=str(config_path),
        )

    config_dict = get_default_config().model_dump(mode="json")
    with config_path.open("w", encoding="utf-8") as f:
        yaml.dump(
            config_dict,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    return config_path


def config_to_yaml(config: EngineConfig) -> str:
    """Render a configuration snapshot as YAML."""
    return yaml.dump(
        config.model_dump(mode="json"),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
