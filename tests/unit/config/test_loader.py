"""Unit tests for automodel.config.loader module."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from automodel.config.loader import (
    SchemaVersion,
    build_config,
    create_default_config,
    detect_schema_version,
    find_config_file,
    load_config,
    load_config_or_default,
    normalize_document,
    parse_document,
)
from automodel.config.models import EngineConfig, get_default_config
from automodel.core.errors import ConfigError
from automodel.core.types import ComplexityTier


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project directory with an empty .automodel/ folder."""
    project = tmp_path / "project"
    (project / ".automodel").mkdir(parents=True)
    return project


def _write_yaml(path: Path, content: dict[str, Any]) -> Path:
    with path.open("w") as f:
        yaml.dump(content, f)
    return path


class TestParseDocument:
    """Tests for parse_document."""

    def test_yaml(self) -> None:
        assert parse_document("enabled: false\n") == {"enabled": False}

    def test_markdown_frontmatter(self) -> None:
        content = "---\ndefaultModel: acme/default\nlogLevel: verbose\n---\n\n# Notes\nIgnored.\n"
        assert parse_document(content, suffix=".md") == {
            "defaultModel": "acme/default",
            "logLevel": "verbose",
        }

    def test_markdown_without_frontmatter_rejected(self) -> None:
        with pytest.raises(ConfigError, match="frontmatter"):
            parse_document("# Just notes\n", suffix=".md")

    def test_json(self) -> None:
        assert parse_document('{"enabled": true}', suffix=".json") == {"enabled": True}

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigError, match="Failed to parse"):
            parse_document("{not json", suffix=".json")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ConfigError, match="Failed to parse"):
            parse_document("key: [unclosed\n")

    def test_empty_document(self) -> None:
        assert parse_document("") == {}

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            parse_document("- a\n- b\n")


class TestSchemaVersions:
    """Tests for schema detection and adapters."""

    def test_detect_v1(self) -> None:
        raw = {"models": {"simple": {"model": "acme/s"}}, "indicators": {}}
        assert detect_schema_version(raw) is SchemaVersion.V1

    def test_detect_v2(self) -> None:
        raw = {"strategies": {}, "taskTypeIndicators": {}, "indicators": {}}
        assert detect_schema_version(raw) is SchemaVersion.V2

    def test_detect_v3(self) -> None:
        raw = {"defaultModel": {"providerID": "acme", "modelID": "big"}, "strategies": {}}
        assert detect_schema_version(raw) is SchemaVersion.V3

    def test_detect_standalone(self) -> None:
        raw = {"complexityIndicators": {"simple": {"keywords": [], "tokenRanges": [0, 500]}}}
        assert detect_schema_version(raw) is SchemaVersion.STANDALONE

    def test_detect_current(self) -> None:
        assert detect_schema_version({"default_model": "acme/x"}) is SchemaVersion.CURRENT

    def test_normalize_does_not_mutate_input(self) -> None:
        raw = {"defaultModel": {"providerID": "acme", "modelID": "big"}}
        normalize_document(raw)
        assert raw == {"defaultModel": {"providerID": "acme", "modelID": "big"}}

    def test_v1_models_become_balanced_strategy(self) -> None:
        config = build_config(
            {
                "defaultModel": "acme/default",
                "models": {
                    "simple": {"model": "acme/s", "description": "cheap"},
                    "medium": {"model": "acme/m"},
                    "complex": {"model": "acme/c"},
                    "advanced": {"model": "acme/a"},
                    "planning": {"simple": "acme/ps", "complex": "acme/pc"},
                },
                "fallback": ["acme/fb"],
            }
        )
        balanced = config.strategies["balanced"]
        assert balanced["general"][ComplexityTier.SIMPLE] == "acme/s"
        assert balanced["general"][ComplexityTier.ADVANCED] == "acme/a"
        assert balanced["planning"][ComplexityTier.MEDIUM] == "acme/ps"
        assert balanced["planning"][ComplexityTier.ADVANCED] == "acme/pc"
        assert config.fallback == ("acme/fb",)

    def test_v1_task_types(self) -> None:
        config = build_config(
            {
                "defaultModel": "acme/default",
                "models": {"simple": {"model": "acme/s"}, "medium": {"model": "acme/m"}},
                "taskTypes": {
                    "testing": {
                        "keywords": ["pytest"],
                        "models": {"simple": "acme/ts", "default": "acme/td"},
                    },
                },
            }
        )
        assert list(config.task_type_indicators) == ["testing", "general"]
        assert config.strategies["balanced"]["testing"][ComplexityTier.COMPLEX] == "acme/td"

    def test_v2_indicators_renamed(self) -> None:
        config = build_config(
            {
                "indicators": {
                    "simple": {"keywords": ["tiny"], "tokenRange": {"min": 0, "max": 9}},
                },
            }
        )
        assert list(config.complexity_indicators) == [ComplexityTier.SIMPLE]
        assert config.complexity_indicators[ComplexityTier.SIMPLE].keywords == ("tiny",)

    def test_v3_default_model_and_context_aware(self) -> None:
        config = build_config(
            {
                "defaultModel": {"providerID": "acme", "modelID": "big"},
                "detection": {"contextAware": {"planAwareness": {"minStepsForReduction": 5}}},
            }
        )
        plan = config.detection.context_aware.plan_awareness
        default_plan = get_default_config().detection.context_aware.plan_awareness
        assert config.default_model == "acme/big"
        assert plan.min_steps_for_reduction == 5
        # Untouched nested settings keep their defaults
        assert plan.plan_indicators == default_plan.plan_indicators

    def test_standalone_token_ranges_and_overrides(self) -> None:
        config = build_config(
            {
                "logLevel": "quiet",
                "complexityIndicators": {
                    "simple": {"keywords": ["tiny"], "tokenRanges": [0, 500]},
                },
                "overrides": {
                    "filePatterns": [{"pattern": "**/core/**", "minComplexity": "complex"}],
                },
            }
        )
        simple = config.complexity_indicators[ComplexityTier.SIMPLE]
        assert (simple.token_range.min, simple.token_range.max) == (0, 500)
        assert config.log_level == "minimal"
        override = config.file_pattern_overrides[0]
        assert override.pattern == "**/core/**"
        assert override.min_complexity is ComplexityTier.COMPLEX
        assert override.reason

    def test_strategies_merge_per_strategy(self) -> None:
        config = build_config(
            {"strategies": {"balanced": {"general": {"simple": "acme/only"}}}}
        )
        assert config.strategies["balanced"] == {"general": {ComplexityTier.SIMPLE: "acme/only"}}
        assert "cost-optimized" in config.strategies

    def test_active_agents_kept(self) -> None:
        config = build_config({"activeAgents": ["build", "auto-optimized"]})
        assert config.active_agents == ("build", "auto-optimized")

    def test_empty_document_is_default(self) -> None:
        assert build_config({}) == get_default_config()


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_yaml(self, project_dir: Path) -> None:
        path = _write_yaml(
            project_dir / ".automodel" / "config.yaml",
            {"default_model": "acme/default", "log_level": "verbose"},
        )
        config = load_config(path)
        assert isinstance(config, EngineConfig)
        assert config.default_model == "acme/default"
        assert config.log_level == "verbose"

    def test_load_markdown(self, project_dir: Path) -> None:
        path = project_dir / ".automodel" / "config.md"
        path.write_text("---\nenabled: false\n---\n# Routing notes\n")
        assert load_config(path).enabled is False

    def test_load_json(self, project_dir: Path) -> None:
        path = project_dir / ".automodel" / "config.json"
        path.write_text(json.dumps({"defaultStrategy": "cost-optimized"}))
        assert load_config(path).default_strategy == "cost-optimized"

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.yaml"
        with pytest.raises(ConfigError, match="not found") as exc_info:
            load_config(path)
        assert exc_info.value.config_file == str(path)

    def test_no_file_discovered(self) -> None:
        with pytest.raises(ConfigError, match="config init"):
            load_config()

    def test_validation_errors_formatted(self, project_dir: Path) -> None:
        path = _write_yaml(
            project_dir / ".automodel" / "config.yaml",
            {"default_strategy": "turbo"},
        )
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert "Configuration validation failed" in exc_info.value.message
        assert "default_strategy 'turbo'" in exc_info.value.message
        assert exc_info.value.config_file == str(path)

    def test_parse_error_names_file(self, project_dir: Path) -> None:
        path = project_dir / ".automodel" / "config.yaml"
        path.write_text("strategies: [unclosed\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.config_file == str(path)


class TestDiscovery:
    """Tests for find_config_file and load_config_or_default."""

    def test_nothing_found(self, project_dir: Path) -> None:
        assert find_config_file(project_dir) is None

    def test_project_file_found(self, project_dir: Path) -> None:
        path = _write_yaml(project_dir / ".automodel" / "config.yml", {"enabled": True})
        assert find_config_file(project_dir) == path

    def test_markdown_preferred(self, project_dir: Path) -> None:
        _write_yaml(project_dir / ".automodel" / "config.yaml", {"enabled": True})
        md = project_dir / ".automodel" / "config.md"
        md.write_text("---\nenabled: true\n---\n")
        assert find_config_file(project_dir) == md

    def test_user_file_found(self, project_dir: Path) -> None:
        user_dir = Path.home() / ".config" / "automodel"
        user_dir.mkdir(parents=True)
        path = _write_yaml(user_dir / "config.yaml", {"enabled": True})
        assert find_config_file(project_dir) == path

    def test_env_var_wins(
        self, project_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_yaml(project_dir / ".automodel" / "config.yaml", {"enabled": True})
        explicit = _write_yaml(tmp_path / "explicit.yaml", {"enabled": False})
        monkeypatch.setenv("AUTOMODEL_CONFIG", str(explicit))
        assert find_config_file(project_dir) == explicit

    def test_defaults_when_nothing_found(self) -> None:
        assert load_config_or_default() == get_default_config()

    def test_explicit_missing_path_still_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config_or_default(tmp_path / "missing.yaml")


class TestCreateDefaultConfig:
    """Tests for create_default_config."""

    def test_creates_file(self, tmp_path: Path) -> None:
        path = create_default_config(tmp_path / "cfg")
        assert path.name == "config.yaml"
        assert path.exists()

    def test_written_config_round_trips(self, tmp_path: Path) -> None:
        path = create_default_config(tmp_path)
        assert load_config(path) == get_default_config()

    def test_written_yaml_uses_snake_case(self, tmp_path: Path) -> None:
        content = yaml.safe_load(create_default_config(tmp_path).read_text())
        assert "default_model" in content
        assert "file_pattern_overrides" in content

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        create_default_config(tmp_path)
        with pytest.raises(ConfigError, match="already exists"):
            create_default_config(tmp_path)

    def test_overwrite(self, tmp_path: Path) -> None:
        path = create_default_config(tmp_path)
        path.write_text("enabled: false\n")
        create_default_config(tmp_path, overwrite=True)
        assert load_config(path).enabled is True

    def test_defaults_to_user_config_dir(self) -> None:
        path = create_default_config()
        assert path == Path.home() / ".config" / "automodel" / "config.yaml"
