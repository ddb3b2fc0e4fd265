"""Unit tests for automodel.routing.task_type."""

from typing import Any

from automodel.config.models import EngineConfig
from automodel.routing.features import extract_features
from automodel.routing.task_type import classify_task_type


class TestClassifyTaskType:
    """Tests against the built-in indicator table."""

    def test_fix_typo(self, default_config: EngineConfig) -> None:
        result = classify_task_type(extract_features("fix typo in readme"), default_config)
        assert result.task_type == "coding-simple"
        assert result.scores["coding-simple"] == 35
        assert result.scores["documentation"] == 10

    def test_debugging(self, default_config: EngineConfig) -> None:
        result = classify_task_type(
            extract_features("Debug the crash in the login flow"), default_config
        )
        assert result.task_type == "debugging"

    def test_planning(self, default_config: EngineConfig) -> None:
        result = classify_task_type(
            extract_features("Write a plan for the new architecture"), default_config
        )
        assert result.task_type == "planning"

    def test_documentation(self, default_config: EngineConfig) -> None:
        result = classify_task_type(extract_features("update the readme"), default_config)
        assert result.task_type == "documentation"
        assert result.describe() == "Task type: documentation (score 10: readme)"

    def test_keywords_disabled(self, default_config: EngineConfig) -> None:
        detection = default_config.detection.model_copy(update={"use_keywords": False})
        config = default_config.model_copy(update={"detection": detection})
        result = classify_task_type(extract_features("update the readme"), config)
        assert result.task_type == "general"

    def test_empty_prompt_is_general(self, default_config: EngineConfig) -> None:
        result = classify_task_type(extract_features(""), default_config)
        assert result.task_type == "general"
        assert result.scores == {}
        assert result.describe() == "Task type: general (no indicators matched)"

    def test_nothing_matched_is_general(self, default_config: EngineConfig) -> None:
        result = classify_task_type(extract_features("zzz qqq"), default_config)
        assert result.task_type == "general"
        assert result.score == 0

    def test_describe_lists_patterns(self, default_config: EngineConfig) -> None:
        result = classify_task_type(extract_features("fix typo"), default_config)
        assert result.describe().startswith("Task type: coding-simple (score 35: fix typo, typo")
        assert "/" in result.describe()


class TestDeclarationOrder:
    def test_tie_goes_to_first_declared(self, minimal_document: dict[str, Any]) -> None:
        minimal_document["task_type_indicators"] = {
            "review": {"keywords": ["parser"]},
            "debugging": {"keywords": ["parser"]},
            "general": {},
        }
        config = EngineConfig.model_validate(minimal_document)
        result = classify_task_type(extract_features("the parser"), config)
        assert result.task_type == "review"
        assert list(result.scores) == ["review", "debugging", "general"]

    def test_malformed_pattern_ignored(self, minimal_document: dict[str, Any]) -> None:
        minimal_document["task_type_indicators"]["debugging"]["patterns"] = ["(unclosed"]
        config = EngineConfig.model_validate(minimal_document)
        result = classify_task_type(extract_features("a bug (unclosed"), config)
        assert result.task_type == "debugging"
        assert result.score == 10
