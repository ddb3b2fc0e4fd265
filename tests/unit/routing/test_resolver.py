"""Unit tests for automodel.routing.resolver."""

from typing import Any

import pytest

from automodel.config.models import EngineConfig
from automodel.core.types import ComplexityTier
from automodel.routing.resolver import find_override, match_file_pattern, resolve


def _with_overrides(document: dict[str, Any], *overrides: dict[str, Any]) -> EngineConfig:
    document["file_pattern_overrides"] = list(overrides)
    return EngineConfig.model_validate(document)


class TestMatchFilePattern:
    @pytest.mark.parametrize(
        ("pattern", "path"),
        [
            ("**/security/**", "app/security/login.ts"),
            ("**/security/**", "security/login.ts"),
            ("*.sql", "schema.sql"),
            ("*.sql", "db/schema.sql"),
            ("src/*.py", "src\\app.py"),
            ("src/app.py", "./src/app.py"),
            ("migrations", "db/migrations/0001_initial.py"),
        ],
    )
    def test_matches(self, pattern: str, path: str) -> None:
        assert match_file_pattern(pattern, path)

    @pytest.mark.parametrize(
        ("pattern", "path"),
        [
            ("**/security/**", "app/insecure/login.ts"),
            ("*.sql", "schema.py"),
            ("*.SQL", "schema.sql"),
            ("", "schema.sql"),
            ("*.sql", ""),
        ],
    )
    def test_no_match(self, pattern: str, path: str) -> None:
        assert not match_file_pattern(pattern, path)


class TestLookupChain:
    def test_cell(self, minimal_config: EngineConfig) -> None:
        resolution = resolve("balanced", "debugging", ComplexityTier.COMPLEX, [], minimal_config)
        assert resolution.models == ["acme/large", "acme/medium"]
        assert resolution.override is None
        assert resolution.reasoning[0].startswith("Matrix balanced/debugging/complex")

    def test_general_row(self, minimal_config: EngineConfig) -> None:
        resolution = resolve("balanced", "debugging", ComplexityTier.SIMPLE, [], minimal_config)
        assert resolution.models == ["acme/small"]
        assert "using general row" in resolution.reasoning[0]

    def test_default_model(self, minimal_config: EngineConfig) -> None:
        resolution = resolve("balanced", "debugging", ComplexityTier.MEDIUM, [], minimal_config)
        assert resolution.models == ["acme/default"]
        assert "using default model" in resolution.reasoning[0]

    def test_unknown_task_type(self, minimal_config: EngineConfig) -> None:
        resolution = resolve("balanced", "review", ComplexityTier.SIMPLE, [], minimal_config)
        assert resolution.models == ["acme/small"]
        assert resolution.task_type == "review"


class TestOverrides:
    def test_model_override(self, minimal_document: dict[str, Any]) -> None:
        config = _with_overrides(
            minimal_document,
            {"pattern": "**/security/**", "model": "acme/secure", "reason": "Security code"},
        )
        resolution = resolve(
            "balanced", "debugging", ComplexityTier.COMPLEX, ["app/security/auth.py"], config
        )
        assert resolution.models == ["acme/secure"]
        assert resolution.override_reason == "Security code"
        assert resolution.matched_file == "app/security/auth.py"
        assert "Override '**/security/**' matched app/security/auth.py" in resolution.reasoning[1]

    def test_task_type_override(self, minimal_document: dict[str, Any]) -> None:
        config = _with_overrides(
            minimal_document,
            {"pattern": "**/legacy/**", "task_type_override": "debugging"},
        )
        resolution = resolve("balanced", "general", ComplexityTier.COMPLEX, ["legacy/x.py"], config)
        assert resolution.task_type == "debugging"
        assert resolution.models == ["acme/large", "acme/medium"]
        assert resolution.override_reason == "Files matching **/legacy/**"

    def test_min_complexity_raises_tier(self, minimal_document: dict[str, Any]) -> None:
        config = _with_overrides(
            minimal_document,
            {"pattern": "*.sql", "min_complexity": "complex"},
        )
        resolution = resolve(
            "balanced", "debugging", ComplexityTier.SIMPLE, ["db/schema.sql"], config
        )
        assert resolution.tier is ComplexityTier.COMPLEX
        assert resolution.models == ["acme/large", "acme/medium"]

    def test_min_complexity_never_lowers(self, minimal_document: dict[str, Any]) -> None:
        config = _with_overrides(
            minimal_document,
            {"pattern": "*.sql", "min_complexity": "simple"},
        )
        resolution = resolve(
            "balanced", "debugging", ComplexityTier.COMPLEX, ["db/schema.sql"], config
        )
        assert resolution.tier is ComplexityTier.COMPLEX
        assert resolution.models == ["acme/large", "acme/medium"]
        assert resolution.override is not None

    def test_first_matching_override_wins(self, minimal_document: dict[str, Any]) -> None:
        config = _with_overrides(
            minimal_document,
            {"pattern": "*.md", "model": "acme/docs"},
            {"pattern": "docs/**", "model": "acme/other"},
        )
        resolution = resolve(
            "balanced", "general", ComplexityTier.SIMPLE, ["docs/index.md"], config
        )
        assert resolution.models == ["acme/docs"]

    def test_no_matching_file(self, minimal_document: dict[str, Any]) -> None:
        config = _with_overrides(minimal_document, {"pattern": "*.sql", "model": "acme/db"})
        resolution = resolve("balanced", "general", ComplexityTier.SIMPLE, ["app.py"], config)
        assert resolution.models == ["acme/small"]
        assert resolution.override_reason is None

    def test_find_override_skips_non_strings(self, minimal_document: dict[str, Any]) -> None:
        config = _with_overrides(minimal_document, {"pattern": "*.sql", "model": "acme/db"})
        files: list[Any] = [None, "a.sql"]
        found = find_override(files, config.file_pattern_overrides)
        assert found is not None
        assert found[1] == "a.sql"
