"""Shared fixtures for automodel tests."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from automodel.config.models import EngineConfig, get_default_config
from automodel.config.store import reset_config_store
from automodel.observability.logging import reset_logging, set_console_logging


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests away from real config files and global state."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("AUTOMODEL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config_store()
    reset_logging()
    set_console_logging(True)
    yield
    reset_config_store()
    reset_logging()
    set_console_logging(True)


@pytest.fixture
def default_config() -> EngineConfig:
    """The built-in configuration."""
    return get_default_config()


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """A small, fully explicit configuration document."""
    return {
        "default_model": "acme/default",
        "strategies": {
            "balanced": {
                "general": {"simple": "acme/small"},
                "debugging": {"complex": ["acme/large", "acme/medium"]},
            },
        },
        "task_type_indicators": {
            "debugging": {"keywords": ["bug"]},
            "general": {},
        },
        "complexity_indicators": {
            "simple": {"keywords": ["tiny"], "token_range": {"min": 0, "max": 10}},
            "complex": {"keywords": ["huge"], "token_range": {"min": 11, "max": 999999}},
        },
    }


@pytest.fixture
def minimal_config(minimal_document: dict[str, Any]) -> EngineConfig:
    """EngineConfig validated from minimal_document, without built-in defaults."""
    return EngineConfig.model_validate(minimal_document)
