"""Unit tests for automodel.observability.logging module."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from automodel.observability.logging import (
    LoggingConfig,
    LogMode,
    apply_verbosity,
    bound_context,
    configure_logging,
    get_current_config,
    get_log_level,
    get_logger,
    is_configured,
    set_console_logging,
)


def _last_json_line(text: str) -> dict[str, object]:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestGetLogLevel:
    """Tests for level name and verbosity mapping."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            ("WARN", logging.WARNING),
            ("minimal", logging.WARNING),
            ("normal", logging.INFO),
            ("verbose", logging.DEBUG),
        ],
    )
    def test_known_levels(self, name: str, expected: int) -> None:
        assert get_log_level(name) == expected

    def test_silent_is_above_critical(self) -> None:
        assert get_log_level("silent") > logging.CRITICAL

    def test_unknown_defaults_to_info(self) -> None:
        assert get_log_level("chatty") == logging.INFO


class TestConfigureLogging:
    """Tests for configure_logging and get_logger."""

    def test_get_logger_configures_on_first_use(self) -> None:
        assert not is_configured()
        get_logger(__name__)
        assert is_configured()

    def test_default_mode_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTOMODEL_LOG_MODE", "prod")
        configure_logging()
        config = get_current_config()
        assert config is not None
        assert config.mode == LogMode.PROD

    def test_prod_mode_emits_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD))
        get_logger("test").info("selection.model.selected", tier="simple")

        entry = _last_json_line(capsys.readouterr().err)
        assert entry["event"] == "selection.model.selected"
        assert entry["tier"] == "simple"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_dev_mode_is_human_readable(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(mode=LogMode.DEV))
        get_logger("test").info("config.file.loaded", path="/tmp/x.yaml")

        err = capsys.readouterr().err
        assert "config.file.loaded" in err
        assert "path=/tmp/x.yaml" in err

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD, log_level="WARNING"))
        log = get_logger("test")
        log.info("hidden.event.logged")
        log.warning("shown.event.logged")

        err = capsys.readouterr().err
        assert "hidden.event.logged" not in err
        assert "shown.event.logged" in err

    def test_console_logging_can_be_disabled(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD))
        set_console_logging(False)
        get_logger("test").info("quiet.event.logged")

        assert capsys.readouterr().err == ""

    def test_file_logging(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        configure_logging(
            LoggingConfig(mode=LogMode.PROD, log_dir=log_dir, enable_file_logging=True)
        )
        get_logger("test").info("file.event.logged")

        content = (log_dir / "automodel.log").read_text()
        assert "file.event.logged" in content


class TestApplyVerbosity:
    """Tests for mapping engine verbosity onto the logger."""

    def test_silent_suppresses_everything(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD))
        apply_verbosity("silent")
        get_logger("test").error("selection.failed.logged")

        assert capsys.readouterr().err == ""

    def test_keeps_mode(self) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD))
        apply_verbosity("verbose")
        config = get_current_config()
        assert config is not None
        assert config.mode == LogMode.PROD
        assert config.log_level == "verbose"


class TestBoundContext:
    """Tests for block-scoped context binding."""

    def test_values_in_entries_inside_block(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD))
        with bound_context(agent="build"):
            get_logger("test").info("selection.model.selected")

        assert _last_json_line(capsys.readouterr().err)["agent"] == "build"

    def test_values_dropped_after_block(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD))
        with bound_context(agent="build", strategy="balanced"):
            pass
        get_logger("test").info("after.event.logged")

        entry = _last_json_line(capsys.readouterr().err)
        assert "agent" not in entry
        assert "strategy" not in entry

    def test_nested_block_restores_outer_value(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(LoggingConfig(mode=LogMode.PROD))
        log = get_logger("test")
        with bound_context(strategy="balanced"):
            with bound_context(strategy="quality-first"):
                log.info("inner.event.logged")
            inner = _last_json_line(capsys.readouterr().err)
            log.info("outer.event.logged")
            outer = _last_json_line(capsys.readouterr().err)

        assert inner["strategy"] == "quality-first"
        assert outer["strategy"] == "balanced"
