"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import structlog

from reviewplane.config.models import LoggingConfig, LogOutputConfig
from reviewplane.core.logging import (
    bind_session_id,
    clear_session_id,
    configure_logging,
    get_logger,
    get_session_id,
)
from reviewplane.core.progress import suppress_console_logs


class TestSessionIdCorrelation:
    """Session ID context variable tests."""

    def setup_method(self) -> None:
        """Clear session ID before each test."""
        clear_session_id()

    def test_given_session_id_when_bound_then_can_retrieve(self) -> None:
        """Bound session ID can be retrieved."""
        # Given
        session_id = "abc123def456"

        # When
        bind_session_id(session_id)

        # Then
        assert get_session_id() == session_id

    def test_given_bound_id_when_clear_then_removes_id(self) -> None:
        """Clear removes the current session ID."""
        # Given
        bind_session_id("to-clear")

        # When
        clear_session_id()

        # Then
        assert get_session_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_session_id()

    def teardown_method(self) -> None:
        clear_session_id()

    def test_given_file_output_when_log_then_json_lines_written(self, tmp_path: Path) -> None:
        """JSON file output carries event, fields, level and timestamp."""
        # Given
        log_file = tmp_path / "review.log"
        config = LoggingConfig(
            level="INFO",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )
        configure_logging(config=config)

        # When
        get_logger("test").info("walkthrough_ready", steps=3)

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "walkthrough_ready"
        assert data["steps"] == 3
        assert data["level"] == "info"
        assert data["logger"] == "test"
        assert "timestamp" in data

    def test_given_bound_session_when_log_then_session_id_added(self, tmp_path: Path) -> None:
        """Every event carries the bound review session ID."""
        # Given
        log_file = tmp_path / "review.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        bind_session_id("sess-1")

        # When
        get_logger().info("comment_added")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["session_id"] == "sess-1"

    def test_given_multi_output_config_when_configure_then_levels_apply_per_output(
        self, tmp_path: Path
    ) -> None:
        """Each output filters by its own level."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_spinner_active_when_log_then_file_still_receives(self, tmp_path: Path) -> None:
        """Console suppression leaves file outputs untouched."""
        # Given
        log_file = tmp_path / "review.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[
                    LogOutputConfig(format="json", destination="stderr"),
                    LogOutputConfig(format="json", destination=str(log_file)),
                ],
            )
        )

        # When
        with suppress_console_logs():
            get_logger().info("during spinner")

        # Then
        assert "during spinner" in log_file.read_text()
