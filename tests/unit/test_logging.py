"""Unit tests for logging utilities."""

import logging
from pathlib import Path

import pytest
import structlog

from pcbcoat.utils.logging import GenerationLogger, GenerationStats, configure_logging


@pytest.fixture
def clean_root_logger():
    """Restore the root logger handlers after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestGenerationStats:
    """Tests for GenerationStats."""

    def test_duration_without_times(self) -> None:
        assert GenerationStats().duration_seconds == 0.0

    def test_duration(self) -> None:
        stats = GenerationStats(start_time=10.0, end_time=12.5)
        assert stats.duration_seconds == 2.5


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_only(self, clean_root_logger: logging.Logger) -> None:
        before = len(clean_root_logger.handlers)
        configure_logging(console_level="INFO")
        added = clean_root_logger.handlers[before:]
        assert len(added) == 1
        assert added[0].level == logging.INFO

    def test_quiet_console(self, clean_root_logger: logging.Logger) -> None:
        before = len(clean_root_logger.handlers)
        configure_logging(quiet=True)
        assert clean_root_logger.handlers[before].level == logging.ERROR

    def test_file_handler(self, clean_root_logger: logging.Logger, tmp_path: Path) -> None:
        """Test a file handler is added when a log path is given."""
        log_file = tmp_path / "pcbcoat.log"
        before = len(clean_root_logger.handlers)
        configure_logging(log_file=log_file, file_level="DEBUG")

        added = clean_root_logger.handlers[before:]
        assert len(added) == 2
        assert isinstance(added[0], logging.FileHandler)
        assert log_file.exists()


class TestGenerationLogger:
    """Tests for GenerationLogger statistics."""

    @pytest.fixture
    def gen_logger(self) -> GenerationLogger:
        return GenerationLogger(structlog.get_logger("test"))

    def test_shape_counters(self, gen_logger: GenerationLogger) -> None:
        gen_logger.log_generation_start(2, 1)
        gen_logger.log_shape_complete("Board", segments=12, zones=3, duration_ms=4.2)
        gen_logger.log_shape_skipped("Pad", "no segments")
        gen_logger.log_generation_complete(40)

        stats = gen_logger.stats
        assert stats.shapes_processed == 1
        assert stats.shapes_skipped == 1
        assert stats.segments == 12
        assert stats.zones == 3
        assert stats.nozzle_cycles == 12
        assert stats.duration_seconds >= 0.0

    def test_travel_counters(self, gen_logger: GenerationLogger) -> None:
        gen_logger.log_travel_avoidance("contour", ["Keepout"], 2)
        gen_logger.log_travel_avoidance("lift", ["A", "B"])
        assert gen_logger.stats.detours == 1
        assert gen_logger.stats.z_lifts == 1

    def test_errors_recorded(self, gen_logger: GenerationLogger) -> None:
        gen_logger.log_generation_error(ValueError("bad"), "trace")
        assert gen_logger.stats.errors == [("ValueError", "bad")]
