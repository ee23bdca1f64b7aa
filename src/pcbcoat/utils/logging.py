"""Logging utilities for pcbcoat."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class GenerationStats:
    """Statistics from one generation run."""

    shapes_processed: int = 0
    shapes_skipped: int = 0
    segments: int = 0
    zones: int = 0
    nozzle_cycles: int = 0
    detours: int = 0
    z_lifts: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate generation duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file; no file handler when None
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(
        logging.ERROR if quiet else getattr(logging, console_level.upper())
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("pcbcoat")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class GenerationLogger:
    """Logger for tracking generation progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = GenerationStats()

    def log_generation_start(self, coating_count: int, mask_count: int) -> None:
        self._stats.start_time = time.perf_counter()
        self._logger.info(
            "Generation started",
            coating_shapes=coating_count,
            masks=mask_count,
        )

    def log_generation_complete(self, line_count: int) -> None:
        self._stats.end_time = time.perf_counter()
        self._logger.info(
            "Generation complete",
            lines=line_count,
            shapes=self._stats.shapes_processed,
            skipped=self._stats.shapes_skipped,
            nozzle_cycles=self._stats.nozzle_cycles,
            duration_ms=round(self._stats.duration_seconds * 1000, 2),
        )

    def log_shape_start(self, shape_name: str, index: int, total: int) -> None:
        """Log start of shape processing."""
        self._logger.debug("Processing shape", shape=shape_name, index=index, total=total)

    def log_shape_complete(
        self,
        shape_name: str,
        segments: int,
        zones: int,
        duration_ms: float,
    ) -> None:
        """Log successful shape processing."""
        self._logger.info(
            "Shape processed",
            shape=shape_name,
            segments=segments,
            zones=zones,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.shapes_processed += 1
        self._stats.segments += segments
        self._stats.zones += zones
        self._stats.nozzle_cycles += segments

    def log_shape_skipped(self, shape_name: str, reason: str) -> None:
        """Log skipped shape."""
        self._logger.debug("Shape skipped", shape=shape_name, reason=reason)
        self._stats.shapes_skipped += 1

    def log_rotation_ignored(self, shape_name: str, rotation: float) -> None:
        self._logger.warning(
            "Shape rotation is not applied to coating paths",
            shape=shape_name,
            rotation=rotation,
        )

    def log_travel_avoidance(
        self,
        strategy: str,
        obstacles: list[str],
        waypoints: int = 0,
    ) -> None:
        """Log a travel move that had to avoid masks."""
        self._logger.debug(
            "Travel avoidance",
            strategy=strategy,
            obstacles=obstacles,
            waypoints=waypoints,
        )
        if waypoints:
            self._stats.detours += 1
        else:
            self._stats.z_lifts += 1

    def log_generation_error(
        self,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log generation error."""
        self._logger.error(
            "Path generation failed",
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.errors.append((type(error).__name__, str(error)))

    @property
    def stats(self) -> GenerationStats:
        """Get current generation statistics."""
        return self._stats
