"""Progress reporting for G-code generation."""

from collections.abc import Callable

import structlog

ProgressCallback = Callable[[float, str], None]

logger = structlog.get_logger(__name__)


class ProgressReporter:
    """Forwards progress updates to an optional observer callback.

    A failing observer never aborts generation: its exception is logged
    and the update is dropped.
    """

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback
        self.last_progress = 0.0
        self.last_message = ""

    def report(self, progress: float, message: str) -> None:
        """Send one update.

        Args:
            progress: Percentage in [0, 100]
            message: Human-readable status
        """
        self.last_progress = progress
        self.last_message = message
        if self._callback is None:
            return
        try:
            self._callback(progress, message)
        except Exception as e:
            logger.warning(
                "Progress callback failed",
                progress=round(progress, 2),
                error=str(e),
                error_type=type(e).__name__,
            )
