"""Cooperative yielding for long-running generation.

Generation runs as a single coroutine. Long loops call into the scheduler
so the event loop can serve other tasks (UI, progress rendering) and so a
cancel request is noticed promptly.
"""

import asyncio

from pcbcoat.exceptions import GenerationCancelledError


class CooperativeScheduler:
    """Explicit yield points with cancellation checks.

    Attributes:
        shapes_done: Coating shapes finished so far, reported on cancel
        shapes_total: Coating shapes in the job, reported on cancel
    """

    def __init__(self, cancel_event: asyncio.Event | None = None) -> None:
        self._cancel_event = cancel_event
        self.shapes_done = 0
        self.shapes_total = 0
        self.yields = 0

    @property
    def cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise GenerationCancelledError when the cancel event is set."""
        if self.cancelled:
            raise GenerationCancelledError(self.shapes_done, self.shapes_total)

    async def pause(self) -> None:
        """Yield to the event loop once."""
        self.raise_if_cancelled()
        await asyncio.sleep(0)
        self.yields += 1
        self.raise_if_cancelled()

    async def checkpoint(self, count: int, every: int) -> None:
        """Yield when ``count`` is a positive multiple of ``every``.

        Args:
            count: Iterations completed so far
            every: Yield interval
        """
        if count > 0 and count % every == 0:
            await self.pause()
