"""Unit tests for cooperative scheduling and progress reporting."""

import asyncio

import pytest

from pcbcoat.core.scheduling import CooperativeScheduler
from pcbcoat.exceptions import GenerationCancelledError
from pcbcoat.utils.progress import ProgressReporter


class TestCooperativeScheduler:
    """Tests for CooperativeScheduler."""

    def test_not_cancelled_without_event(self) -> None:
        scheduler = CooperativeScheduler()
        assert not scheduler.cancelled
        scheduler.raise_if_cancelled()

    @pytest.mark.asyncio
    async def test_pause_counts_yields(self) -> None:
        scheduler = CooperativeScheduler()
        await scheduler.pause()
        await scheduler.pause()
        assert scheduler.yields == 2

    @pytest.mark.asyncio
    async def test_checkpoint_cadence(self) -> None:
        """Test yields happen on positive multiples of the interval only."""
        scheduler = CooperativeScheduler()
        for count in range(0, 11):
            await scheduler.checkpoint(count, 5)
        assert scheduler.yields == 2

    @pytest.mark.asyncio
    async def test_cancel_event(self) -> None:
        event = asyncio.Event()
        scheduler = CooperativeScheduler(event)
        scheduler.shapes_done = 2
        scheduler.shapes_total = 5
        event.set()

        with pytest.raises(GenerationCancelledError) as exc_info:
            await scheduler.pause()

        assert exc_info.value.shapes_done == 2
        assert exc_info.value.shapes_total == 5
        assert "2 of 5" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_cancel_noticed_after_yield(self) -> None:
        """Test a cancel set by another task is seen when the pause resumes."""
        event = asyncio.Event()
        scheduler = CooperativeScheduler(event)

        async def cancel() -> None:
            event.set()

        task = asyncio.create_task(cancel())
        with pytest.raises(GenerationCancelledError):
            await scheduler.pause()
        await task


class TestProgressReporter:
    """Tests for ProgressReporter."""

    def test_without_callback(self) -> None:
        reporter = ProgressReporter()
        reporter.report(42.0, "halfway")
        assert reporter.last_progress == 42.0
        assert reporter.last_message == "halfway"

    def test_forwards_updates(self) -> None:
        updates: list[tuple[float, str]] = []
        reporter = ProgressReporter(lambda p, m: updates.append((p, m)))
        reporter.report(5, "Analyzing paths...")
        reporter.report(100, "done")
        assert updates == [(5, "Analyzing paths..."), (100, "done")]

    def test_failing_callback_does_not_raise(self) -> None:
        """Test an observer exception never aborts the caller."""

        def broken(progress: float, message: str) -> None:
            raise RuntimeError("observer crashed")

        reporter = ProgressReporter(broken)
        reporter.report(10, "still running")
        assert reporter.last_progress == 10
