"""Coating G-code generation pipeline.

This module orchestrates one generation call:
1. Split shapes into coating targets and masks
2. Per coating shape: generate masked segments, cluster them into zones
3. Sequence the zones through the emitter
4. Optionally wrap the body with user snippets
"""

import asyncio
import time
import traceback
from collections.abc import Sequence
from datetime import datetime

import structlog

from pcbcoat.config.settings import GcodeSettings, PlannerConfig
from pcbcoat.core.clustering import cluster_segments
from pcbcoat.core.emitter import GCodeEmitter
from pcbcoat.core.masking import MaskSet
from pcbcoat.core.scheduling import CooperativeScheduler
from pcbcoat.core.segments import SegmentGenerator
from pcbcoat.core.sequencer import ZoneSequencer
from pcbcoat.core.snippets import compose
from pcbcoat.domain import GCodeSnippet, Shape
from pcbcoat.exceptions import CoatingError, EmptyGCodeError, PathGenerationError
from pcbcoat.utils.logging import GenerationLogger
from pcbcoat.utils.progress import ProgressCallback, ProgressReporter

# Share of a shape's progress range spent on scan lines; zones get the rest
SCAN_PROGRESS_SHARE = 0.3


class CoatingGCodeGenerator:
    """Generates the G-code body for a set of shapes.

    Example:
        >>> generator = CoatingGCodeGenerator(settings)
        >>> body = await generator.generate(shapes, on_progress=print)
    """

    def __init__(
        self,
        settings: GcodeSettings,
        planner: PlannerConfig | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            settings: Coating settings
            planner: Planning tunables; defaults reproduce the editor's output
            logger: Structured logger; module logger when None
        """
        self.settings = settings
        self.planner = planner or PlannerConfig()
        self.logger = logger or structlog.get_logger(__name__)
        self.generation_logger = GenerationLogger(self.logger)
        self.line_count = 0
        self.nozzle_cycles = 0

    def coating_shapes(self, shapes: Sequence[Shape]) -> list[Shape]:
        """Active fill/outline shapes in processing order.

        Order is ascending coating order (unset ranks last), then x, then y.
        """
        default_order = self.planner.default_coating_order
        return sorted(
            (shape for shape in shapes if shape.is_coating),
            key=lambda shape: (
                shape.coating_order if shape.coating_order is not None else default_order,
                shape.x,
                shape.y,
            ),
        )

    async def generate(
        self,
        shapes: Sequence[Shape],
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Generate the raw G-code body.

        Args:
            shapes: All layout shapes; inputs are not modified
            on_progress: Observer for ``(percent, message)`` updates
            cancel_event: Setting this event cancels generation at the
                next yield point

        Returns:
            G-code body without header or footer; ``""`` when there is
            nothing to coat

        Raises:
            GenerationCancelledError: If the cancel event was set
            CoatingError: Any domain error raised during generation
            PathGenerationError: Wrapping any other failure
        """
        reporter = ProgressReporter(on_progress)
        try:
            return await self._generate(shapes, reporter, cancel_event)
        except asyncio.CancelledError:
            raise
        except CoatingError as e:
            self.generation_logger.log_generation_error(e, traceback.format_exc())
            reporter.report(0, f"Path generation failed: {e}")
            raise
        except Exception as e:
            self.generation_logger.log_generation_error(e, traceback.format_exc())
            reporter.report(0, f"Path generation failed: {e}")
            raise PathGenerationError(str(e)) from e

    async def _generate(
        self,
        shapes: Sequence[Shape],
        reporter: ProgressReporter,
        cancel_event: asyncio.Event | None,
    ) -> str:
        settings = self.settings
        planner = self.planner
        scheduler = CooperativeScheduler(cancel_event)
        masks = MaskSet.from_shapes(shapes, settings, planner.min_clip_length)
        emitter = GCodeEmitter(settings, planner.position_tolerance)
        segment_generator = SegmentGenerator(settings, masks, planner, scheduler, reporter)
        sequencer = ZoneSequencer(
            emitter, masks, settings, planner, scheduler, reporter, self.generation_logger
        )

        for shape in shapes:
            if (shape.is_coating or shape.is_mask) and shape.rotation:
                self.generation_logger.log_rotation_ignored(shape.display_name, shape.rotation)

        reporter.report(5, "Analyzing paths...")
        ordered = self.coating_shapes(shapes)
        if not ordered:
            reporter.report(100, "No shapes to coat")
            return ""

        self.generation_logger.log_generation_start(len(ordered), len(masks.masks))
        scheduler.shapes_total = len(ordered)
        emitter.set_z(settings.safe_height)

        span = 90 / len(ordered)
        for index, shape in enumerate(ordered):
            scheduler.raise_if_cancelled()
            base = 5 + index * span
            started = time.perf_counter()
            self.generation_logger.log_shape_start(shape.display_name, index + 1, len(ordered))
            reporter.report(
                base, f"{shape.label} {index + 1}/{len(ordered)}: calculating paths..."
            )

            segments = await segment_generator.generate(
                shape, base, span * SCAN_PROGRESS_SHARE
            )
            if not segments:
                emitter.comment(f"{shape.display_name} - no paths to generate")
                self.generation_logger.log_shape_skipped(shape.display_name, "no segments")
                scheduler.shapes_done += 1
                continue

            zones = cluster_segments(
                segments,
                planner.zone_count,
                planner.max_kmeans_iterations,
                planner.kmeans_tolerance,
            )
            zone_base = base + span * SCAN_PROGRESS_SHARE
            visited = await sequencer.sequence_shape(
                shape, zones, zone_base, span * (1 - SCAN_PROGRESS_SHARE)
            )

            scheduler.shapes_done += 1
            self.generation_logger.log_shape_complete(
                shape.display_name,
                len(segments),
                visited,
                (time.perf_counter() - started) * 1000,
            )

        self.line_count = emitter.line_count
        self.nozzle_cycles = emitter.nozzle_cycles
        self.generation_logger.log_generation_complete(emitter.line_count)
        reporter.report(100, "G-code generation complete")
        return emitter.get_gcode()


async def generate_coating_gcode(
    shapes: Sequence[Shape],
    settings: GcodeSettings,
    on_progress: ProgressCallback | None = None,
    *,
    planner: PlannerConfig | None = None,
    cancel_event: asyncio.Event | None = None,
) -> str:
    """Generate the raw coating G-code body.

    Args:
        shapes: Layout shapes
        settings: Coating settings
        on_progress: Observer for ``(percent, message)`` updates
        planner: Planning tunables
        cancel_event: Set to cancel generation

    Returns:
        G-code body, ``""`` when there is nothing to coat
    """
    generator = CoatingGCodeGenerator(settings, planner)
    return await generator.generate(shapes, on_progress, cancel_event)


async def generate_coating_gcode_with_snippets(
    shapes: Sequence[Shape],
    settings: GcodeSettings,
    snippets: Sequence[GCodeSnippet],
    on_progress: ProgressCallback | None = None,
    *,
    planner: PlannerConfig | None = None,
    cancel_event: asyncio.Event | None = None,
    now: datetime | None = None,
    job_hooks: bool = False,
) -> str:
    """Generate coating G-code wrapped with user snippets.

    Args:
        shapes: Layout shapes
        settings: Coating settings
        snippets: User snippets; disabled ones are ignored
        on_progress: Observer for ``(percent, message)`` updates
        planner: Planning tunables
        cancel_event: Set to cancel generation
        now: Timestamp for the ``time`` placeholder; current UTC time when None
        job_hooks: Also emit beforeJob and afterJob snippets

    Returns:
        Complete G-code ending with exactly one newline

    Raises:
        EmptyGCodeError: If no G-code body was generated
    """
    body = await generate_coating_gcode(
        shapes, settings, on_progress, planner=planner, cancel_event=cancel_event
    )
    if not body.strip():
        raise EmptyGCodeError()
    return compose(body, snippets, settings, now, job_hooks=job_hooks)
