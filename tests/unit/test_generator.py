"""Unit tests for the generation pipeline."""

import asyncio
from datetime import datetime, timezone

import pytest

from pcbcoat.config import FillPattern, GcodeSettings
from pcbcoat.core import generator as generator_module
from pcbcoat.core.emitter import NOZZLE_ON
from pcbcoat.core.generator import (
    CoatingGCodeGenerator,
    generate_coating_gcode,
    generate_coating_gcode_with_snippets,
)
from pcbcoat.domain import CoatingType, GCodeHook, GCodeSnippet, Shape, ShapeKind
from pcbcoat.exceptions import EmptyGCodeError, GenerationCancelledError, PathGenerationError


@pytest.fixture
def settings() -> GcodeSettings:
    return GcodeSettings(enable_masking=False, fill_pattern=FillPattern.HORIZONTAL)


def _rect(shape_id: str, **kwargs) -> Shape:
    values = {"x": 0, "y": 0, "width": 100, "height": 50, "line_spacing": 10,
              "coating_type": CoatingType.FILL}
    values.update(kwargs)
    return Shape(id=shape_id, kind=ShapeKind.RECTANGLE, **values)


class TestCoatingShapes:
    """Tests for shape selection and order."""

    def test_order(self, settings: GcodeSettings) -> None:
        """Test coating order ranks first, then x, then y."""
        shapes = [
            _rect("unset", x=0),
            _rect("second", coating_order=2),
            _rect("first-right", coating_order=1, x=50),
            _rect("first-left", coating_order=1, x=10),
            _rect("mask", coating_type=CoatingType.MASKING),
            _rect("skipped", skip_coating=True, coating_order=0),
            _rect("plain", coating_type=None),
        ]
        ordered = CoatingGCodeGenerator(settings).coating_shapes(shapes)
        assert [s.id for s in ordered] == ["first-left", "first-right", "second", "unset"]


class TestGenerate:
    """Tests for CoatingGCodeGenerator.generate."""

    @pytest.mark.asyncio
    async def test_no_shapes(self, settings: GcodeSettings) -> None:
        updates: list[tuple[float, str]] = []
        body = await generate_coating_gcode([], settings, lambda p, m: updates.append((p, m)))
        assert body == ""
        assert updates == [(5, "Analyzing paths..."), (100, "No shapes to coat")]

    @pytest.mark.asyncio
    async def test_single_rectangle(self, settings: GcodeSettings) -> None:
        generator = CoatingGCodeGenerator(settings)
        body = await generator.generate([_rect("r", name="Pad")])

        lines = body.splitlines()
        assert lines[0] == "G0 F2000 X0.000 Y0.000 Z80.000"
        assert lines[1] == "; ---- RECTANGLE Pad start ----"
        assert lines[-1] == "; ---- RECTANGLE Pad end ----"
        assert lines.count(NOZZLE_ON) == 6
        assert generator.nozzle_cycles == 6
        assert generator.line_count == len(lines)

    @pytest.mark.asyncio
    async def test_shapes_emitted_in_order(self, settings: GcodeSettings) -> None:
        shapes = [_rect("b", name="B", coating_order=2), _rect("a", name="A", coating_order=1)]
        body = await generate_coating_gcode(shapes, settings)
        assert body.index("RECTANGLE A start") < body.index("RECTANGLE B start")

    @pytest.mark.asyncio
    async def test_shape_without_segments(self) -> None:
        """Test a shape covered by a mask leaves only a comment."""
        settings = GcodeSettings(coating_width=0.0)
        mask = _rect("m", coating_type=CoatingType.MASKING, x=-10, y=-10, width=150, height=100)
        generator = CoatingGCodeGenerator(settings)

        body = await generator.generate([_rect("r", name="Pad"), mask])

        assert "; Pad - no paths to generate" in body
        assert NOZZLE_ON not in body
        assert generator.generation_logger.stats.shapes_skipped == 1

    @pytest.mark.asyncio
    async def test_progress_is_monotonic(self, settings: GcodeSettings) -> None:
        updates: list[float] = []
        shapes = [_rect("a"), _rect("b", x=100, coating_order=2), _rect("c", y=100, coating_order=3)]
        await generate_coating_gcode(shapes, settings, lambda p, m: updates.append(p))
        assert updates[0] == 5
        assert updates[-1] == 100
        assert all(later >= earlier - 1e-9 for earlier, later in zip(updates, updates[1:]))

    @pytest.mark.asyncio
    async def test_failing_progress_callback(self, settings: GcodeSettings) -> None:
        def broken(progress: float, message: str) -> None:
            raise RuntimeError("observer crashed")

        body = await generate_coating_gcode([_rect("r")], settings, broken)
        assert body.count(NOZZLE_ON) == 6

    @pytest.mark.asyncio
    async def test_inputs_not_mutated(self, settings: GcodeSettings) -> None:
        shapes = [_rect("a"), _rect("b", coating_order=1)]
        copy = list(shapes)
        await generate_coating_gcode(shapes, settings)
        assert shapes == copy

    @pytest.mark.asyncio
    async def test_deterministic(self, settings: GcodeSettings) -> None:
        shapes = [_rect("a", fill_pattern=FillPattern.AUTO), _rect("b", x=120, width=40)]
        first = await generate_coating_gcode(shapes, settings)
        second = await generate_coating_gcode(shapes, settings)
        assert first == second

    @pytest.mark.asyncio
    async def test_cancellation(self, settings: GcodeSettings) -> None:
        event = asyncio.Event()
        event.set()
        with pytest.raises(GenerationCancelledError) as exc_info:
            await generate_coating_gcode([_rect("r")], settings, cancel_event=event)
        assert exc_info.value.shapes_total == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(
        self, settings: GcodeSettings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test failures are reported at 0% and re-raised with a message."""

        def boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(generator_module, "cluster_segments", boom)
        updates: list[tuple[float, str]] = []
        generator = CoatingGCodeGenerator(settings)

        with pytest.raises(PathGenerationError, match="boom"):
            await generator.generate([_rect("r")], lambda p, m: updates.append((p, m)))

        assert updates[-1] == (0, "Path generation failed: boom")
        assert generator.generation_logger.stats.errors == [("RuntimeError", "boom")]


class TestGenerateWithSnippets:
    """Tests for snippet-wrapped generation."""

    @pytest.mark.asyncio
    async def test_empty_body_raises(self, settings: GcodeSettings) -> None:
        with pytest.raises(EmptyGCodeError):
            await generate_coating_gcode_with_snippets([], settings, [])

    @pytest.mark.asyncio
    async def test_wrapped(self, settings: GcodeSettings) -> None:
        snippets = [
            GCodeSnippet(id="a", name="Setup", hook=GCodeHook.BEFORE_ALL,
                         template="G21 ; {{unit}}\nG90\nG0 Z{{safeHeight}}"),
            GCodeSnippet(id="b", name="Park", hook=GCodeHook.AFTER_ALL,
                         template="M5\nG0 Z{{safeHeight}}\nG0 X0 Y0"),
        ]
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        result = await generate_coating_gcode_with_snippets(
            [_rect("r")], settings, snippets, now=now
        )
        lines = result.splitlines()
        assert lines[:4] == ["G21 ; mm", "G90", "G0 Z80", "G0 F2000 X0.000 Y0.000 Z80.000"]
        assert lines[-3:] == ["M5", "G0 Z80", "G0 X0 Y0"]
        assert result.endswith("G0 X0 Y0\n")
