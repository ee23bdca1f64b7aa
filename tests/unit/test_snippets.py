"""Unit tests for snippet rendering and composition."""

from datetime import datetime, timezone

import pytest

from pcbcoat.config import GcodeSettings, WorkArea
from pcbcoat.core.snippets import (
    build_path_variables,
    build_variables,
    compose,
    emit,
    iso_timestamp,
    render_template,
)
from pcbcoat.domain import GCodeHook, GCodeSnippet

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _snippet(hook: GCodeHook, template: str, **kwargs) -> GCodeSnippet:
    return GCodeSnippet(id=template, name=template, hook=hook, template=template, **kwargs)


class TestRenderTemplate:
    """Tests for placeholder substitution."""

    def test_simple_and_nested(self) -> None:
        variables = {"safeHeight": 80.0, "workArea": {"width": 200.0, "height": 150.5}}
        assert render_template("G0 Z{{safeHeight}}", variables) == "G0 Z80"
        assert render_template("{{workArea.width}}x{{ workArea.height }}", variables) == "200x150.5"

    def test_unknown_placeholder_is_empty(self) -> None:
        assert render_template("A{{missing}}B{{workArea.depth}}C", {"workArea": {}}) == "ABC"

    def test_path_through_scalar(self) -> None:
        assert render_template("{{unit.name}}", {"unit": "mm"}) == ""

    def test_booleans(self) -> None:
        assert render_template("{{flag}}", {"flag": True}) == "true"

    def test_empty_template(self) -> None:
        assert render_template("", {"a": 1}) == ""

    def test_text_without_placeholders(self) -> None:
        assert render_template("M5 ; spindle off", {}) == "M5 ; spindle off"


class TestEmit:
    """Tests for per-hook emission."""

    def test_order_and_enabled(self) -> None:
        snippets = [
            _snippet(GCodeHook.BEFORE_ALL, "second", order=2),
            _snippet(GCodeHook.BEFORE_ALL, "first", order=1),
            _snippet(GCodeHook.BEFORE_ALL, "disabled", order=0, enabled=False),
            _snippet(GCodeHook.AFTER_ALL, "other hook"),
        ]
        assert emit(snippets, GCodeHook.BEFORE_ALL, {}) == "first\nsecond\n"

    def test_nothing_to_emit(self) -> None:
        assert emit([], GCodeHook.BEFORE_ALL, {}) == ""
        assert emit([_snippet(GCodeHook.BEFORE_ALL, "   ")], GCodeHook.BEFORE_ALL, {}) == ""

    def test_rendered_text_is_trimmed(self) -> None:
        snippet = _snippet(GCodeHook.AFTER_PATH, "\nG0 Z{{safeHeight}}\n\n")
        assert emit([snippet], GCodeHook.AFTER_PATH, {"safeHeight": 5}) == "G0 Z5\n"


class TestVariables:
    """Tests for template variables."""

    def test_iso_timestamp(self) -> None:
        assert iso_timestamp(NOW) == "2024-05-01T12:00:00.000Z"

    def test_naive_timestamp_treated_as_utc(self) -> None:
        assert iso_timestamp(datetime(2024, 5, 1, 12, 0, 0)) == "2024-05-01T12:00:00.000Z"

    def test_job_variables(self) -> None:
        settings = GcodeSettings(work_area=WorkArea(width=300, height=100), safe_height=50)
        variables = build_variables(settings, NOW)
        assert variables == {
            "unit": "mm",
            "workArea": {"width": 300, "height": 100},
            "safeHeight": 50,
            "time": "2024-05-01T12:00:00.000Z",
        }

    def test_path_variables(self) -> None:
        variables = build_path_variables({"unit": "mm"})
        assert variables["unit"] == "mm"
        assert variables["pathIndex"] == 1
        assert variables["pathCount"] == 1
        assert variables["shapeName"] == "Coating"
        assert variables["shapeType"] == "coating"


class TestCompose:
    """Tests for body composition."""

    def test_hook_order(self) -> None:
        snippets = [
            _snippet(GCodeHook.AFTER_ALL, "after all"),
            _snippet(GCodeHook.AFTER_JOB, "after job"),
            _snippet(GCodeHook.AFTER_PATH, "after {{shapeName}}"),
            _snippet(GCodeHook.BEFORE_PATH, "before path {{pathIndex}}/{{pathCount}}"),
            _snippet(GCodeHook.BEFORE_JOB, "before job"),
            _snippet(GCodeHook.BEFORE_ALL, "G21 ; {{unit}}"),
        ]
        result = compose("G0 X1\nG0 X2\n", snippets, GcodeSettings(), NOW, job_hooks=True)
        assert result == (
            "G21 ; mm\n"
            "before job\n"
            "before path 1/1\n"
            "G0 X1\nG0 X2\n"
            "after Coating\n"
            "after job\n"
            "after all\n"
        )

    def test_job_hooks_skipped_by_default(self) -> None:
        snippets = [
            _snippet(GCodeHook.BEFORE_JOB, "before job"),
            _snippet(GCodeHook.BEFORE_ALL, "G21"),
            _snippet(GCodeHook.AFTER_JOB, "after job"),
        ]
        assert compose("G0 X1", snippets, GcodeSettings(), NOW) == "G21\nG0 X1\n"

    def test_no_snippets(self) -> None:
        assert compose("\n\nG0 X1\n\n", [], GcodeSettings(), NOW) == "G0 X1\n"

    def test_time_placeholder(self) -> None:
        snippets = [_snippet(GCodeHook.BEFORE_ALL, "; generated {{time}}")]
        result = compose("G0 X1", snippets, GcodeSettings(), NOW)
        assert result.splitlines()[0] == "; generated 2024-05-01T12:00:00.000Z"

    def test_single_trailing_newline(self) -> None:
        snippets = [_snippet(GCodeHook.AFTER_ALL, "G0 X0 Y0\n\n\n")]
        result = compose("G0 X1", snippets, GcodeSettings(), NOW)
        assert result.endswith("G0 X0 Y0\n")
        assert not result.endswith("\n\n")

    @pytest.mark.parametrize("hook", list(GCodeHook))
    def test_disabled_snippets_ignored(self, hook: GCodeHook) -> None:
        snippets = [_snippet(hook, "SHOULD NOT APPEAR", enabled=False)]
        assert "SHOULD NOT APPEAR" not in compose("G0 X1", snippets, GcodeSettings(), NOW)
