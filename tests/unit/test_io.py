"""Unit tests for the project I/O layer.

Tests for ProjectReader, GCodeWriter, and converter functions.
"""

import json
from pathlib import Path

import pytest

from pcbcoat.config import FillPattern, TravelAvoidanceStrategy
from pcbcoat.domain import CoatingType, GCodeHook, OutlineStartPoint, ShapeKind
from pcbcoat.exceptions import GCodeWriteError, InvalidShapeError, ProjectLoadError, SettingsError
from pcbcoat.io import GCodeWriter, ProjectReader, read_snippets
from pcbcoat.io.converter import settings_from_dict, shape_from_dict, shapes_from_list, snippets_from_list


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestShapeFromDict:
    """Tests for shape record conversion."""

    def test_rectangle(self) -> None:
        shape = shape_from_dict(
            {
                "id": "r1",
                "type": "rectangle",
                "x": 10,
                "y": 20,
                "width": 30,
                "height": 40,
                "name": "Pad",
                "coatingType": "fill",
                "fillPattern": "horizontal",
                "lineSpacing": 2,
                "coatingOrder": 3,
            }
        )
        assert shape.kind is ShapeKind.RECTANGLE
        assert (shape.x, shape.y, shape.width, shape.height) == (10, 20, 30, 40)
        assert shape.coating_type is CoatingType.FILL
        assert shape.fill_pattern is FillPattern.HORIZONTAL
        assert shape.line_spacing == 2
        assert shape.coating_order == 3
        assert shape.name == "Pad"

    def test_line_points(self) -> None:
        shape = shape_from_dict({"id": "l", "type": "line", "points": [0, 0, 10, 5]})
        assert shape.points == (0.0, 0.0, 10.0, 5.0)

    def test_defaults(self) -> None:
        shape = shape_from_dict({"id": "c", "type": "circle", "radius": 4})
        assert shape.coating_type is None
        assert shape.outline_passes == 1
        assert shape.skip_coating is False
        assert shape.use_custom_coating is False
        assert shape.coating_order is None

    def test_non_numeric_overrides_are_unset(self) -> None:
        """Test overrides that are not numbers count as unset."""
        shape = shape_from_dict(
            {"id": "c", "type": "circle", "coatingHeight": "", "coatingSpeed": None, "lineSpacing": "5"}
        )
        assert shape.coating_height is None
        assert shape.coating_speed is None
        assert shape.line_spacing is None

    def test_unknown_fill_pattern_falls_back(self) -> None:
        shape = shape_from_dict({"id": "r", "type": "rectangle", "fillPattern": "spiral"})
        assert shape.fill_pattern is None

    def test_concentric_outline_options(self) -> None:
        shape = shape_from_dict(
            {
                "id": "r",
                "type": "rectangle",
                "fillPattern": "concentric",
                "coatingWidth": 2.5,
                "outlineStartPoint": "inside",
            }
        )
        assert shape.fill_pattern is FillPattern.CONCENTRIC
        assert shape.coating_width == 2.5
        assert shape.outline_start_point is OutlineStartPoint.INSIDE

    def test_unknown_outline_start_point(self) -> None:
        with pytest.raises(InvalidShapeError, match="outline start point"):
            shape_from_dict({"id": "x", "type": "rectangle", "outlineStartPoint": "middle"})

    def test_zlift_strategy(self) -> None:
        shape = shape_from_dict({"id": "m", "type": "rectangle", "avoidanceStrategy": "zlift"})
        assert shape.avoidance_strategy is TravelAvoidanceStrategy.LIFT

    def test_unknown_type(self) -> None:
        with pytest.raises(InvalidShapeError, match="unknown shape type"):
            shape_from_dict({"id": "x", "type": "polygon"})

    def test_missing_type(self) -> None:
        with pytest.raises(InvalidShapeError, match="missing shape type"):
            shape_from_dict({"id": "x"})

    def test_unknown_coating_type(self) -> None:
        with pytest.raises(InvalidShapeError):
            shape_from_dict({"id": "x", "type": "rectangle", "coatingType": "paint"})

    def test_non_numeric_geometry(self) -> None:
        with pytest.raises(InvalidShapeError) as exc_info:
            shape_from_dict({"id": "x", "type": "rectangle", "width": "wide"})
        assert exc_info.value.shape_id == "x"

    def test_bad_points(self) -> None:
        with pytest.raises(InvalidShapeError):
            shape_from_dict({"id": "x", "type": "line", "points": [0, "a"]})

    def test_groups_dropped(self) -> None:
        shapes = shapes_from_list(
            [
                {"id": "g", "type": "group"},
                {"id": "r", "type": "rectangle", "parentId": "g"},
            ]
        )
        assert [s.id for s in shapes] == ["r"]


class TestSettingsFromDict:
    """Tests for settings conversion."""

    def test_top_level_work_area(self) -> None:
        settings = settings_from_dict({"lineSpacing": 3}, {"width": 300, "height": 120})
        assert settings.work_area.width == 300
        assert settings.line_spacing == 3

    def test_inner_work_area_wins(self) -> None:
        settings = settings_from_dict(
            {"workArea": {"width": 50, "height": 50}}, {"width": 300, "height": 120}
        )
        assert settings.work_area.width == 50

    def test_invalid_settings(self) -> None:
        with pytest.raises(SettingsError):
            settings_from_dict({"coatingSpeed": -5})


class TestSnippetsFromList:
    """Tests for snippet conversion."""

    def test_valid(self) -> None:
        snippets = snippets_from_list(
            [{"id": "s", "name": "Home", "hook": "beforeAll", "template": "G28", "order": 1}]
        )
        assert snippets[0].hook is GCodeHook.BEFORE_ALL
        assert snippets[0].template == "G28"

    def test_missing_hook(self) -> None:
        with pytest.raises(ValueError, match="missing"):
            snippets_from_list([{"id": "s", "template": "G28"}])


class TestProjectReader:
    """Tests for ProjectReader class."""

    def test_init(self) -> None:
        path = Path("board.json")
        reader = ProjectReader(path)
        assert reader.path == path

    def test_load_nonexistent_file(self) -> None:
        reader = ProjectReader(Path("nonexistent.json"))
        with pytest.raises(ProjectLoadError, match="file not found"):
            reader.load()

    def test_properties_before_load(self) -> None:
        """Test accessing data before loading raises RuntimeError."""
        reader = ProjectReader(Path("board.json"))
        with pytest.raises(RuntimeError, match="Project not loaded"):
            _ = reader.shapes
        with pytest.raises(RuntimeError, match="Project not loaded"):
            _ = reader.settings

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ProjectLoadError, match="invalid JSON"):
            ProjectReader(path).load()

    def test_not_an_object(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "list.json", [1, 2])
        with pytest.raises(ProjectLoadError, match="expected a JSON object"):
            ProjectReader(path).load()

    def test_load_project(self, tmp_path: Path) -> None:
        path = _write_json(
            tmp_path / "board.json",
            {
                "version": 2,
                "shapes": [
                    {"id": "g", "type": "group"},
                    {"id": "r", "type": "rectangle", "width": 10, "height": 10, "coatingType": "fill"},
                    {"id": "m", "type": "circle", "radius": 3, "coatingType": "masking"},
                ],
                "coatingSettings": {"lineSpacing": 2, "travelAvoidanceStrategy": "zlift"},
                "gcodeSnippets": [{"id": "s", "hook": "afterAll", "template": "M5"}],
            },
        )
        reader = ProjectReader(path)
        reader.load()

        assert reader.version == 2
        assert [s.id for s in reader.shapes] == ["r", "m"]
        assert reader.settings.line_spacing == 2
        assert reader.settings.travel_avoidance_strategy is TravelAvoidanceStrategy.LIFT
        assert reader.snippets[0].template == "M5"

    def test_empty_project(self, tmp_path: Path) -> None:
        reader = ProjectReader(_write_json(tmp_path / "empty.json", {}))
        reader.load()
        assert reader.shapes == []
        assert reader.version == 1

    def test_shapes_not_a_list(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "bad.json", {"shapes": {"id": "r"}})
        with pytest.raises(ProjectLoadError, match="must be a list"):
            ProjectReader(path).load()


class TestReadSnippets:
    """Tests for standalone snippet files."""

    def test_plain_list(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "s.json", [{"id": "a", "hook": "beforeAll", "template": "G21"}])
        assert [s.id for s in read_snippets(path)] == ["a"]

    def test_settings_object(self, tmp_path: Path) -> None:
        path = _write_json(
            tmp_path / "settings.json",
            {
                "workArea": {"width": 200, "height": 200},
                "gcodeSnippets": [{"id": "b", "hook": "afterAll", "template": "M5"}],
            },
        )
        assert [s.id for s in read_snippets(path)] == ["b"]

    def test_malformed(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "s.json", [{"id": "a", "hook": "sometime"}])
        with pytest.raises(ProjectLoadError):
            read_snippets(path)


class TestGCodeWriter:
    """Tests for GCodeWriter class."""

    def test_get_output_path(self) -> None:
        assert GCodeWriter.get_output_path(Path("/tmp/board.json")) == Path("/tmp/board.gcode")

    def test_write(self, tmp_path: Path) -> None:
        out = tmp_path / "board.gcode"
        written = GCodeWriter(out).write("G0 X1\n")
        assert written == 6
        assert out.read_text(encoding="utf-8") == "G0 X1\n"

    def test_write_failure(self, tmp_path: Path) -> None:
        writer = GCodeWriter(tmp_path / "missing" / "board.gcode")
        with pytest.raises(GCodeWriteError):
            writer.write("G0 X1\n")
