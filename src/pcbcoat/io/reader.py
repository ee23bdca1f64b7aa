"""Project reader for loading editor project files.

This module provides the ProjectReader class for loading a saved layout
(``{version, shapes, coatingSettings}``) into domain models.
"""

import json
from pathlib import Path
from typing import Any

from pcbcoat.config.settings import GcodeSettings
from pcbcoat.domain import GCodeSnippet, Shape
from pcbcoat.exceptions import ProjectLoadError
from pcbcoat.io.converter import settings_from_dict, shapes_from_list, snippets_from_list


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise ProjectLoadError(str(path), "file not found")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectLoadError(str(path), str(e)) from e
    except json.JSONDecodeError as e:
        raise ProjectLoadError(str(path), f"invalid JSON: {e}") from e


class ProjectReader:
    """Loads a layout project and exposes its shapes and settings.

    Example:
        reader = ProjectReader(Path("board.json"))
        reader.load()
        for shape in reader.shapes:
            print(shape.display_name)
    """

    def __init__(self, project_path: Path) -> None:
        """Initialize the project reader.

        Args:
            project_path: Path to the project JSON file
        """
        self._project_path = project_path
        self._loaded = False
        self._version = 0
        self._shapes: list[Shape] = []
        self._settings = GcodeSettings()
        self._snippets: list[GCodeSnippet] = []

    def load(self) -> None:
        """Load and validate the project file.

        Raises:
            ProjectLoadError: If the file is missing, unreadable or malformed
            InvalidShapeError: If a shape record is invalid
            SettingsError: If the coating settings are invalid
        """
        data = _read_json(self._project_path)
        if not isinstance(data, dict):
            raise ProjectLoadError(str(self._project_path), "expected a JSON object")

        shapes = data.get("shapes", [])
        if not isinstance(shapes, list):
            raise ProjectLoadError(str(self._project_path), "'shapes' must be a list")

        try:
            self._shapes = shapes_from_list(shapes)
        except (AttributeError, TypeError) as e:
            raise ProjectLoadError(str(self._project_path), f"malformed shape record: {e}") from e

        self._settings = settings_from_dict(
            data.get("coatingSettings") or {},
            data.get("workArea"),
        )

        try:
            self._snippets = snippets_from_list(data.get("gcodeSnippets") or [])
        except (ValueError, TypeError) as e:
            raise ProjectLoadError(str(self._project_path), str(e)) from e

        version = data.get("version", 1)
        self._version = version if isinstance(version, int) else 1
        self._loaded = True

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("Project not loaded. Call load() first.")

    @property
    def version(self) -> int:
        """Return the project file version.

        Raises:
            RuntimeError: If the project has not been loaded yet
        """
        self._require_loaded()
        return self._version

    @property
    def shapes(self) -> list[Shape]:
        """Return all shapes of the project (groups excluded)."""
        self._require_loaded()
        return list(self._shapes)

    @property
    def settings(self) -> GcodeSettings:
        self._require_loaded()
        return self._settings

    @property
    def snippets(self) -> list[GCodeSnippet]:
        """Return snippets embedded in the project, if any."""
        self._require_loaded()
        return list(self._snippets)

    @property
    def path(self) -> Path:
        return self._project_path


def read_snippets(path: Path) -> list[GCodeSnippet]:
    """Load snippets from a JSON file.

    Accepts either a plain list of snippet records or an application
    settings object carrying them under ``gcodeSnippets``.

    Args:
        path: Snippet or settings JSON file

    Returns:
        Parsed snippets

    Raises:
        ProjectLoadError: If the file cannot be read or is malformed
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("gcodeSnippets", [])
    if not isinstance(data, list):
        raise ProjectLoadError(str(path), "expected a list of snippets")
    try:
        return snippets_from_list(data)
    except (ValueError, TypeError, AttributeError) as e:
        raise ProjectLoadError(str(path), str(e)) from e
