"""G-code writer for saving generated programs."""

from pathlib import Path

from pcbcoat.exceptions import GCodeWriteError


class GCodeWriter:
    """Writes generated G-code to disk.

    Example:
        writer = GCodeWriter(Path("board.gcode"))
        writer.write(gcode)
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the G-code writer.

        Args:
            output_path: Path where the G-code will be saved
        """
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def write(self, gcode: str) -> int:
        """Save the G-code text.

        Args:
            gcode: Complete G-code program

        Returns:
            Number of bytes written

        Raises:
            GCodeWriteError: If the file cannot be written
        """
        data = gcode.encode("utf-8")
        try:
            self._output_path.write_bytes(data)
        except OSError as e:
            raise GCodeWriteError(str(self._output_path), str(e)) from e
        return len(data)

    @staticmethod
    def get_output_path(input_path: Path) -> Path:
        """Generate the default output path for a project.

        Converts: board.json -> board.gcode

        Args:
            input_path: Project file path

        Returns:
            Path with a .gcode extension beside the project
        """
        return input_path.parent / f"{input_path.stem}.gcode"
