"""G-code emission.

Motion is planned by a pure function over an immutable machine state:
``plan_move`` takes the current state and a target and returns the next
state together with the G-code line to emit (or None for a no-op move).
``GCodeEmitter`` threads that state through a job and accumulates the
emitted lines.

Line format:
    G0 F2000 X10.000 Y5.000          rapid travel
    G1 F1000 X90.000 Y5.000 Z20.000  coating feed
    M503 ; Nozzle ON
    M504 ; Nozzle OFF
"""

from dataclasses import dataclass

from pcbcoat.config.settings import GcodeSettings
from pcbcoat.domain import Point

NOZZLE_ON = "M503 ; Nozzle ON"
NOZZLE_OFF = "M504 ; Nozzle OFF"


@dataclass(frozen=True, slots=True)
class EmitterState:
    """Last commanded tool position.

    Attributes:
        x: X position
        y: Y position
        z: Z height
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_point(self) -> Point:
        return Point(self.x, self.y)


def format_number(value: float) -> str:
    """Render a feed rate the way the editor does: no trailing ``.0``.

    Examples:
        >>> format_number(1000.0)
        '1000'
        >>> format_number(1000.5)
        '1000.5'
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_coordinate(value: float) -> str:
    # + 0.0 folds negative zero
    return f"{value + 0.0:.3f}"


def plan_move(
    state: EmitterState,
    x: float,
    y: float,
    z: float | None,
    speed: float,
    rapid: bool,
    tolerance: float = 0.01,
) -> tuple[EmitterState, str | None]:
    """Plan one linear move.

    Args:
        state: Current machine state
        x: Target X
        y: Target Y
        z: Target Z, or None to keep the current height
        speed: Feed rate
        rapid: True for G0, False for G1
        tolerance: Per-axis distance under which the move is a no-op

    Returns:
        Tuple of (next state, G-code line or None when nothing moves)
    """
    if (
        abs(state.x - x) < tolerance
        and abs(state.y - y) < tolerance
        and (z is None or abs(state.z - z) < tolerance)
    ):
        return state, None

    command = "G0" if rapid else "G1"
    line = f"{command} F{format_number(speed)} X{format_coordinate(x)} Y{format_coordinate(y)}"
    if z is not None:
        line += f" Z{format_coordinate(z)}"

    return EmitterState(x, y, state.z if z is None else z), line


class GCodeEmitter:
    """Stateful writer for a G-code body.

    Example:
        >>> emitter = GCodeEmitter(settings)
        >>> emitter.travel_to(10, 10)
        >>> emitter.nozzle_on()
        >>> emitter.coat_to(90, 10)
        >>> emitter.nozzle_off()
        >>> text = emitter.get_gcode()
    """

    def __init__(self, settings: GcodeSettings, tolerance: float = 0.01) -> None:
        self.settings = settings
        self.tolerance = tolerance
        self._state = EmitterState()
        self._lines: list[str] = []
        self.nozzle_cycles = 0

    def add_line(self, line: str) -> None:
        self._lines.append(line)

    def comment(self, text: str) -> None:
        self._lines.append(f"; {text}")

    def _move(self, x: float, y: float, z: float | None, speed: float, rapid: bool) -> None:
        self._state, line = plan_move(self._state, x, y, z, speed, rapid, self.tolerance)
        if line is not None:
            self._lines.append(line)

    def travel_to(self, x: float, y: float, z: float | None = None) -> None:
        """Rapid move at travel speed."""
        self._move(x, y, z, self.settings.move_speed, True)

    def coat_to(self, x: float, y: float) -> None:
        """Feed move at the global coating speed and current height."""
        self.coat_to_with_speed(x, y, self.settings.coating_speed)

    def coat_to_with_speed(self, x: float, y: float, speed: float) -> None:
        """Feed move at the current height with an explicit feed rate."""
        self._move(x, y, self._state.z, speed, False)

    def set_z(self, z: float) -> None:
        """Rapid Z-only move at the current XY."""
        self._move(self._state.x, self._state.y, z, self.settings.move_speed, True)

    def set_coating_z(self, z: float) -> None:
        self.set_z(z)

    def nozzle_on(self) -> None:
        self._lines.append(NOZZLE_ON)

    def nozzle_off(self) -> None:
        self._lines.append(NOZZLE_OFF)
        self.nozzle_cycles += 1

    def current_position(self) -> EmitterState:
        return self._state

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_gcode(self) -> str:
        """Return the accumulated body, one command per line."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"
