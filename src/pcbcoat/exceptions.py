"""Exception hierarchy for pcbcoat."""


class CoatingError(Exception):
    """Base exception for all pcbcoat errors."""

    pass


class ShapeError(CoatingError):
    """Errors related to shape input data."""

    pass


class InvalidShapeError(ShapeError):
    """A shape record could not be interpreted."""

    def __init__(self, shape_id: str, reason: str) -> None:
        self.shape_id = shape_id
        self.reason = reason
        super().__init__(f"Invalid shape '{shape_id}': {reason}")


class GenerationError(CoatingError):
    """Errors raised while generating G-code."""

    pass


class PathGenerationError(GenerationError):
    """Unexpected failure inside the path generation pipeline."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Path generation failed: {reason}")


class EmptyGCodeError(GenerationError):
    """Generation finished without producing any G-code body."""

    def __init__(self) -> None:
        super().__init__(
            "No G-code body was generated. Check the shapes and coating settings."
        )


class GenerationCancelledError(GenerationError):
    """Generation was cancelled through its cancel event."""

    def __init__(self, shapes_done: int, shapes_total: int) -> None:
        self.shapes_done = shapes_done
        self.shapes_total = shapes_total
        super().__init__(
            f"Generation cancelled: {shapes_done} of {shapes_total} shapes completed"
        )


class ProjectError(CoatingError):
    """Errors related to project files."""

    pass


class ProjectLoadError(ProjectError):
    """Error loading a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load project '{path}': {reason}")


class SettingsError(ProjectError):
    """Coating settings failed validation."""

    def __init__(self, details: str) -> None:
        self.details = details
        super().__init__(f"Invalid coating settings: {details}")


class GCodeWriteError(ProjectError):
    """Error writing a G-code file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write G-code '{path}': {reason}")
