"""Configuration settings for pcbcoat."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FillPattern(str, Enum):
    """How an area is filled.

    - HORIZONTAL, VERTICAL: One scan-line sweep in that direction
    - AUTO: One sweep, direction chosen per shape from its aspect ratio
      and how much of it is masked
    - BOTH: A horizontal sweep followed by a vertical one
    - CONCENTRIC: Nested rings shrinking towards the centre
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    AUTO = "auto"
    BOTH = "both"
    CONCENTRIC = "concentric"


class TravelAvoidanceStrategy(str, Enum):
    """How travel moves react to a masked region in their way."""

    CONTOUR = "contour"
    LIFT = "lift"


class Unit(str, Enum):
    """Machine length unit."""

    MM = "mm"
    INCH = "inch"


class WorkArea(BaseModel):
    """Machine work area in machine units."""

    width: float = Field(default=200.0, gt=0.0, description="Work area width")
    height: float = Field(default=200.0, gt=0.0, description="Work area height")


class GcodeSettings(BaseModel):
    """Process-wide coating settings.

    Field names are snake_case; the camelCase keys written by the layout
    editor are accepted as aliases.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    work_area: WorkArea = Field(
        default_factory=WorkArea,
        alias="workArea",
        description="Machine work area",
    )
    coating_width: float = Field(
        default=10.0,
        ge=0.0,
        alias="coatingWidth",
        description="Width of one coated line; half of it pads every mask",
    )
    line_spacing: float = Field(
        default=10.0,
        alias="lineSpacing",
        description="Distance between fill scan lines",
    )
    coating_speed: float = Field(
        default=1000.0,
        gt=0.0,
        alias="coatingSpeed",
        description="Feed rate while dispensing",
    )
    move_speed: float = Field(
        default=2000.0,
        gt=0.0,
        alias="moveSpeed",
        description="Feed rate for travel moves",
    )
    safe_height: float = Field(
        default=80.0,
        alias="safeHeight",
        description="Z clearance for travel between regions and parking",
    )
    coating_height: float = Field(
        default=20.0,
        alias="coatingHeight",
        description="Z height while dispensing",
    )
    fill_pattern: FillPattern = Field(
        default=FillPattern.AUTO,
        alias="fillPattern",
        description="Default fill direction for shapes that do not set one",
    )
    enable_masking: bool = Field(
        default=True,
        alias="enableMasking",
        description="Honor masking shapes",
    )
    masking_clearance: float = Field(
        default=0.0,
        ge=0.0,
        alias="maskingClearance",
        description="Extra safety margin around every mask",
    )
    travel_avoidance_strategy: TravelAvoidanceStrategy = Field(
        default=TravelAvoidanceStrategy.CONTOUR,
        alias="travelAvoidanceStrategy",
        description="Reaction to a mask crossing a travel move",
    )
    unit: Unit = Field(default=Unit.MM, description="Machine length unit")

    @field_validator("travel_avoidance_strategy", mode="before")
    @classmethod
    def _accept_zlift(cls, value: object) -> object:
        if isinstance(value, str) and value.lower() == "zlift":
            return TravelAvoidanceStrategy.LIFT
        return value

    @property
    def mask_clearance(self) -> float:
        """Clearance applied around masks: margin plus half a coated line."""
        return self.masking_clearance + self.coating_width / 2


class PlannerConfig(BaseModel):
    """Tuning knobs for path planning.

    The defaults reproduce the editor's output; changing them changes the
    emitted G-code.
    """

    zone_count: int = Field(
        default=5,
        ge=1,
        le=64,
        description="Number of k-means zones per shape",
    )
    max_kmeans_iterations: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Upper bound on Lloyd iterations",
    )
    kmeans_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        description="Summed centroid shift below which clustering stops",
    )
    circle_segments: int = Field(
        default=180,
        ge=8,
        le=3600,
        description="Chords used to approximate an outline circle",
    )
    min_clip_length: float = Field(
        default=0.01,
        ge=0.0,
        description="Clipped outline pieces shorter than this are dropped",
    )
    position_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        description="Distance under which two tool positions are the same",
    )
    scanline_yield_interval: int = Field(
        default=200,
        ge=1,
        description="Scan lines between event-loop yields",
    )
    scanline_progress_interval: int = Field(
        default=10,
        ge=1,
        description="Scan lines between progress reports",
    )
    zone_yield_threshold: int = Field(
        default=1000,
        ge=1,
        description="Zones larger than this yield while being ordered",
    )
    zone_yield_interval: int = Field(
        default=100,
        ge=1,
        description="Ordered segments between yields in large zones",
    )
    default_coating_order: int = Field(
        default=999,
        description="Rank used for shapes without a coating order",
    )
    auto_density_grid: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Samples per side when measuring mask density for auto fill",
    )
    auto_density_threshold: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Masked share above which auto fill sweeps the short side",
    )
    concentric_min_segments: int = Field(
        default=32,
        ge=8,
        description="Minimum chords per concentric fill ring of a circle",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class CoatingAppSettings(BaseModel):
    """Main application settings."""

    gcode: GcodeSettings = Field(default_factory=GcodeSettings)
    planner: PlannerConfig = Field(default_factory=PlannerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> CoatingAppSettings:
    """Get default application settings."""
    return CoatingAppSettings()
