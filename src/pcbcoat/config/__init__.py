"""Configuration management for pcbcoat.

This module provides configuration management using Pydantic models.
Configuration can be provided via project files, CLI arguments or defaults.

Key classes:
- GcodeSettings: Coating process settings supplied by the layout editor
- PlannerConfig: Path planning tunables (zone count, yield cadence, ...)
- LoggingConfig: Logging settings
- CoatingAppSettings: Main application settings
"""

from pcbcoat.config.settings import (
    CoatingAppSettings,
    FillPattern,
    GcodeSettings,
    LoggingConfig,
    PlannerConfig,
    TravelAvoidanceStrategy,
    Unit,
    WorkArea,
    get_default_settings,
)

__all__ = [
    "CoatingAppSettings",
    "FillPattern",
    "GcodeSettings",
    "LoggingConfig",
    "PlannerConfig",
    "TravelAvoidanceStrategy",
    "Unit",
    "WorkArea",
    "get_default_settings",
]
