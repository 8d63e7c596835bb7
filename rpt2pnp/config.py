"""Run-scope constants for dispensing and machine motion.

These are fixed once at startup (defaults, or overridden from the
command line) and handed to the machine backends at construction.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


# Board thickness assumed when a configuration does not say otherwise.
TYPICAL_BOARD_THICKNESS = 1.6


@dataclass(frozen=True)
class DispenseTiming:
    """How long to keep dispenser pressure on for a pad.

    All times are in milliseconds.
    """

    minimum_ms: float = 50.0
    """Lower bound for any dispense, even for zero-area pads."""

    start_ms: float = 50.0
    """Initial offset before the area-proportional part kicks in."""

    area_ms_per_mm2: float = 25.0
    """Additional milliseconds per mm² of pad area."""

    def __post_init__(self) -> None:
        values = (self.minimum_ms, self.start_ms, self.area_ms_per_mm2)
        if not all(math.isfinite(v) and v >= 0 for v in values):
            raise ValueError(
                f"Dispense timing must be finite and not negative: minimum={self.minimum_ms} "
                f"start={self.start_ms} area={self.area_ms_per_mm2}"
            )

    def duration_ms(self, area_mm2: float) -> float:
        return max(self.minimum_ms, self.start_ms + area_mm2 * self.area_ms_per_mm2)

    @classmethod
    def from_pair(cls, spec: str) -> DispenseTiming:
        """Parse an ``"<init-ms>,<area-to-ms>"`` override."""
        fields = spec.split(",")
        if len(fields) != 2:
            raise ValueError(f"Expected '<init-ms>,<area-to-ms>', got {spec!r}")
        start_ms, area_ms = (float(f) for f in fields)
        return cls(start_ms=start_ms, area_ms_per_mm2=area_ms)


@dataclass(frozen=True)
class GCodeSettings:
    """Feed rates, clearances and actuator codes for the G-code backend.

    Distances in millimetres, feed rates in mm/min.
    """

    travel_feed: float = 6000
    z_feed: float = 1000
    rotate_feed: float = 3000

    hover_mm: float = 5.0
    """Clearance above the highest point (board top or tape) while travelling."""

    needle_gap_mm: float = 0.2
    """Gap between dispenser needle and board top while dispensing."""

    vacuum_dwell_ms: int = 200
    """Pause after switching the vacuum so the part settles."""

    park_x: float = 0.0
    park_y: float = 0.0

    dispense_on: str = "M106"
    dispense_off: str = "M107"
    vacuum_on: str = "M42 P6 S255"
    vacuum_off: str = "M42 P6 S0"
    rotate_axis: str = "A"


DEFAULT_TIMING = DispenseTiming()
DEFAULT_GCODE = GCodeSettings()
