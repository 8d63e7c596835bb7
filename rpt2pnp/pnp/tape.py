"""Tape — one component reel with a finite number of pickup positions."""

from __future__ import annotations

import math

from rpt2pnp.frames import Frame, Position


class Tape:
    """Feed state of a single reel.

    The tape starts at its first pickup position and moves by the
    spacing vector each time a component is taken.  Once the count
    reaches zero the tape is exhausted for good: ``get_pos()`` returns
    None and ``advance()`` returns False.

    Positions are relative to the tape tray (TRAY frame).
    """

    DEFAULT_COUNT = 1000

    def __init__(self) -> None:
        self._x = 0.0
        self._y = 0.0
        self._z = 0.0
        self._dx = 0.0
        self._dy = 0.0
        self._angle = 0.0
        self._slant_angle = 0.0
        self._count = self.DEFAULT_COUNT

    # ── configuration ──────────────────────────────────────────────

    def set_first_component_position(self, x: float, y: float, z: float) -> None:
        self._x, self._y, self._z = x, y, z

    def set_component_spacing(self, dx: float, dy: float) -> None:
        self._dx, self._dy = dx, dy
        # Reel is planar, so no z component.
        self._slant_angle = math.degrees(math.atan2(dy, dx))

    def set_angle(self, angle: float) -> None:
        """Rotation of the component on the tape relative to the footprint."""
        self._angle = angle

    def set_number_components(self, n: int) -> None:
        self._count = max(0, n)

    # ── state ──────────────────────────────────────────────────────

    @property
    def count(self) -> int:
        return self._count

    @property
    def exhausted(self) -> bool:
        return self._count <= 0

    @property
    def height(self) -> float:
        """Pickup z of the component, tray-relative."""
        return self._z

    @property
    def angle(self) -> float:
        return self._angle

    @property
    def slant_angle(self) -> float:
        return self._slant_angle

    @property
    def spacing(self) -> tuple[float, float]:
        return (self._dx, self._dy)

    def get_pos(self) -> Position | None:
        """Current pickup position, or None if the tape is empty."""
        if self.exhausted:
            return None
        return Position(self._x, self._y, self._z, Frame.TRAY)

    def advance(self) -> bool:
        """Move to the next component.  False if there was nothing left."""
        if self.exhausted:
            return False
        self._x += self._dx
        self._y += self._dy
        self._count -= 1
        return True

    def describe(self) -> str:
        return (
            f"origin: ({self._x:.2f}, {self._y:.2f}, {self._z:.2f}) "
            f"delta: ({self._dx:.2f},{self._dy:.2f}) "
            f"slant: {self._slant_angle:.1f}° count: {self._count}"
        )

    def __repr__(self) -> str:
        return f"Tape({self.describe()})"
