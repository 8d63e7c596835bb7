"""Coordinate frames and tagged positions.

Three frames are involved when turning a board into machine moves:

  BOARD    relative to the board origin (bottom-left of the PCB)
  TRAY     relative to the tape-tray origin
  MACHINE  absolute machine coordinates

Every Position carries its frame tag.  The only way to get from a local
frame to MACHINE is ``compose()``, which refuses to mix frames.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class Frame(Enum):
    BOARD = "board"
    TRAY = "tray"
    MACHINE = "machine"


class FrameError(ValueError):
    """Raised when coordinates from incompatible frames are combined."""


@dataclass(frozen=True)
class Position:
    """A point in millimetres, tagged with the frame it is relative to."""

    x: float
    y: float
    z: float = 0.0
    frame: Frame = Frame.BOARD

    def distance_to(self, other: Position) -> float:
        """XY distance; both points must share a frame."""
        if other.frame is not self.frame:
            raise FrameError(
                f"Distance between {self.frame.value} and {other.frame.value} coordinates"
            )
        return math.hypot(other.x - self.x, other.y - self.y)


def compose(origin: Position, local: Position, expected: Frame) -> Position:
    """Return ``origin + local`` as a MACHINE-frame position.

    ``origin`` must be a machine coordinate and ``local`` must be tagged
    with ``expected`` (the frame that origin anchors).
    """
    if origin.frame is not Frame.MACHINE:
        raise FrameError(f"Frame origin must be a machine coordinate, got {origin.frame.value}")
    if local.frame is not expected:
        raise FrameError(
            f"Expected a {expected.value} coordinate, got {local.frame.value}"
        )
    return Position(
        origin.x + local.x,
        origin.y + local.y,
        origin.z + local.z,
        Frame.MACHINE,
    )
