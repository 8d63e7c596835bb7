"""Board dataclasses — parts, pads and board extents (board frame)."""

from __future__ import annotations

from dataclasses import dataclass, field

from rpt2pnp.frames import Frame, Position


@dataclass(frozen=True)
class Box:
    """Axis-aligned bounding box in board coordinates."""

    p0: Position
    p1: Position

    @property
    def width(self) -> float:
        return abs(self.p1.x - self.p0.x)

    @property
    def height(self) -> float:
        return abs(self.p1.y - self.p0.y)


@dataclass(frozen=True)
class Pad:
    """A solder-paste deposition point.

    ``pos`` is the pad centre on the board; width/height are the copper
    extents used to derive the dispensing area.
    """

    name: str
    pos: Position
    width: float
    height: float

    @property
    def area(self) -> float:
        """Copper area in mm²."""
        return self.width * self.height


@dataclass
class Part:
    """A component placed on the board."""

    component_name: str     # reference designator, e.g. "C12"
    footprint: str
    value: str
    pos: Position
    angle: float = 0.0      # degrees, counter-clockwise
    bounding_box: Box | None = None
    pads: list[Pad] = field(default_factory=list)

    @property
    def key(self) -> str:
        """Component identity used for tape binding: ``footprint@value``."""
        return f"{self.footprint}@{self.value}"


@dataclass(frozen=True)
class Dimension:
    w: float
    h: float


@dataclass
class Board:
    """All parts of one board plus its overall size."""

    parts: list[Part]
    dimension: Dimension
    name: str = ""

    def find_part(self, component_name: str) -> Part | None:
        for part in self.parts:
            if part.component_name == component_name:
                return part
        return None


def board_position(x: float, y: float) -> Position:
    return Position(x, y, 0.0, Frame.BOARD)


class BoardError(Exception):
    """Raised when a board description cannot be interpreted."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")
