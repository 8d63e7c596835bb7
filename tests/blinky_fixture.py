"""Blinky test fixture — a small hand-built board for planner/machine tests.

Parts (board frame, mm):
  - C1, C2: 0805 100n capacitors, two pads each
  - R1:     0805 10k resistor, two pads
  - U1:     SOT-23 transistor, three pads

The raw dict mirrors the JSON board format so the loader can be
exercised with the same data.
"""

from __future__ import annotations

from rpt2pnp.board.models import Board, Dimension, Pad, Part, board_position
from rpt2pnp.frames import Frame, Position
from rpt2pnp.pnp.binding import BindingTable
from rpt2pnp.pnp.tape import Tape


def _chip(name: str, value: str, x: float, y: float, angle: float = 0) -> dict:
    return {
        "component_name": name,
        "footprint": "SMD_0805",
        "value": value,
        "x": x, "y": y, "angle": angle,
        "bounding_box": [[-1.5, -1.0], [1.5, 1.0]],
        "pads": [
            {"name": "1", "x": -0.95, "y": 0, "width": 1.0, "height": 1.3},
            {"name": "2", "x": 0.95, "y": 0, "width": 1.0, "height": 1.3},
        ],
    }


def make_blinky_dict() -> dict:
    return {
        "name": "blinky",
        "width": 30, "height": 20,
        "parts": [
            _chip("C1", "100n", 5, 5),
            _chip("R1", "10k", 15, 5, angle=90),
            _chip("C2", "100n", 5, 15),
            {
                "component_name": "U1",
                "footprint": "SOT-23",
                "value": "BC847",
                "x": 22, "y": 12,
                "bounding_box": [[-1.5, -1.4], [1.5, 1.4]],
                "pads": [
                    {"name": "1", "x": -0.95, "y": -1.0, "width": 0.6, "height": 0.7},
                    {"name": "2", "x": 0.95, "y": -1.0, "width": 0.6, "height": 0.7},
                    {"name": "3", "x": 0.0, "y": 1.0, "width": 0.6, "height": 0.7},
                ],
            },
        ],
    }


def make_part(name: str, footprint: str = "SMD_0805", value: str = "100n",
              x: float = 0.0, y: float = 0.0, angle: float = 0.0,
              pads: list[Pad] | None = None) -> Part:
    return Part(
        component_name=name,
        footprint=footprint,
        value=value,
        pos=board_position(x, y),
        angle=angle,
        pads=pads or [],
    )


def make_pad(name: str, x: float, y: float, w: float = 1.0, h: float = 1.0) -> Pad:
    return Pad(name=name, pos=board_position(x, y), width=w, height=h)


def make_board(parts: list[Part], w: float = 50.0, h: float = 50.0) -> Board:
    return Board(parts=parts, dimension=Dimension(w, h))


def make_tape(x: float = 0.0, y: float = 0.0, z: float = 2.0,
              dx: float = 4.0, dy: float = 0.0, count: int | None = None,
              angle: float = 0.0) -> Tape:
    tape = Tape()
    tape.set_first_component_position(x, y, z)
    tape.set_component_spacing(dx, dy)
    tape.set_angle(angle)
    if count is not None:
        tape.set_number_components(count)
    return tape


def make_binding(tapes: dict[str, Tape] | None = None,
                 board_origin: tuple[float, float, float] = (0.0, 0.0, 1.6),
                 tray_origin: tuple[float, float, float] = (0.0, 0.0, 0.0),
                 bed_level: float = 0.0) -> BindingTable:
    return BindingTable(
        board_origin=Position(*board_origin, Frame.MACHINE),
        tray_origin=Position(*tray_origin, Frame.MACHINE),
        bed_level=bed_level,
        tapes=dict(tapes or {}),
    )


class RecordingMachine:
    """Machine stand-in that records every call in order."""

    def __init__(self) -> None:
        self.actions: list[tuple] = []
        self.init_ok = True

    def init(self, binding, description, dimension) -> bool:
        self.actions.append(("init", description))
        return self.init_ok

    def pick_part(self, part, tape) -> None:
        pos = tape.get_pos() if tape is not None else None
        self.actions.append(("pick", part.component_name, pos))

    def place_part(self, part, tape) -> None:
        self.actions.append(("place", part.component_name))

    def dispense(self, part, pad) -> None:
        self.actions.append(("dispense", part.component_name, pad.name))

    def finish(self) -> None:
        self.actions.append(("finish",))

    def names(self, op: str) -> list[str]:
        return [a[1] for a in self.actions if a[0] == op]
