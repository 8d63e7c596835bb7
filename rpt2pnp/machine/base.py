"""Machine capability set shared by all output backends."""

from __future__ import annotations

from typing import Protocol

from rpt2pnp.board.models import Dimension, Pad, Part
from rpt2pnp.frames import Frame
from rpt2pnp.pnp.binding import BindingTable
from rpt2pnp.pnp.tape import Tape


class Machine(Protocol):
    """What the planner drives.

    ``init`` must succeed before any other call; a backend writes
    nothing to its output until then.
    """

    def init(self, binding: BindingTable, description: str, dimension: Dimension) -> bool:
        ...

    def pick_part(self, part: Part, tape: Tape | None) -> None:
        ...

    def place_part(self, part: Part, tape: Tape | None) -> None:
        ...

    def dispense(self, part: Part, pad: Pad) -> None:
        ...

    def finish(self) -> None:
        ...


def init_problem(binding: BindingTable | None, dimension: Dimension) -> str | None:
    """Return why a machine cannot start with this setup, or None."""
    if binding is None:
        return "no binding table"
    if binding.board_origin is None:
        return "board origin not configured"
    if binding.board_origin.frame is not Frame.MACHINE:
        return "board origin is not a machine coordinate"
    if binding.tray_origin.frame is not Frame.MACHINE:
        return "tape-tray origin is not a machine coordinate"
    if dimension.w <= 0 or dimension.h <= 0:
        return f"invalid board dimension {dimension.w:.1f}x{dimension.h:.1f}mm"
    if binding.board_top < binding.bed_level:
        return (f"board top {binding.board_top:.2f} is below bed level "
                f"{binding.bed_level:.2f}")
    return None
