"""Component binding table — which tape supplies which component.

The table owns every Tape for the lifetime of a run.  Several component
keys may refer to the same Tape when they are physically the same part
(e.g. ``0805@100n`` and ``0805@0.1uF``); lookups hand out that shared
instance so advancing through one key is visible through the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rpt2pnp.board.models import Part
from rpt2pnp.config import TYPICAL_BOARD_THICKNESS
from rpt2pnp.frames import Frame, Position

from .tape import Tape

log = logging.getLogger("rpt2pnp.pnp.binding")


class ConfigError(Exception):
    """Raised when a configuration cannot be used.

    ``source`` and ``line`` point at the offending input when known.
    """

    def __init__(self, message: str, source: str = "", line: int | None = None,
                 text: str | None = None) -> None:
        self.message = message
        self.source = source
        self.line = line
        self.text = text
        where = source
        if line is not None:
            where = f"{source}:{line}"
        detail = f"{where}: {message}" if where else message
        if text is not None:
            detail += f" '{text.strip()}'"
        super().__init__(detail)


def component_key(part: Part) -> str:
    return part.key


@dataclass
class BindingTable:
    """Tape bindings plus the frame parameters of board and tape tray.

    ``board_origin`` is the machine position of the board-frame origin,
    its z being the board top.  ``tray_origin`` anchors all tape
    positions; its z is the tray height.
    """

    board_origin: Position | None = None
    tray_origin: Position = field(
        default_factory=lambda: Position(0.0, 0.0, 0.0, Frame.MACHINE))
    bed_level: float = 0.0
    tapes: dict[str, Tape] = field(default_factory=dict)

    @property
    def board_top(self) -> float:
        return self.board_origin.z if self.board_origin is not None else TYPICAL_BOARD_THICKNESS

    def bind(self, key: str, tape: Tape) -> None:
        if key in self.tapes and self.tapes[key] is not tape:
            log.warning("Component %s bound to more than one tape; last one wins", key)
        self.tapes[key] = tape

    def tape_for(self, part: Part) -> Tape | None:
        return self.tapes.get(component_key(part))

    def tape_height(self, tape: Tape) -> float:
        """Pickup height of a tape in machine coordinates."""
        return self.tray_origin.z + tape.height

    def unique_tapes(self) -> list[Tape]:
        """Distinct reels, in the order they were first bound."""
        seen: set[int] = set()
        result: list[Tape] = []
        for tape in self.tapes.values():
            if id(tape) not in seen:
                seen.add(id(tape))
                result.append(tape)
        return result

    def lowest_point(self) -> float:
        lowest = self.board_top
        for tape in self.unique_tapes():
            lowest = min(lowest, self.tape_height(tape))
        return lowest

    def check_bed_level(self, source: str = "") -> None:
        """Reject configurations with anything below the bed."""
        lowest = self.lowest_point()
        if lowest < self.bed_level:
            raise ConfigError(
                f"Something is below bed level (bed-level={self.bed_level:.1f}, "
                f"lowest point={lowest:.1f})",
                source=source,
            )


def create_empty() -> BindingTable:
    """Binding table with the board at the machine origin and no tapes."""
    return BindingTable(
        board_origin=Position(0.0, 0.0, TYPICAL_BOARD_THICKNESS, Frame.MACHINE),
        bed_level=0.0,
    )
