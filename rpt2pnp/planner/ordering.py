"""Visit ordering for placement and dispensing."""

from __future__ import annotations

from dataclasses import dataclass

from rpt2pnp.board.models import Board, Pad, Part
from rpt2pnp.frames import Position
from rpt2pnp.pnp.binding import BindingTable

# Sort height for parts without a tape; they go first.
UNBOUND_HEIGHT = -1.0


@dataclass(frozen=True, eq=False)
class DispenseUnit:
    """One pad to dispense on, together with the part it belongs to."""

    part: Part
    pad: Pad

    @property
    def position(self) -> Position:
        return self.pad.pos


def part_height(part: Part, binding: BindingTable) -> float:
    tape = binding.tape_for(part)
    return UNBOUND_HEIGHT if tape is None else binding.tape_height(tape)


def sort_by_height(parts: list[Part], binding: BindingTable) -> list[Part]:
    """Lowest components first so the head never hits a taller neighbour.

    Equal heights are ordered by component name.
    """
    return sorted(parts, key=lambda p: (part_height(p, binding), p.component_name))


def collect_dispense_units(board: Board) -> list[DispenseUnit]:
    return [DispenseUnit(part, pad) for part in board.parts for pad in part.pads]


def optimize_dispense_order(units: list[DispenseUnit]) -> list[DispenseUnit]:
    """Reorder pads to shorten the needle's travel.

    Greedy nearest-neighbour tour starting at the first unit.  Ties go
    to the unit that came first in the input, so the result only depends
    on the input order.  Every unit appears exactly once.
    """
    if len(units) <= 2:
        return list(units)

    remaining = list(units)
    current = remaining.pop(0)
    result = [current]
    while remaining:
        cx, cy = current.position.x, current.position.y
        best_index = 0
        best_dist = -1.0
        for i, unit in enumerate(remaining):
            dx = unit.position.x - cx
            dy = unit.position.y - cy
            dist = dx * dx + dy * dy
            if best_dist < 0 or dist < best_dist:
                best_index = i
                best_dist = dist
        current = remaining.pop(best_index)
        result.append(current)
    return result


def travel_distance(units: list[DispenseUnit]) -> float:
    """Total XY distance when visiting ``units`` in order."""
    return sum(
        a.position.distance_to(b.position)
        for a, b in zip(units, units[1:])
    )
