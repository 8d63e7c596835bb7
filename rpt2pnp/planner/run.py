"""Drive a machine through a complete dispensing or pick-and-place run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rpt2pnp.board.models import Board
from rpt2pnp.machine.base import Machine
from rpt2pnp.pnp.binding import BindingTable

from .ordering import collect_dispense_units, optimize_dispense_order, sort_by_height, travel_distance

log = logging.getLogger("rpt2pnp.planner")


@dataclass
class PickPlaceResult:
    """What happened during a pick-and-place run."""

    placed: list[str] = field(default_factory=list)
    missing_tape: list[str] = field(default_factory=list)
    exhausted: list[str] = field(default_factory=list)

    @property
    def warnings(self) -> int:
        return len(self.missing_tape) + len(self.exhausted)


def pick_n_place(binding: BindingTable, board: Board, machine: Machine) -> PickPlaceResult:
    """Pick every part from its tape and place it, lowest parts first.

    Missing tapes and empty tapes are reported but do not stop the run;
    the operator may refill a tape by hand.
    """
    result = PickPlaceResult()
    for part in sort_by_height(board.parts, binding):
        tape = binding.tape_for(part)
        if tape is None:
            log.warning("No tape for '%s' (%s)", part.component_name, part.key)
            result.missing_tape.append(part.component_name)
        elif tape.exhausted:
            log.warning("Tape for '%s' (%s) is empty", part.component_name, part.key)
            result.exhausted.append(part.component_name)

        machine.pick_part(part, tape)
        machine.place_part(part, tape)
        if tape is not None:
            tape.advance()
        result.placed.append(part.component_name)

    log.info("Placed %d parts (%d without tape, %d from empty tape)",
             len(result.placed), len(result.missing_tape), len(result.exhausted))
    return result


def solder_dispense(board: Board, machine: Machine) -> int:
    """Dispense paste on every pad of the board.  Returns the pad count."""
    units = collect_dispense_units(board)
    ordered = optimize_dispense_order(units)
    log.info("Dispensing %d pads, travel %.1fmm (file order %.1fmm)",
             len(ordered), travel_distance(ordered), travel_distance(units))
    for unit in ordered:
        machine.dispense(unit.part, unit.pad)
    return len(ordered)
