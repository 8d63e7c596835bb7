"""G-code backend — motion and actuation commands for the assembly machine.

Coordinates are composed into machine space before they are written:

    board point  → board_origin + point   (z = board top)
    tape point   → tray_origin  + point   (z = tray height + pickup z)

Every motion goes through ``_move_to`` which remembers the last commanded
position and leaves out axes that do not change.
"""

from __future__ import annotations

import logging
from typing import TextIO

from rpt2pnp.board.models import Dimension, Pad, Part
from rpt2pnp.config import DEFAULT_GCODE, DEFAULT_TIMING, DispenseTiming, GCodeSettings
from rpt2pnp.frames import Frame, Position, compose
from rpt2pnp.pnp.binding import BindingTable
from rpt2pnp.pnp.tape import Tape

from .base import init_problem

log = logging.getLogger("rpt2pnp.machine.gcode")


class GCodeMachine:
    """Render the action sequence as G-code on a text stream."""

    def __init__(
        self,
        out: TextIO,
        timing: DispenseTiming = DEFAULT_TIMING,
        settings: GCodeSettings = DEFAULT_GCODE,
    ) -> None:
        self._out = out
        self._timing = timing
        self._settings = settings
        self._ready = False

        self._board_origin: Position | None = None
        self._tray_origin: Position | None = None
        self._bed_level = 0.0
        self._safe_z = 0.0

        # Last commanded position; None = unknown.
        self._x: float | None = None
        self._y: float | None = None
        self._z: float | None = None
        self._rotation: float | None = None
        self._last_pick: dict[int, Position] = {}

    # ── Machine interface ──────────────────────────────────────────

    def init(self, binding: BindingTable, description: str, dimension: Dimension) -> bool:
        problem = init_problem(binding, dimension)
        if problem is not None:
            log.error("G-code machine init failed: %s", problem)
            return False

        self._board_origin = binding.board_origin
        self._tray_origin = binding.tray_origin
        self._bed_level = binding.bed_level

        highest = binding.board_top
        for tape in binding.unique_tapes():
            highest = max(highest, binding.tape_height(tape))
        self._safe_z = highest + self._settings.hover_mm

        t = self._timing
        self._emit(f"; {description.strip()}")
        self._emit(f"; Board: {dimension.w:.1f}mm x {dimension.h:.1f}mm, "
                   f"origin ({self._board_origin.x:.2f}, {self._board_origin.y:.2f}), "
                   f"top {self._board_origin.z:.2f}, bed level {self._bed_level:.2f}")
        self._emit(f"; Dispense: max({t.minimum_ms:.0f}, {t.start_ms:.0f} + "
                   f"{t.area_ms_per_mm2:.1f} * area) ms")
        self._emit("G21 ; millimetres")
        self._emit("G90 ; absolute positioning")
        self._emit("G28 ; home all axes")
        self._move_to(z=self._safe_z, feed=self._settings.z_feed)

        self._ready = True
        log.info("G-code machine ready, travel height %.2f", self._safe_z)
        return True

    def pick_part(self, part: Part, tape: Tape | None) -> None:
        self._check_ready()
        if tape is None:
            self._emit(f"; {part.component_name}: no tape, nothing to pick")
            return
        local = tape.get_pos()
        if local is None:
            self._emit(f"; {part.component_name}: tape empty, nothing to pick")
            return

        pos = compose(self._tray_origin, local, Frame.TRAY)
        s = self._settings
        self._emit(f"; Pick {part.component_name} ({part.footprint}@{part.value})")
        self._travel_to(pos)
        self._move_to(z=pos.z, feed=s.z_feed)
        self._emit(s.vacuum_on)
        self._dwell(s.vacuum_dwell_ms)
        self._move_to(z=self._safe_z, feed=s.z_feed)
        self._last_pick[id(part)] = pos

    def place_part(self, part: Part, tape: Tape | None) -> None:
        self._check_ready()
        pos = compose(self._board_origin, part.pos, Frame.BOARD)
        s = self._settings

        picked = self._last_pick.pop(id(part), None)
        thickness = picked.z - self._bed_level if picked is not None else 0.0
        rotation = (part.angle + (tape.angle if tape is not None else 0.0)) % 360

        self._emit(f"; Place {part.component_name} @ ({part.pos.x:.2f}, {part.pos.y:.2f}) "
                   f"{part.angle:.0f}°")
        self._travel_to(pos)
        self._rotate_to(rotation)
        self._move_to(z=pos.z + thickness, feed=s.z_feed)
        self._emit(s.vacuum_off)
        self._dwell(s.vacuum_dwell_ms)
        self._move_to(z=self._safe_z, feed=s.z_feed)

    def dispense(self, part: Part, pad: Pad) -> None:
        self._check_ready()
        pos = compose(self._board_origin, pad.pos, Frame.BOARD)
        s = self._settings
        ms = self._timing.duration_ms(pad.area)

        self._emit(f"; {part.component_name}.{pad.name} area {pad.area:.2f}mm²")
        self._travel_to(pos)
        self._move_to(z=pos.z + s.needle_gap_mm, feed=s.z_feed)
        self._emit(s.dispense_on)
        self._dwell(ms)
        self._emit(s.dispense_off)
        self._move_to(z=self._safe_z, feed=s.z_feed)

    def finish(self) -> None:
        if not self._ready:
            return
        s = self._settings
        self._emit("; done")
        self._move_to(z=self._safe_z, feed=s.z_feed)
        self._move_to(x=s.park_x, y=s.park_y, feed=s.travel_feed)
        self._emit("M84 ; motors off")
        self._out.flush()
        self._ready = False

    # ── emission helpers ───────────────────────────────────────────

    def _check_ready(self) -> None:
        if not self._ready:
            raise RuntimeError("GCodeMachine used before a successful init()")

    def _emit(self, line: str) -> None:
        self._out.write(line + "\n")

    def _dwell(self, ms: float) -> None:
        self._emit(f"G4 P{ms:.0f}")

    def _travel_to(self, pos: Position) -> None:
        """Lift to travel height, then move over the target."""
        self._move_to(z=self._safe_z, feed=self._settings.z_feed)
        self._move_to(x=pos.x, y=pos.y, feed=self._settings.travel_feed)

    def _rotate_to(self, angle: float) -> None:
        if self._rotation is not None and abs(self._rotation - angle) < 1e-6:
            return
        self._emit(f"G1 {self._settings.rotate_axis}{angle:.2f} F{self._settings.rotate_feed:.0f}")
        self._rotation = angle

    def _move_to(self, *, x: float | None = None, y: float | None = None,
                 z: float | None = None, feed: float) -> None:
        words: list[str] = []
        if x is not None and (self._x is None or abs(self._x - x) > 1e-6):
            words.append(f"X{x:.3f}")
            self._x = x
        if y is not None and (self._y is None or abs(self._y - y) > 1e-6):
            words.append(f"Y{y:.3f}")
            self._y = y
        if z is not None and (self._z is None or abs(self._z - z) > 1e-6):
            words.append(f"Z{z:.3f}")
            self._z = z
        if not words:
            return
        op = "G0" if feed == self._settings.travel_feed else "G1"
        self._emit(f"{op} {' '.join(words)} F{feed:.0f}")
