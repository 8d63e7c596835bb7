"""Preview backend — draws the action sequence as a PNG for inspection.

The canvas covers the board and every tape pickup point in machine
coordinates.  Dispense points become discs whose size follows the
dispense time; picks are marked on the tray and connected to the
footprint they are placed on.  Nothing is written until ``finish()``.
"""

from __future__ import annotations

import logging
import math
from typing import BinaryIO

from PIL import Image, ImageDraw

from rpt2pnp.board.models import Dimension, Pad, Part
from rpt2pnp.config import DEFAULT_TIMING, DispenseTiming
from rpt2pnp.frames import Frame, Position, compose
from rpt2pnp.pnp.binding import BindingTable
from rpt2pnp.pnp.tape import Tape

from .base import init_problem

log = logging.getLogger("rpt2pnp.machine.preview")


class PreviewMachine:
    """Render the action sequence as a top-down image."""

    COLORS = {
        'background': (11, 17, 32),
        'board': (30, 41, 59),
        'board_outline': (148, 163, 184),
        'paste': (200, 200, 210),
        'pick': (34, 197, 94),
        'travel': (59, 130, 246),
        'part_outline': (249, 115, 22),
        'missing': (239, 68, 68),
        'text': (248, 250, 252),
    }

    def __init__(
        self,
        out: BinaryIO,
        timing: DispenseTiming = DEFAULT_TIMING,
        dpi: int = 300,
        margin_mm: float = 5.0,
    ) -> None:
        self._out = out
        self._timing = timing
        self.dpi = dpi
        self.margin_mm = margin_mm
        self.mm_to_px = dpi / 25.4

        self._img: Image.Image | None = None
        self._draw: ImageDraw.ImageDraw | None = None
        self._board_origin: Position | None = None
        self._tray_origin: Position | None = None
        self._min_x = self._min_y = 0.0
        self._picks: dict[int, Position] = {}
        self._step = 0

    # ── Machine interface ──────────────────────────────────────────

    def init(self, binding: BindingTable, description: str, dimension: Dimension) -> bool:
        problem = init_problem(binding, dimension)
        if problem is not None:
            log.error("Preview machine init failed: %s", problem)
            return False

        self._board_origin = binding.board_origin
        self._tray_origin = binding.tray_origin

        corners = [
            compose(self._board_origin, Position(0, 0), Frame.BOARD),
            compose(self._board_origin, Position(dimension.w, dimension.h), Frame.BOARD),
        ]
        for tape in binding.unique_tapes():
            local = tape.get_pos()
            if local is not None:
                corners.append(compose(self._tray_origin, local, Frame.TRAY))

        self._min_x = min(p.x for p in corners) - self.margin_mm
        self._min_y = min(p.y for p in corners) - self.margin_mm
        max_x = max(p.x for p in corners) + self.margin_mm
        max_y = max(p.y for p in corners) + self.margin_mm

        width_px = max(1, int((max_x - self._min_x) * self.mm_to_px))
        height_px = max(1, int((max_y - self._min_y) * self.mm_to_px))
        self._img = Image.new('RGB', (width_px, height_px), self.COLORS['background'])
        self._draw = ImageDraw.Draw(self._img)

        self._draw.rectangle(
            self._rect(corners[0].x, corners[0].y, corners[1].x, corners[1].y),
            fill=self.COLORS['board'], outline=self.COLORS['board_outline'],
        )
        self._draw.text((4, 4), description.strip(), fill=self.COLORS['text'])
        log.info("Preview canvas %dx%d px", width_px, height_px)
        return True

    def pick_part(self, part: Part, tape: Tape | None) -> None:
        draw = self._check_ready()
        local = tape.get_pos() if tape is not None else None
        if local is None:
            return
        pos = compose(self._tray_origin, local, Frame.TRAY)
        x, y = self._mm_to_canvas(pos.x, pos.y)
        r = max(2, int(0.5 * self.mm_to_px))
        draw.rectangle((x - r, y - r, x + r, y + r), outline=self.COLORS['pick'])
        self._picks[id(part)] = pos

    def place_part(self, part: Part, tape: Tape | None) -> None:
        draw = self._check_ready()
        self._step += 1
        center = compose(self._board_origin, part.pos, Frame.BOARD)
        color = self.COLORS['part_outline'] if tape is not None else self.COLORS['missing']

        bb = part.bounding_box
        if bb is not None:
            p0 = compose(self._board_origin, bb.p0, Frame.BOARD)
            p1 = compose(self._board_origin, bb.p1, Frame.BOARD)
            draw.rectangle(self._rect(p0.x, p0.y, p1.x, p1.y), outline=color)

        cx, cy = self._mm_to_canvas(center.x, center.y)
        picked = self._picks.pop(id(part), None)
        if picked is not None:
            draw.line([self._mm_to_canvas(picked.x, picked.y), (cx, cy)],
                      fill=self.COLORS['travel'])
        draw.text((cx + 2, cy + 2), f"{self._step}:{part.component_name}",
                  fill=self.COLORS['text'])

    def dispense(self, part: Part, pad: Pad) -> None:
        draw = self._check_ready()
        self._step += 1
        pos = compose(self._board_origin, pad.pos, Frame.BOARD)
        ms = self._timing.duration_ms(pad.area)
        # Disc area proportional to the amount of paste.
        r_mm = 0.1 * math.sqrt(ms)
        x, y = self._mm_to_canvas(pos.x, pos.y)
        r = max(1, int(r_mm * self.mm_to_px))
        draw.ellipse((x - r, y - r, x + r, y + r), fill=self.COLORS['paste'])
        draw.text((x + r, y - r), str(self._step), fill=self.COLORS['text'])

    def finish(self) -> None:
        if self._img is None:
            return
        self._img.save(self._out, format="PNG")
        self._out.flush()
        log.info("Preview written (%d steps)", self._step)
        self._img = None
        self._draw = None

    # ── canvas helpers ─────────────────────────────────────────────

    def _check_ready(self) -> ImageDraw.ImageDraw:
        if self._draw is None:
            raise RuntimeError("PreviewMachine used before a successful init()")
        return self._draw

    def _mm_to_canvas(self, x: float, y: float) -> tuple[int, int]:
        """Machine mm → canvas pixels (Y-inverted)."""
        px = int((x - self._min_x) * self.mm_to_px)
        py = int(self._img.height - (y - self._min_y) * self.mm_to_px)
        return px, py

    def _rect(self, x0: float, y0: float, x1: float, y1: float) -> tuple[int, int, int, int]:
        ax, ay = self._mm_to_canvas(x0, y0)
        bx, by = self._mm_to_canvas(x1, y1)
        return (min(ax, bx), min(ay, by), max(ax, bx), max(ay, by))
