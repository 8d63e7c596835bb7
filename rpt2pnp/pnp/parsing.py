"""Binding-table producers — read tape configuration files.

Two formats are understood:

Declarative configuration (hand-written, see ``templates.config_template``)::

    Board:
    origin: 10 10 1.6            # board origin x/y, optional z = board top
    Tape-Tray-Origin: 0 40 0     # tray origin x/y, optional z = tray height

    Tape: smd0805@100n smd0805@0.1uF
    origin:  12 4 2              # first component, relative to the tray
    spacing: 4 0
    angle: 90                    # optional
    count: 50                    # optional

Calibration ("homer") configuration, one measured machine position per
line, produced by walking the needle through ``homer_instructions``::

    bedlevel:BedLevel-Z  0 0 0.1
    tape1:smd0805@100n   31.2 52.0 2.1
    tape4:smd0805@100n   43.2 52.1 2.1
    board:C1             22.5 14.0 1.7
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from rpt2pnp.board.models import Board
from rpt2pnp.config import TYPICAL_BOARD_THICKNESS
from rpt2pnp.frames import Frame, Position

from .binding import BindingTable, ConfigError
from .tape import Tape

log = logging.getLogger("rpt2pnp.pnp.parsing")

# Tapes on the tray are usually rotated 90° against the footprint drawing.
DEFAULT_TAPE_ANGLE = 90.0


def _numbers(source: str, line_no: int, text: str, what: str,
             minimum: int, maximum: int) -> list[float]:
    """Parse between ``minimum`` and ``maximum`` leading numbers of ``text``."""
    values: list[float] = []
    for token in text.split()[:maximum]:
        try:
            values.append(float(token))
        except ValueError:
            break
    if len(values) < minimum:
        raise ConfigError(f"Parse problem {what}:", source=source, line=line_no, text=text)
    return values


# ── Declarative configuration ──────────────────────────────────────


def parse_pnp_config(text: str, source: str = "<config>") -> BindingTable:
    """Build a binding table from the declarative configuration format."""
    result = BindingTable(bed_level=0.0)
    current_tape: Tape | None = None

    for line_no, raw in enumerate(text.splitlines(), start=1):
        content = raw.split("#", 1)[0].strip()
        if not content:
            continue
        token, *tail = content.split(None, 1)
        rest = tail[0] if tail else ""

        if token == "Board:":
            current_tape = None

        elif token == "Tape-Tray-Origin:":
            current_tape = None
            if result.tapes:
                raise ConfigError("Tape-Tray-Origin must come before the first Tape:",
                                  source=source, line=line_no, text=raw)
            values = _numbers(source, line_no, rest, "tape-tray origin", 2, 3)
            z = values[2] if len(values) > 2 else 0.0
            result.tray_origin = Position(values[0], values[1], z, Frame.MACHINE)

        elif token == "Tape:":
            keys = rest.split()
            if not keys:
                raise ConfigError("Tape: without component names",
                                  source=source, line=line_no, text=raw)
            current_tape = Tape()
            current_tape.set_angle(DEFAULT_TAPE_ANGLE)
            for key in keys:
                result.bind(key, current_tape)

        elif token == "origin:":
            if current_tape is not None:
                x, y, z = _numbers(source, line_no, rest, "tape origin", 3, 3)
                current_tape.set_first_component_position(x, y, z)
            else:
                values = _numbers(source, line_no, rest, "board origin", 2, 3)
                top = values[2] if len(values) > 2 else TYPICAL_BOARD_THICKNESS
                result.board_origin = Position(values[0], values[1], top, Frame.MACHINE)

        elif token == "spacing:":
            if current_tape is None:
                raise ConfigError("spacing without tape", source=source, line=line_no)
            dx, dy = _numbers(source, line_no, rest, "spacing", 2, 2)
            if dx == 0 and dy == 0:
                raise ConfigError("Spacing: at least one needs to be set",
                                  source=source, line=line_no, text=raw)
            current_tape.set_component_spacing(dx, dy)

        elif token == "angle:":
            if current_tape is None:
                raise ConfigError("angle without tape", source=source, line=line_no)
            (angle,) = _numbers(source, line_no, rest, "angle", 1, 1)
            current_tape.set_angle(angle)

        elif token == "count:":
            if current_tape is None:
                raise ConfigError("count without tape", source=source, line=line_no)
            try:
                count = int(rest.split()[0])
            except (IndexError, ValueError):
                raise ConfigError("Parse problem count:", source=source,
                                  line=line_no, text=raw) from None
            if count < 0:
                raise ConfigError("count must not be negative", source=source,
                                  line=line_no, text=raw)
            current_tape.set_number_components(count)

        else:
            raise ConfigError(f"invalid token '{token}'", source=source, line=line_no)

    log.info("Config %s: %d component keys on %d tapes",
             source, len(result.tapes), len(result.unique_tapes()))
    return result


def load_pnp_config(path: Path) -> BindingTable:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(e), source=str(path)) from e
    return parse_pnp_config(text, source=str(path))


# ── Calibration configuration ──────────────────────────────────────

_NUM = r"([-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)"
_TAPE_RE = re.compile(rf"^tape(\d+):(\S+)\s+{_NUM}\s+{_NUM}\s+{_NUM}")
_BOARD_RE = re.compile(rf"^board:(\S+)\s+{_NUM}\s+{_NUM}\s+{_NUM}")
_BEDLEVEL_RE = re.compile(rf"^bedlevel:(\S+)\s+{_NUM}\s+{_NUM}\s+{_NUM}")


def parse_homer_config(text: str, board: Board, source: str = "<homer>") -> BindingTable:
    """Build a binding table from measured calibration points.

    Positions are absolute machine coordinates, so the tray origin is
    the machine origin.  The result is checked against the bed level
    and rejected if anything sits below it.
    """
    result = BindingTable()
    bed_level: float | None = None

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue

        m = _TAPE_RE.match(line)
        if m:
            tape_idx = int(m.group(1))
            key = m.group(2)
            x, y, z = (float(m.group(i)) for i in (3, 4, 5))
            if tape_idx == 1:
                tape = Tape()
                tape.set_angle(DEFAULT_TAPE_ANGLE)
                tape.set_first_component_position(x, y, z)
                result.bind(key, tape)
                continue
            tape = result.tapes.get(key)
            if tape is None:
                log.warning("%s:%d: tape%d for '%s' before tape1, ignored",
                            source, line_no, tape_idx, key)
                continue
            first = tape.get_pos()
            advance = tape_idx - 1
            dx = (x - first.x) / advance
            dy = (y - first.y) / advance
            tape.set_component_spacing(dx, dy)
            log.info("Δ=%.2fmm ∡=%5.1f° %s", (dx * dx + dy * dy) ** 0.5, tape.angle, key)
            continue

        m = _BOARD_RE.match(line)
        if m:
            designator = m.group(1)
            x, y, z = (float(m.group(i)) for i in (2, 3, 4))
            part = board.find_part(designator)
            if part is not None:
                result.board_origin = Position(x - part.pos.x, y - part.pos.y, z, Frame.MACHINE)
            else:
                log.warning("%s:%d: trouble finding '%s' on board", source, line_no, designator)
                origin = result.board_origin or Position(0.0, 0.0, 0.0, Frame.MACHINE)
                result.board_origin = Position(origin.x, origin.y, z, Frame.MACHINE)
            if bed_level is None:
                bed_level = z - TYPICAL_BOARD_THICKNESS
            continue

        m = _BEDLEVEL_RE.match(line)
        if m:
            bed_level = float(m.group(4))
            continue

        log.warning("%s:%d: couldn't parse '%s'", source, line_no, line)

    if bed_level is None:
        log.warning("%s: no bed level measured, assuming 0", source)
        bed_level = 0.0
    result.bed_level = bed_level

    result.check_bed_level(source=source)
    return result


def load_homer_config(path: Path, board: Board) -> BindingTable:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(e), source=str(path)) from e
    return parse_homer_config(text, board, source=str(path))
