"""Operator helpers — component lists and configuration skeletons.

These produce text for a human to fill in or follow; none of it feeds
back into the planner directly.
"""

from __future__ import annotations

from rpt2pnp.board.geometry import find_part_closest_to
from rpt2pnp.board.models import Board, Part

from .binding import component_key

# Where the template puts the board when nothing is known yet.
TEMPLATE_BOARD_ORIGIN = (10, 10)


def count_components(parts: list[Part]) -> dict[str, int]:
    """``footprint@value`` → number of parts, in first-seen order."""
    counts: dict[str, int] = {}
    for part in parts:
        key = component_key(part)
        counts[key] = counts.get(key, 0) + 1
    return counts


def component_list(parts: list[Part]) -> str:
    """Aligned ``<key> <count>`` table, sorted by key."""
    counts = count_components(parts)
    if not counts:
        return ""
    longest = max(len(k) for k in counts)
    lines = [f"{key:<{longest}} {counts[key]:4d}" for key in sorted(counts)]
    return "\n".join(lines) + "\n"


def config_template(board: Board) -> str:
    """Declarative configuration skeleton with one Tape per component key."""
    origin_x, origin_y = TEMPLATE_BOARD_ORIGIN
    out: list[str] = [
        "Board:",
        f"origin: {origin_x} {origin_y} 1.6 # x/y/z origin of the board; (z=thickness).",
        "",
        "# Where the tray with all the tapes start.",
        f"Tape-Tray-Origin: 0 {origin_y + board.dimension.h:.1f} 0",
        "",
        "# This template provides one <footprint>@<component> per tape,",
        "# but if you have multiple components that are indeed the same",
        "# e.g. smd0805@100n smd0805@0.1uF, then you can just put them",
        "# space delimited behind each Tape:",
        "#   Tape: smd0805@100n smd0805@0.1uF",
        "# Each Tape section requires",
        "#   'origin:', which is the (x/y/z) position (relative to Tape-Tray-Origin) of",
        "# the top of the first component (z: pick-up-height).",
        "# And",
        "#   'spacing:', (dx,dy) to the next one",
        "#",
        "# Also there are the following optional parameters",
        "#angle: 0     # Optional: Default rotation of component on tape.",
        "#count: 1000  # Optional: available count on tape",
        "",
    ]

    counts = count_components(board.parts)
    ypos = 0
    for part in board.parts:
        key = component_key(part)
        if key not in counts:
            continue    # already written
        if part.bounding_box is not None:
            width = int(part.bounding_box.width) + 5
            height = int(part.bounding_box.height)
        else:
            width, height = 5, 0
        out.append("")
        out.append(f"Tape: {key}")
        out.append(f"count: {counts.pop(key)}")
        out.append(f"origin:  {10 + height // 2} {ypos + width // 2} 2 # fill me")
        out.append(f"spacing: {4 if height < 4 else height + 2} 0   # fill me")
        ypos += width

    return "\n".join(out) + "\n"


def homer_instructions(board: Board) -> str:
    """Calibration points to visit, one per line: ``<id>\\t<instruction>``."""
    out = ["bedlevel:BedLevel-Z\tTouch needle on bed next to board"]
    for key, count in count_components(board.parts).items():
        out.append(f"tape1:{key}\tfind first component")
        next_pos = min(max(2, count), 4)
        out.append(f"tape{next_pos}:{key}\tfind {next_pos}. component")

    corner = find_part_closest_to(board.parts, 0, 0)
    if corner is not None:
        out.append(f"board:{corner.component_name}\tfind component center on board (bottom left)")
    corner = find_part_closest_to(board.parts, board.dimension.w, board.dimension.h)
    if corner is not None:
        out.append(f"board:{corner.component_name}\tfind component center on board (top right)")
    return "\n".join(out) + "\n"
