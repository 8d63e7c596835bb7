"""Board loader — reads a board description (JSON) into Board/Part/Pad.

Format:

    {
      "name": "blinky",
      "width": 50, "height": 30,            # optional, derived if absent
      "parts": [
        {
          "component_name": "C1",
          "footprint": "SMD_0805",
          "value": "100n",
          "x": 12.0, "y": 8.5, "angle": 90,
          "bounding_box": [[-1.4, -0.9], [1.4, 0.9]],
          "pads": [
            {"name": "1", "x": -0.95, "y": 0, "width": 1.0, "height": 1.3},
            {"name": "2", "x":  0.95, "y": 0, "width": 1.0, "height": 1.3}
          ]
        }
      ]
    }

Bounding box and pad coordinates are relative to the part centre and
are rotated by the part angle.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .geometry import board_extent, local_to_board_xy, rotated_box
from .models import Board, BoardError, Dimension, Pad, Part, board_position

log = logging.getLogger("rpt2pnp.board.loader")


def _parse_pad(data: dict, cx: float, cy: float, angle: float, index: int) -> Pad:
    x, y = local_to_board_xy(
        (float(data.get("x", 0.0)), float(data.get("y", 0.0))), cx, cy, angle,
    )
    width = float(data["width"])
    height = float(data["height"])
    # Pad extents follow the part when it is turned sideways
    if round(angle) % 180 == 90:
        width, height = height, width
    return Pad(
        name=str(data.get("name", index + 1)),
        pos=board_position(x, y),
        width=width,
        height=height,
    )


def _parse_part(data: dict) -> Part:
    cx = float(data["x"])
    cy = float(data["y"])
    angle = float(data.get("angle", 0.0))

    bbox = None
    raw_box = data.get("bounding_box")
    if raw_box is not None:
        (x0, y0), (x1, y1) = raw_box
        bbox = rotated_box((float(x0), float(y0)), (float(x1), float(y1)), cx, cy, angle)

    pads = [
        _parse_pad(p, cx, cy, angle, i)
        for i, p in enumerate(data.get("pads", []))
    ]

    return Part(
        component_name=str(data["component_name"]),
        footprint=str(data["footprint"]),
        value=str(data.get("value", "")),
        pos=board_position(cx, cy),
        angle=angle,
        bounding_box=bbox,
        pads=pads,
    )


def parse_board(data: dict, source: str = "<board>") -> Board:
    """Parse a raw dict (from JSON) into a Board."""
    parts: list[Part] = []
    for i, raw in enumerate(data.get("parts", [])):
        try:
            parts.append(_parse_part(raw))
        except (KeyError, TypeError, ValueError) as e:
            name = raw.get("component_name", f"#{i}") if isinstance(raw, dict) else f"#{i}"
            raise BoardError(source, f"part {name}: {e!r}") from e

    if "width" in data and "height" in data:
        try:
            dimension = Dimension(float(data["width"]), float(data["height"]))
        except (TypeError, ValueError) as e:
            raise BoardError(source, f"board dimension: {e!r}") from e
    else:
        dimension = board_extent(parts)

    log.debug("Parsed %d parts from %s", len(parts), source)
    return Board(parts=parts, dimension=dimension, name=str(data.get("name", "")))


def load_board(path: Path) -> Board:
    """Read and parse a board JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise BoardError(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise BoardError(str(path), "expected a JSON object at top level")
    return parse_board(data, source=str(path))
