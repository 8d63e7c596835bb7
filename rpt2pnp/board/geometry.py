"""Low-level geometry helpers for board parts."""

from __future__ import annotations

import math

from shapely.affinity import rotate, translate
from shapely.geometry import Point, box as shapely_box
from shapely.ops import unary_union

from .models import Box, Dimension, Part, board_position


def local_to_board_xy(
    local: tuple[float, float],
    cx: float, cy: float,
    rotation_deg: float,
) -> tuple[float, float]:
    """Transform a part-local offset into board coordinates."""
    px, py = local
    rad = math.radians(rotation_deg)
    cos_r = math.cos(rad)
    sin_r = math.sin(rad)
    return (
        cx + px * cos_r - py * sin_r,
        cy + px * sin_r + py * cos_r,
    )


def rotated_box(
    p0: tuple[float, float],
    p1: tuple[float, float],
    cx: float, cy: float,
    rotation_deg: float,
) -> Box:
    """Axis-aligned envelope of a part-local box after rotation and placement."""
    body = shapely_box(
        min(p0[0], p1[0]), min(p0[1], p1[1]),
        max(p0[0], p1[0]), max(p0[1], p1[1]),
    )
    body = rotate(body, rotation_deg, origin=(0, 0))
    body = translate(body, cx, cy)
    min_x, min_y, max_x, max_y = body.bounds
    return Box(board_position(min_x, min_y), board_position(max_x, max_y))


def _part_shapes(part: Part) -> list:
    shapes = []
    if part.bounding_box is not None:
        bb = part.bounding_box
        shapes.append(shapely_box(bb.p0.x, bb.p0.y, bb.p1.x, bb.p1.y))
    for pad in part.pads:
        shapes.append(shapely_box(
            pad.pos.x - pad.width / 2, pad.pos.y - pad.height / 2,
            pad.pos.x + pad.width / 2, pad.pos.y + pad.height / 2,
        ))
    if not shapes:
        shapes.append(Point(part.pos.x, part.pos.y))
    return shapes


def board_extent(parts: list[Part]) -> Dimension:
    """Board size derived from everything drawn on it.

    The board origin is the board-frame (0, 0), so the extent is the
    maximum X/Y reached by any part body or pad.
    """
    if not parts:
        return Dimension(0.0, 0.0)
    shapes = [s for part in parts for s in _part_shapes(part)]
    _, _, max_x, max_y = unary_union(shapes).bounds
    return Dimension(max(max_x, 0.0), max(max_y, 0.0))


def find_part_closest_to(parts: list[Part], x: float, y: float) -> Part | None:
    """Part whose centre is nearest to (x, y); first one wins on ties."""
    target = Point(x, y)
    result = None
    closest = -1.0
    for part in parts:
        dist = target.distance(Point(part.pos.x, part.pos.y))
        if closest < 0 or dist < closest:
            result = part
            closest = dist
    return result
