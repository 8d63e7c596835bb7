"""Board — the parts and pads that the assembly steps operate on.

Submodules:
  models    Board, Part, Pad, Box, Dimension dataclasses.
  geometry  Rotation, extents and closest-part helpers.
  loader    JSON board description parsing.
"""

from .models import Board, BoardError, Box, Dimension, Pad, Part, board_position
from .loader import load_board, parse_board
from .geometry import board_extent, find_part_closest_to, local_to_board_xy

__all__ = [
    # Models
    "Board", "BoardError", "Box", "Dimension", "Pad", "Part", "board_position",
    # Loader
    "load_board", "parse_board",
    # Geometry
    "board_extent", "find_part_closest_to", "local_to_board_xy",
]
