"""Planner — decides the order in which the machine visits things.

Submodules:
  ordering  Height ordering for placement, travel ordering for pads.
  run       pick_n_place / solder_dispense drivers.
"""

from .ordering import (
    DispenseUnit, UNBOUND_HEIGHT,
    part_height, sort_by_height,
    collect_dispense_units, optimize_dispense_order, travel_distance,
)
from .run import PickPlaceResult, pick_n_place, solder_dispense

__all__ = [
    "DispenseUnit", "UNBOUND_HEIGHT",
    "part_height", "sort_by_height",
    "collect_dispense_units", "optimize_dispense_order", "travel_distance",
    "PickPlaceResult", "pick_n_place", "solder_dispense",
]
