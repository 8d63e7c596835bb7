"""Tests for visit ordering and the run drivers.

Covers:
  - height ordering (stable, name tie-break, unbound parts first)
  - dispense travel optimisation (pure reordering, shorter, deterministic)
  - dispense timing
  - end-to-end pick'n place with shared / exhausted tapes
"""

from __future__ import annotations

import random
import unittest
from collections import Counter

from rpt2pnp.config import DispenseTiming
from rpt2pnp.planner import (
    PickPlaceResult,
    collect_dispense_units,
    optimize_dispense_order,
    part_height,
    pick_n_place,
    solder_dispense,
    sort_by_height,
    travel_distance,
)
from tests.blinky_fixture import (
    RecordingMachine, make_binding, make_board, make_pad, make_part, make_tape,
)


def _unit_ids(units) -> Counter:
    return Counter((u.part.component_name, u.pad.name) for u in units)


class TestHeightOrdering(unittest.TestCase):

    def test_lowest_first_with_name_tie_break(self):
        binding = make_binding({
            "SOT-23@x": make_tape(z=5),
            "SMD_0805@100n": make_tape(z=2),
        })
        parts = [
            make_part("C3", "SOT-23", "x"),
            make_part("C2"),
            make_part("C1"),
        ]
        ordered = sort_by_height(parts, binding)
        self.assertEqual([p.component_name for p in ordered], ["C1", "C2", "C3"])

    def test_unbound_parts_first(self):
        binding = make_binding({"SMD_0805@100n": make_tape(z=0.5)})
        parts = [make_part("C1"), make_part("X1", "unknown", "?")]
        self.assertEqual(part_height(parts[1], binding), -1)
        ordered = sort_by_height(parts, binding)
        self.assertEqual([p.component_name for p in ordered], ["X1", "C1"])

    def test_input_not_modified(self):
        binding = make_binding({"SMD_0805@100n": make_tape()})
        parts = [make_part("C2"), make_part("C1")]
        sort_by_height(parts, binding)
        self.assertEqual([p.component_name for p in parts], ["C2", "C1"])

    def test_tray_height_counts(self):
        binding = make_binding({
            "A@1": make_tape(z=1.0),
            "B@1": make_tape(z=3.0),
        }, tray_origin=(0, 0, 2.0))
        self.assertAlmostEqual(part_height(make_part("P", "A", "1"), binding), 3.0)
        self.assertAlmostEqual(part_height(make_part("P", "B", "1"), binding), 5.0)


class TestDispenseOrder(unittest.TestCase):

    def _scattered_board(self, n: int, seed: int = 42):
        rng = random.Random(seed)
        parts = []
        for i in range(n):
            x, y = rng.uniform(0, 100), rng.uniform(0, 100)
            parts.append(make_part(f"R{i}", x=x, y=y, pads=[make_pad("1", x, y)]))
        return make_board(parts, 100, 100)

    def test_empty_board(self):
        self.assertEqual(optimize_dispense_order([]), [])

    def test_single_pad(self):
        units = collect_dispense_units(self._scattered_board(1))
        self.assertEqual(optimize_dispense_order(units), units)

    def test_bijection_on_large_board(self):
        units = collect_dispense_units(self._scattered_board(150))
        ordered = optimize_dispense_order(units)
        self.assertEqual(len(ordered), 150)
        self.assertEqual(_unit_ids(ordered), _unit_ids(units))
        self.assertEqual({id(u) for u in ordered}, {id(u) for u in units})

    def test_shorter_than_file_order(self):
        units = collect_dispense_units(self._scattered_board(150))
        ordered = optimize_dispense_order(units)
        self.assertLess(travel_distance(ordered), travel_distance(units) * 0.5)

    def test_deterministic(self):
        units = collect_dispense_units(self._scattered_board(60, seed=7))
        a = optimize_dispense_order(units)
        b = optimize_dispense_order(list(units))
        self.assertEqual([id(u) for u in a], [id(u) for u in b])

    def test_nearest_neighbour_walk(self):
        pads = [make_pad("a", 0, 0), make_pad("b", 10, 0), make_pad("c", 1, 0), make_pad("d", 11, 0)]
        board = make_board([make_part("P", pads=pads)])
        ordered = optimize_dispense_order(collect_dispense_units(board))
        self.assertEqual([u.pad.name for u in ordered], ["a", "c", "b", "d"])

    def test_pads_not_mutated(self):
        pad = make_pad("1", 3, 4, 2, 2)
        board = make_board([make_part("P", pads=[pad, make_pad("2", 0, 0)])])
        ordered = optimize_dispense_order(collect_dispense_units(board))
        self.assertIn(pad, [u.pad for u in ordered])
        self.assertEqual((pad.pos.x, pad.pos.y, pad.area), (3, 4, 4))

    def test_solder_dispense_visits_every_pad(self):
        board = self._scattered_board(20)
        machine = RecordingMachine()
        self.assertEqual(solder_dispense(board, machine), 20)
        self.assertEqual(sorted(machine.names("dispense")), sorted(p.component_name for p in board.parts))


class TestDispenseTiming(unittest.TestCase):

    def test_defaults(self):
        t = DispenseTiming()
        self.assertEqual((t.minimum_ms, t.start_ms, t.area_ms_per_mm2), (50, 50, 25))
        self.assertAlmostEqual(t.duration_ms(2.0), 100.0)

    def test_never_below_minimum(self):
        t = DispenseTiming(minimum_ms=50, start_ms=0, area_ms_per_mm2=10)
        self.assertEqual(t.duration_ms(0.0), 50)
        self.assertEqual(t.duration_ms(1.0), 50)
        self.assertEqual(t.duration_ms(10.0), 100)

    def test_monotonic_in_area(self):
        t = DispenseTiming(start_ms=10, area_ms_per_mm2=25)
        areas = [0, 0.1, 0.5, 1, 1.5, 2, 4, 10, 100]
        durations = [t.duration_ms(a) for a in areas]
        self.assertEqual(durations, sorted(durations))
        self.assertTrue(all(d >= t.minimum_ms for d in durations))

    def test_from_pair(self):
        t = DispenseTiming.from_pair("20,30")
        self.assertEqual((t.minimum_ms, t.start_ms, t.area_ms_per_mm2), (50, 20, 30))

    def test_from_pair_invalid(self):
        for spec in ("20", "a,b", "1,2,3", "-5,10"):
            with self.assertRaises(ValueError):
                DispenseTiming.from_pair(spec)

    def test_non_finite_rejected(self):
        for spec in ("nan,25", "10,nan", "inf,1", "1,inf"):
            with self.assertRaises(ValueError):
                DispenseTiming.from_pair(spec)
        with self.assertRaises(ValueError):
            DispenseTiming(minimum_ms=float("nan"))


class TestPickAndPlace(unittest.TestCase):

    def test_shared_tape_runs_out(self):
        """Two parts from a tape of two; a third reports exhaustion but is placed."""
        tape = make_tape(x=0, y=0, z=2, dx=4, dy=0, count=2)
        binding = make_binding({"SMD_0805@100n": tape})
        board = make_board([make_part("C1"), make_part("C2")])
        machine = RecordingMachine()

        result = pick_n_place(binding, board, machine)

        picks = [a for a in machine.actions if a[0] == "pick"]
        self.assertEqual([p[1] for p in picks], ["C1", "C2"])
        self.assertEqual((picks[0][2].x, picks[0][2].y, picks[0][2].z), (0, 0, 2))
        self.assertEqual((picks[1][2].x, picks[1][2].y, picks[1][2].z), (4, 0, 2))
        self.assertTrue(tape.exhausted)
        self.assertEqual(result.exhausted, [])

        third = make_board([make_part("C3")])
        with self.assertLogs("rpt2pnp.planner", level="WARNING"):
            result = pick_n_place(binding, third, machine)
        self.assertEqual(result.exhausted, ["C3"])
        self.assertIn(("place", "C3"), machine.actions)
        self.assertIn(("pick", "C3", None), machine.actions)

    def test_height_order_end_to_end(self):
        binding = make_binding({
            "SOT-23@x": make_tape(z=5),
            "SMD_0805@100n": make_tape(z=2),
        })
        board = make_board([
            make_part("C3", "SOT-23", "x"),
            make_part("C1"),
            make_part("C2"),
        ])
        machine = RecordingMachine()
        result = pick_n_place(binding, board, machine)
        self.assertEqual(machine.names("place"), ["C1", "C2", "C3"])
        self.assertEqual(result.placed, ["C1", "C2", "C3"])
        ops = [a[0] for a in machine.actions]
        self.assertEqual(ops, ["pick", "place"] * 3)

    def test_missing_tape_is_reported(self):
        binding = make_binding({})
        board = make_board([make_part("Q1", "TO-92", "2N3904")])
        machine = RecordingMachine()
        with self.assertLogs("rpt2pnp.planner", level="WARNING") as logs:
            result = pick_n_place(binding, board, machine)
        self.assertIn("No tape for 'Q1'", logs.output[0])
        self.assertEqual(result.missing_tape, ["Q1"])
        self.assertEqual(result.warnings, 1)
        self.assertEqual(machine.names("place"), ["Q1"])

    def test_result_defaults(self):
        self.assertEqual(PickPlaceResult().warnings, 0)


if __name__ == "__main__":
    unittest.main()
