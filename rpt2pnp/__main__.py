"""
rpt2pnp — entry point.

Usage:
    python -m rpt2pnp -l board.json                    # list components
    python -m rpt2pnp -t board.json > tapes.conf       # config template
    python -m rpt2pnp -H board.json > homer.txt        # calibration points
    python -m rpt2pnp -d board.json > paste.gcode      # dispense solder paste
    python -m rpt2pnp -p -c tapes.conf board.json      # pick'n place
    python -m rpt2pnp -p -C homer.conf -P -o pnp.png board.json
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from pathlib import Path

from rpt2pnp.board import BoardError, load_board
from rpt2pnp.config import DEFAULT_TIMING, DispenseTiming
from rpt2pnp.machine import GCodeMachine, PreviewMachine
from rpt2pnp.planner import pick_n_place, solder_dispense
from rpt2pnp.pnp import (
    ConfigError, component_list, config_template, create_empty,
    homer_instructions, load_homer_config, load_pnp_config,
)

log = logging.getLogger("rpt2pnp")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rpt2pnp",
        description="Board description → solder-paste dispensing or pick'n place G-code",
    )
    op = p.add_mutually_exclusive_group(required=True)
    op.add_argument("-l", dest="op", action="store_const", const="list",
                    help="List found <footprint>@<value> <count>")
    op.add_argument("-t", dest="op", action="store_const", const="template",
                    help="Create human-editable config template")
    op.add_argument("-H", dest="op", action="store_const", const="homer",
                    help="Create calibration (homer) instructions")
    op.add_argument("-d", dest="op", action="store_const", const="dispense",
                    help="Dispense solder paste")
    op.add_argument("-p", dest="op", action="store_const", const="pnp",
                    help="Pick'n place")

    p.add_argument("-D", dest="timing", metavar="INIT_MS,AREA_MS", default=None,
                   help="Dispense time: initial milliseconds and milliseconds per mm² of pad")
    p.add_argument("-P", dest="preview", action="store_true",
                   help="Output a PNG preview instead of G-code")

    cfg = p.add_mutually_exclusive_group()
    cfg.add_argument("-c", dest="config", type=Path, default=None,
                     help="Tape configuration (see -t)")
    cfg.add_argument("-C", dest="homer_config", type=Path, default=None,
                     help="Calibration configuration (see -H)")

    p.add_argument("-o", dest="output", type=Path, default=None,
                   help="Output file (default: stdout)")
    p.add_argument("-v", dest="verbose", action="store_true", help="Debug logging")
    p.add_argument("board", type=Path, help="Board description (JSON)")
    return p


def _write_output(data: str | bytes, output: Path | None) -> None:
    if output is not None:
        if isinstance(data, bytes):
            output.write_bytes(data)
        else:
            output.write_text(data, encoding="utf-8")
    elif isinstance(data, bytes):
        sys.stdout.buffer.write(data)
    else:
        sys.stdout.write(data)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        timing = DispenseTiming.from_pair(args.timing) if args.timing else DEFAULT_TIMING
    except ValueError as e:
        log.error("Invalid -D spec: %s", e)
        return 2

    try:
        board = load_board(args.board)
    except BoardError as e:
        log.error("%s", e)
        return 1
    log.info("Board: %s, %.1fmm x %.1fmm, %d parts",
             args.board, board.dimension.w, board.dimension.h, len(board.parts))

    if args.op == "list":
        _write_output(component_list(board.parts), args.output)
        return 0
    if args.op == "template":
        _write_output(config_template(board), args.output)
        return 0
    if args.op == "homer":
        _write_output(homer_instructions(board), args.output)
        return 0

    try:
        if args.config is not None:
            binding = load_pnp_config(args.config)
        elif args.homer_config is not None:
            binding = load_homer_config(args.homer_config, board)
        else:
            binding = create_empty()
    except ConfigError as e:
        log.error("%s", e)
        return 1

    # Buffer everything so a failed run leaves no partial output behind.
    if args.preview:
        buffer = io.BytesIO()
        machine = PreviewMachine(buffer, timing=timing)
    else:
        buffer = io.StringIO()
        machine = GCodeMachine(buffer, timing=timing)

    description = "rpt2pnp " + " ".join(argv if argv is not None else sys.argv[1:])
    if not machine.init(binding, description, board.dimension):
        log.error("Initialization failed")
        return 1

    if args.op == "dispense":
        solder_dispense(board, machine)
    else:
        pick_n_place(binding, board, machine)
    machine.finish()

    _write_output(buffer.getvalue(), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
