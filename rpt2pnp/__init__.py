"""
rpt2pnp — turn a board's part list into solder-paste dispensing or
pick-and-place machine commands.

Packages:
  board    Parts, pads and board geometry.
  pnp      Tapes, tape bindings and their configuration files.
  planner  Visit ordering and run drivers.
  machine  G-code and preview output backends.
"""
