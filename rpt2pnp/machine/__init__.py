"""Machine backends — turn planned actions into output.

Submodules:
  base     Machine protocol and shared init checks.
  gcode    G-code for the dispenser / pick-and-place head.
  preview  PNG rendering of the same action sequence.
"""

from .base import Machine, init_problem
from .gcode import GCodeMachine
from .preview import PreviewMachine

__all__ = ["Machine", "init_problem", "GCodeMachine", "PreviewMachine"]
