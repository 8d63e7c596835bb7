"""Pick-and-place supply side — tapes and the component→tape binding.

Submodules:
  tape       Tape feed state (position, spacing, remaining count).
  binding    BindingTable, ConfigError, component_key.
  parsing    Declarative and calibration configuration readers.
  templates  Component list and configuration skeletons for operators.
"""

from .tape import Tape
from .binding import BindingTable, ConfigError, component_key, create_empty
from .parsing import (
    parse_pnp_config, load_pnp_config,
    parse_homer_config, load_homer_config,
)
from .templates import count_components, component_list, config_template, homer_instructions

__all__ = [
    "Tape",
    "BindingTable", "ConfigError", "component_key", "create_empty",
    "parse_pnp_config", "load_pnp_config", "parse_homer_config", "load_homer_config",
    "count_components", "component_list", "config_template", "homer_instructions",
]
