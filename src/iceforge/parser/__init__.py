"""Manifest parsing with byte-span fidelity for iceforge."""

from iceforge.parser.builder import ConfigBuilder, load_config, load_config_string
from iceforge.parser.loader import SourceMap, TrackedLoader, YAMLSafetyError

__all__ = [
    "ConfigBuilder",
    "SourceMap",
    "TrackedLoader",
    "YAMLSafetyError",
    "load_config",
    "load_config_string",
]
