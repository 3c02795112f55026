"""Mode identity, layout and hooks."""

from modebridge.mode.capabilities import ModeCapabilities
from modebridge.mode.descriptor import ModeDescriptor, load_mode_descriptor, resolve_mode_path
from modebridge.mode.entry import load_capabilities, load_entry_object

__all__ = [
    "ModeCapabilities",
    "ModeDescriptor",
    "load_capabilities",
    "load_entry_object",
    "load_mode_descriptor",
    "resolve_mode_path",
]
