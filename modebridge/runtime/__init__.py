"""Mode boot and per-mode runtime state."""

from modebridge.runtime.boot import LibraryLoader, boot_mode, complete_boot, load_resource_tree
from modebridge.runtime.cncserver import BotProfile, Canvas, CncServerClient, api_server_url
from modebridge.runtime.context import ModeApi, ModeContext
from modebridge.runtime.join import BootJoin

__all__ = [
    "BootJoin",
    "BotProfile",
    "Canvas",
    "CncServerClient",
    "LibraryLoader",
    "ModeApi",
    "ModeContext",
    "api_server_url",
    "boot_mode",
    "complete_boot",
    "load_resource_tree",
]
