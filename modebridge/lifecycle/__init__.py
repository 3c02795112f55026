"""Mode lifecycle and the command passthrough."""

from modebridge.lifecycle.commands import CommandChannel, full_cancel_batch
from modebridge.lifecycle.coordinator import LifecycleCoordinator, ModeState

__all__ = ["CommandChannel", "LifecycleCoordinator", "ModeState", "full_cancel_batch"]
