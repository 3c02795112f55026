"""Run a continuation once every named prerequisite has resolved."""

from __future__ import annotations

from typing import Callable, Iterable

from loguru import logger


class BootJoin:
    """
    Fires ``on_complete`` exactly once, after every name in ``names`` resolved.

    Resolution order does not matter. Resolving a name twice, or a name that
    was never registered, is ignored.
    """

    def __init__(self, names: Iterable[str], on_complete: Callable[[], None]):
        self.pending: set[str] = {n for n in names}
        self.on_complete = on_complete
        self.fired = False

    def resolve(self, name: str) -> None:
        if name not in self.pending:
            logger.debug("Boot prerequisite {} already resolved or unknown", name)
            return
        self.pending.discard(name)
        logger.debug("Boot prerequisite {} resolved, {} left", name, len(self.pending))
        self.check()

    def check(self) -> None:
        """Fire if nothing is pending; a join over no names fires on first check."""
        if self.fired or self.pending:
            return
        self.fired = True
        self.on_complete()
