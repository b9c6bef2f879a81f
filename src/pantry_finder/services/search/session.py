"""Per-caller search session that only ever exposes the latest search."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ...models.domain import ParsedQuery, SearchFilters
from .orchestrator import SearchOrchestrator, SearchOutcome


class SearchSession:
    """Serializes one caller's searches.

    Each call takes the next sequence token and cancels the previous in-flight task.
    An outcome is committed to ``latest`` only while its token is still current, so a
    superseded search returns None even if its I/O ignored the cancellation.
    """

    def __init__(self, orchestrator: SearchOrchestrator) -> None:
        self.orchestrator = orchestrator
        self.latest: Optional[SearchOutcome] = None
        self._sequence = 0
        self._in_flight: Optional[asyncio.Task] = None

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def loading(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    def cancel(self) -> None:
        """Invalidate any in-flight search without starting a new one."""
        self._sequence += 1
        if self._in_flight is not None and not self._in_flight.done():
            self._in_flight.cancel()
        self._in_flight = None

    def clear(self) -> None:
        self.cancel()
        self.latest = None

    async def search(self, query: ParsedQuery, filters: SearchFilters | None = None) -> Optional[SearchOutcome]:
        self.cancel()
        token = self._sequence
        task = asyncio.ensure_future(self.orchestrator.search(query, filters))
        self._in_flight = task

        try:
            outcome = await task
        except asyncio.CancelledError:
            if token != self._sequence:
                logging.debug(f"Search #{token} superseded by #{self._sequence}; dropping")
                return None
            raise

        if token != self._sequence:
            logging.debug(f"Search #{token} finished after #{self._sequence} was issued; dropping result")
            return None

        self.latest = outcome
        self._in_flight = None
        return outcome
