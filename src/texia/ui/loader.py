from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class ScreenLoader:
    """Holds one screen's fetched records.

    ``load()`` runs the blocking fetch in a worker thread. Each call supersedes
    the previous one: a result from an older call, or one arriving after
    ``close()``, is dropped without touching the screen state.
    """

    def __init__(self, fetch: Callable[[], list[Any]], *, label: str):
        self._fetch = fetch
        self.label = label
        self.records: list[Any] = []
        self.error: str | None = None
        self.loading = False
        self.active = True
        self._generation = 0

    def _is_current(self, generation: int) -> bool:
        return self.active and generation == self._generation

    async def load(self) -> bool:
        """Fetch and store records. Returns False when the result was dropped."""
        if not self.active:
            return False
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            records = await asyncio.to_thread(self._fetch)
        except Exception as ex:
            if not self._is_current(generation):
                return False
            logger.exception("Error al cargar %s", self.label)
            self.records = []
            self.error = f"Error al cargar {self.label}: {ex}"
        else:
            if not self._is_current(generation):
                logger.debug("Resultado obsoleto de %s descartado", self.label)
                return False
            self.records = list(records)
            self.error = None
        finally:
            if self._is_current(generation):
                self.loading = False
        return True

    def dismiss_error(self) -> None:
        self.error = None

    def attach(self, client: Any) -> None:
        """Close once the page client is deleted.

        A websocket drop is not a teardown: the client may reconnect within
        its reconnect timeout and keep using this loader.
        """
        client.on_delete(self.close)

    def close(self) -> None:
        self.active = False
        self.loading = False
