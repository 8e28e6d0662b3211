"""Optional background sweep of expired sessions."""

import asyncio
import logging

from services.sessions.session_store import SessionStore

LOGGER = logging.getLogger(__name__)


class SessionCleaner:
    """Periodically drop sessions idle past the store's timeout.

    Lookups already hide expired sessions, so this only bounds memory for a
    store that stops receiving traffic.
    """

    def __init__(self, store: SessionStore) -> None:
        """
        Args:
            store: Session store to sweep.
        """
        self._store = store

    def prune_expired_sessions(self) -> int:
        """Sweep the store and return the number of sessions removed."""
        return self._store.sweep_expired()

    async def run_periodic_cleanup(self, interval_seconds: float = 3_600) -> None:
        """
        Repeatedly prune expired sessions at the given interval until cancelled.

        Args:
            interval_seconds: Seconds to sleep between cleanup runs.
        """
        while True:
            try:
                await asyncio.sleep(interval_seconds)
                self.prune_expired_sessions()
            except asyncio.CancelledError:
                break
            except Exception:
                LOGGER.exception("Periodic session sweep failed")
