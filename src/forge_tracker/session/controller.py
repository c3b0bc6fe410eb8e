"""Session controller: the start/stop lifecycle of the single timed session.

The controller never owns domain data. It reads the selection from the
``DomainStore`` and writes elapsed time back through ``commit_seconds``.
Live elapsed time is recomputed from the injected clock on every query, so
callers can poll it on any cadence without the controller running a timer.
"""

from datetime import datetime, timezone
from typing import Callable, List
from uuid import UUID

from ..core.enums import SessionStatus
from ..domain.models import IDLE, Domain, Running, SessionState
from ..store.domain_store import DomainStore
from ..utils.logging_config import get_logger

logger = get_logger("session")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionController:
    """Two-state machine over ``Idle`` and ``Running``."""

    def __init__(self, store: DomainStore, clock: Clock = utc_now):
        self._store = store
        self._clock = clock
        self._state: SessionState = IDLE

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return isinstance(self._state, Running)

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.RUNNING if self.is_running else SessionStatus.IDLE

    def start(self) -> bool:
        """
        Start a session against the selected domain.

        Returns:
            True if a session was started; False if one is already running
            or no domain is selected
        """
        if self.is_running:
            return False

        domain_id = self._store.selected_domain_id
        if domain_id is None:
            logger.debug("Cannot start a session without a selected domain")
            return False

        self._state = Running(domain_id=domain_id, started_at=self._clock())
        logger.info(f"Session started for domain {domain_id}")
        return True

    def stop(self) -> int:
        """
        Stop the running session and commit its elapsed seconds.

        Returns:
            The committed seconds, 0 when no session was running
        """
        state = self._state
        if not isinstance(state, Running):
            return 0

        elapsed = self._elapsed_since(state.started_at)
        self._state = IDLE
        self._store.commit_seconds(state.domain_id, elapsed)

        logger.info(f"Session stopped for domain {state.domain_id} after {elapsed}s")
        return elapsed

    def toggle(self) -> SessionStatus:
        """Start when idle, stop when running; returns the new status."""
        if self.is_running:
            self.stop()
        else:
            self.start()
        return self.status

    def select_domain(self, domain_id: UUID) -> bool:
        """
        Change the selected domain.

        A session running against another domain is committed first. The
        newly selected domain starts idle.

        Returns:
            True if ``domain_id`` is now selected
        """
        if self._store.get_domain(domain_id) is None:
            return False

        state = self._state
        if isinstance(state, Running):
            if state.domain_id == domain_id:
                return True
            self.stop()

        return self._store.select_domain(domain_id)

    def remove_domain(self, domain_id: UUID) -> bool:
        """Remove a domain, committing a session that targets it first."""
        state = self._state
        if isinstance(state, Running) and state.domain_id == domain_id:
            self.stop()
        return self._store.remove_domain(domain_id)

    def live_elapsed_seconds(self) -> int:
        """Seconds since the session started, 0 when idle."""
        state = self._state
        if not isinstance(state, Running):
            return 0
        return self._elapsed_since(state.started_at)

    def live_seconds_for(self, domain_id: UUID) -> int:
        """Stored total for a domain plus the live session if it targets it."""
        domain = self._store.get_domain(domain_id)
        if domain is None:
            return 0

        state = self._state
        if isinstance(state, Running) and state.domain_id == domain_id:
            return domain.total_seconds + self._elapsed_since(state.started_at)
        return domain.total_seconds

    def domains_with_live_session(self) -> List[Domain]:
        """
        Copies of every domain with the live session folded into its target.

        The store itself is not touched; live time is only persisted by
        ``stop``.
        """
        domains = self._store.domains
        state = self._state
        if not isinstance(state, Running):
            return domains

        elapsed = self._elapsed_since(state.started_at)
        for domain in domains:
            if domain.id == state.domain_id:
                domain.total_seconds = domain.total_seconds + elapsed
        return domains

    def _elapsed_since(self, started_at: datetime) -> int:
        # Clamped: a clock that moved backwards never yields negative time
        return max(0, int((self._clock() - started_at).total_seconds()))
