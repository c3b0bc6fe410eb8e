"""
Tracker service: the entry point the presentation layer drives.

The presentation layer forwards ticks and user intents here and reads back
view models. Nothing is cached between calls; every read recomputes XP,
levels and progress from stored totals plus the live session.
"""

from datetime import datetime, timezone
from typing import List, Optional, Union
from uuid import UUID

from ..core.enums import SessionStatus
from ..domain.models import Domain
from ..domain.progression import (
    format_duration,
    snapshot_for_domains,
    snapshot_for_seconds,
    xp_for_seconds,
)
from ..session.controller import Clock, SessionController, utc_now
from ..store.domain_store import DomainStore
from ..utils.logging_config import get_logger
from .schemas import DomainView, OverviewView, SessionView

logger = get_logger("main")


class TickClock:
    """
    Clock that reports the most recent tick.

    The first read before any tick samples the source clock once and holds
    that instant until a later tick replaces it. Ticks that are earlier than
    the current reading are ignored, so the reported time never moves
    backwards.
    """

    def __init__(self, source: Clock = utc_now):
        self._source = source
        self._now: Optional[datetime] = None

    def tick(self, now: datetime) -> datetime:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if self._now is None or now > self._now:
            self._now = now
        return self._now

    def __call__(self) -> datetime:
        if self._now is None:
            self.tick(self._source())
        return self._now


def _coerce_id(domain_id: Union[UUID, str]) -> Optional[UUID]:
    if isinstance(domain_id, UUID):
        return domain_id
    try:
        return UUID(str(domain_id))
    except ValueError:
        return None


class TrackerService:
    """Facade over the store and session controller for one user."""

    def __init__(
        self,
        store: DomainStore,
        controller: SessionController,
        clock: Optional[TickClock] = None,
    ):
        self.store = store
        self.controller = controller
        self.clock = clock

    # Intents

    def on_tick(self, now: datetime) -> None:
        """Record the latest wall-clock sample."""
        if self.clock is not None:
            self.clock.tick(now)

    def on_start_stop(self) -> SessionStatus:
        status = self.controller.toggle()
        logger.debug(f"Start/stop pressed, session is now {status.value}")
        return status

    def on_select_domain(self, domain_id: Union[UUID, str]) -> bool:
        parsed = _coerce_id(domain_id)
        if parsed is None:
            return False
        return self.controller.select_domain(parsed)

    def on_add_domain(self, name: str) -> Optional[Domain]:
        return self.store.add_domain(name)

    def on_rename_domain(self, domain_id: Union[UUID, str], name: str) -> bool:
        parsed = _coerce_id(domain_id)
        if parsed is None:
            return False
        return self.store.rename_domain(parsed, name)

    def on_remove_domain(self, domain_id: Union[UUID, str]) -> bool:
        parsed = _coerce_id(domain_id)
        if parsed is None:
            return False
        return self.controller.remove_domain(parsed)

    def close(self) -> None:
        """
        Release the storage backend.

        A running session is left uncommitted, exactly as when the process
        exits; stop it first to fold its time into the domain total.
        """
        if self.controller.is_running:
            logger.warning("Closing tracker with a running session; its time is not committed")
        self.store.close()

    # Reads

    def domain_views(self) -> List[DomainView]:
        selected_id = self.store.selected_domain_id
        views = []
        for domain in self.controller.domains_with_live_session():
            snapshot = snapshot_for_seconds(domain.total_seconds)
            views.append(
                DomainView(
                    id=domain.id,
                    name=domain.name,
                    icon=domain.icon,
                    total_seconds=domain.total_seconds,
                    xp=snapshot.xp,
                    level=snapshot.level,
                    progress=snapshot.progress,
                    is_selected=domain.id == selected_id,
                )
            )
        return views

    def overview(self) -> OverviewView:
        snapshot = snapshot_for_domains(self.controller.domains_with_live_session())
        return OverviewView(
            total_xp=snapshot.xp, level=snapshot.level, progress=snapshot.progress
        )

    def session_view(self) -> SessionView:
        selected = self.store.selected_domain
        elapsed = self.controller.live_elapsed_seconds()
        return SessionView(
            status=self.controller.status,
            domain_id=selected.id if selected else None,
            domain_name=selected.name if selected else None,
            elapsed_seconds=elapsed,
            elapsed_display=format_duration(elapsed),
            session_xp=xp_for_seconds(elapsed),
        )
