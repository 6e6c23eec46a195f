"""The set of open sessions and the surfaces they are bound to."""

import logging
from typing import Iterable, Iterator

from .jobs import Scheduler
from .session import Session

logger = logging.getLogger(__name__)


class Registry:
    """Ordered collection of live sessions.

    The registry is the source of truth for whether a session is alive: a
    session not in it is disposed, or about to be.
    """

    def __init__(self, scheduler: Scheduler | None = None):
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.sessions: list[Session] = []

    def add(self, session: Session) -> None:
        self.sessions.append(session)

    def dispose(self, session: Session) -> None:
        """Remove ``session``; a no-op if it is not registered."""
        for i, s in enumerate(self.sessions):
            if s is session:
                del self.sessions[i]
                return

    def __contains__(self, session) -> bool:
        return any(s is session for s in self.sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self.sessions))

    def __len__(self) -> int:
        return len(self.sessions)

    def sessions_of_type(self, cls: type) -> list[Session]:
        return [s for s in self.sessions if isinstance(s, cls)]

    def current_for_surface(self, surface_id) -> Session | None:
        for session in self.sessions:
            if session.surface_id == surface_id:
                return session
        return None

    def sweep_stray(self, live_surface_ids: Iterable) -> list[Session]:
        """Dispose of sessions whose surface no longer exists.

        Strays leave the registry immediately; their `close` runs on a later
        scheduler turn, since the host's surface list may lag behind a surface
        that was just closed.
        """
        live = set(live_surface_ids)
        stray = [s for s in self.sessions if s.surface_id not in live]
        for session in stray:
            logger.debug(f"Disposing stray session {session.id} (surface {session.surface_id})")
            self.scheduler.schedule(session.close)
            self.dispose(session)
        return stray

    def pick_fallback_surface(self, all_surface_ids: Iterable, preferred=None):
        """A surface not bound to any session, trying ``preferred`` first."""
        surfaces = list(all_surface_ids)
        bound = {s.surface_id for s in self.sessions}
        if preferred is not None and preferred in surfaces and preferred not in bound:
            return preferred
        for surface_id in surfaces:
            if surface_id not in bound:
                return surface_id
        return None
