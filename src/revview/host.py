"""What the command entry points know about their surroundings."""

import logging
import os
from dataclasses import dataclass, field
from itertools import count

from .config import Config
from .git import Git
from .jobs import Scheduler
from .registry import Registry
from .session import Session

logger = logging.getLogger(__name__)


@dataclass
class Host:
    """The editor (or shell) a command runs in.

    Holds the session registry, the repository query surface, configuration,
    the cwd and the file currently being edited, and hands out surface ids
    for newly opened sessions.
    """
    registry: Registry = field(default_factory=Registry)
    git: Git = field(default_factory=Git)
    config: Config = field(default_factory=Config.from_env)
    cwd: str = field(default_factory=os.getcwd)
    current_file: str | None = None
    print_sessions: bool = False
    use_color: bool = False
    surfaces: count = field(default_factory=lambda: count(1), repr=False)

    @property
    def scheduler(self) -> Scheduler:
        return self.registry.scheduler

    def new_surface(self):
        return next(self.surfaces)

    def open_session(self, session: Session) -> Session | None:
        """Bind a freshly built session to a new surface and register it.

        Closing the session removes it from the registry.
        """
        if not session.is_valid():
            return None
        session.surface_id = self.new_surface()
        self.registry.add(session)
        session.on_dispose(self.registry.dispose)
        logger.debug(f"{type(session).__name__} instantiation successful!")
        return session
