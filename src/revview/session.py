"""Comparison sessions.

A session is what a command opens: a repository context plus either a
`ComparisonSpec` (diff sessions) or log options (history sessions), bound to a
display surface owned by the host. Rendering is the host's business; the
session only knows what it compares and how to dispose of itself.
"""

import logging
import os
from itertools import count
from typing import Callable

from utz import err

from .color import style_rev
from .errors import EmptyHistory
from .git import pathspec_split
from .jobs import Job, Scheduler, submit_for_session
from .log_options import FLAGS, FileHistoryOptions, LogOptions, is_single_file
from .rev import ComparisonSpec, RepositoryContext

logger = logging.getLogger(__name__)

_ids = count(1)


class Session:
    def __init__(self, repo: RepositoryContext, path_args: list[str] | None = None):
        self.id = next(_ids)
        self.repo = repo
        self.path_args = list(path_args or [])
        self.surface_id = None
        self.closed = False
        self._dispose_hooks: list[Callable[['Session'], None]] = []

    def on_dispose(self, hook: Callable[['Session'], None]) -> None:
        self._dispose_hooks.append(hook)

    def is_valid(self) -> bool:
        """Whether construction produced a usable session.

        Absolute path restrictions must lie inside the working tree.
        """
        toplevel = self.repo.toplevel
        for path in self.path_args:
            _, pattern = pathspec_split(path)
            if os.path.isabs(pattern):
                rel = os.path.relpath(os.path.realpath(pattern), toplevel)
                if rel == os.pardir or rel.startswith(os.pardir + os.sep):
                    err(f"Path is outside the working tree '{toplevel}': {pattern}")
                    return False
        return True

    def close(self) -> None:
        """Dispose of the session. Hooks run once; later calls are no-ops."""
        if self.closed:
            return
        self.closed = True
        logger.debug(f"Closing session {self.id} (surface {self.surface_id})")
        for hook in self._dispose_hooks:
            hook(self)

    def describe(self, use_color: bool = False) -> str:
        return f"{type(self).__name__} #{self.id} in {self.repo.toplevel}"

    def __repr__(self):
        return f'<{type(self).__name__} id={self.id} surface={self.surface_id}>'


class DiffSession(Session):
    """Compares two endpoints, resolved when the session opens."""

    def __init__(
        self,
        repo: RepositoryContext,
        spec: ComparisonSpec,
        rev_arg: str | None = None,
        path_args: list[str] | None = None,
        show_untracked: bool | None = None,
        selected_file: str | None = None,
    ):
        super().__init__(repo, path_args)
        self.spec = spec
        self.rev_arg = rev_arg
        self.show_untracked = show_untracked
        self.selected_file = selected_file

    def describe(self, use_color: bool = False) -> str:
        lines = [
            super().describe(),
            f"  left:  {style_rev(self.spec.left, use_color)}",
            f"  right: {style_rev(self.spec.right, use_color)}",
        ]
        if self.path_args:
            lines.append(f"  paths: {' '.join(self.path_args)}")
        return '\n'.join(lines)


class HistorySession(Session):
    """Browses history filtered by `FileHistoryOptions`.

    Options can be edited while the session is open: `open_option_editor`
    snapshots them, and `close_option_editor` refreshes the entries only if
    something changed.
    """

    def __init__(self, repo: RepositoryContext, log_options: FileHistoryOptions, git):
        super().__init__(repo, log_options.path_args)
        self.log_options = log_options
        self.git = git
        self.option_state: FileHistoryOptions | None = None
        self.has_entries = True
        self.description: list[str] = []

    def current_options(self) -> LogOptions:
        single = is_single_file(self.git, self.repo.toplevel, self.log_options.path_args, self.log_options.L)
        return self.log_options.get(single)

    def set_option(self, key: str, value) -> None:
        self.log_options.set(key, value)
        self.path_args = list(self.log_options.path_args)

    def toggle_option(self, key: str) -> None:
        option = FLAGS[key]
        if option.kind != 'switch':
            raise ValueError(f"{option.flag} is not a switch")
        self.set_option(key, not self.current_options().get(key))

    def open_option_editor(self) -> None:
        self.option_state = self.log_options.deep_clone()

    def close_option_editor(self, registry, scheduler: Scheduler) -> Job | None:
        """Finish an edit; schedule an entry update if the options changed."""
        state, self.option_state = self.option_state, None
        if state is None or state.equals(self.log_options):
            return None
        return self.update_entries(registry, scheduler)

    def update_entries(self, registry, scheduler: Scheduler) -> Job:
        """Re-check the filtered history on a later turn.

        The result is dropped if the session has been disposed by then.
        """
        def apply(result):
            ok, description = result
            self.has_entries = ok
            self.description = description
            if not ok:
                err(str(EmptyHistory(self.path_args, description)))

        return submit_for_session(
            scheduler, registry, self,
            self.git.file_history_dry_run, self.repo.toplevel, self.log_options.deep_clone(),
            apply=apply,
        )

    def describe(self, use_color: bool = False) -> str:
        lines = [super().describe()]
        lines.extend(f"  {line}" for line in self.description)
        if self.path_args:
            lines.append(f"  paths: {' '.join(self.path_args)}")
        return '\n'.join(lines)
