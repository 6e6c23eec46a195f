import logging
import os
from typing import Iterable

from .errors import NotARepoError
from .rev import RepositoryContext

logger = logging.getLogger(__name__)


def find_toplevel(indicators: Iterable[str | None], git, cwd: str | None = None) -> RepositoryContext:
    """Find the working tree that the first usable indicator path belongs to.

    Indicators are tried in priority order (explicit ``-C`` path, current file,
    cwd). ``None`` entries are skipped, files are replaced by their parent
    directory, and directories that are missing or unreadable are passed over.

    Raises:
        NotARepoError: No indicator is inside a git working tree, or the
            working tree's git dir cannot be found.
    """
    attempted = []
    for path in indicators:
        if path is None:
            continue
        attempted.append(path)
        if not os.path.isdir(path):
            path = os.path.dirname(path)
        if not path or not os.path.isdir(path) or not os.access(path, os.R_OK | os.X_OK):
            continue

        toplevel = git.toplevel(path)
        if toplevel:
            logger.debug(f"Found git top-level: '{toplevel}'")
            git_dir = git.git_dir(toplevel)
            if not git_dir:
                raise NotARepoError(
                    f"Failed to find the git dir for the repository: '{toplevel}'",
                    attempted,
                )
            return RepositoryContext(toplevel=toplevel, dir=git_dir)

    cwd = cwd or os.getcwd()
    shown = []
    for path in attempted:
        shown.append(f"'{os.path.relpath(path, cwd)}'")
    raise NotARepoError(f"Path not a git repo (or any parent): {', '.join(shown)}", attempted)
