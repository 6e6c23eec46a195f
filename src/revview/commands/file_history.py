"""`history`: browse the history of files, filtered by git-log options."""

import logging
import os

from click import Choice, command, pass_context
from utz.cli import arg, flag, opt

from ..errors import BadRevision, EmptyHistory, RevviewError
from ..git import pathspec_expand, pathspec_split
from ..host import Host
from ..locate import find_toplevel
from ..log_options import FLAGS, OPTIONS, SWITCHES, FileHistoryOptions
from ..session import HistorySession
from .base import RevviewCommand, expand_path_arg, finish, read_link

logger = logging.getLogger(__name__)

# Passed separately from the generated log option flags
EXPLICIT_KEYS = ('rev_range', 'path_args')


def log_opts(func):
    """Apply one click option per log flag in the catalogue."""
    for option in reversed((*SWITCHES, *OPTIONS)):
        if option.key in EXPLICIT_KEYS:
            continue
        names = [*option.aliases, option.flag]
        if option.kind == 'switch':
            func = flag(*names, option.key, help=option.description)(func)
            continue
        kwargs = {'help': option.description}
        if option.kind == 'multi':
            kwargs['multiple'] = True
        if option.select:
            kwargs['type'] = Choice([v for v in option.select if v])
        if option.key == 'max_count':
            kwargs['type'] = int
        func = opt(*names, option.key, **kwargs)(func)
    return func


def file_history(
    host: Host,
    path_args: list[str] = (),
    cpath: str | None = None,
    rev_range: str | None = None,
    line_range: tuple[int, int] | None = None,
    log_values: dict | None = None,
) -> HistorySession | None:
    """Open a history session for ``path_args`` (or the whole tree).

    Args:
        line_range: (start, end) lines of the current file to trace; replaces
            ``path_args`` with a single ``-L`` trace

    Raises:
        NotARepoError: No indicator path is inside a repository
        BadRevision: ``rev_range`` does not parse
        EmptyHistory: The options select no commits
    """
    git = host.git
    paths = [expand_path_arg(p, host.cwd) for p in path_args]
    cfile = read_link(host.current_file, host.cwd) if host.current_file else None
    if cpath:
        cpath = os.path.realpath(os.path.join(host.cwd, os.path.expanduser(cpath)))

    top_indicators = []
    for path in paths:
        magic, _ = pathspec_split(path)
        if not magic:
            top_indicators.append(os.path.abspath(os.path.join(cpath or host.cwd, path)))
            break
    top_indicators.append(cpath or (os.path.abspath(os.path.join(host.cwd, cfile)) if cfile else None))
    if not cpath:
        top_indicators.append(os.path.realpath(host.cwd))

    repo = find_toplevel(top_indicators, git, cwd=host.cwd)

    rel_paths = list(path_args)
    cwd = cpath or os.path.realpath(host.cwd)
    paths = [pathspec_expand(repo.toplevel, cwd, p) for p in paths]

    if rev_range:
        if not git.verify_rev_arg(repo.toplevel, rev_range):
            raise BadRevision(f"Bad revision: '{rev_range}'", rev_range)
        logger.debug(f"Verified range rev: {rev_range}")

    values = {
        key: value
        for key, value in (log_values or {}).items()
        if value or FLAGS[key].kind != 'switch'
    }
    values['rev_range'] = rev_range

    if line_range:
        if not cfile:
            raise RevviewError("Tracing a line range requires a current file")
        start, end = line_range
        target = os.path.relpath(os.path.realpath(os.path.join(host.cwd, cfile)), repo.toplevel)
        paths, rel_paths = [], []
        values['L'] = [f'{start},{end}:{target}']

    values['path_args'] = paths
    log_options = FileHistoryOptions.from_values(values, host.config)

    ok, description = git.file_history_dry_run(repo.toplevel, log_options)
    if not ok:
        raise EmptyHistory(rel_paths, description)

    session = HistorySession(repo, log_options, git)
    session.description = description
    return host.open_session(session)


@command('history', cls=RevviewCommand)
@opt('-C', 'cpath', help='Find the repository from this path instead of the paths, current file or cwd')
@opt('--range', 'rev_range', help='Show only commits in the specified revision range')
@opt('--line-range', type=(int, int), default=None, metavar='START END', help='Trace these lines of the current file')
@log_opts
@arg('paths', nargs=-1)
@pass_context
def history_command(
    ctx,
    cpath: str | None,
    rev_range: str | None,
    line_range: tuple[int, int] | None,
    paths: tuple[str, ...],
    **log_values,
):
    """Browse the history of PATHS (default: the whole working tree)."""
    host = ctx.ensure_object(Host)
    return finish(
        ctx, host, file_history,
        [*paths, *ctx.meta['post_args']],
        cpath=cpath,
        rev_range=rev_range,
        line_range=line_range,
        log_values=log_values,
    )


def register(cli):
    """Register command with CLI."""
    cli.add_command(history_command)
