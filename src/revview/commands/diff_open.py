"""`open`: compare two states of the working tree, the index or commits."""

import logging
import os

from click import Choice, command, pass_context
from utz.cli import arg, flag, opt

from ..host import Host
from ..git import pathspec_expand
from ..locate import find_toplevel
from ..resolve import parse_revs
from ..session import DiffSession
from .base import RevviewCommand, ambiguous_bool, expand_path_arg, finish, read_link

logger = logging.getLogger(__name__)

UNTRACKED_TRUE = ('all', 'normal', 'true')
UNTRACKED_FALSE = ('no', 'false')


def diffview_open(
    host: Host,
    rev_arg: str | None,
    path_args: list[str] = (),
    cpath: str | None = None,
    cached: bool = False,
    imply_local: bool = False,
    untracked: str | None = None,
    selected_file: str | None = None,
) -> DiffSession | None:
    """Resolve ``rev_arg`` and open a diff session for it.

    Raises:
        NotARepoError: Neither ``cpath``, the current file nor the cwd is in a repo
        ResolveError: ``rev_arg`` could not be resolved
    """
    paths = [expand_path_arg(p, host.cwd) for p in path_args]
    cfile = read_link(host.current_file, host.cwd) if host.current_file else None
    if cpath:
        cpath = os.path.realpath(os.path.join(host.cwd, os.path.expanduser(cpath)))

    top_indicators = [cpath or (os.path.abspath(os.path.join(host.cwd, cfile)) if cfile else None)]
    if not cpath:
        top_indicators.append(os.path.realpath(host.cwd))

    repo = find_toplevel(top_indicators, host.git, cwd=host.cwd)

    cwd = cpath or os.path.realpath(host.cwd)
    paths = [pathspec_expand(repo.toplevel, cwd, p) for p in paths]

    spec = parse_revs(host.git, repo, rev_arg, cached=cached, imply_local=imply_local)
    logger.debug(f"Parsed revs: left = {spec.left}, right = {spec.right}")

    if selected_file:
        selected_file = os.path.join(host.cwd, os.path.expanduser(selected_file))
    elif cfile:
        selected_file = os.path.abspath(os.path.join(host.cwd, cfile))

    session = DiffSession(
        repo,
        spec,
        rev_arg=rev_arg,
        path_args=paths,
        show_untracked=ambiguous_bool(untracked, None, UNTRACKED_TRUE, UNTRACKED_FALSE),
        selected_file=selected_file,
    )
    return host.open_session(session)


@command('open', cls=RevviewCommand)
@opt('-C', 'cpath', help='Find the repository from this path instead of the current file or cwd')
@flag('--cached', '--staged', 'cached', help='Compare against the index instead of the working tree')
@flag('--imply-local', help="Show HEAD's side of the comparison as the live working tree")
@flag('-u', 'untracked_flag', help='Include untracked files')
@opt('--untracked-files', 'untracked', type=Choice(UNTRACKED_TRUE + UNTRACKED_FALSE), help='Whether to include untracked files')
@opt('--selected-file', help='File to select when the session opens')
@arg('rev_arg', required=False)
@pass_context
def open_command(
    ctx,
    cpath: str | None,
    cached: bool,
    imply_local: bool,
    untracked_flag: bool,
    untracked: str | None,
    selected_file: str | None,
    rev_arg: str | None,
):
    """Compare REV_ARG (A, A..B, A...B; default: index vs working tree) [-- PATHS...]."""
    host = ctx.ensure_object(Host)
    return finish(
        ctx, host, diffview_open,
        rev_arg, ctx.meta['post_args'],
        cpath=cpath,
        cached=cached,
        imply_local=imply_local,
        untracked=untracked or ('true' if untracked_flag else None),
        selected_file=selected_file,
    )


def register(cli):
    """Register command with CLI."""
    cli.add_command(open_command)
