"""Shared plumbing for the command entry points."""

import logging
import os

from click import Command, Context, echo
from utz import err

from ..errors import EmptyHistory, RevviewError
from ..git import pathspec_split
from ..host import Host
from ..session import Session

logger = logging.getLogger(__name__)


class RevviewCommand(Command):
    """Command that prepends configured default args and splits off ``-- <paths>``.

    Everything after the first ``--`` lands in ``ctx.meta['post_args']``
    instead of being parsed by click, so that an empty revision can be told
    apart from a path.
    """

    def parse_args(self, ctx: Context, args: list[str]) -> list[str]:
        host = ctx.find_object(Host)
        if host is not None:
            args = [*host.config.default_args.get(self.name, []), *args]
        if '--' in args:
            i = args.index('--')
            args, post_args = args[:i], args[i + 1:]
        else:
            post_args = []
        ctx.meta['post_args'] = post_args
        logger.debug(f"[command call] {self.name} {' '.join(args)}{' -- ' + ' '.join(post_args) if post_args else ''}")
        return super().parse_args(ctx, args)


def read_link(path: str, cwd: str) -> str:
    full = os.path.join(cwd, os.path.expanduser(path))
    return os.path.realpath(full) if os.path.islink(full) else path


def expand_path_arg(path: str, cwd: str) -> str:
    """Expand ``~`` and resolve a symlinked pattern, keeping any pathspec magic."""
    magic, pattern = pathspec_split(os.path.expanduser(path))
    return magic + read_link(pattern, cwd) if pattern else magic


def ambiguous_bool(value: str | None, default: bool | None, truthy: tuple[str, ...], falsy: tuple[str, ...]) -> bool | None:
    if value is None:
        return default
    if value in truthy:
        return True
    if value in falsy:
        return False
    return default


def finish(ctx: Context, host: Host, run, *args, **kwargs) -> Session | None:
    """Run an entry point, reporting its failure on stderr.

    A failure aborts only this command: the ctx exits 1 (0 for an empty
    history, which is a notice rather than an error).
    """
    try:
        session = run(host, *args, **kwargs)
    except EmptyHistory as e:
        err(str(e))
        ctx.exit(0)
    except RevviewError as e:
        err(str(e))
        ctx.exit(1)
    if session is not None and host.print_sessions:
        echo(session.describe(use_color=host.use_color), color=host.use_color)
    return session


def run_command(host: Host, command: Command, argv: list[str]) -> Session | None:
    """Invoke ``command`` with an argument vector, as the editor integration does."""
    rv = command.main(list(argv), prog_name=f'git-revview {command.name}', obj=host, standalone_mode=False)
    return rv if isinstance(rv, Session) else None
