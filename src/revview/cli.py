"""Resolve git comparison requests into typed revision endpoints.

`open` takes a git-style revision argument and prints the two endpoints a diff
session would compare:

    git-revview open                 # index vs working tree
    git-revview open --cached        # HEAD vs index
    git-revview open HEAD~3          # HEAD~3 vs working tree
    git-revview open main..feature   # main vs feature
    git-revview open main...feature  # merge-base vs feature
    git-revview open HEAD~2 -- src/  # restricted to paths

`history` checks that a filtered file history has entries and prints the
effective git-log options:

    git-revview history --author=alice -n 20 src/app.py
    git-revview history --line-range 10 20 -C . --range main..feature
"""

import logging

from click import Choice, group, pass_context
from utz.cli import flag, opt

from .color import should_use_color
from .host import Host


@group()
@opt('-c', '--color', type=Choice(['auto', 'always', 'never']), default='auto', help='When to use colored output (default: auto)')
@flag('-v', '--verbose', help='Log debug messages to stderr')
@pass_context
def cli(ctx, color: str, verbose: bool):
    """Resolve git comparisons and file histories."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')
    host = ctx.ensure_object(Host)
    host.print_sessions = True
    host.use_color = should_use_color(color)


# Register commands
from .commands import diff_open as diff_open_module
from .commands import file_history as file_history_module
diff_open_module.register(cli)
file_history_module.register(cli)


if __name__ == '__main__':
    cli()
