"""Terminal colors for resolved endpoints."""

import sys

from click import style

from .rev import Commit, Local, NullTree, Rev, Stage

REV_COLORS = {
    Commit: 'yellow',
    Local: 'green',
    Stage: 'cyan',
    NullTree: 'red',
}


def should_use_color(color_option: str, stream=None) -> bool:
    """Determine if color should be used based on option and TTY status."""
    if color_option in ('always', 'never'):
        return color_option == 'always'
    return (stream or sys.stdout).isatty()


def style_rev(rev: Rev, use_color: bool) -> str:
    text = str(rev)
    return style(text, fg=REV_COLORS[type(rev)]) if use_color else text
