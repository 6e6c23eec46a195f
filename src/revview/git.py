"""Repository query surface: the git commands the resolver and commands rely on."""

import logging
import os
import re
import shlex
from subprocess import CompletedProcess, run

from .rev import Commit, rev_from_token

logger = logging.getLogger(__name__)

# `:(top)`, `:(exclude,icase)` long form, or `:/`, `:!`, `:^` short form
PATHSPEC_MAGIC_RE = re.compile(r'^(?::\([^)]*\)|:[/!^]*:?)')
RANGE_RE = re.compile(r'^\^|\.\.|\^[@!]$|\^-\d*$')


def pathspec_split(pathspec: str) -> tuple[str, str]:
    """Split a pathspec into its magic prefix and its pattern."""
    m = PATHSPEC_MAGIC_RE.match(pathspec)
    magic = m.group(0) if m else ''
    return magic, pathspec[len(magic):]


def pathspec_is_top(magic: str) -> bool:
    """Whether the magic anchors the pattern at the top-level rather than the cwd."""
    if magic.startswith(':('):
        return 'top' in magic[2:-1].split(',')
    return '/' in magic


def pathspec_expand(toplevel: str, cwd: str, pathspec: str) -> str:
    """Rewrite a cwd-relative pathspec so that it is relative to ``toplevel``."""
    magic, pattern = pathspec_split(pathspec)
    if not os.path.isabs(pattern) and not pathspec_is_top(magic):
        prefix = os.path.relpath(cwd, toplevel)
        pattern = os.path.normpath(os.path.join(prefix, pattern)) if pattern else prefix
    return magic + pattern


def tilde_path(path: str) -> str:
    home = os.path.expanduser('~')
    if path == home or path.startswith(home + os.sep):
        return '~' + path[len(home):]
    return path


def is_rev_arg_range(rev_arg: str) -> bool:
    """Whether a revision argument denotes a range rather than a single commit.

    Matches ``^A``, ``A..B``, ``A...B``, ``A^@``, ``A^!`` and ``A^-<n>``.
    """
    return RANGE_RE.search(rev_arg) is not None


class Git:
    """Runs git subprocesses against a working tree."""

    def __init__(self, git_cmd: str = 'git'):
        self.git_cmd = git_cmd

    def _run(self, *args: str, cwd: str | None = None) -> CompletedProcess:
        cmd = [self.git_cmd, *args]
        logger.debug(f"Running {shlex.join(cmd)} in {cwd or '.'}")
        return run(cmd, capture_output=True, text=True, cwd=cwd)

    def toplevel(self, path: str) -> str | None:
        """Top-level directory of the working tree containing ``path``, if any."""
        result = self._run('rev-parse', '--show-toplevel', cwd=path)
        if result.returncode != 0 or not result.stdout.strip():
            return None
        return os.path.realpath(result.stdout.strip())

    def git_dir(self, toplevel: str) -> str | None:
        result = self._run('rev-parse', '--absolute-git-dir', cwd=toplevel)
        if result.returncode != 0 or not result.stdout.strip():
            return None
        return result.stdout.strip()

    def head_rev(self, toplevel: str) -> Commit | None:
        """The commit HEAD points at, or None in a repository without commits."""
        result = self._run('rev-parse', 'HEAD', '--', cwd=toplevel)
        if result.returncode != 0:
            return None
        lines = result.stdout.split()
        return Commit(lines[0]) if lines else None

    def rev_parse(self, toplevel: str, rev_arg: str) -> tuple[list[str], int, list[str]]:
        """Run ``rev-parse --revs-only``.

        Returns:
            (revision tokens, exit status, stderr lines)
        """
        result = self._run('rev-parse', '--revs-only', rev_arg, cwd=toplevel)
        tokens = [line for line in result.stdout.splitlines() if line]
        return tokens, result.returncode, result.stderr.splitlines()

    def verify_rev_arg(self, toplevel: str, rev_arg: str) -> bool:
        """Whether ``rev_arg`` names at least one revision.

        `--revs-only` silently drops unknown names, so an empty result counts
        as a failure too.
        """
        tokens, code, _ = self.rev_parse(toplevel, rev_arg)
        return code == 0 and bool(tokens)

    def symmetric_diff_revs(self, toplevel: str, rev_arg: str) -> tuple[Commit, Commit] | None:
        """Resolve ``A...B`` to (merge-base of A and B, B).

        Either side may be omitted, in which case it defaults to HEAD.
        """
        left_arg, _, right_arg = rev_arg.partition('...')
        left_arg = left_arg or 'HEAD'
        right_arg = right_arg or 'HEAD'

        result = self._run('merge-base', left_arg, right_arg, cwd=toplevel)
        if result.returncode != 0 or not result.stdout.strip():
            logger.debug(f"merge-base {left_arg} {right_arg} failed: {result.stderr.strip()}")
            return None
        left = rev_from_token(result.stdout.split()[0])

        tokens, code, stderr = self.rev_parse(toplevel, right_arg)
        if code != 0 or not tokens:
            logger.debug(f"rev-parse {right_arg} failed: {' '.join(stderr)}")
            return None
        return left, rev_from_token(tokens[0])

    def ls_files(self, toplevel: str, paths: list[str]) -> list[str]:
        result = self._run('ls-files', '--', *paths, cwd=toplevel)
        if result.returncode != 0:
            return []
        return [line for line in result.stdout.splitlines() if line]

    def file_history_dry_run(self, toplevel: str, options) -> tuple[bool, list[str]]:
        """Check whether the filtered history for ``options`` has at least one entry.

        Args:
            toplevel: Working tree top-level
            options: FileHistoryOptions; the single- or multi-file profile is
                picked from the path arguments and line traces

        Returns:
            (has entries, description of the effective options)
        """
        from .log_options import describe, is_single_file, prepare_flags

        single_file = is_single_file(self, toplevel, options.path_args, options.L)
        log_options = options.get(single_file)
        description = describe(toplevel, log_options, single_file)

        probe = log_options.updated(max_count=1)
        flags = prepare_flags(probe, single_file)
        rev_range = [probe.rev_range] if probe.rev_range else []
        if probe.L:
            cmd = [
                '-c', 'gc.auto=0', '-c', 'core.quotePath=false',
                'log', *rev_range, '--color=never', '--no-ext-diff',
                '--pretty=format:%H', '-s', *flags, '--',
            ]
        else:
            cmd = [
                '-c', 'gc.auto=0', '-c', 'core.quotePath=false',
                'log', '--pretty=format:%H', '--name-status', *flags,
                *rev_range, '--', *probe.path_args,
            ]

        result = self._run(*cmd, cwd=toplevel)
        ok = result.returncode == 0 and bool(result.stdout.strip())
        return ok, description
