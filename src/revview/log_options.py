"""Log filter options for history sessions.

The flag catalogue is a static table: every recognised option is declared once
in `SWITCHES` or `OPTIONS`, and `FLAGS` maps option keys to their declaration.
`LogOptions` holds one value per key; `FileHistoryOptions` keeps a single-file
and a multi-file profile of it in sync.
"""

import copy
import os
import shlex
from dataclasses import dataclass, field
from typing import Any

from .errors import InvalidOption
from .git import tilde_path

DIFF_MERGES = ('', 'off', 'on', 'first-parent', 'separate', 'combined', 'dense-combined', 'remerge')
TRUE_STRINGS = ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class FlagOption:
    key: str
    flag: str
    description: str
    kind: str = 'value'  # 'switch', 'value' or 'multi'
    aliases: tuple[str, ...] = ()
    select: tuple[str, ...] | None = None
    prompt_label: str = ''

    def normalize(self, value: Any) -> Any:
        """Coerce a user-supplied value to what `LogOptions` stores for this key."""
        if self.kind == 'switch':
            if isinstance(value, str):
                return value.strip().lower() in TRUE_STRINGS
            return bool(value)

        if self.kind == 'multi':
            if value is None:
                return []
            if isinstance(value, str):
                value = [value]
            values = []
            for v in value:
                if self.key == 'L' and v.startswith('-L'):
                    v = v[2:]
                if v:
                    values.append(v)
            return values

        if value is None or value == '':
            return None
        if self.select is not None and value not in self.select:
            raise InvalidOption(self.key, value, self.select)
        if self.key == 'max_count':
            try:
                return int(value)
            except (TypeError, ValueError):
                raise InvalidOption(self.key, value, ('<integer>',)) from None
        return str(value)

    def prompt(self) -> str:
        """Prompt text for entering this option's value."""
        label = f'{self.prompt_label} ' if self.prompt_label else ''
        return f'{label}{self.flag}'

    def render_value(self, value: Any) -> tuple[bool, str]:
        """Render the flag with its value.

        Returns:
            (whether the value is unset, rendered text)
        """
        if self.kind == 'switch':
            return not value, self.flag
        if self.kind == 'multi':
            if not value:
                return True, self.flag
            if self.key == 'path_args':
                return False, ' '.join(['--', *(shlex.quote(v) for v in value)])
            return False, ' '.join(shlex.quote(self.flag + v) for v in value)
        if value is None:
            return True, f'{self.flag}='
        return False, f'{self.flag}={shlex.quote(str(value))}'

    def render_default(self, value: Any) -> str:
        """Render the current value as default text for an input prompt."""
        if value is None or self.kind == 'switch':
            return ''
        if self.kind == 'multi':
            prefix = self.flag if self.key == 'L' else ''
            return ' '.join(shlex.quote(prefix + v) for v in value)
        return shlex.quote(str(value))


SWITCHES: tuple[FlagOption, ...] = (
    FlagOption('follow', '--follow', "Follow renames (only for single file)", 'switch'),
    FlagOption('first_parent', '--first-parent', "Follow only the first parent upon seeing a merge commit", 'switch'),
    FlagOption('show_pulls', '--show-pulls', "Show merge commits that first introduced a change to a branch", 'switch'),
    FlagOption('reflog', '--reflog', "Include all reachable objects mentioned by reflogs", 'switch'),
    FlagOption('all', '--all', "Include all refs", 'switch'),
    FlagOption('merges', '--merges', "List only merge commits", 'switch'),
    FlagOption('no_merges', '--no-merges', "List no merge commits", 'switch'),
    FlagOption('reverse', '--reverse', "List commits in reverse order", 'switch'),
)

OPTIONS: tuple[FlagOption, ...] = (
    FlagOption('rev_range', '--range', "Show only commits in the specified revision range"),
    FlagOption('base', '--base', "Set the base revision"),
    FlagOption('max_count', '--max-count', "Limit the number of commits", aliases=('-n',)),
    FlagOption('L', '-L', "Trace line evolution", 'multi', prompt_label="(Accepts multiple values)"),
    FlagOption('diff_merges', '--diff-merges', "Determines how merge commits are treated", select=DIFF_MERGES),
    FlagOption('author', '--author', "List only commits from a given author", prompt_label="(Extended regular expression)"),
    FlagOption('grep', '--grep', "Filter commit messages", prompt_label="(Extended regular expression)"),
    FlagOption('path_args', '--', "Limit to files", 'multi', prompt_label="(Path arguments)"),
)

FLAGS: dict[str, FlagOption] = {option.key: option for option in (*SWITCHES, *OPTIONS)}


def _flag_name(name: str) -> str:
    return name if name == '--' else name.lstrip('-').replace('-', '_')


FLAG_NAMES: dict[str, str] = {
    _flag_name(name): option.key
    for option in FLAGS.values()
    for name in (option.key, option.flag, *option.aliases)
}


def option_key(name: str) -> str:
    """Map a flag spelling (``max-count``, ``--max-count``, ``-n``, ``max_count``) to its key."""
    try:
        return FLAG_NAMES[_flag_name(name)]
    except KeyError:
        raise InvalidOption(name) from None


@dataclass
class LogOptions:
    follow: bool = False
    first_parent: bool = False
    show_pulls: bool = False
    reflog: bool = False
    all: bool = False
    merges: bool = False
    no_merges: bool = False
    reverse: bool = False
    rev_range: str | None = None
    base: str | None = None
    max_count: int | None = 256
    L: list[str] = field(default_factory=list)
    diff_merges: str | None = None
    author: str | None = None
    grep: str | None = None
    path_args: list[str] = field(default_factory=list)

    @classmethod
    def from_values(cls, *layers: dict[str, Any]) -> 'LogOptions':
        """Build from defaults overlaid with each mapping in turn; ``None`` values are skipped."""
        options = cls()
        for layer in layers:
            for key, value in layer.items():
                if value is not None:
                    options.set(key, value)
        return options

    def get(self, key: str) -> Any:
        return getattr(self, option_key(key))

    def set(self, key: str, value: Any) -> None:
        key = option_key(key)
        setattr(self, key, FLAGS[key].normalize(value))

    def updated(self, **values: Any) -> 'LogOptions':
        options = self.deep_clone()
        for key, value in values.items():
            options.set(key, value)
        return options

    def deep_clone(self) -> 'LogOptions':
        return copy.deepcopy(self)

    def equals(self, other: 'LogOptions') -> bool:
        return self == other


class FileHistoryOptions:
    """Single-file and multi-file profiles of `LogOptions`.

    Some flags (``--follow``) only apply when exactly one file is targeted, so
    each profile keeps its own defaults; every `set` writes both so that a
    change survives switching between one and many targets.
    """

    def __init__(self, single_file: LogOptions, multi_file: LogOptions):
        self.single_file = single_file
        self.multi_file = multi_file

    @classmethod
    def from_values(cls, values: dict[str, Any], config=None) -> 'FileHistoryOptions':
        profiles = config.log_options if config else {}
        return cls(
            single_file=LogOptions.from_values(profiles.get('single_file', {}), values),
            multi_file=LogOptions.from_values(profiles.get('multi_file', {}), values),
        )

    def get(self, single_file: bool) -> LogOptions:
        return self.single_file if single_file else self.multi_file

    def set(self, key: str, value: Any) -> None:
        self.single_file.set(key, value)
        self.multi_file.set(key, value)

    @property
    def path_args(self) -> list[str]:
        return self.multi_file.path_args

    @property
    def L(self) -> list[str]:
        return self.multi_file.L

    @property
    def rev_range(self) -> str | None:
        return self.multi_file.rev_range

    def deep_clone(self) -> 'FileHistoryOptions':
        return FileHistoryOptions(self.single_file.deep_clone(), self.multi_file.deep_clone())

    def equals(self, other: 'FileHistoryOptions') -> bool:
        return self == other

    def __eq__(self, other):
        if not isinstance(other, FileHistoryOptions):
            return NotImplemented
        return self.single_file == other.single_file and self.multi_file == other.multi_file

    def __repr__(self):
        return f'FileHistoryOptions(single_file={self.single_file!r}, multi_file={self.multi_file!r})'


def prepare_flags(options: LogOptions, single_file: bool) -> list[str]:
    """git-log flags for ``options`` (excluding the revision range and paths)."""
    o = options
    flags = [v if v.startswith('-L') else f'-L{v}' for v in o.L]
    if o.follow and single_file:
        flags.append('--follow')
    if o.first_parent:
        flags.append('--first-parent')
    if o.show_pulls:
        flags.append('--show-pulls')
    if o.reflog:
        flags.append('--reflog')
    if o.all:
        flags.append('--all')
    if o.merges:
        flags.extend(['--merges', '--first-parent'])
    if o.no_merges:
        flags.extend(['--no-merges', '--first-parent'])
    if o.reverse:
        flags.append('--reverse')
    if o.max_count is not None:
        flags.append(f'-n{o.max_count}')
    if o.diff_merges:
        flags.append(f'--diff-merges={o.diff_merges}')
    if o.author:
        flags.extend(['-E', f'--author={o.author}'])
    if o.grep:
        flags.extend(['-E', f'--grep={o.grep}'])
    return flags


def describe(toplevel: str, options: LogOptions, single_file: bool) -> list[str]:
    """Human-readable lines describing the effective options."""
    lines = [f"Top-level path: '{tilde_path(toplevel)}'"]
    if options.rev_range:
        lines.append(f"Revision range: '{options.rev_range}'")
    lines.append(f"Flags: {shlex.join(prepare_flags(options, single_file))}")
    return lines


def is_single_file(git, toplevel: str | None, path_args: list[str], L: list[str]) -> bool:
    """Whether the history targets exactly one file."""
    if L:
        # -L<range>:<file>; the file is whatever follows the last colon
        return len({v.rpartition(':')[2] for v in L}) <= 1
    if toplevel is not None:
        return (
            len(path_args) == 1
            and not os.path.isdir(os.path.join(toplevel, path_args[0]))
            and len(git.ls_files(toplevel, path_args)) < 2
        )
    return True


def has_matching_history(git, repo, options: FileHistoryOptions) -> bool:
    ok, _ = git.file_history_dry_run(repo.toplevel, options)
    return ok
