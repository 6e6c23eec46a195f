"""Defaults for command arguments and log options, overridable from the environment.

    REVVIEW_OPEN_ARGS               default args prepended to `git-revview open`
    REVVIEW_HISTORY_ARGS            default args prepended to `git-revview history`
    REVVIEW_LOG_OPTIONS_SINGLE_FILE `key=value` log option defaults for one target file
    REVVIEW_LOG_OPTIONS_MULTI_FILE  `key=value` log option defaults for several targets
"""

import shlex
from dataclasses import dataclass, field
from os import environ
from typing import Any, Mapping


def default_log_options() -> dict[str, dict[str, Any]]:
    return {
        'single_file': {'diff_merges': 'combined'},
        'multi_file': {'diff_merges': 'first-parent'},
    }


@dataclass
class Config:
    default_args: dict[str, list[str]] = field(default_factory=lambda: {'open': [], 'history': []})
    log_options: dict[str, dict[str, Any]] = field(default_factory=default_log_options)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> 'Config':
        env = environ if env is None else env
        config = cls()
        for command, var in (('open', 'REVVIEW_OPEN_ARGS'), ('history', 'REVVIEW_HISTORY_ARGS')):
            if env.get(var):
                config.default_args[command] = shlex.split(env[var])
        for profile, var in (
            ('single_file', 'REVVIEW_LOG_OPTIONS_SINGLE_FILE'),
            ('multi_file', 'REVVIEW_LOG_OPTIONS_MULTI_FILE'),
        ):
            if env.get(var):
                config.log_options[profile].update(parse_key_values(env[var]))
        return config


def parse_key_values(text: str) -> dict[str, str]:
    """Parse ``"diff_merges=separate follow=true"`` into a dict."""
    values = {}
    for item in shlex.split(text):
        key, sep, value = item.partition('=')
        if not sep:
            raise ValueError(f"Expected key=value, got {item!r}")
        values[key.strip().replace('-', '_')] = value
    return values
