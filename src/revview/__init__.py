"""git-revview: resolve git comparison requests and track the sessions opened from them."""

__version__ = "0.1.0"

from .cli import cli
from .commands.base import run_command
from .commands.diff_open import diffview_open, open_command
from .commands.file_history import file_history, history_command
from .config import Config
from .errors import (
    AmbiguousRevision,
    BadRevision,
    EmptyHistory,
    InvalidOption,
    NotARepoError,
    ResolveError,
    RevviewError,
)
from .git import Git, is_rev_arg_range, pathspec_expand, pathspec_split
from .host import Host
from .jobs import Job, JobStatus, Scheduler, submit_for_session
from .locate import find_toplevel
from .log_options import FLAGS, FileHistoryOptions, LogOptions, has_matching_history
from .registry import Registry
from .resolve import parse_revs, replace_head_with_local, resolve_job
from .rev import Commit, ComparisonSpec, Local, NullTree, RepositoryContext, Rev, Stage
from .session import DiffSession, HistorySession, Session

__all__ = [
    "cli",
    "run_command",
    "diffview_open",
    "open_command",
    "file_history",
    "history_command",
    "Config",
    "AmbiguousRevision",
    "BadRevision",
    "EmptyHistory",
    "InvalidOption",
    "NotARepoError",
    "ResolveError",
    "RevviewError",
    "Git",
    "is_rev_arg_range",
    "pathspec_expand",
    "pathspec_split",
    "Host",
    "Job",
    "JobStatus",
    "Scheduler",
    "submit_for_session",
    "find_toplevel",
    "FLAGS",
    "FileHistoryOptions",
    "LogOptions",
    "has_matching_history",
    "Registry",
    "parse_revs",
    "replace_head_with_local",
    "resolve_job",
    "Commit",
    "ComparisonSpec",
    "Local",
    "NullTree",
    "RepositoryContext",
    "Rev",
    "Stage",
    "DiffSession",
    "HistorySession",
    "Session",
]
