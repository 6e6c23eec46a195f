"""Exception hierarchy for revision resolution and session commands."""

from typing import Any


class RevviewError(Exception):
    """Base exception for errors that abort a single command."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class NotARepoError(RevviewError):
    """None of the candidate paths is inside a git working tree."""

    def __init__(self, message: str, attempted: list[str]) -> None:
        super().__init__(message, {"attempted": attempted})
        self.attempted = attempted


class ResolveError(RevviewError):
    """A revision expression could not be turned into a comparison."""

    def __init__(self, message: str, expr: str | None) -> None:
        super().__init__(message, {"expr": expr})
        self.expr = expr


class BadRevision(ResolveError):
    """rev-parse yielded no revisions, or exited non-zero."""

    def __init__(self, message: str, expr: str | None, diagnostics: list[str] | None = None) -> None:
        super().__init__(message, expr)
        self.diagnostics = diagnostics or []

    def __str__(self) -> str:
        if self.diagnostics:
            return '\n'.join([self.message, 'Git output:', *self.diagnostics])
        return self.message


class AmbiguousRevision(ResolveError):
    """Neither side of a symmetric difference could be resolved."""


class EmptyHistory(RevviewError):
    """The filtered history has no entries.

    Informational: the command aborts, but this is reported as a notice rather
    than an error.
    """

    def __init__(self, targets: list[str], description: list[str]) -> None:
        shown = ", ".join(f"'{t}'" for t in targets) if targets else "':(top)'"
        message = (
            f"No git history for the target(s) given the current options! Targets: {shown}\n"
            f"Current options: [ {' '.join(description)} ]"
        )
        super().__init__(message, {"targets": targets})
        self.targets = targets
        self.description = description


class InvalidOption(RevviewError, ValueError):
    """Unknown log option key, or a value outside the option's allowed set."""

    def __init__(self, key: str, value: Any = None, allowed: tuple[str, ...] | None = None) -> None:
        if allowed is not None:
            message = f"Invalid value for {key}: {value!r} (expected one of: {', '.join(a or '<unset>' for a in allowed)})"
        else:
            message = f"Unknown log option: {key}"
        super().__init__(message, {"key": key, "value": value})
        self.key = key
        self.value = value
