"""Revision resolver: turn a git-style revision argument into a `ComparisonSpec`."""

import logging

from .errors import AmbiguousRevision, BadRevision
from .git import is_rev_arg_range
from .jobs import submit_for_session
from .rev import Commit, ComparisonSpec, Local, NullTree, RepositoryContext, Stage, rev_from_token

logger = logging.getLogger(__name__)


def replace_head_with_local(spec: ComparisonSpec, head: Commit | None) -> ComparisonSpec:
    """Replace any side that is HEAD's commit with the working tree.

    Only literal hash equality counts: a symbolic ref or a detached HEAD that
    happens to name the same commit some other way is not special-cased.
    """
    if head is None:
        return spec
    left, right = spec
    if isinstance(left, Commit) and left.hash == head.hash:
        left = Local()
    if isinstance(right, Commit) and right.hash == head.hash:
        right = Local()
    return ComparisonSpec(left, right)


def parse_revs(
    git,
    repo: RepositoryContext,
    rev_arg: str | None,
    cached: bool = False,
    imply_local: bool = False,
) -> ComparisonSpec:
    """Resolve ``rev_arg`` to a pair of endpoints.

    Args:
        git: Repository query surface (see `revview.git.Git`)
        repo: The working tree to resolve in
        rev_arg: ``None`` (index vs working tree), ``A...B``, ``A..B``,
            ``A^..B``, or a single revision
        cached: Compare against the index instead of the working tree
        imply_local: Show HEAD's side as the live working tree

    Raises:
        BadRevision: rev-parse failed or yielded nothing
        AmbiguousRevision: a symmetric difference could not be resolved
    """
    toplevel = repo.toplevel
    head = git.head_rev(toplevel)

    if not rev_arg:
        if cached:
            return ComparisonSpec(head or NullTree(), Stage(0))
        return ComparisonSpec(Stage(0), Local())

    if '...' in rev_arg:
        revs = git.symmetric_diff_revs(toplevel, rev_arg)
        if not revs:
            raise AmbiguousRevision(f"Failed to resolve symmetric difference: '{rev_arg}'", rev_arg)
        spec = ComparisonSpec(*revs)
        return replace_head_with_local(spec, head) if imply_local else spec

    tokens, code, stderr = git.rev_parse(toplevel, rev_arg)
    if code != 0:
        raise BadRevision(f"Failed to parse rev '{rev_arg}'!", rev_arg, stderr)
    if not tokens:
        raise BadRevision(f"Bad revision: '{rev_arg}'", rev_arg)

    if is_rev_arg_range(rev_arg):
        right = rev_from_token(tokens[0])
        left = rev_from_token(tokens[1]) if len(tokens) > 1 else NullTree()
        spec = ComparisonSpec(left, right)
        return replace_head_with_local(spec, head) if imply_local else spec

    return ComparisonSpec(rev_from_token(tokens[0]), Stage(0) if cached else Local())


def resolve_job(scheduler, registry, session, git, repo, rev_arg, cached=False, imply_local=False):
    """Resolve on a later scheduler turn and store the result on ``session.spec``.

    The result is dropped if the session was disposed before the job finished.
    """
    def apply(spec):
        logger.debug(f"Parsed revs: {spec}")
        session.spec = spec

    return submit_for_session(
        scheduler, registry, session,
        parse_revs, git, repo, rev_arg, cached, imply_local,
        apply=apply,
    )
