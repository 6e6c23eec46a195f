"""Shared fixtures: a scripted stand-in for the git query surface."""

import os
import re

import pytest

from revview.config import Config
from revview.host import Host
from revview.jobs import Scheduler
from revview.log_options import describe, is_single_file
from revview.registry import Registry
from revview.rev import Commit, RepositoryContext

HEAD = 'a' * 40
MAIN = 'b' * 40
BASE = 'c' * 40
ROOT = 'd' * 40


class FakeGit:
    """Answers repository queries from tables instead of running git."""

    def __init__(self, toplevels=(), head=HEAD):
        self.toplevels = list(toplevels)
        self.head = head
        self.revs: dict[str, tuple[list[str], int, list[str]]] = {}
        self.symmetric: dict[str, tuple[Commit, Commit]] = {}
        self.authors: list[str] = ['Alice <alice@example.com>']
        self.calls: list[tuple] = []

    def toplevel(self, path):
        self.calls.append(('toplevel', path))
        for top in self.toplevels:
            if path == top or path.startswith(top + os.sep):
                return top
        return None

    def git_dir(self, toplevel):
        return os.path.join(toplevel, '.git')

    def head_rev(self, toplevel):
        self.calls.append(('head_rev', toplevel))
        return Commit(self.head) if self.head else None

    def rev_parse(self, toplevel, rev_arg):
        self.calls.append(('rev_parse', rev_arg))
        return self.revs.get(rev_arg, ([], 128, [f"fatal: ambiguous argument '{rev_arg}': unknown revision"]))

    def verify_rev_arg(self, toplevel, rev_arg):
        return self.rev_parse(toplevel, rev_arg)[1] == 0

    def symmetric_diff_revs(self, toplevel, rev_arg):
        self.calls.append(('symmetric_diff_revs', rev_arg))
        return self.symmetric.get(rev_arg)

    def ls_files(self, toplevel, paths):
        return list(paths)

    def file_history_dry_run(self, toplevel, options):
        self.calls.append(('file_history_dry_run', toplevel))
        single = is_single_file(self, toplevel, options.path_args, options.L)
        log_options = options.get(single)
        ok = any(not log_options.author or re.search(log_options.author, a) for a in self.authors)
        return ok, describe(toplevel, log_options, single)


@pytest.fixture
def repo_dir(tmp_path):
    """A directory tree standing in for a working tree: repo/src/app.py."""
    top = os.path.realpath(tmp_path / 'repo')
    os.makedirs(os.path.join(top, 'src'))
    with open(os.path.join(top, 'src', 'app.py'), 'w') as f:
        f.write('print("hi")\n')
    return top


@pytest.fixture
def fake_git(repo_dir):
    git = FakeGit([repo_dir])
    git.revs['HEAD~1'] = ([MAIN], 0, [])
    git.revs['abc123'] = (['abc123' + '0' * 34], 0, [])
    git.revs['main..HEAD'] = ([HEAD, '^' + MAIN], 0, [])
    git.revs['main'] = ([MAIN], 0, [])
    git.symmetric['main...feature'] = (Commit(BASE), Commit(HEAD))
    return git


@pytest.fixture
def repo(repo_dir):
    return RepositoryContext(toplevel=repo_dir, dir=os.path.join(repo_dir, '.git'))


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def registry(scheduler):
    return Registry(scheduler)


@pytest.fixture
def host(registry, fake_git, repo_dir):
    return Host(registry=registry, git=fake_git, config=Config(), cwd=repo_dir)
