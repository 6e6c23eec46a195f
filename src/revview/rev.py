"""Typed revision endpoints and the comparison/repository records built from them."""

from dataclasses import dataclass
from typing import Union

# git's well-known hash of the empty tree object
NULL_TREE_SHA = '4b825dc642cb6eb9a060e54bf8d69288fbee4904'


@dataclass(frozen=True)
class Commit:
    """An immutable, content-addressed commit."""
    hash: str

    def object_name(self) -> str:
        return self.hash

    def abbrev(self, length: int = 8) -> str:
        return self.hash[:length]

    def __str__(self) -> str:
        return f'COMMIT({self.hash})'


@dataclass(frozen=True)
class Local:
    """The working tree. Always "latest", so it carries no hash."""

    def object_name(self) -> None:
        return None

    def abbrev(self, length: int = 8) -> str:
        return 'LOCAL'

    def __str__(self) -> str:
        return 'LOCAL'


@dataclass(frozen=True)
class Stage:
    """An index slot: 0 is the merged index, 1-3 are the sides of a conflict."""
    number: int = 0

    def __post_init__(self):
        if not 0 <= self.number <= 3:
            raise ValueError(f"Stage number must be in 0..3, got {self.number}")

    def object_name(self) -> str:
        return f':{self.number}'

    def abbrev(self, length: int = 8) -> str:
        return f'STAGE({self.number})'

    def __str__(self) -> str:
        return f'STAGE({self.number})'


@dataclass(frozen=True)
class NullTree:
    """No tree at all: the left side of a diff against a root commit."""

    def object_name(self) -> str:
        return NULL_TREE_SHA

    def abbrev(self, length: int = 8) -> str:
        return NULL_TREE_SHA[:length]

    def __str__(self) -> str:
        return 'NULL_TREE'


Rev = Union[Commit, Local, Stage, NullTree]


def rev_from_token(token: str) -> Commit:
    """Build a `Commit` from a rev-parse token, dropping an exclusion ``^`` prefix."""
    return Commit(token[1:] if token.startswith('^') else token)


@dataclass(frozen=True)
class ComparisonSpec:
    """The two endpoints a comparison session diffs."""
    left: Rev
    right: Rev

    def __post_init__(self):
        if isinstance(self.left, NullTree) and isinstance(self.right, NullTree):
            raise ValueError("A comparison cannot have the null tree on both sides")

    def __iter__(self):
        yield self.left
        yield self.right

    def __str__(self) -> str:
        return f'{self.left} → {self.right}'


@dataclass(frozen=True)
class RepositoryContext:
    """A discovered working tree: its top-level directory and its git dir."""
    toplevel: str
    dir: str
