"""
Commit graph traversal.

All walks are iterative with an explicit work list, so history depth is not
limited by the interpreter's recursion limit.
"""

from collections import deque
from typing import Iterator

from gitlet.base import ObjectStore
from gitlet.errors import (
    AmbiguousCommitId,
    EmptyCommit,
    MissingCommitMessage,
    NoSuchCommit,
)
from gitlet.objects import Commit, CommitId
from gitlet.stage import Stage

MIN_PREFIX_LENGTH = 4


def history(store: ObjectStore, head_id: CommitId) -> Iterator[tuple[CommitId, Commit]]:
    """Yield ``(id, commit)`` from ``head_id`` back to the root, first parents only."""
    commit_id: CommitId | None = head_id
    seen: set[CommitId] = set()
    while commit_id is not None and commit_id not in seen:
        seen.add(commit_id)
        commit = store.get_commit(commit_id)
        yield commit_id, commit
        commit_id = commit.parent_id


def all_commits(store: ObjectStore) -> Iterator[tuple[CommitId, Commit]]:
    """Every stored commit, reachable or not, in storage order."""
    for commit_id in store.commit_ids():
        yield commit_id, store.get_commit(commit_id)


def ancestor_set(store: ObjectStore, commit_id: CommitId) -> set[CommitId]:
    """``commit_id`` and everything reachable through first and second parents."""
    visited: set[CommitId] = set()
    queue = deque([commit_id])
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        queue.extend(
            p for p in store.get_commit(current).parent_ids if p not in visited
        )
    return visited


def lowest_common_ancestor(store: ObjectStore, a_id: CommitId, b_id: CommitId) -> CommitId:
    """
    Split point of ``a_id`` and ``b_id``.

    Walks ``b_id``'s first-parent chain and returns the first commit that is an
    ancestor of ``a_id``. Deterministic for a given pair, though not always the
    closest candidate when several exist at the same depth.
    """
    ancestors = ancestor_set(store, a_id)
    for commit_id, _ in history(store, b_id):
        if commit_id in ancestors:
            return commit_id
    # Every repository shares one root, so this only happens on a corrupt graph.
    raise NoSuchCommit(f"Commits {a_id} and {b_id} share no ancestor.")


def resolve_commit_id(store: ObjectStore, prefix: str) -> CommitId:
    """Expand a full or abbreviated commit id to the stored id."""
    prefix = prefix.strip().lower()
    if store.has_commit(prefix):
        return prefix
    if len(prefix) < MIN_PREFIX_LENGTH:
        raise NoSuchCommit()
    matches = [c for c in store.commit_ids() if c.startswith(prefix)]
    if not matches:
        raise NoSuchCommit()
    if len(matches) > 1:
        raise AmbiguousCommitId(
            f"Commit id prefix {prefix} is ambiguous: {', '.join(sorted(matches))}"
        )
    return matches[0]


def make_commit(
    message: str,
    timestamp: int,
    stage: Stage,
    parent_id: CommitId | None,
    parent: Commit | None,
    second_parent_id: CommitId | None = None,
    allow_empty: bool = False,
) -> Commit:
    """
    Build the commit that results from applying ``stage`` on top of ``parent``.

    Merge commits pass ``allow_empty`` since they are recorded even when both
    sides already agree on every file.
    """
    if not allow_empty and not stage.is_dirty():
        raise EmptyCommit()
    if not message.strip():
        raise MissingCommitMessage()
    base_files = parent.files if parent is not None else {}
    return Commit(
        message=message,
        timestamp=timestamp,
        parent_id=parent_id,
        second_parent_id=second_parent_id,
        files=stage.apply(base_files),
    )
