"""
Three-way merge of another branch into the current one.

Every path in the current, given or split-point snapshot is classified by
comparing its blob ids (``None`` when absent). Conflicts are written into the
working file with markers and committed; they never block the merge.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from gitlet.checkout import check_untracked_overwrite, checkout_branch
from gitlet.errors import DirtyState, NoSuchBranch, SelfMerge
from gitlet.graph import lowest_common_ancestor, make_commit
from gitlet.objects import BlobId, Commit, CommitId

if TYPE_CHECKING:
    from gitlet.repository import Repository

logger = logging.getLogger(__name__)

CONFLICT_START = b"<<<<<<< HEAD\n"
CONFLICT_SEPARATOR = b"=======\n"
CONFLICT_END = b">>>>>>>\n"


class MergeOutcome(str, Enum):
    MERGED = "merged"
    FAST_FORWARDED = "fast-forwarded"
    ALREADY_ANCESTOR = "already-ancestor"


class FileAction(str, Enum):
    KEEP = "keep"
    TAKE_GIVEN = "take-given"
    REMOVE = "remove"
    CONFLICT = "conflict"


@dataclass
class MergeResult:
    outcome: MergeOutcome
    commit_id: CommitId | None = None
    conflicts: list[str] = field(default_factory=list)

    @property
    def conflicted(self) -> bool:
        return bool(self.conflicts)


def classify(
    current: BlobId | None, given: BlobId | None, split: BlobId | None
) -> FileAction:
    if given == split:
        # Untouched by given: covers "removed in both", "unchanged by either"
        # and "added only in current".
        return FileAction.KEEP
    if current == split:
        return FileAction.REMOVE if given is None else FileAction.TAKE_GIVEN
    if current == given:
        return FileAction.KEEP
    return FileAction.CONFLICT


def conflict_content(current: bytes | None, given: bytes | None) -> bytes:
    return (
        CONFLICT_START
        + (current or b"")
        + CONFLICT_SEPARATOR
        + (given or b"")
        + CONFLICT_END
    )


def merge_message(given_branch: str, current_branch: str) -> str:
    return f"Merged {given_branch} into {current_branch}."


def merge(repo: "Repository", branch: str, timestamp: int | None = None) -> MergeResult:
    refs = repo.refs
    if repo.stage.is_dirty():
        raise DirtyState()
    if branch == refs.current:
        raise SelfMerge()
    if not refs.exists(branch):
        raise NoSuchBranch()

    current_id = refs.head_commit_id
    given_id = refs.get(branch)
    current = repo.commit_at(current_id)
    given = repo.commit_at(given_id)
    check_untracked_overwrite(repo, current, given)

    split_id = lowest_common_ancestor(repo.store, current_id, given_id)
    if split_id == given_id:
        return MergeResult(MergeOutcome.ALREADY_ANCESTOR)
    if split_id == current_id:
        checkout_branch(repo, branch)
        logger.info("Fast-forwarded to %s at %s", branch, given_id)
        return MergeResult(MergeOutcome.FAST_FORWARDED, commit_id=given_id)

    split = repo.commit_at(split_id)
    conflicts = _apply_three_way(repo, current, given, split)

    commit = make_commit(
        merge_message(branch, refs.current),
        int(time.time()) if timestamp is None else timestamp,
        repo.stage,
        parent_id=current_id,
        parent=current,
        second_parent_id=given_id,
        allow_empty=True,
    )
    commit_id = repo.store.put_commit(commit)
    refs.advance_head(commit_id)
    repo.stage.clear()
    if conflicts:
        logger.warning("Merge of %s recorded conflicts in %s", branch, ", ".join(conflicts))
    return MergeResult(MergeOutcome.MERGED, commit_id=commit_id, conflicts=conflicts)


def _apply_three_way(
    repo: "Repository", current: Commit, given: Commit, split: Commit
) -> list[str]:
    conflicts: list[str] = []
    paths = sorted(set(current.files) | set(given.files) | set(split.files))
    for path in paths:
        c, g, s = current.get(path), given.get(path), split.get(path)
        action = classify(c, g, s)
        logger.debug("merge %s: current=%s given=%s split=%s -> %s", path, c, g, s, action.value)

        if action is FileAction.TAKE_GIVEN:
            assert g is not None
            repo.work_tree.write(path, repo.store.get_blob(g))
            repo.stage.add(path, g)
        elif action is FileAction.REMOVE:
            repo.stage.mark_removed(path)
            repo.work_tree.delete(path)
        elif action is FileAction.CONFLICT:
            content = conflict_content(
                repo.store.get_blob(c) if c is not None else None,
                repo.store.get_blob(g) if g is not None else None,
            )
            repo.work_tree.write(path, content)
            repo.stage.add(path, repo.store.put_blob(content))
            conflicts.append(path)
    return conflicts
