"""Checkout and hard reset: materializing a commit into the working directory."""

import logging
from typing import TYPE_CHECKING

from gitlet.errors import FileNotInCommit, NoSuchBranch, SameBranch, UntrackedOverwrite
from gitlet.graph import resolve_commit_id
from gitlet.objects import Commit, CommitId

if TYPE_CHECKING:
    from gitlet.repository import Repository

logger = logging.getLogger(__name__)


def check_untracked_overwrite(repo: "Repository", current: Commit, target: Commit) -> None:
    """
    Refuse to clobber working files the current commit does not track.

    Runs before anything is written, so a failure leaves no partial effects.
    """
    for path, blob_id in target.files.items():
        if current.tracks(path):
            continue
        content = repo.work_tree.read(path)
        if content is not None and content != repo.store.get_blob(blob_id):
            raise UntrackedOverwrite(path)


def checkout_file(repo: "Repository", path: str, commit: Commit) -> None:
    """Overwrite the working copy of ``path`` with its version in ``commit``.

    The stage is not touched.
    """
    blob_id = commit.get(path)
    if blob_id is None:
        raise FileNotInCommit()
    repo.work_tree.write(path, repo.store.get_blob(blob_id))


def materialize(repo: "Repository", current: Commit, target: Commit) -> None:
    """Make the working directory match ``target``, starting from ``current``."""
    for path in current.files:
        if not target.tracks(path):
            repo.work_tree.delete(path)
    for path, blob_id in target.files.items():
        repo.work_tree.write(path, repo.store.get_blob(blob_id))


def checkout_branch(repo: "Repository", name: str) -> None:
    refs = repo.refs
    if name == refs.current:
        raise SameBranch()
    if not refs.exists(name):
        raise NoSuchBranch("No such branch exists.")

    current = repo.head_commit()
    target = repo.commit_at(refs.get(name))
    check_untracked_overwrite(repo, current, target)

    materialize(repo, current, target)
    refs.switch(name)
    repo.stage.clear()
    logger.info("Switched to branch %s", name)


def reset_hard(repo: "Repository", commit_ref: str) -> CommitId:
    """Move the current branch to ``commit_ref`` and match the working directory.

    Unlike a commit, the branch may move anywhere in the graph, not only forward.
    """
    commit_id = resolve_commit_id(repo.store, commit_ref)
    current = repo.head_commit()
    target = repo.commit_at(commit_id)
    check_untracked_overwrite(repo, current, target)

    materialize(repo, current, target)
    repo.refs.advance_head(commit_id)
    repo.stage.clear()
    logger.info("Reset %s to %s", repo.refs.current, commit_id)
    return commit_id
