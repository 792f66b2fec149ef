"""
Repository context: durable state loaded at the start of a command, mutated in
memory by one operation and persisted when the operation returns normally.
"""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from gitlet import checkout as checkout_engine
from gitlet import merge as merge_engine
from gitlet.base import ObjectStore
from gitlet.config import GitletSettings
from gitlet.errors import (
    AlreadyInitialized,
    FileNotFound,
    NoCommitWithMessage,
    NothingToRemove,
    UninitializedRepo,
)
from gitlet.fsutil import atomic_write
from gitlet.graph import all_commits, history, make_commit, resolve_commit_id
from gitlet.impl.fs import FsObjectStore
from gitlet.impl.sql import create_sql_object_store
from gitlet.locking import repository_lock
from gitlet.objects import Blob, Commit, CommitId, canonical_json, initial_commit
from gitlet.refs import BranchRegistry
from gitlet.stage import Stage
from gitlet.worktree import WorkTree

logger = logging.getLogger(__name__)

CONFIG_FILE = "config"
INDEX_FILE = "index"


@dataclass
class Status:
    current_branch: str
    branches: list[str]
    staged: list[str]
    removed: list[str]
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    def render(self) -> str:
        sections = [
            ("Branches", [("*" + b if b == self.current_branch else b) for b in self.branches]),
            ("Staged Files", self.staged),
            ("Removed Files", self.removed),
            ("Modifications Not Staged For Commit", self.modified),
            ("Untracked Files", self.untracked),
        ]
        return "\n".join(
            "\n".join([f"=== {title} ===", *entries]) + "\n" for title, entries in sections
        )


class Repository:
    """
    One gitlet repository rooted at ``work_dir``.

    Holds the object store, branch registry and stage for the duration of a
    command. Nothing here terminates the process; failures raise GitletError.
    """

    def __init__(
        self,
        work_dir: Path,
        store: ObjectStore,
        refs: BranchRegistry,
        stage: Stage,
        settings: GitletSettings,
    ) -> None:
        self.work_dir = Path(work_dir)
        self.root = self.work_dir / settings.repo_dir
        self.store = store
        self.refs = refs
        self.stage = stage
        self.settings = settings
        self.work_tree = WorkTree(self.work_dir, settings.repo_dir)

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("Repository(...)")
        else:
            with p.group(4, "Repository(", ")"):
                p.breakable()
                p.text(f"path={self.work_dir},")
                p.breakable()
                p.text("refs=")
                p.pretty(self.refs)
                p.text(",")
                p.breakable()
                p.text("stage=")
                p.pretty(self.stage)
                p.breakable()

    @property
    def current_branch(self) -> str:
        return self.refs.current

    @property
    def head_id(self) -> CommitId:
        return self.refs.head_commit_id

    def head_commit(self) -> Commit:
        return self.commit_at(self.head_id)

    def commit_at(self, commit_id: CommitId) -> Commit:
        return self.store.get_commit(commit_id)

    def is_dirty(self) -> bool:
        return self.stage.is_dirty()

    def save(self) -> None:
        self.refs.save(self.root)
        self.stage.save(self.root / INDEX_FILE)

    def add(self, path: str) -> None:
        content = self.work_tree.read(path)
        if content is None:
            raise FileNotFound()
        blob_id = self.store.put_blob(content)
        self.stage.add_with_unstage_check(path, blob_id, self.head_commit().get(path))

    def commit(self, message: str, timestamp: int | None = None) -> CommitId:
        parent_id = self.head_id
        commit = make_commit(
            message,
            int(time.time()) if timestamp is None else timestamp,
            self.stage,
            parent_id=parent_id,
            parent=self.commit_at(parent_id),
        )
        commit_id = self.store.put_commit(commit)
        self.refs.advance_head(commit_id)
        self.stage.clear()
        logger.info("Committed %s on %s", commit_id, self.current_branch)
        return commit_id

    def remove(self, path: str) -> None:
        head = self.head_commit()
        if path not in self.stage.added and not head.tracks(path):
            raise NothingToRemove()
        self.stage.unstage(path)
        if head.tracks(path):
            self.stage.mark_removed(path)
            self.work_tree.delete(path)

    def log(self) -> Iterator[tuple[CommitId, Commit]]:
        return history(self.store, self.head_id)

    def global_log(self) -> Iterator[tuple[CommitId, Commit]]:
        return all_commits(self.store)

    def find(self, message: str) -> list[CommitId]:
        found = [
            commit_id
            for commit_id, commit in all_commits(self.store)
            if commit.message == message
        ]
        if not found:
            raise NoCommitWithMessage()
        return found

    def status(self) -> Status:
        head = self.head_commit()
        added = self.stage.added
        removed = self.stage.removed
        modified: list[str] = []
        for path in sorted(set(head.files) | set(added)):
            if path in removed:
                continue
            expected = added.get(path, head.get(path))
            content = self.work_tree.read(path)
            if content is None:
                modified.append(f"{path} (deleted)")
            elif expected != Blob(content).id:
                modified.append(f"{path} (modified)")

        untracked = [
            path
            for path in self.work_tree.list_files()
            if path not in added and (not head.tracks(path) or path in removed)
        ]
        return Status(
            current_branch=self.current_branch,
            branches=self.refs.list_branches(),
            staged=sorted(added),
            removed=sorted(removed),
            modified=modified,
            untracked=untracked,
        )

    def create_branch(self, name: str) -> None:
        self.refs.create(name, self.head_id)

    def remove_branch(self, name: str) -> None:
        self.refs.delete(name)

    def list_branches(self) -> list[str]:
        return self.refs.list_branches()

    def checkout_file(self, path: str, commit_ref: str | None = None) -> None:
        if commit_ref is None:
            commit = self.head_commit()
        else:
            commit = self.commit_at(resolve_commit_id(self.store, commit_ref))
        checkout_engine.checkout_file(self, path, commit)

    def switch_branch(self, name: str) -> None:
        checkout_engine.checkout_branch(self, name)

    def reset(self, commit_ref: str) -> CommitId:
        return checkout_engine.reset_hard(self, commit_ref)

    def merge(self, branch: str, timestamp: int | None = None) -> merge_engine.MergeResult:
        return merge_engine.merge(self, branch, timestamp=timestamp)


def repository_root(work_dir: str | Path, settings: GitletSettings) -> Path:
    return Path(work_dir) / settings.repo_dir


def repository_exists(work_dir: str | Path, settings: GitletSettings | None = None) -> bool:
    settings = settings or GitletSettings()
    return (repository_root(work_dir, settings) / "HEAD").is_file()


def create_object_store(root: Path, backend: str, sql_url: str | None = None) -> ObjectStore:
    if backend == "sql":
        return create_sql_object_store(sql_url or f"sqlite:///{root / 'objects.db'}")
    store = FsObjectStore(root)
    store.initialize()
    return store


def _load_store(root: Path, settings: GitletSettings) -> ObjectStore:
    config_file = root / CONFIG_FILE
    stored = json.loads(config_file.read_text(encoding="utf-8")) if config_file.exists() else {}
    return create_object_store(
        root,
        stored.get("object_backend", settings.object_backend),
        stored.get("sql_url", settings.sql_url),
    )


def init_repository(work_dir: str | Path, settings: GitletSettings | None = None) -> CommitId:
    """Create the repository with its shared initial commit on the default branch."""
    settings = settings or GitletSettings()
    root = repository_root(work_dir, settings)
    root.parent.mkdir(parents=True, exist_ok=True)
    try:
        root.mkdir()
    except FileExistsError:
        raise AlreadyInitialized() from None

    BranchRegistry.heads_dir(root).mkdir(parents=True)
    with repository_lock(root, settings.lock_timeout):
        atomic_write(
            root / CONFIG_FILE,
            canonical_json(
                {"object_backend": settings.object_backend, "sql_url": settings.sql_url}
            ),
        )
        store = create_object_store(root, settings.object_backend, settings.sql_url)
        try:
            root_id = store.put_commit(initial_commit())
        finally:
            store.close()
        refs = BranchRegistry({settings.default_branch: root_id}, settings.default_branch)
        refs.save(root)
        Stage().save(root / INDEX_FILE)

    logger.info("Initialized repository at %s (%s backend)", root, settings.object_backend)
    return root_id


@contextmanager
def open_repository(
    work_dir: str | Path, settings: GitletSettings | None = None
) -> Iterator[Repository]:
    """
    Lock the repository, load its state and yield it.

    Branch registry and index are written back only when the block exits
    without an exception.
    """
    settings = settings or GitletSettings()
    root = repository_root(work_dir, settings)
    if not repository_exists(work_dir, settings):
        raise UninitializedRepo()

    with repository_lock(root, settings.lock_timeout):
        store = _load_store(root, settings)
        try:
            repo = Repository(
                Path(work_dir),
                store,
                BranchRegistry.load(root),
                Stage.load(root / INDEX_FILE),
                settings,
            )
            yield repo
            repo.save()
        finally:
            store.close()
