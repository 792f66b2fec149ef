import logging
from pathlib import Path
from typing import Any

from gitlet.errors import (
    BranchExists,
    CannotRemoveCurrentBranch,
    NoSuchBranch,
    UninitializedRepo,
    UsageError,
)
from gitlet.fsutil import atomic_write_text
from gitlet.objects import CommitId

logger = logging.getLogger(__name__)

HEAD_PREFIX = "ref: refs/heads/"


class BranchRegistry:
    """
    Branch name -> commit id, plus the currently checked-out branch (HEAD).

    HEAD always names an existing branch; there is no detached state.
    """

    def __init__(self, branches: dict[str, CommitId], current: str) -> None:
        if current not in branches:
            raise NoSuchBranch(f"HEAD points at unknown branch '{current}'.")
        self.branches = dict(branches)
        self.current = current
        self._deleted: set[str] = set()

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("BranchRegistry(...)")
        else:
            with p.group(4, "BranchRegistry(", ")"):
                p.breakable()
                p.text(f"current='{self.current}',")
                p.breakable()
                p.text(f"branches={self.branches},")
                p.breakable()

    @property
    def head_commit_id(self) -> CommitId:
        return self.branches[self.current]

    def exists(self, name: str) -> bool:
        return name in self.branches

    def get(self, name: str) -> CommitId:
        try:
            return self.branches[name]
        except KeyError:
            raise NoSuchBranch() from None

    def list_branches(self) -> list[str]:
        return sorted(self.branches)

    def create(self, name: str, commit_id: CommitId) -> None:
        if not name or "/" in name or name.startswith("."):
            raise UsageError(f"Invalid branch name: {name!r}")
        if name in self.branches:
            raise BranchExists()
        self.branches[name] = commit_id
        self._deleted.discard(name)

    def delete(self, name: str) -> None:
        if name not in self.branches:
            raise NoSuchBranch()
        if name == self.current:
            raise CannotRemoveCurrentBranch()
        del self.branches[name]
        self._deleted.add(name)

    def move(self, name: str, commit_id: CommitId) -> None:
        if name not in self.branches:
            raise NoSuchBranch()
        logger.debug("Moving %s: %s -> %s", name, self.branches[name], commit_id)
        self.branches[name] = commit_id

    def advance_head(self, commit_id: CommitId) -> None:
        self.move(self.current, commit_id)

    def switch(self, name: str) -> None:
        if name not in self.branches:
            raise NoSuchBranch("No such branch exists.")
        self.current = name

    @staticmethod
    def heads_dir(root: Path) -> Path:
        return root / "refs" / "heads"

    @classmethod
    def load(cls, root: Path) -> "BranchRegistry":
        head_file = root / "HEAD"
        heads_dir = cls.heads_dir(root)
        if not head_file.is_file() or not heads_dir.is_dir():
            raise UninitializedRepo()

        head = head_file.read_text(encoding="utf-8").strip()
        if not head.startswith(HEAD_PREFIX):
            raise UninitializedRepo(f"Malformed HEAD: {head!r}")

        branches = {
            p.name: p.read_text(encoding="utf-8").strip()
            for p in heads_dir.iterdir()
            if p.is_file() and not p.name.startswith(".")
        }
        return cls(branches, head[len(HEAD_PREFIX):])

    def save(self, root: Path) -> None:
        heads_dir = self.heads_dir(root)
        for name, commit_id in self.branches.items():
            ref_file = heads_dir / name
            if not ref_file.exists() or ref_file.read_text(encoding="utf-8").strip() != commit_id:
                atomic_write_text(ref_file, commit_id + "\n")
        for name in self._deleted:
            (heads_dir / name).unlink(missing_ok=True)
        self._deleted.clear()
        atomic_write_text(root / "HEAD", f"{HEAD_PREFIX}{self.current}\n")
