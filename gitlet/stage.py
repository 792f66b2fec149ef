import json
import logging
from pathlib import Path
from typing import Any

from gitlet.fsutil import atomic_write
from gitlet.objects import BlobId, SnapshotFiles, canonical_json

logger = logging.getLogger(__name__)


class Stage:
    """
    Pending changes relative to the current branch head.

    ``added`` maps paths to the blob they will point at after the next commit,
    ``removed`` lists tracked paths the next commit will drop.
    """

    def __init__(
        self,
        added: SnapshotFiles | None = None,
        removed: set[str] | None = None,
    ) -> None:
        self.added: SnapshotFiles = dict(added or {})
        self.removed: set[str] = set(removed or ())

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("Stage(...)")
        else:
            with p.group(4, "Stage(", ")"):
                p.breakable()
                p.text(f"added={self.added},")
                p.breakable()
                p.text(f"removed={sorted(self.removed)},")
                p.breakable()

    def is_dirty(self) -> bool:
        return bool(self.added) or bool(self.removed)

    def add(self, path: str, blob_id: BlobId) -> None:
        """Stage ``path``; re-adding a path staged for removal only cancels it."""
        if path in self.removed:
            self.removed.discard(path)
            return
        self.added[path] = blob_id

    def add_with_unstage_check(
        self, path: str, blob_id: BlobId, tracked_blob_id: BlobId | None
    ) -> None:
        """Stage ``path`` unless the content equals the tracked version.

        Re-adding a path staged for removal only cancels the removal. Staging
        content identical to the head commit unstages the path.
        """
        if path in self.removed:
            self.removed.discard(path)
            return
        if blob_id == tracked_blob_id:
            self.added.pop(path, None)
            return
        self.added[path] = blob_id

    def unstage(self, path: str) -> bool:
        return self.added.pop(path, None) is not None

    def mark_removed(self, path: str) -> None:
        self.added.pop(path, None)
        self.removed.add(path)

    def clear(self) -> None:
        self.added = {}
        self.removed = set()

    def apply(self, files: SnapshotFiles) -> SnapshotFiles:
        """Return ``files`` with staged additions and removals applied."""
        snapshot = {**files, **self.added}
        for path in self.removed:
            snapshot.pop(path, None)
        return snapshot

    def to_dict(self) -> dict:
        return {"added": dict(self.added), "removed": sorted(self.removed)}

    @classmethod
    def from_dict(cls, data: dict) -> "Stage":
        return cls(added=data.get("added", {}), removed=set(data.get("removed", [])))

    @classmethod
    def load(cls, path: Path) -> "Stage":
        if not path.exists():
            return cls()
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))

    def save(self, path: Path) -> None:
        atomic_write(path, canonical_json(self.to_dict()))
        logger.debug(
            "Saved index: %d added, %d removed", len(self.added), len(self.removed)
        )
