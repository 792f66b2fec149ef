import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

BlobId = str
CommitId = str
SnapshotFiles = dict[str, BlobId]

INITIAL_COMMIT_MESSAGE = "initial commit"
ID_LENGTH = 40


def hash_bytes(data: bytes) -> str:
    """Content address of ``data``: SHA-1 hex digest."""
    return hashlib.sha1(data).hexdigest()


def canonical_json(value: Any) -> bytes:
    return json.dumps(
        value, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


@dataclass(frozen=True)
class Blob:
    """
    Immutable file body. Identity depends on the content only, so equal
    content under different paths (or in different repositories) shares one id.
    """

    content: bytes

    @property
    def id(self) -> BlobId:
        return hash_bytes(self.content)

    def serialize(self) -> bytes:
        return self.content


@dataclass(frozen=True, eq=False)
class Commit:
    """
    Immutable snapshot of every tracked path plus metadata.

    ``files`` is a full snapshot, not a diff against the parent.
    """

    message: str
    timestamp: int
    parent_id: CommitId | None = None
    second_parent_id: CommitId | None = None
    files: SnapshotFiles = field(default_factory=dict)

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("Commit(...)")
        else:
            with p.group(4, "Commit(", ")"):
                p.breakable()
                p.text(f"id={self.id[:7]},")
                p.breakable()
                p.text(f"message={self.message!r},")
                p.breakable()
                p.text(f"files={self.files},")
                p.breakable()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def id(self) -> CommitId:
        return hash_bytes(self.serialize())

    @property
    def is_merge(self) -> bool:
        return self.second_parent_id is not None

    @property
    def parent_ids(self) -> list[CommitId]:
        return [p for p in (self.parent_id, self.second_parent_id) if p is not None]

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    def serialize(self) -> bytes:
        # Field order and separators are fixed so equal commits hash equally
        # on every machine.
        return canonical_json(
            {
                "message": self.message,
                "timestamp": self.timestamp,
                "parent": self.parent_id,
                "second_parent": self.second_parent_id,
                "files": dict(self.files),
            }
        )

    @classmethod
    def deserialize(cls, data: bytes) -> "Commit":
        raw = json.loads(data.decode("utf-8"))
        return cls(
            message=raw["message"],
            timestamp=int(raw["timestamp"]),
            parent_id=raw.get("parent"),
            second_parent_id=raw.get("second_parent"),
            files=dict(raw.get("files", {})),
        )

    def get(self, path: str) -> BlobId | None:
        return self.files.get(path)

    def tracks(self, path: str) -> bool:
        return path in self.files


def initial_commit() -> Commit:
    return Commit(message=INITIAL_COMMIT_MESSAGE, timestamp=0)


def format_log_entry(commit_id: CommitId, commit: Commit) -> str:
    lines = ["===", f"commit {commit_id}"]
    if commit.second_parent_id is not None and commit.parent_id is not None:
        lines.append(f"Merge: {commit.parent_id[:7]} {commit.second_parent_id[:7]}")
    local = commit.date.astimezone()
    lines.append(f"Date: {local.strftime('%a %b %d %H:%M:%S %Y %z')}")
    lines.append(commit.message)
    return "\n".join(lines) + "\n"
