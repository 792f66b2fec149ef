import logging
from enum import Enum

from gitlet.errors import ObjectNotFound
from gitlet.objects import Blob, BlobId, Commit, CommitId

logger = logging.getLogger(__name__)


class ObjectKind(str, Enum):
    BLOB = "blobs"
    COMMIT = "commits"


class ObjectStore:
    """
    Content-addressed, append-only storage for blobs and commits.

    Objects are keyed by the hash of their serialized bytes. Writing the same
    bytes twice is a no-op and nothing is ever overwritten or deleted.
    """

    def put(self, kind: ObjectKind, data: bytes) -> str:
        """Store ``data`` under its content hash and return the id."""
        raise NotImplementedError()

    def get(self, kind: ObjectKind, object_id: str) -> bytes:
        """Return stored bytes, raising ObjectNotFound for an unknown id."""
        raise NotImplementedError()

    def exists(self, kind: ObjectKind, object_id: str) -> bool:
        """Check whether an object with this id has been written."""
        raise NotImplementedError()

    def list_ids(self, kind: ObjectKind) -> list[str]:
        """List ids of every stored object of ``kind`` in unspecified order."""
        raise NotImplementedError()

    def close(self) -> None:
        pass

    def put_blob(self, content: bytes) -> BlobId:
        return self.put(ObjectKind.BLOB, Blob(content).serialize())

    def get_blob(self, blob_id: BlobId) -> bytes:
        return self.get(ObjectKind.BLOB, blob_id)

    def put_commit(self, commit: Commit) -> CommitId:
        commit_id = self.put(ObjectKind.COMMIT, commit.serialize())
        logger.debug("Stored commit %s (%r)", commit_id, commit.message)
        return commit_id

    def get_commit(self, commit_id: CommitId) -> Commit:
        return Commit.deserialize(self.get(ObjectKind.COMMIT, commit_id))

    def has_commit(self, commit_id: CommitId) -> bool:
        return self.exists(ObjectKind.COMMIT, commit_id)

    def commit_ids(self) -> list[CommitId]:
        return self.list_ids(ObjectKind.COMMIT)


def missing(kind: ObjectKind, object_id: str) -> ObjectNotFound:
    return ObjectNotFound(kind.value.rstrip("s"), object_id)
