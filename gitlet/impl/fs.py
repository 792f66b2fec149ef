import logging
from pathlib import Path
from typing import Any

from gitlet.base import ObjectKind, ObjectStore, missing
from gitlet.errors import ObjectNotFound
from gitlet.fsutil import atomic_write
from gitlet.objects import ID_LENGTH, hash_bytes

logger = logging.getLogger(__name__)


class FsObjectStore(ObjectStore):
    """
    Objects as plain files under ``<root>/objects/<kind>/<id>``.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.objects_dir = self.root / "objects"

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("FsObjectStore(...)")
        else:
            p.text(f"FsObjectStore(path={self.objects_dir})")

    def kind_dir(self, kind: ObjectKind) -> Path:
        return self.objects_dir / kind.value

    def _object_path(self, kind: ObjectKind, object_id: str) -> Path:
        # Ids become file names, so reject anything that could escape the dir.
        if len(object_id) != ID_LENGTH or not object_id.isalnum():
            raise missing(kind, object_id)
        return self.kind_dir(kind) / object_id

    def initialize(self) -> None:
        for kind in ObjectKind:
            self.kind_dir(kind).mkdir(parents=True, exist_ok=True)

    def put(self, kind: ObjectKind, data: bytes) -> str:
        object_id = hash_bytes(data)
        path = self._object_path(kind, object_id)
        if not path.exists():
            atomic_write(path, data)
            logger.debug("Wrote %s/%s (%d bytes)", kind.value, object_id, len(data))
        return object_id

    def get(self, kind: ObjectKind, object_id: str) -> bytes:
        path = self._object_path(kind, object_id)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise missing(kind, object_id) from None

    def exists(self, kind: ObjectKind, object_id: str) -> bool:
        try:
            return self._object_path(kind, object_id).is_file()
        except ObjectNotFound:
            return False

    def list_ids(self, kind: ObjectKind) -> list[str]:
        directory = self.kind_dir(kind)
        if not directory.is_dir():
            return []
        return [
            p.name
            for p in directory.iterdir()
            if p.is_file() and len(p.name) == ID_LENGTH
        ]


def create_fs_object_store(root: str | Path) -> FsObjectStore:
    return FsObjectStore(Path(root))
