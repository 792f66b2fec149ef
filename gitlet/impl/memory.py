from typing import Any

from gitlet.base import ObjectKind, ObjectStore, missing
from gitlet.objects import hash_bytes

MemoryStoreData = dict[str, dict[str, bytes]]


class MemoryObjectStore(ObjectStore):
    def __init__(self, data: MemoryStoreData | None = None) -> None:
        self.data = data if data is not None else {}

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("MemoryObjectStore(...)")
        else:
            with p.group(4, "MemoryObjectStore(", ")"):
                for kind in ObjectKind:
                    p.breakable()
                    p.text(f"{kind.value}={len(self.data.get(kind.value, {}))},")
                p.breakable()

    def _bucket(self, kind: ObjectKind) -> dict[str, bytes]:
        return self.data.setdefault(kind.value, {})

    def put(self, kind: ObjectKind, data: bytes) -> str:
        object_id = hash_bytes(data)
        bucket = self._bucket(kind)
        if object_id not in bucket:
            bucket[object_id] = bytes(data)
        return object_id

    def get(self, kind: ObjectKind, object_id: str) -> bytes:
        try:
            return self._bucket(kind)[object_id]
        except KeyError:
            raise missing(kind, object_id) from None

    def exists(self, kind: ObjectKind, object_id: str) -> bool:
        return object_id in self._bucket(kind)

    def list_ids(self, kind: ObjectKind) -> list[str]:
        return list(self._bucket(kind).keys())


def create_memory_object_store(data: MemoryStoreData | None = None) -> MemoryObjectStore:
    return MemoryObjectStore(data)
