from .base import ObjectKind, ObjectStore
from .config import GitletSettings
from .impl.fs import create_fs_object_store
from .impl.memory import create_memory_object_store
from .impl.sql import create_sql_object_store
from .merge import MergeOutcome, MergeResult
from .objects import Blob, Commit
from .repository import Repository, Status, init_repository, open_repository
from .stage import Stage

__version__ = "0.1.0"

__all__ = [
    "Blob",
    "Commit",
    "GitletSettings",
    "MergeOutcome",
    "MergeResult",
    "ObjectKind",
    "ObjectStore",
    "Repository",
    "Stage",
    "Status",
    "create_fs_object_store",
    "create_memory_object_store",
    "create_sql_object_store",
    "init_repository",
    "open_repository",
]
