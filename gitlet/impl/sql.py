from typing import Any, Callable

from sqlalchemy import LargeBinary, String, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from gitlet.base import ObjectKind, ObjectStore, missing
from gitlet.objects import hash_bytes


class Base(DeclarativeBase):
    pass


class BlobModel(Base):
    __tablename__ = "blobs"
    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


class CommitModel(Base):
    __tablename__ = "commits"
    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


MODELS: dict[ObjectKind, type[BlobModel] | type[CommitModel]] = {
    ObjectKind.BLOB: BlobModel,
    ObjectKind.COMMIT: CommitModel,
}


class SqlObjectStore(ObjectStore):
    """
    Object store backed by a relational database.

    One table per object kind, keyed by the content hash.
    """

    def __init__(self, session_maker: Callable[[], Session], engine: Any = None) -> None:
        self.session_maker = session_maker
        self.engine = engine

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("SqlObjectStore(...)")
        else:
            with p.group(4, "SqlObjectStore(", ")"):
                p.breakable()
                p.text(f"engine={self.engine},")
                p.breakable()

    def put(self, kind: ObjectKind, data: bytes) -> str:
        object_id = hash_bytes(data)
        model = MODELS[kind]
        with self.session_maker() as session:
            existing = session.execute(
                select(model.id).where(model.id == object_id)
            ).scalar_one_or_none()
            if existing is None:
                session.add(model(id=object_id, content=data))
                session.commit()
        return object_id

    def get(self, kind: ObjectKind, object_id: str) -> bytes:
        model = MODELS[kind]
        with self.session_maker() as session:
            content = session.execute(
                select(model.content).where(model.id == object_id)
            ).scalar_one_or_none()
        if content is None:
            raise missing(kind, object_id)
        return content

    def exists(self, kind: ObjectKind, object_id: str) -> bool:
        model = MODELS[kind]
        with self.session_maker() as session:
            found = session.execute(
                select(model.id).where(model.id == object_id)
            ).scalar_one_or_none()
            return found is not None

    def list_ids(self, kind: ObjectKind) -> list[str]:
        model = MODELS[kind]
        with self.session_maker() as session:
            return list(session.execute(select(model.id)).scalars().all())

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def create_sql_object_store(url: str) -> SqlObjectStore:
    engine = create_engine(url)
    Base.metadata.create_all(engine)
    return SqlObjectStore(sessionmaker(bind=engine), engine=engine)
