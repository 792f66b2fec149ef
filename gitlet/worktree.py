import logging
from pathlib import Path, PurePosixPath

from gitlet.errors import UsageError

logger = logging.getLogger(__name__)


class WorkTree:
    """
    The user's working directory: plain files addressed by relative path.

    The repository directory itself is never listed, read or written.
    """

    def __init__(self, path: Path, repo_dir: str = ".gitlet") -> None:
        self.path = Path(path)
        self.repo_dir = repo_dir

    def resolve(self, rel_path: str) -> Path:
        parts = PurePosixPath(rel_path).parts
        if (
            not parts
            or PurePosixPath(rel_path).is_absolute()
            or ".." in parts
            or parts[0] == self.repo_dir
        ):
            raise UsageError(f"Invalid path: {rel_path!r}")
        return self.path.joinpath(*parts)

    def exists(self, rel_path: str) -> bool:
        return self.resolve(rel_path).is_file()

    def read(self, rel_path: str) -> bytes | None:
        try:
            return self.resolve(rel_path).read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            return None

    def write(self, rel_path: str, content: bytes) -> None:
        target = self.resolve(rel_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.debug("Wrote %s (%d bytes)", rel_path, len(content))

    def delete(self, rel_path: str) -> None:
        target = self.resolve(rel_path)
        if target.is_file():
            target.unlink()
            logger.debug("Deleted %s", rel_path)

    def list_files(self) -> list[str]:
        """Plain files directly inside the working directory, sorted."""
        return sorted(
            p.name
            for p in self.path.iterdir()
            if p.is_file() and p.name != self.repo_dir
        )
