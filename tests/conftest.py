from pathlib import Path

import pytest

from gitlet.config import GitletSettings
from gitlet.repository import init_repository


@pytest.fixture
def settings() -> GitletSettings:
    return GitletSettings(lock_timeout=1)


@pytest.fixture
def work_dir(tmp_path: Path, settings: GitletSettings) -> Path:
    """An initialized, empty repository."""
    path = tmp_path / "work"
    path.mkdir()
    init_repository(path, settings)
    return path
