import pytest
from pydantic import ValidationError

from gitlet.config import GitletSettings


def test_defaults():
    settings = GitletSettings.from_env({})
    assert settings.repo_dir == ".gitlet"
    assert settings.default_branch == "master"
    assert settings.object_backend == "fs"
    assert settings.log_level == "WARNING"


def test_from_env():
    settings = GitletSettings.from_env(
        {
            "GITLET_OBJECT_BACKEND": "sql",
            "GITLET_LOCK_TIMEOUT": "2.5",
            "GITLET_LOG_LEVEL": "debug",
            "GITLET_DEFAULT_BRANCH": "main",
            "UNRELATED": "x",
        }
    )
    assert settings.object_backend == "sql"
    assert settings.lock_timeout == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.default_branch == "main"


def test_invalid_values():
    with pytest.raises(ValidationError):
        GitletSettings.from_env({"GITLET_OBJECT_BACKEND": "git"})
    with pytest.raises(ValidationError):
        GitletSettings.from_env({"GITLET_LOCK_TIMEOUT": "-1"})
