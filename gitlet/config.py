"""Gitlet settings using Pydantic."""

import os
from typing import Literal

from pydantic import BaseModel, Field

ENV_PREFIX = "GITLET_"


class GitletSettings(BaseModel):
    """Runtime settings for a gitlet invocation."""

    repo_dir: str = Field(default=".gitlet", min_length=1)
    default_branch: str = Field(default="master", min_length=1)
    object_backend: Literal["fs", "sql"] = "fs"
    sql_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for the sql backend (default: sqlite file in the repo)",
    )
    lock_timeout: float = Field(default=10.0, ge=0)
    log_level: str = Field(
        default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"
    )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "GitletSettings":
        """Build settings from ``GITLET_<FIELD>`` environment variables."""
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw.upper() if name == "log_level" else raw
        return cls.model_validate(values)
