"""
Exclusive advisory lock over a repository root.

Uses flock on ``<root>/lock`` so that two gitlet processes never interleave
reads and writes of the branch registry and the index.
"""

import fcntl
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from gitlet.errors import RepositoryLocked

logger = logging.getLogger(__name__)

LOCK_FILE = "lock"
POLL_INTERVAL = 0.05


@contextmanager
def repository_lock(root: Path, timeout: float = 10.0) -> Iterator[None]:
    """
    Acquire the repository lock, yield, release on exit.

    Raises RepositoryLocked if the lock is not obtained within ``timeout`` seconds.
    """
    lock_file = root / LOCK_FILE
    # Lock files are never deleted: unlinking would let two processes hold
    # "exclusive" locks on different inodes with the same path.
    fd = open(lock_file, "a+")
    start = time.monotonic()

    try:
        while True:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() - start >= timeout:
                    raise RepositoryLocked(
                        f"Could not lock {root} within {timeout}s; "
                        "another gitlet command is running."
                    ) from None
                time.sleep(POLL_INTERVAL)

        logger.debug("Acquired repository lock %s (pid %d)", lock_file, os.getpid())
        try:
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            logger.debug("Released repository lock %s", lock_file)
    finally:
        fd.close()
