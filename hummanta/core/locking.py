"""
Concurrent access control for the installed-state cache.

Package managers for different kinds share one ``installed.toml`` per
installation root. Every load-mutate-save cycle runs under an advisory
file lock so concurrent Hummanta processes do not lose each other's updates.

Usage:
    from hummanta.core.locking import cache_lock

    with cache_lock(root / "installed.toml", timeout=30):
        # Re-read, merge and save the cache
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from hummanta.core.exceptions import CacheLockTimeout

logger = logging.getLogger(__name__)


def lock_path_for(path: Path) -> Path:
    """Lock file guarding a given file (``<name>.lock`` next to it)."""
    path = Path(path)
    return path.with_name(f"{path.name}.lock")


@contextmanager
def cache_lock(path: Path, timeout: float = 30):
    """
    Acquire the advisory lock guarding a cache file.

    Args:
        path: The cache file to guard
        timeout: Maximum wait time in seconds

    Yields:
        None

    Raises:
        CacheLockTimeout: If the lock can't be acquired within timeout
    """
    lock_file = lock_path_for(path)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_file, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired cache lock: {lock_file}")
            yield
        logger.debug(f"Released cache lock: {lock_file}")
    except LockTimeout as e:
        logger.error(f"Could not acquire cache lock after {timeout}s")
        raise CacheLockTimeout(
            f"Could not acquire lock on {path} after {timeout}s. "
            "Another Hummanta process may be running."
        ) from e
