import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator

from filelock import FileLock, Timeout

from storefront.config import Settings
from storefront.errors import ConflictError

logger = logging.getLogger(__name__)


def _locks_dir(settings: Settings) -> str:
    path = settings.LOCK_DIR or os.path.join(tempfile.gettempdir(), "storefront_locks")
    os.makedirs(path, exist_ok=True)
    return path


@contextmanager
def cart_line_lock(settings: Settings, user_id: str, product_id: str) -> Iterator[None]:
    """
    Serialize check-then-write on one (user, product) cart line across
    processes. A no-op unless CART_SERIALIZE_MUTATIONS is enabled.
    """
    if not settings.CART_SERIALIZE_MUTATIONS:
        yield
        return

    lockfile = os.path.join(_locks_dir(settings), f"cart_{user_id}_{product_id}.lock")
    lock = FileLock(lockfile)
    try:
        with lock.acquire(timeout=settings.CART_LOCK_TIMEOUT_SECONDS):
            yield
    except Timeout:
        logger.warning("Timed out waiting for cart lock user=%s product=%s", user_id, product_id)
        raise ConflictError("Could not acquire cart lock; try again")
