import logging
from contextlib import contextmanager
from typing import Iterator, Optional

try:
    import redis
except Exception:  # pragma: no cover
    redis = None

from ...application.errors import ConflictError
from ...application.ports.slot_lock import SlotLocks

logger = logging.getLogger(__name__)


class RedisSlotLocks(SlotLocks):
    """Per-doctor locks shared by every worker process through Redis."""

    def __init__(self, url: str, prefix: str = "slot-lock:", timeout: int = 10, blocking_timeout: Optional[float] = None) -> None:
        if redis is None:
            raise RuntimeError("redis package is not installed")
        self.client = redis.Redis.from_url(url)
        self.prefix = prefix
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout if blocking_timeout is not None else float(timeout)

    @contextmanager
    def hold(self, doctor_id: int) -> Iterator[None]:
        lock = self.client.lock(f"{self.prefix}{doctor_id}", timeout=self.timeout, blocking_timeout=self.blocking_timeout)
        if not lock.acquire():
            logger.warning(f"Timed out waiting for schedule lock of doctor {doctor_id}")
            raise ConflictError("Doctor schedule is busy, try again")
        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                # lock expired while held; the write already went through
                logger.warning(f"Schedule lock of doctor {doctor_id} expired before release")
