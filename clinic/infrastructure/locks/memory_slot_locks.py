import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from ...application.ports.slot_lock import SlotLocks


class InMemorySlotLocks(SlotLocks):
    """One ``threading.Lock`` per doctor, created on first use."""

    def __init__(self) -> None:
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, doctor_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(doctor_id)
            if lock is None:
                lock = self._locks[doctor_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, doctor_id: int) -> Iterator[None]:
        with self._lock_for(doctor_id):
            yield
