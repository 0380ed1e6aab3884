import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SnapshotCache(Generic[T]):
    """
    Single-slot holder for the latest snapshot of a sampler.

    Snapshots are built completely before replace() is called and are never
    mutated afterwards. Writers serialize on a lock; readers take the current
    reference without it, since rebinding one attribute is atomic, so a read
    never waits on a writer or on another reader.
    """

    def __init__(self):
        self._write_lock = threading.Lock()
        self._value: Optional[T] = None

    def replace(self, snapshot: T) -> None:
        """Store snapshot as the latest value, discarding the previous one."""
        with self._write_lock:
            self._value = snapshot

    def read(self) -> Optional[T]:
        """Return the latest snapshot, or None if nothing has been stored yet."""
        return self._value

    @property
    def has_data(self) -> bool:
        return self._value is not None
