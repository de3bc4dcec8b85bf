"""Reader/writer lock guarding a shared configuration tree.

Many threads may query a loaded configuration at the same time, while a
reload must run alone. Waiting writers block new readers so a steady stream
of lookups cannot starve a reload.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """Shared/exclusive lock built on a single condition variable."""

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._active_readers = 0
        self._waiting_writers = 0
        self._writer_active = False

    def acquire_read(self) -> None:
        """Acquire the lock in shared mode."""
        with self._condition:
            while self._writer_active or self._waiting_writers:
                self._condition.wait()
            self._active_readers += 1

    def release_read(self) -> None:
        """Release a shared hold."""
        with self._condition:
            if self._active_readers <= 0:
                raise RuntimeError("release_read() called without a read hold")
            self._active_readers -= 1
            if self._active_readers == 0:
                self._condition.notify_all()

    def acquire_write(self) -> None:
        """Acquire the lock in exclusive mode."""
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer_active or self._active_readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer_active = True

    def release_write(self) -> None:
        """Release the exclusive hold."""
        with self._condition:
            if not self._writer_active:
                raise RuntimeError("release_write() called without a write hold")
            self._writer_active = False
            self._condition.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Context manager holding the lock in shared mode."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Context manager holding the lock in exclusive mode."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def active_readers(self) -> int:
        """Number of threads currently holding the lock in shared mode."""
        with self._condition:
            return self._active_readers

    @property
    def writer_active(self) -> bool:
        """Whether a thread currently holds the lock in exclusive mode."""
        with self._condition:
            return self._writer_active
