"""Tests for the reader/writer lock."""

import threading
import time

import pytest

from tagged_config.shared import ReadWriteLock


class TestReadWriteLock:
    """Test shared and exclusive holds."""

    def test_readers_share_the_lock(self) -> None:
        """Test several readers can hold the lock at once."""
        lock = ReadWriteLock()
        lock.acquire_read()
        lock.acquire_read()

        assert lock.active_readers == 2
        assert not lock.writer_active

        lock.release_read()
        lock.release_read()
        assert lock.active_readers == 0

    def test_context_managers(self) -> None:
        """Test the context managers acquire and release."""
        lock = ReadWriteLock()

        with lock.read_locked():
            assert lock.active_readers == 1
        with lock.write_locked():
            assert lock.writer_active
        assert lock.active_readers == 0
        assert not lock.writer_active

    def test_context_manager_releases_on_error(self) -> None:
        """Test an exception inside the block still releases the hold."""
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError, match="boom"):
            with lock.write_locked():
                raise RuntimeError("boom")

        assert not lock.writer_active

    def test_release_without_hold_raises_error(self) -> None:
        """Test unbalanced releases are detected."""
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError, match="without a read hold"):
            lock.release_read()
        with pytest.raises(RuntimeError, match="without a write hold"):
            lock.release_write()

    def test_writer_waits_for_readers(self) -> None:
        """Test a writer cannot enter while a reader holds the lock."""
        lock = ReadWriteLock()
        entered = threading.Event()

        def writer() -> None:
            with lock.write_locked():
                entered.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()

        assert not entered.wait(0.1)
        lock.release_read()
        assert entered.wait(5)
        thread.join(5)

    def test_waiting_writer_blocks_new_readers(self) -> None:
        """Test readers arriving after a waiting writer queue behind it."""
        lock = ReadWriteLock()
        order = []

        def writer() -> None:
            with lock.write_locked():
                order.append("writer")

        def reader() -> None:
            with lock.read_locked():
                order.append("reader")

        lock.acquire_read()
        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        while lock._waiting_writers == 0:
            time.sleep(0.001)

        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        time.sleep(0.05)
        assert order == []

        lock.release_read()
        writer_thread.join(5)
        reader_thread.join(5)

        assert order == ["writer", "reader"]
