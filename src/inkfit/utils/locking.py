"""Readers-writer lock with an upgradable read mode.

Many readers may hold the lock at once. A single upgradable reader may join
them and later upgrade to exclusive write access once the plain readers have
drained. Writers exclude everyone.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from inkfit.exceptions import PixelBufferError


class ReadWriteLock:
    """Readers-writer lock built on a single condition variable."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._upgradable = False

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers == 0:
                raise PixelBufferError("release_read without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            while self._writer or self._upgradable or self._readers:
                self._cond.wait()
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise PixelBufferError("release_write without a matching acquire_write")
            self._writer = False
            self._cond.notify_all()

    def acquire_upgradable(self) -> None:
        with self._cond:
            while self._writer or self._upgradable:
                self._cond.wait()
            self._upgradable = True

    def release_upgradable(self) -> None:
        with self._cond:
            if not self._upgradable:
                raise PixelBufferError("release_upgradable without a matching acquire")
            self._upgradable = False
            self._cond.notify_all()

    def upgrade(self) -> None:
        """Turn the held upgradable read into a write lock.

        Blocks until every plain reader has released.
        """
        with self._cond:
            if not self._upgradable:
                raise PixelBufferError("upgrade requires an upgradable read lock")
            while self._readers:
                self._cond.wait()
            self._upgradable = False
            self._writer = True

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @contextmanager
    def upgradable_locked(self) -> Iterator["UpgradeHandle"]:
        self.acquire_upgradable()
        handle = UpgradeHandle(self)
        try:
            yield handle
        finally:
            if handle.upgraded:
                self.release_write()
            else:
                self.release_upgradable()


class UpgradeHandle:
    """Tracks whether an upgradable read has been turned into a write."""

    def __init__(self, lock: ReadWriteLock) -> None:
        self._lock = lock
        self.upgraded = False

    def upgrade(self) -> None:
        if not self.upgraded:
            self._lock.upgrade()
            self.upgraded = True
