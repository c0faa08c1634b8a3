"""
Synchronisation of the mutable model state.

``ReadWriteGuard`` lets any number of readers or a single writer hold the
model at a time. Unlike ``threading.Lock`` the exclusive window is not owned
by a thread: an online session takes it on the caller's thread and gives it
back from the background finalization thread.
"""

import enum
import threading
from contextlib import contextmanager


class ModelState(enum.Enum):
    """Lifecycle of a model: IDLE -> TRAINING -> IDLE or
    IDLE -> STREAMING -> FINALIZING -> IDLE."""

    IDLE = "idle"
    TRAINING = "training"
    STREAMING = "streaming"
    FINALIZING = "finalizing"


class ReadWriteGuard:
    """
    Readers/writer exclusion with writer preference.

    Readers arriving while a writer waits are held back so that a training
    call cannot be starved by a steady stream of queries.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self):
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            if self._readers == 0:
                raise RuntimeError("release_read() called without a reader.")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self):
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without a writer.")
            self._writer = False
            self._cond.notify_all()

    @property
    def locked(self) -> bool:
        """True while a writer holds the guard."""
        with self._cond:
            return self._writer

    @contextmanager
    def read(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
