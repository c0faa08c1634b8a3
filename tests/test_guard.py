import threading
import time

import pytest

from kmeans_flow.guard import ModelState, ReadWriteGuard


def test_readers_share():
    guard = ReadWriteGuard()
    inside = threading.Barrier(3, timeout=5)

    def reader():
        with guard.read():
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    inside.wait()
    for t in threads:
        t.join(timeout=5)
        assert not t.is_alive()


def test_writer_excludes_readers():
    guard = ReadWriteGuard()
    order = []

    guard.acquire_write()
    def reader_target():
        with guard.read():
            order.append("read")

    reader = threading.Thread(target=reader_target)
    reader.start()
    time.sleep(0.05)
    assert order == []

    order.append("write-released")
    guard.release_write()
    reader.join(timeout=5)
    assert order == ["write-released", "read"]


def test_writer_waits_for_readers():
    guard = ReadWriteGuard()
    acquired = threading.Event()

    guard.acquire_read()
    writer = threading.Thread(target=lambda: (guard.acquire_write(), acquired.set()))
    writer.start()
    time.sleep(0.05)
    assert not acquired.is_set()

    guard.release_read()
    assert acquired.wait(timeout=5)
    assert guard.locked
    guard.release_write()
    writer.join(timeout=5)


def test_release_from_another_thread():
    guard = ReadWriteGuard()
    guard.acquire_write()

    releaser = threading.Thread(target=guard.release_write)
    releaser.start()
    releaser.join(timeout=5)

    assert not guard.locked
    with guard.read():
        pass


def test_unbalanced_release():
    guard = ReadWriteGuard()
    with pytest.raises(RuntimeError):
        guard.release_write()
    with pytest.raises(RuntimeError):
        guard.release_read()


def test_write_context_releases_on_error():
    guard = ReadWriteGuard()
    with pytest.raises(KeyError):
        with guard.write():
            raise KeyError("boom")
    assert not guard.locked


def test_states():
    assert [s.value for s in ModelState] == [
        "idle",
        "training",
        "streaming",
        "finalizing",
    ]
