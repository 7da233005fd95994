import fcntl
import os
import threading

import pytest

from bpm.flock import Flock


@pytest.fixture
def lock_path(tmp_path):
    return tmp_path / "file.lock"


@pytest.fixture
def lock(lock_path):
    fl = Flock(lock_path)
    yield fl
    fl.close()


def _try_lock_elsewhere(path):
    fd = os.open(path, os.O_RDWR)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except BlockingIOError:
        return False
    finally:
        os.close(fd)
    return True


def test_creates_the_file(lock_path):
    fl = Flock(lock_path)
    try:
        assert lock_path.exists()
        assert fl.locked is False
    finally:
        fl.close()


def test_unlocked_lock_cannot_be_unlocked(lock):
    with pytest.raises(RuntimeError, match="unlock of unlocked lock"):
        lock.unlock()


def test_can_be_locked_and_unlocked(lock):
    lock.lock()
    assert lock.locked is True
    lock.unlock()
    assert lock.locked is False


def test_can_be_locked_but_not_unlocked_twice(lock):
    lock.lock()
    lock.unlock()
    with pytest.raises(RuntimeError):
        lock.unlock()


def test_lock_excludes_other_descriptors(lock, lock_path):
    lock.lock()
    assert lock.locked is True
    assert _try_lock_elsewhere(lock_path) is False
    lock.unlock()
    assert lock.locked is False
    assert _try_lock_elsewhere(lock_path) is True


def test_context_manager_locks_and_unlocks(lock, lock_path):
    with lock as held:
        assert held.locked is True
        assert _try_lock_elsewhere(lock_path) is False
    assert lock.locked is False
    assert _try_lock_elsewhere(lock_path) is True


def test_no_concurrent_access_while_held(lock, lock_path):
    lock2 = Flock(lock_path)
    acquired = threading.Event()
    seen = []

    def worker():
        lock2.lock()
        seen.append(lock2.locked)
        acquired.set()
        lock2.unlock()
        seen.append(lock2.locked)

    lock.lock()
    assert lock.locked is True
    thread = threading.Thread(target=worker)
    thread.start()
    try:
        assert acquired.wait(0.3) is False
        assert seen == []
        lock.unlock()
        assert lock.locked is False
        assert acquired.wait(5) is True
    finally:
        thread.join(5)
        lock2.close()
    assert seen == [True, False]


def test_closed_lock_cannot_be_locked(lock_path):
    fl = Flock(lock_path)
    fl.close()
    with pytest.raises(ValueError):
        fl.lock()