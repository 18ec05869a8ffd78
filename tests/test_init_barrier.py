"""Tests for the readiness barrier."""

import threading
import time

import pytest
from libwebmedia.core.exceptions import NotReadyError
from libwebmedia.core.init_barrier import InitBarrier


class TestInitBarrier:
    """Test InitBarrier class."""

    def test_starts_unset(self):
        assert InitBarrier().is_signaled is False

    def test_returns_immediately_when_signaled(self):
        barrier = InitBarrier()
        assert barrier.signal() is True
        barrier.wait_until_ready(timeout=0)
        assert barrier.is_signaled is True

    def test_signal_is_one_shot(self):
        barrier = InitBarrier()
        assert barrier.signal() is True
        assert barrier.signal() is False
        assert barrier.is_signaled is True

    def test_blocks_until_signaled(self):
        barrier = InitBarrier()
        released = threading.Event()

        def waiter():
            barrier.wait_until_ready()
            released.set()

        thread = threading.Thread(target=waiter, daemon=True)
        thread.start()
        time.sleep(0.05)
        assert not released.is_set()

        barrier.signal()
        assert released.wait(2.0)
        thread.join(2.0)

    def test_releases_all_waiters(self):
        barrier = InitBarrier()
        count = []
        threads = [
            threading.Thread(target=lambda: (barrier.wait_until_ready(), count.append(1)))
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        barrier.signal()
        for thread in threads:
            thread.join(2.0)
        assert len(count) == 4

    def test_bounded_wait_raises(self):
        with pytest.raises(NotReadyError):
            InitBarrier().wait_until_ready(timeout=0.01)

    def test_default_timeout(self):
        barrier = InitBarrier(default_timeout=0.01)
        with pytest.raises(NotReadyError):
            barrier.wait_until_ready()
