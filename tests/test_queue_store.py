"""
Queue Store Tests
"""

from services.queue_store import QueueStore


class TestQueueStore:
    """FIFO queue of tracks"""

    def setup_method(self):
        self.queue = QueueStore()

    def test_empty(self):
        assert self.queue.is_empty()
        assert len(self.queue) == 0
        assert self.queue.dequeue_front() is None
        assert self.queue.peek_front() is None

    def test_fifo(self, make_track):
        a, b = make_track("a"), make_track("b")
        self.queue.enqueue(a)
        self.queue.enqueue(b)

        assert self.queue.peek_front() == a
        assert self.queue.dequeue_front() == a
        assert self.queue.dequeue_front() == b
        assert self.queue.is_empty()

    def test_remove_first_match(self, make_track):
        a, b = make_track("a"), make_track("b")
        for track in (a, b, a):
            self.queue.enqueue(track)

        assert self.queue.remove("a") is True
        assert self.queue.snapshot() == (b, a)
        assert self.queue.remove("missing") is False

    def test_remove_at(self, make_track):
        a, b = make_track("a"), make_track("b")
        self.queue.enqueue(a)
        self.queue.enqueue(b)

        assert self.queue.remove_at(-1) is None
        assert self.queue.remove_at(2) is None
        assert self.queue.remove_at(0) == a
        assert list(self.queue) == [b]

    def test_clear(self, make_track):
        self.queue.enqueue(make_track())
        self.queue.clear()
        assert self.queue.is_empty()

    def test_snapshot_is_immutable_copy(self, make_track):
        self.queue.enqueue(make_track("a"))
        snapshot = self.queue.snapshot()
        self.queue.clear()

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
