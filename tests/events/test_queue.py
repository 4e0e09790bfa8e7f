from concurrent.futures import ThreadPoolExecutor
import threading
import unittest

from gameasure.events import HitQueue, QueueState


class TestHitQueue(unittest.TestCase):
    def setUp(self):
        self.queue = HitQueue()

    def test_first_append_is_a_transition(self):
        self.assertTrue(self.queue.append("a"))
        self.assertFalse(self.queue.append("b"))
        self.assertFalse(self.queue.append("c"))

    def test_drain_returns_hits_in_order_and_empties(self):
        for hit in ("a", "b", "c"):
            self.queue.append(hit)

        self.assertEqual(self.queue.drain(), ["a", "b", "c"])
        self.assertEqual(len(self.queue), 0)
        self.assertFalse(self.queue)

    def test_append_after_drain_is_a_new_transition(self):
        self.queue.append("a")
        self.queue.drain()

        self.assertTrue(self.queue.append("b"))
        self.assertEqual(self.queue.drain(), ["b"])

    def test_drain_of_empty_queue(self):
        self.assertEqual(self.queue.drain(), [])

    def test_state(self):
        self.assertIs(self.queue.state, QueueState.EMPTY)
        self.queue.append("a")
        self.assertIs(self.queue.state, QueueState.PENDING)
        self.queue.drain()
        self.assertIs(self.queue.state, QueueState.EMPTY)

    def test_concurrent_appends_to_empty_queue_transition_once(self):
        for _ in range(50):
            queue = HitQueue()
            barrier = threading.Barrier(8)

            def append(i):
                barrier.wait()
                return queue.append(f"hit-{i}")

            with ThreadPoolExecutor(max_workers=8) as pool:
                transitions = list(pool.map(append, range(8)))

            self.assertEqual(transitions.count(True), 1)
            self.assertEqual(len(queue), 8)

    def test_concurrent_drain_never_loses_or_duplicates(self):
        total = 2000
        writers = 4
        drained = []
        done = threading.Event()

        def write(offset):
            for i in range(total // writers):
                self.queue.append(f"{offset}-{i}")

        def drain():
            while not done.is_set():
                drained.extend(self.queue.drain())
            drained.extend(self.queue.drain())

        drainer = threading.Thread(target=drain)
        drainer.start()
        with ThreadPoolExecutor(max_workers=writers) as pool:
            list(pool.map(write, range(writers)))
        done.set()
        drainer.join()

        self.assertEqual(len(drained), total)
        self.assertEqual(len(set(drained)), total)

    def test_order_is_preserved_per_writer_across_drains(self):
        drained = []
        for i in range(10):
            self.queue.append(str(i))
            if i % 3 == 0:
                drained.extend(self.queue.drain())
        drained.extend(self.queue.drain())

        self.assertEqual(drained, [str(i) for i in range(10)])
