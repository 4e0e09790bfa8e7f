import threading
import time
import unittest

from gameasure.events import DispatchLoop, FlushScheduler


class TestFlushScheduler(unittest.TestCase):
    def setUp(self):
        self.loop = DispatchLoop(name="test-scheduler")
        self.loop.start()
        self.fired = []
        self.event = threading.Event()

        def on_fire():
            self.fired.append(time.monotonic())
            self.event.set()

        self.scheduler = FlushScheduler(self.loop, on_fire=on_fire, delay=0.2)

    def tearDown(self):
        self.loop.stop(timeout=2)

    def test_fires_once_after_delay(self):
        armed_at = time.monotonic()
        self.scheduler.arm()

        self.assertTrue(self.event.wait(2))
        time.sleep(0.3)
        self.assertEqual(len(self.fired), 1)
        self.assertGreaterEqual(self.fired[0] - armed_at, 0.15)
        self.assertEqual(self.scheduler.pending, 0)

    def test_fire_pending_fires_immediately(self):
        self.scheduler.delay = 10
        self.scheduler.arm()

        async def fire():
            return self.scheduler.fire_pending()

        # arm is queued on the loop before this coroutine runs
        self.assertEqual(self.loop.submit(fire()).result(2), 1)
        self.assertEqual(len(self.fired), 1)
        self.assertEqual(self.scheduler.pending, 0)

    def test_failing_callback_does_not_break_loop(self):
        def boom():
            raise RuntimeError("boom")

        scheduler = FlushScheduler(self.loop, on_fire=boom, delay=0)
        scheduler.arm()
        self.scheduler.delay = 0
        self.scheduler.arm()

        self.assertTrue(self.event.wait(2))
