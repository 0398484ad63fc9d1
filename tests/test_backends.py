import threading
import unittest

from backends import (BACKENDS, DeferredBackend, ProcessBackend,
                      ThreadBackend, get_backend)
from errors import InvalidConfiguration, SlotAlreadyRead
from monte_carlo import monte_carlo_worker


class Recorder:
    def __init__(self):
        self.calls = []
        self.threads = []

    def __call__(self, value):
        self.calls.append(value)
        self.threads.append(threading.current_thread())
        return value * 2


class TestGetBackend(unittest.TestCase):

    def test_known_names(self):
        self.assertEqual(set(BACKENDS), {"thread", "process", "deferred"})
        with get_backend("deferred", 2) as backend:
            self.assertIsInstance(backend, DeferredBackend)
        with get_backend("thread", 2) as backend:
            self.assertIsInstance(backend, ThreadBackend)

    def test_unknown_name(self):
        with self.assertRaises(InvalidConfiguration):
            get_backend("gpu", 2)


class TestDeferredBackend(unittest.TestCase):

    def test_runs_on_resolve(self):
        recorder = Recorder()
        with DeferredBackend(2) as backend:
            handles = [backend.submit(recorder, i) for i in range(3)]
            self.assertEqual(backend.submitted, 3)
            self.assertEqual(recorder.calls, [])
            self.assertEqual(handles[1].get(), 2)
            self.assertEqual(recorder.calls, [1])
            self.assertEqual([h.get() for h in (handles[0], handles[2])],
                             [0, 4])
        self.assertEqual(recorder.threads,
                         [threading.current_thread()] * 3)

    def test_resolve_once(self):
        handle = DeferredBackend(1).submit(abs, -1)
        self.assertEqual(handle.get(), 1)
        with self.assertRaises(SlotAlreadyRead):
            handle.get()


class TestThreadBackend(unittest.TestCase):

    def test_runs_eagerly(self):
        recorder = Recorder()
        with ThreadBackend(2) as backend:
            handles = [backend.submit(recorder, i) for i in range(4)]
            self.assertEqual([h.get() for h in handles], [0, 2, 4, 6])
        self.assertNotIn(threading.current_thread(), recorder.threads)

    def test_exception_propagates(self):
        with ThreadBackend(1) as backend:
            handle = backend.submit(int, "not a number")
            with self.assertRaises(ValueError):
                handle.get()


class TestProcessBackend(unittest.TestCase):

    def test_same_result_as_deferred(self):
        with ProcessBackend(2) as backend:
            handles = [backend.submit(monte_carlo_worker, 1000, seed)
                       for seed in range(2)]
            eager = [h.get() for h in handles]
        with DeferredBackend(2) as backend:
            handles = [backend.submit(monte_carlo_worker, 1000, seed)
                       for seed in range(2)]
            lazy = [h.get() for h in handles]
        self.assertEqual(eager, lazy)


if __name__ == "__main__":
    unittest.main()
