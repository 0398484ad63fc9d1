"""
Task back-ends: submit a callable, get back a handle that resolves to its
return value.

``thread`` and ``process`` start the work as soon as it is submitted.
``deferred`` runs nothing until the handle is resolved, and then runs it on
the resolving thread. Callers get the same results from all three; only the
wall-clock behaviour differs.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from multiprocessing import Pool

from errors import InvalidConfiguration
from oneshot import ResultHandle

logger = logging.getLogger(__name__)


class FutureHandle(ResultHandle):
    def __init__(self, future):
        super().__init__()
        self._future = future

    def _resolve(self):
        return self._future.result()


class AsyncResultHandle(ResultHandle):
    def __init__(self, async_result):
        super().__init__()
        self._async_result = async_result

    def _resolve(self):
        return self._async_result.get()


class DeferredHandle(ResultHandle):
    def __init__(self, fn, args):
        super().__init__()
        self._fn = fn
        self._args = args

    def _resolve(self):
        fn, args = self._fn, self._args
        self._fn = self._args = None
        return fn(*args)


class TaskBackend:
    name = None

    def __init__(self, num_workers):
        self.num_workers = num_workers
        self.submitted = 0

    def submit(self, fn, *args):
        self.submitted += 1
        return self._submit(fn, args)

    def _submit(self, fn, args):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()


class ThreadBackend(TaskBackend):
    name = "thread"

    def __init__(self, num_workers):
        super().__init__(num_workers)
        self._executor = ThreadPoolExecutor(max_workers=num_workers)

    def _submit(self, fn, args):
        return FutureHandle(self._executor.submit(fn, *args))

    def close(self):
        # Waits for anything still running; there is no cancellation
        self._executor.shutdown(wait=True)


class ProcessBackend(TaskBackend):
    name = "process"

    def __init__(self, num_workers):
        super().__init__(num_workers)
        self._pool = Pool(processes=num_workers)

    def _submit(self, fn, args):
        return AsyncResultHandle(self._pool.apply_async(fn, args))

    def close(self):
        self._pool.close()
        self._pool.join()


class DeferredBackend(TaskBackend):
    name = "deferred"

    def _submit(self, fn, args):
        return DeferredHandle(fn, args)


BACKENDS = {
    backend.name: backend
    for backend in (ThreadBackend, ProcessBackend, DeferredBackend)
}


def get_backend(name, num_workers):
    try:
        backend_class = BACKENDS[name]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown task backend {name!r}, expected one of "
            f"{sorted(BACKENDS)}")
    logger.debug("Starting %s backend with %d workers", name, num_workers)
    return backend_class(num_workers)
