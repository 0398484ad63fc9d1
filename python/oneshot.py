"""
Single-use result slots.

``channel()`` returns a producer side and a consumer side sharing one
``concurrent.futures.Future``. The producer writes exactly once (a value or an
exception) and the consumer reads exactly once, blocking until the write has
happened. Closing the producer without writing breaks the slot so that a
reader fails instead of waiting forever.
"""
import threading
from concurrent.futures import Future, InvalidStateError

from errors import BrokenSlot, SlotAlreadyRead, SlotAlreadyWritten


class ResultHandle:
    """Something the aggregator can resolve exactly once with ``get()``."""

    def __init__(self):
        self._consumed = False
        self._consume_lock = threading.Lock()

    @property
    def consumed(self):
        return self._consumed

    def get(self):
        with self._consume_lock:
            if self._consumed:
                raise SlotAlreadyRead("Result handle was already resolved")
            self._consumed = True
        return self._resolve()

    def _resolve(self):
        raise NotImplementedError


class ResultSender:
    def __init__(self, future):
        self._future = future

    def set_value(self, value):
        try:
            self._future.set_result(value)
        except InvalidStateError:
            raise SlotAlreadyWritten("Result slot was already written")

    def set_exception(self, exc):
        try:
            self._future.set_exception(exc)
        except InvalidStateError:
            raise SlotAlreadyWritten("Result slot was already written")

    @property
    def written(self):
        return self._future.done()

    def close(self):
        # No-op once a value or an exception is in the slot
        if not self._future.done():
            self.set_exception(BrokenSlot("Producer closed the slot without "
                                          "writing a result"))


class ResultReceiver(ResultHandle):
    def __init__(self, future):
        super().__init__()
        self._future = future

    @property
    def future(self):
        return self._future

    @property
    def ready(self):
        return self._future.done()

    def _resolve(self):
        return self._future.result()


def channel():
    future = Future()
    return ResultSender(future), ResultReceiver(future)
