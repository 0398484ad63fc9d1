"""
Named timing spans around the interesting parts of an estimation run.

Spans are always logged at DEBUG level. Additional sinks (a profiler, a test
recorder) can subscribe with ``add_sink`` and receive ``(name, elapsed)``
for every span that finishes, including spans left by an exception.
"""
import logging
import threading
import time
from contextlib import contextmanager

logger = logging.getLogger(__name__)

_sinks = []
_sinks_lock = threading.Lock()


def add_sink(sink):
    with _sinks_lock:
        _sinks.append(sink)


def remove_sink(sink):
    with _sinks_lock:
        _sinks.remove(sink)


@contextmanager
def block(name):
    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start_time
        logger.debug("%s took %.2fms", name, elapsed * 1000)
        with _sinks_lock:
            sinks = list(_sinks)
        for sink in sinks:
            sink(name, elapsed)
