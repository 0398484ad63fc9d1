import logging
import threading
import time
from collections import namedtuple
from concurrent.futures import wait

import config
import tracing
from backends import get_backend
from errors import InvalidConfiguration, SlotAlreadyRead, UnresolvedWorker
from oneshot import channel
from partition import plan_partitions
from sampler import ENGINES, RandomStream, count_hits

logger = logging.getLogger(__name__)

STRATEGIES = ("single_thread", "task_based", "thread_based")

EstimateResult = namedtuple(
    "EstimateResult", ["strategy", "estimate", "hits", "samples", "elapsed"])


def monte_carlo_worker(samples, seed, engine="pcg64"):
    with tracing.block("partition"):
        rng = RandomStream(seed, engine)
        return count_hits(rng, samples)


def _thread_worker(sender, samples, seed, engine):
    try:
        inside = monte_carlo_worker(samples, seed, engine)
    except Exception as exc:
        logger.debug("Worker with seed %s failed: %r", seed, exc)
        sender.set_exception(exc)
    else:
        # Last action of the worker
        sender.set_value(inside)
    finally:
        sender.close()


def collect_hits(handles):
    """
    Resolve every handle in worker order and return the summed hit count.

    The first handle that fails aborts the whole collection with
    ``UnresolvedWorker``.
    """
    total_inside = 0
    with tracing.block("collect"):
        for index, handle in enumerate(handles):
            try:
                inside = handle.get()
            except SlotAlreadyRead:
                raise
            except Exception as exc:
                raise UnresolvedWorker(index, exc) from exc
            logger.debug("Worker %d reported %d hits", index, inside)
            total_inside += inside
    return total_inside


def estimate_from_hits(hits, samples):
    return 4.0 * hits / samples


def validate(sample_count, worker_count):
    for name, value in (("sample_count", sample_count),
                        ("worker_count", worker_count)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfiguration(
                f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidConfiguration(
                f"{name} must be positive, got {value}")


def _validate_engine(engine):
    if engine not in ENGINES:
        raise InvalidConfiguration(
            f"Unknown random engine {engine!r}, expected one of {ENGINES}")


def _validate_partitioned(sample_count, worker_count, engine):
    validate(sample_count, worker_count)
    _validate_engine(engine)
    if sample_count < worker_count:
        raise InvalidConfiguration(
            f"Cannot split {sample_count} samples between {worker_count} "
            f"workers")


def single_thread(sample_count, seed=None, engine="pcg64"):
    """Baseline: every sample on the calling thread from one stream."""
    validate(sample_count, 1)
    _validate_engine(engine)
    with tracing.block("single_thread"):
        rng = RandomStream(0 if seed is None else seed, engine)
        return count_hits(rng, sample_count)


def task_based(sample_count, worker_count, seed=None, backend=None,
               engine="pcg64"):
    """
    Run each partition as a task on ``backend`` and sum the task results.

    Every task is launched before any is resolved.
    """
    _validate_partitioned(sample_count, worker_count, engine)
    backend = config.BACKEND if backend is None else backend
    partitions = plan_partitions(sample_count, worker_count, seed)

    with tracing.block("task_based"):
        with get_backend(backend, worker_count) as executor:
            with tracing.block("task_based.launch"):
                handles = [
                    executor.submit(monte_carlo_worker, p.iterations, p.seed,
                                    engine)
                    for p in partitions
                ]
            return collect_hits(handles)


def thread_based(sample_count, worker_count, seed=None, detach=False,
                 engine="pcg64"):
    """
    Run each partition on its own thread, which hands its hit count back
    through a one-shot result slot.

    Joined threads are all joined before any slot is read. Detached threads
    are never joined; instead every slot is awaited before any is read. A
    slot is written as its worker's last action, so a failing worker never
    leaves the others running after this returns.
    """
    _validate_partitioned(sample_count, worker_count, engine)
    partitions = plan_partitions(sample_count, worker_count, seed)

    threads = []
    receivers = []
    with tracing.block("thread_based"):
        with tracing.block("thread_based.spawn"):
            try:
                for p in partitions:
                    sender, receiver = channel()
                    thread = threading.Thread(
                        target=_thread_worker,
                        args=(sender, p.iterations, p.seed, engine),
                        name=f"pi-worker-{p.index}",
                        daemon=detach,
                    )
                    thread.start()
                    receivers.append(receiver)
                    threads.append(thread)
            except RuntimeError as exc:
                # Could not start every worker; reap the ones already running
                for thread in threads:
                    thread.join()
                raise UnresolvedWorker(len(threads), exc) from exc

        if detach:
            # Each slot is written or broken as its worker's last action
            with tracing.block("thread_based.await"):
                wait([receiver.future for receiver in receivers])
        else:
            with tracing.block("thread_based.join"):
                for thread in threads:
                    thread.join()
        return collect_hits(receivers)


def _samples_used(strategy, sample_count, worker_count):
    if strategy == "single_thread":
        return sample_count
    return (sample_count // worker_count) * worker_count


def run_strategy(strategy, sample_count, worker_count, seed=None, **options):
    """Run one strategy and return the estimate together with its bookkeeping."""
    if strategy not in STRATEGIES:
        raise InvalidConfiguration(
            f"Unknown strategy {strategy!r}, expected one of {STRATEGIES}")
    validate(sample_count, worker_count)
    options.setdefault("engine", config.ENGINE)

    start_time = time.perf_counter()
    if strategy == "single_thread":
        total_inside = single_thread(sample_count, seed, **options)
    elif strategy == "task_based":
        total_inside = task_based(sample_count, worker_count, seed, **options)
    else:
        total_inside = thread_based(sample_count, worker_count, seed,
                                    **options)
    elapsed = time.perf_counter() - start_time

    samples = _samples_used(strategy, sample_count, worker_count)
    pi_estimate = estimate_from_hits(total_inside, samples)
    logger.debug("%s: %d of %d points inside, pi ~ %f", strategy,
                 total_inside, samples, pi_estimate)
    return EstimateResult(strategy, pi_estimate, total_inside, samples,
                          elapsed)


def estimate_pi(strategy, sample_count, worker_count, seed=None, **options):
    return run_strategy(strategy, sample_count, worker_count, seed,
                        **options).estimate
