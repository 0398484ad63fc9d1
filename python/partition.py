import logging
from collections import namedtuple

logger = logging.getLogger(__name__)

Partition = namedtuple("Partition", ["index", "iterations", "seed"])


def plan_partitions(sample_count, worker_count, base_seed=None):
    """
    Split ``sample_count`` iterations into ``worker_count`` equal shares, each
    with its own seed.

    Integer division decides the share size. Leftover samples are dropped, not
    given to any worker.
    """
    samples_per_worker = sample_count // worker_count
    remainder = sample_count % worker_count
    if remainder:
        logger.warning("Dropping %d of %d samples that do not divide evenly "
                       "between %d workers", remainder, sample_count,
                       worker_count)

    partitions = []
    for i in range(worker_count):
        seed = i if base_seed is None else base_seed + i
        partitions.append(Partition(i, samples_per_worker, seed))

    logger.debug("Planned %d partitions of %d samples", worker_count,
                 samples_per_worker)
    return partitions
