#!/usr/bin/env python3
import logging
import math
import sys
import time

import config
from errors import EstimationError
from monte_carlo import STRATEGIES, run_strategy

# Pause between strategies so their timings are easy to tell apart in a profile
PAUSE_SECONDS = 0.1


def usage(prog):
    print(f"Usage: {prog} <strategy> [samples] [workers] [seed]")
    print(f"Strategies: {', '.join(STRATEGIES)}, all")


def parse_args(argv):
    if not 2 <= len(argv) <= 5:
        return None

    strategy = argv[1].lower()
    if strategy != "all" and strategy not in STRATEGIES:
        print(f"Unknown strategy: {strategy}")
        return None

    try:
        samples = int(argv[2]) if len(argv) > 2 else config.SAMPLES
        workers = int(argv[3]) if len(argv) > 3 else config.WORKERS
        seed = int(argv[4]) if len(argv) > 4 else config.SEED
    except ValueError as exc:
        print(f"Invalid number: {exc}")
        return None

    return strategy, samples, workers, seed


def report(result):
    print(f"{result.strategy} has computed PI as {result.estimate:.6f} "
          f"in {result.elapsed * 1000:.2f}ms")
    print(f"  Points inside circle: {result.hits} of {result.samples}")
    print(f"  Error: {math.pi - result.estimate:.6f}")


def main(argv=None):
    argv = sys.argv if argv is None else argv
    try:
        config.reload_config()
    except EstimationError as exc:
        print(f"Configuration error: {exc}")
        return 2
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s")

    args = parse_args(argv)
    if args is None:
        usage(argv[0])
        return 1
    strategy, samples, workers, seed = args

    strategies = STRATEGIES if strategy == "all" else (strategy,)
    for i, name in enumerate(strategies):
        if i:
            time.sleep(PAUSE_SECONDS)
        options = {}
        if name == "task_based":
            options["backend"] = config.BACKEND
        try:
            result = run_strategy(name, samples, workers, seed, **options)
        except EstimationError as exc:
            print(f"{name} failed: {exc}")
            return 2
        report(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
