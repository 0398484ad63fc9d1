"""
Defaults for the estimator, read from ``PI_ESTIMATE_*`` environment variables.

Importing this module never fails: a malformed variable falls back to its
default with a warning. ``reload_config()`` is strict and raises
``InvalidConfiguration`` instead, which is what the CLI calls.
"""
import os
import warnings

from errors import InvalidConfiguration

DEFAULT_SAMPLES = 1000000
DEFAULT_WORKERS = 4
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def _log_level(value):
    level = value.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"unknown log level {value!r}")
    return level


def _readenv(name, ctor, default, strict):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return ctor(value)
    except ValueError:
        msg = f"Environment variable {name} has an invalid value: {value!r}"
        if strict:
            raise InvalidConfiguration(msg)
        warnings.warn(f"{msg}, using {default!r}", RuntimeWarning)
        return default


def _load(strict):
    global SAMPLES, WORKERS, SEED, ENGINE, BACKEND, LOG_LEVEL

    # Nothing changes unless every variable parses
    settings = (
        _readenv("PI_ESTIMATE_SAMPLES", int, DEFAULT_SAMPLES, strict),
        _readenv("PI_ESTIMATE_WORKERS", int, DEFAULT_WORKERS, strict),
        _readenv("PI_ESTIMATE_SEED", int, None, strict),
        _readenv("PI_ESTIMATE_ENGINE", str.lower, "pcg64", strict),
        _readenv("PI_ESTIMATE_BACKEND", str.lower, "thread", strict),
        _readenv("PI_ESTIMATE_LOG_LEVEL", _log_level, "WARNING", strict),
    )
    SAMPLES, WORKERS, SEED, ENGINE, BACKEND, LOG_LEVEL = settings


def reload_config():
    """Re-read the environment and update the module level settings."""
    _load(strict=True)


_load(strict=False)
