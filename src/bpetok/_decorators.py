"""Timing decorator for vocabulary loads."""

import functools
import logging
import time
from typing import Callable

log = logging.getLogger(__name__)


def measure_time(func: Callable) -> Callable:
    """
    Log how long a vocabulary load took.

    A successful load is reported at info level with the size of the returned
    vocabulary. A load that raises is reported at warning level and the error
    propagates unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            vocab = func(*args, **kwargs)
        except Exception:
            elapsed = time.perf_counter() - start
            log.warning(f"{func.__qualname__} failed after {elapsed:.2f} s")
            raise
        elapsed = time.perf_counter() - start
        log.info(f"{func.__qualname__} loaded {len(vocab)} subwords in {elapsed:.2f} s")
        return vocab

    return wrapper
