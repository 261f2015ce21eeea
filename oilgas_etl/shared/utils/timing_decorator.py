import time
import logging
from functools import wraps

# Dedicated logger so stage durations can be filtered independently
timing_logger = logging.getLogger("timing")


def _qualified_name(func) -> str:
    qualname_parts = func.__qualname__.split('.')
    if len(qualname_parts) > 1:
        return f"{qualname_parts[-2]}.{func.__name__}"
    return func.__name__


def timed(func):
    """
    Log the execution time of the decorated function.
    Logs to a logger named 'timing'.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            total_time = time.perf_counter() - start_time
            timing_logger.info(f"{_qualified_name(func)} took {total_time:.4f} seconds to execute.")
    return wrapper


def async_timed(func):
    """
    Log the execution time of the decorated coroutine function.
    Logs to a logger named 'timing'.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            total_time = time.perf_counter() - start_time
            timing_logger.info(f"{_qualified_name(func)} took {total_time:.4f} seconds to execute.")
    return wrapper
