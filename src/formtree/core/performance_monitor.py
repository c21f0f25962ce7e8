"""Performance monitoring utilities for formtree.

Provides a context manager and decorator that log operation timings to the
performance logger named by the active FormConfig. No handlers are
installed here; applications configure logging.
"""

import functools
import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional

from formtree.protocols import get_form_config


def get_perf_logger() -> logging.Logger:
    return logging.getLogger(get_form_config().performance_logger_name)


@contextmanager
def timer(operation_name: str, threshold_ms: Optional[float] = None, log_args: bool = False, **kwargs):
    """Context manager for timing operations.

    Args:
        operation_name: Name of the operation being timed
        threshold_ms: Only log if operation takes at least this long (in
            milliseconds); defaults to ``FormConfig.performance_threshold_ms``
        log_args: Whether to log kwargs in the message
        **kwargs: Additional context to include in log message

    Example:
        with timer("Validating form", path="address"):
            result = root.pure_validate()
    """
    if threshold_ms is None:
        threshold_ms = get_form_config().performance_threshold_ms
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000

        if elapsed_ms >= threshold_ms:
            msg = f"{operation_name}: {elapsed_ms:.2f}ms"
            if log_args and kwargs:
                args_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
                msg += f" ({args_str})"

            get_perf_logger().debug(msg)


def timed(operation_name: Optional[str] = None, threshold_ms: Optional[float] = None):
    """Decorator for timing function calls.

    Args:
        operation_name: Name for the operation (defaults to function name)
        threshold_ms: Only log if the call takes at least this long

    Example:
        @timed("Building form")
        def build():
            ...
    """
    def decorator(func: Callable) -> Callable:
        name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with timer(name, threshold_ms):
                return func(*args, **kwargs)

        return wrapper
    return decorator
