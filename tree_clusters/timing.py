"""Timing decorator and context manager.

- @timed decorator for function timing
- PerformanceTimer context manager for code block timing
"""

import functools
import time
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from .clusters_logging import get_logger

P = ParamSpec("P")
T = TypeVar("T")


def timed(
    operation_name: str | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator to time function execution and log results.

    Logs the execution time at DEBUG level, with ``duration_ms`` and
    ``operation`` as extra fields for the JSON formatter.

    Args:
        operation_name: Custom name for the operation (defaults to function name).

    Returns:
        Decorator function.

    Example:
        >>> @timed("build_matrix")
        ... def build(nodes):
        ...     ...
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            logger = get_logger()
            op_name = operation_name or func.__name__

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"[PERF] {op_name} failed after {duration_ms:.2f}ms: {e}",
                    extra={"duration_ms": duration_ms, "operation": op_name},
                )
                raise
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(
                f"[PERF] {op_name} completed in {duration_ms:.2f}ms",
                extra={"duration_ms": duration_ms, "operation": op_name},
            )
            return result

        return wrapper

    return decorator


class PerformanceTimer:
    """Context manager for timing code blocks.

    The duration is available as an attribute after the context exits.

    Example:
        >>> with PerformanceTimer("agglomerate") as timer:
        ...     run_merges()
        >>> print(f"Merged in {timer.duration_ms:.2f}ms")
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float = 0
        self.end_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "PerformanceTimer":
        """Start timing."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Stop timing and optionally log."""
        self.end_time = time.perf_counter()
        self.duration_ms = (self.end_time - self.start_time) * 1000

        if self.auto_log:
            logger = get_logger()
            extra = {"duration_ms": self.duration_ms, "operation": self.operation_name}
            if exc_type is None:
                logger.debug(
                    f"[PERF] {self.operation_name}: {self.duration_ms:.2f}ms",
                    extra=extra,
                )
            else:
                logger.error(
                    f"[PERF] {self.operation_name} failed after {self.duration_ms:.2f}ms",
                    extra=extra,
                )


__all__ = ["timed", "PerformanceTimer"]
