"""
Performance monitoring utilities.

Tracks how long store round-trips and recomputes take, and warns about
slow ones.
"""

import asyncio
import functools
import logging
import time
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

SLOW_OPERATION_SECONDS = 1.0

_slow_threshold = SLOW_OPERATION_SECONDS


class PerformanceMonitor:
    """
    Collects operation durations keyed by operation name.
    """

    def __init__(self):
        self.metrics: Dict[str, List[float]] = {}

    def record(self, operation: str, duration: float):
        self.metrics.setdefault(operation, []).append(duration)

    def get_stats(self, operation: str) -> Dict[str, float]:
        """
        Get statistics for an operation.

        Returns:
            Dictionary with min, max, avg, total, count
        """
        durations = self.metrics.get(operation)
        if not durations:
            return {'min': 0, 'max': 0, 'avg': 0, 'total': 0, 'count': 0}

        return {
            'min': min(durations),
            'max': max(durations),
            'avg': sum(durations) / len(durations),
            'total': sum(durations),
            'count': len(durations)
        }

    def get_all_stats(self) -> Dict[str, Dict[str, float]]:
        return {operation: self.get_stats(operation) for operation in self.metrics}

    def clear(self):
        self.metrics.clear()


_global_monitor = PerformanceMonitor()


def get_monitor() -> PerformanceMonitor:
    """Get the global performance monitor instance."""
    return _global_monitor


def set_slow_threshold(seconds: float):
    """Set the default duration above which monitored operations log a warning."""
    global _slow_threshold
    _slow_threshold = seconds


def get_slow_threshold() -> float:
    return _slow_threshold


def _finish(op_name: str, start_time: float, threshold: Optional[float]):
    duration = time.perf_counter() - start_time
    if threshold is None:
        threshold = _slow_threshold
    _global_monitor.record(op_name, duration)
    if duration > threshold:
        logger.warning(
            f"Operation '{op_name}' took {duration:.2f}s "
            f"(threshold: {threshold}s)"
        )


def monitor_performance(operation_name: Optional[str] = None, threshold: Optional[float] = None):
    """
    Decorator recording the duration of a function or coroutine function.

    Args:
        operation_name: Name for the operation (defaults to function name)
        threshold: Duration in seconds above which a warning is logged;
            None uses the value set by set_slow_threshold at call time

    Example:
        @monitor_performance("survey_refresh")
        async def refresh(self):
            ...
    """
    def decorator(func: Callable) -> Callable:
        op_name = operation_name or func.__name__

        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs) -> Any:
                start_time = time.perf_counter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    _finish(op_name, start_time, threshold)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                _finish(op_name, start_time, threshold)

        return wrapper
    return decorator
