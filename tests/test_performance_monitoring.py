"""
Tests for performance monitoring utilities.
"""

import asyncio
import logging
import time

import pytest

from utils.performance import (
    PerformanceMonitor,
    get_monitor,
    get_slow_threshold,
    monitor_performance,
    set_slow_threshold,
)


def test_performance_monitor_record():
    monitor = PerformanceMonitor()

    monitor.record("test_op", 0.5)
    monitor.record("test_op", 0.3)
    monitor.record("test_op", 0.7)

    stats = monitor.get_stats("test_op")

    assert stats['count'] == 3
    assert stats['min'] == 0.3
    assert stats['max'] == 0.7
    assert stats['avg'] == pytest.approx(0.5, rel=0.01)
    assert stats['total'] == pytest.approx(1.5, rel=0.01)


def test_performance_monitor_unknown_operation():
    assert PerformanceMonitor().get_stats("missing")['count'] == 0


def test_performance_monitor_clear():
    monitor = PerformanceMonitor()
    monitor.record("op1", 0.1)
    monitor.record("op2", 0.2)
    assert len(monitor.get_all_stats()) == 2

    monitor.clear()

    assert monitor.get_all_stats() == {}


def test_decorator_records_sync_function():
    @monitor_performance("sync_test_operation")
    def add(a, b):
        return a + b

    before = get_monitor().get_stats("sync_test_operation")['count']

    assert add(2, 3) == 5
    assert get_monitor().get_stats("sync_test_operation")['count'] == before + 1


def test_decorator_records_coroutine_function():
    @monitor_performance("async_test_operation")
    async def fetch():
        await asyncio.sleep(0)
        return "ok"

    before = get_monitor().get_stats("async_test_operation")['count']

    assert asyncio.run(fetch()) == "ok"
    assert get_monitor().get_stats("async_test_operation")['count'] == before + 1


def test_decorator_records_even_on_error():
    @monitor_performance("failing_test_operation")
    def boom():
        raise RuntimeError("boom")

    before = get_monitor().get_stats("failing_test_operation")['count']

    with pytest.raises(RuntimeError):
        boom()

    assert get_monitor().get_stats("failing_test_operation")['count'] == before + 1


def test_slow_operation_logs_warning(caplog):
    @monitor_performance("slow_test_operation", threshold=0.0)
    def slow():
        return None

    with caplog.at_level(logging.WARNING, logger="utils.performance"):
        slow()

    assert "slow_test_operation" in caplog.text


def test_configured_threshold_applies_at_call_time(caplog):
    @monitor_performance("configured_threshold_operation")
    def slow():
        time.sleep(0.01)

    previous = get_slow_threshold()
    try:
        with caplog.at_level(logging.WARNING, logger="utils.performance"):
            slow()
            assert "configured_threshold_operation" not in caplog.text

            set_slow_threshold(0.001)
            slow()
    finally:
        set_slow_threshold(previous)

    assert "configured_threshold_operation" in caplog.text
