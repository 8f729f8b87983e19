"""
Tests for OrderDispatcher.

Covers:
- Jobs reach OrderProcessor.run with the pool's cancel event
- Rejection is swallowed, logged and counted
- Faults are isolated per job and counted
- Lifecycle delegation to the pool
"""

import threading
from unittest.mock import MagicMock

import pytest

from src.application.dispatch.dispatcher import OrderDispatcher
from src.application.dispatch.worker_pool import BoundedWorkerPool
from src.application.exceptions import ProcessingFault
from src.application.models import ORDERS_FAULTED, ORDERS_REJECTED
from src.infrastructure.metrics import InMemoryMetricsSink


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def metrics():
    return InMemoryMetricsSink()


@pytest.fixture
def processor():
    """Mock OrderProcessor."""
    return MagicMock()


@pytest.fixture
def dispatcher(processor, metrics):
    pool = BoundedWorkerPool(core_workers=1, max_workers=1, queue_capacity=1)
    dispatcher = OrderDispatcher(processor, pool, metrics)
    dispatcher.start()
    yield dispatcher
    dispatcher.stop(cancel_running=True, timeout=5)


# ============================================================================
# TESTS
# ============================================================================


def test_enqueue_runs_processor_with_cancel_event(dispatcher, processor):
    assert dispatcher.enqueue(42) is True
    assert dispatcher.wait_idle(timeout=5)

    processor.run.assert_called_once_with(42, cancel_event=dispatcher.pool.cancel_event)


def test_enqueue_when_pool_full_returns_false_and_counts(dispatcher, processor, metrics):
    gate = threading.Event()
    processor.run.side_effect = lambda order_id, cancel_event: gate.wait(5)

    assert dispatcher.enqueue(1) is True  # running
    assert dispatcher.enqueue(2) is True  # backlog
    assert dispatcher.enqueue(3) is False  # rejected

    assert metrics.read_counter(ORDERS_REJECTED) == 1

    gate.set()
    assert dispatcher.wait_idle(timeout=5)
    assert [c.args[0] for c in processor.run.call_args_list] == [1, 2]


def test_enqueue_before_start_is_rejected(processor, metrics):
    pool = BoundedWorkerPool(core_workers=1, max_workers=1, queue_capacity=1)
    dispatcher = OrderDispatcher(processor, pool, metrics)

    assert dispatcher.enqueue(1) is False
    assert metrics.read_counter(ORDERS_REJECTED) == 1
    processor.run.assert_not_called()


@pytest.mark.parametrize(
    "error",
    [ProcessingFault(5, RuntimeError("store down")), RuntimeError("unexpected")],
)
def test_fault_is_counted_and_isolated(dispatcher, processor, metrics, error):
    processor.run.side_effect = [error, None]

    dispatcher.enqueue(5)
    dispatcher.enqueue(6)
    assert dispatcher.wait_idle(timeout=5)

    assert metrics.read_counter(ORDERS_FAULTED) == 1
    assert processor.run.call_count == 2
    # The job boundary caught it, so the pool saw a normal completion
    snapshot = dispatcher.snapshot()
    assert snapshot.failed == 0
    assert snapshot.completed == 2


def test_stop_returns_dropped_backlog(processor, metrics):
    pool = BoundedWorkerPool(core_workers=1, max_workers=1, queue_capacity=3)
    dispatcher = OrderDispatcher(processor, pool, metrics)
    started = threading.Event()

    def slow_run(order_id, cancel_event):
        started.set()
        cancel_event.wait(5)

    processor.run.side_effect = slow_run
    dispatcher.start()
    for order_id in range(1, 4):
        dispatcher.enqueue(order_id)
    assert started.wait(2)

    dropped = dispatcher.stop(wait=True, cancel_running=True, timeout=5)

    assert dropped == 2
    assert dispatcher.snapshot().running is False
