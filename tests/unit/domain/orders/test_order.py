"""
Tests for Order Entity.
Covers: creation, validation, status transitions, revision, copies, serialization.
"""

from datetime import datetime, timezone

import pytest

from src.domain.orders.entities.order import Order, OrderStatus
from src.domain.shared.exceptions import InvalidOrderError, InvalidOrderStateError


CREATED_AT = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def order():
    """Fixture for a freshly received order."""
    return Order(id=1, item="widget", amount=9.99, created_at=CREATED_AT)


# ============================================================================
# TESTS - Creation and Validation
# ============================================================================


def test_new_order_defaults_to_received():
    order = Order(id=1, item="widget", amount=9.99)

    assert order.status == OrderStatus.RECEIVED
    assert order.created_at.tzinfo is not None
    assert not order.is_terminal


def test_integer_amount_is_coerced_to_float():
    order = Order(id=1, item="widget", amount=3)

    assert order.amount == 3.0
    assert isinstance(order.amount, float)


def test_status_string_is_coerced_to_enum():
    order = Order(id=1, item="widget", amount=1.0, status="FAILED")

    assert order.status is OrderStatus.FAILED


@pytest.mark.parametrize("item", ["", "   ", None, 42])
def test_invalid_item_rejected(item):
    with pytest.raises(InvalidOrderError) as exc_info:
        Order(id=1, item=item, amount=1.0)

    assert exc_info.value.field_name == "item"


@pytest.mark.parametrize("amount", [0, -1, -0.01, float("nan"), float("inf"), True, "9.99", None])
def test_invalid_amount_rejected(amount):
    with pytest.raises(InvalidOrderError) as exc_info:
        Order(id=1, item="widget", amount=amount)

    assert exc_info.value.field_name == "amount"


def test_validate_fields_returns_normalized_pair():
    assert Order.validate_fields("widget", 2) == ("widget", 2.0)


# ============================================================================
# TESTS - Status Transitions
# ============================================================================


def test_complete_success_sets_processed(order):
    order.complete(failed=False)

    assert order.status == OrderStatus.PROCESSED
    assert order.is_terminal


def test_complete_failure_sets_failed(order):
    order.complete(failed=True)

    assert order.status == OrderStatus.FAILED
    assert order.is_terminal


@pytest.mark.parametrize("terminal", [OrderStatus.PROCESSED, OrderStatus.FAILED])
def test_complete_on_terminal_order_raises(terminal):
    order = Order(id=7, item="widget", amount=1.0, status=terminal)

    with pytest.raises(InvalidOrderStateError) as exc_info:
        order.complete(failed=False)

    assert exc_info.value.order_id == 7
    assert exc_info.value.current_status == terminal.value
    assert order.status == terminal


def test_terminal_flags_on_enum():
    assert not OrderStatus.RECEIVED.is_terminal
    assert OrderStatus.PROCESSED.is_terminal
    assert OrderStatus.FAILED.is_terminal


# ============================================================================
# TESTS - Revision and Copies
# ============================================================================


def test_revise_preserves_status_and_created_at():
    order = Order(id=1, item="widget", amount=9.99, status=OrderStatus.PROCESSED, created_at=CREATED_AT)

    order.revise("gadget", 19.5)

    assert order.item == "gadget"
    assert order.amount == 19.5
    assert order.status == OrderStatus.PROCESSED
    assert order.created_at == CREATED_AT


def test_revise_with_invalid_values_leaves_order_untouched(order):
    with pytest.raises(InvalidOrderError):
        order.revise("gadget", -5)

    assert order.item == "widget"
    assert order.amount == 9.99


def test_copy_is_detached(order):
    clone = order.copy()
    clone.complete(failed=True)
    clone.revise("other", 1.0)

    assert clone == Order(id=1, item="other", amount=1.0, status=OrderStatus.FAILED, created_at=CREATED_AT)
    assert order.status == OrderStatus.RECEIVED
    assert order.item == "widget"


# ============================================================================
# TESTS - Serialization
# ============================================================================


def test_to_dict(order):
    assert order.to_dict() == {
        "id": 1,
        "item": "widget",
        "amount": 9.99,
        "status": "RECEIVED",
        "created_at": "2025-01-15T10:30:00+00:00",
    }


def test_from_dict_accepts_string_values():
    restored = Order.from_dict(
        {
            "id": "3",
            "item": "widget",
            "amount": "9.99",
            "status": "PROCESSED",
            "created_at": "2025-01-15T10:30:00+00:00",
        }
    )

    assert restored == Order(
        id=3, item="widget", amount=9.99, status=OrderStatus.PROCESSED, created_at=CREATED_AT
    )


def test_from_dict_missing_field_raises_key_error():
    with pytest.raises(KeyError):
        Order.from_dict({"id": "1", "item": "widget", "amount": "1.0", "status": "RECEIVED"})


def test_repr_contains_status(order):
    assert repr(order) == "Order(id=1, item='widget', amount=9.99, status=RECEIVED)"
