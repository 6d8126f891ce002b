"""
Tests for order history statistics (services.order_stats).
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from gigaeats.app.models.order import OrderRecord, OrderStatus
from gigaeats.app.services.order_history import build_day_groups
from gigaeats.app.services.order_stats import (
    GroupStats,
    RollupSummary,
    compute_group_stats,
    summarize,
)


@dataclass
class FakeOrder:
    status: OrderStatus
    total_amount: Decimal
    commission_amount: Optional[Decimal] = None


@dataclass
class FakeGroup:
    day: date
    stats: GroupStats


def _orders(*rows):
    return [FakeOrder(status, Decimal(total), Decimal(c) if c else None) for status, total, c in rows]


# --- compute_group_stats ---


def test_empty_group_is_all_zero():
    stats = compute_group_stats([])
    assert stats == GroupStats()
    assert stats.average_order_value == Decimal("0.00")
    assert stats.completion_rate == 0.0
    assert stats.cancellation_rate == 0.0


def test_status_counts():
    orders = _orders(
        (OrderStatus.PENDING, "10.00", None),
        (OrderStatus.CONFIRMED, "10.00", None),
        (OrderStatus.PREPARING, "10.00", None),
        (OrderStatus.READY, "10.00", None),
        (OrderStatus.OUT_FOR_DELIVERY, "10.00", None),
        (OrderStatus.DELIVERED, "10.00", None),
        (OrderStatus.CANCELLED, "10.00", None),
        (OrderStatus.CANCELLED, "10.00", None),
    )
    stats = compute_group_stats(orders)

    assert stats.total_orders == 8
    assert stats.pending_orders == 1
    assert stats.out_for_delivery_orders == 1
    assert stats.delivered_orders == 1
    assert stats.cancelled_orders == 2
    assert stats.active_orders == 5
    assert stats.completed_orders == 3


def test_revenue_and_commission_count_delivered_orders_only():
    orders = _orders(
        (OrderStatus.DELIVERED, "50.00", "5.00"),
        (OrderStatus.DELIVERED, "30.00", None),
        (OrderStatus.CANCELLED, "99.00", "9.90"),
        (OrderStatus.PENDING, "20.00", "2.00"),
    )
    stats = compute_group_stats(orders)

    assert stats.total_revenue == Decimal("80.00")
    assert stats.total_commission == Decimal("5.00")
    assert stats.net_earnings == Decimal("75.00")


def test_average_order_value_without_deliveries_is_zero():
    stats = compute_group_stats(_orders((OrderStatus.CANCELLED, "15.00", None)))
    assert stats.average_order_value == Decimal("0.00")


def test_average_order_value_rounds_to_cents():
    orders = _orders(
        (OrderStatus.DELIVERED, "3.00", None),
        (OrderStatus.DELIVERED, "3.00", None),
        (OrderStatus.DELIVERED, "4.00", None),
    )
    assert compute_group_stats(orders).average_order_value == Decimal("3.33")


def test_rates_are_fractions():
    orders = _orders(
        (OrderStatus.DELIVERED, "10.00", None),
        (OrderStatus.DELIVERED, "10.00", None),
        (OrderStatus.CANCELLED, "10.00", None),
        (OrderStatus.PENDING, "10.00", None),
    )
    stats = compute_group_stats(orders)

    assert stats.completion_rate == pytest.approx(0.5)
    assert stats.cancellation_rate == pytest.approx(0.25)


def test_status_given_as_string_is_accepted():
    stats = compute_group_stats([FakeOrder("delivered", Decimal("12.50"))])
    assert stats.delivered_orders == 1
    assert stats.total_revenue == Decimal("12.50")


def test_stats_add_field_by_field():
    a = GroupStats(total_orders=2, delivered_orders=2, total_revenue=Decimal("20.00"))
    b = GroupStats(total_orders=1, cancelled_orders=1, total_commission=Decimal("1.00"))

    total = a + b

    assert total.total_orders == 3
    assert total.delivered_orders == 2
    assert total.cancelled_orders == 1
    assert total.total_revenue == Decimal("20.00")
    assert total.total_commission == Decimal("1.00")


# --- summarize ---


def test_summarize_empty_list():
    summary = summarize([])

    assert isinstance(summary, RollupSummary)
    assert summary.total_orders == 0
    assert summary.days_count == 0
    assert summary.start_date is None
    assert summary.end_date is None
    assert summary.total_revenue == Decimal("0.00")
    assert summary.average_order_value == Decimal("0.00")
    assert summary.completion_rate == 0.0
    assert summary.cancellation_rate == 0.0
    assert summary.average_orders_per_day == 0.0
    assert summary.average_revenue_per_day == Decimal("0.00")


def test_summarize_recomputes_rates_from_sums():
    """A one-order day must not weigh as much as a three-order day."""
    busy_day = FakeGroup(
        date(2026, 10, 18),
        compute_group_stats(_orders(
            (OrderStatus.DELIVERED, "10.00", None),
            (OrderStatus.DELIVERED, "10.00", None),
            (OrderStatus.DELIVERED, "10.00", None),
        )),
    )
    quiet_day = FakeGroup(
        date(2026, 10, 17),
        compute_group_stats(_orders((OrderStatus.CANCELLED, "10.00", None))),
    )

    summary = summarize([busy_day, quiet_day])

    assert summary.total_orders == 4
    assert summary.cancellation_rate == pytest.approx(0.25)
    assert summary.completion_rate == pytest.approx(0.75)
    assert summary.average_order_value == Decimal("10.00")


def test_summarize_daily_averages_and_range():
    groups = [
        FakeGroup(date(2026, 10, 18), compute_group_stats(_orders(
            (OrderStatus.DELIVERED, "50.00", "5.00"),
            (OrderStatus.DELIVERED, "30.00", "3.00"),
        ))),
        FakeGroup(date(2026, 10, 15), compute_group_stats(_orders(
            (OrderStatus.DELIVERED, "20.00", "2.00"),
        ))),
    ]

    summary = summarize(groups)

    assert summary.days_count == 2
    assert summary.start_date == date(2026, 10, 15)
    assert summary.end_date == date(2026, 10, 18)
    assert summary.average_orders_per_day == pytest.approx(1.5)
    assert summary.average_revenue_per_day == Decimal("50.00")
    assert summary.total_commission == Decimal("10.00")
    assert summary.net_earnings == Decimal("90.00")


def test_summarize_accepts_real_day_groups():
    record = OrderRecord(
        id="1",
        order_number="GE-1",
        status=OrderStatus.DELIVERED,
        total_amount=Decimal("42.00"),
        created_at=datetime(2026, 10, 18, 9, 30),
    )
    summary = summarize(build_day_groups([record], date(2026, 10, 18)))

    assert summary.total_revenue == Decimal("42.00")
    assert summary.days_count == 1
