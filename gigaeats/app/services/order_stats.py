"""
Order history statistics.

Per-day metrics come from compute_group_stats(); summarize() rolls day
groups up by summing their counts and money and recomputing every ratio
from the sums, so a quiet day weighs exactly as much as its orders.

Money is Decimal throughout. Ratios are floats in [0, 1]. Every division
has a zero guard that yields 0.
"""
from collections import Counter
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from gigaeats.app.core.constants import ZERO, ONE_CENT
from gigaeats.app.models.order import OrderStatus


def _ratio(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def _money_average(amount: Decimal, count: int) -> Decimal:
    if not count:
        return ZERO
    return (amount / count).quantize(ONE_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class GroupStats:
    total_orders: int = 0
    pending_orders: int = 0
    confirmed_orders: int = 0
    preparing_orders: int = 0
    ready_orders: int = 0
    out_for_delivery_orders: int = 0
    delivered_orders: int = 0
    cancelled_orders: int = 0
    # Delivered orders only
    total_revenue: Decimal = ZERO
    total_commission: Decimal = ZERO

    @property
    def active_orders(self) -> int:
        return (
            self.pending_orders
            + self.confirmed_orders
            + self.preparing_orders
            + self.ready_orders
            + self.out_for_delivery_orders
        )

    @property
    def completed_orders(self) -> int:
        return self.delivered_orders + self.cancelled_orders

    @property
    def net_earnings(self) -> Decimal:
        return self.total_revenue - self.total_commission

    @property
    def average_order_value(self) -> Decimal:
        return _money_average(self.total_revenue, self.delivered_orders)

    @property
    def completion_rate(self) -> float:
        return _ratio(self.delivered_orders, self.total_orders)

    @property
    def cancellation_rate(self) -> float:
        return _ratio(self.cancelled_orders, self.total_orders)

    def __add__(self, other: "GroupStats") -> "GroupStats":
        if not isinstance(other, GroupStats):
            return NotImplemented
        return GroupStats(**{
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(GroupStats)
        })


# Which GroupStats counter each status increments
STATUS_COUNT_FIELDS = {
    OrderStatus.PENDING: "pending_orders",
    OrderStatus.CONFIRMED: "confirmed_orders",
    OrderStatus.PREPARING: "preparing_orders",
    OrderStatus.READY: "ready_orders",
    OrderStatus.OUT_FOR_DELIVERY: "out_for_delivery_orders",
    OrderStatus.DELIVERED: "delivered_orders",
    OrderStatus.CANCELLED: "cancelled_orders",
}


def compute_group_stats(orders: Iterable) -> GroupStats:
    """Metrics for one batch of orders (normally a single day group)."""
    status_counts: Counter = Counter()
    revenue = ZERO
    commission = ZERO
    total = 0
    for order in orders:
        total += 1
        status = OrderStatus(order.status)
        status_counts[status] += 1
        if status is OrderStatus.DELIVERED:
            revenue += order.total_amount
            commission += order.commission_amount or ZERO

    return GroupStats(
        total_orders=total,
        total_revenue=revenue,
        total_commission=commission,
        **{field: status_counts[status] for status, field in STATUS_COUNT_FIELDS.items()},
    )


@dataclass(frozen=True)
class RollupSummary(GroupStats):
    days_count: int = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def average_orders_per_day(self) -> float:
        return self.total_orders / self.days_count if self.days_count else 0.0

    @property
    def average_revenue_per_day(self) -> Decimal:
        return _money_average(self.total_revenue, self.days_count)


def summarize(groups: Sequence) -> RollupSummary:
    """
    Roll a list of day groups up into one summary.

    Each group only needs `day` and `stats`; an empty list gives an
    all-zero summary.
    """
    totals = GroupStats()
    for group in groups:
        totals = totals + group.stats

    days = [group.day for group in groups]
    return RollupSummary(
        days_count=len(days),
        start_date=min(days) if days else None,
        end_date=max(days) if days else None,
        **{f.name: getattr(totals, f.name) for f in fields(GroupStats)},
    )
