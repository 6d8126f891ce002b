"""
Day grouping for order history.

build_day_groups() buckets orders by the calendar day of one anchor
timestamp and labels each bucket relative to a caller-supplied reference
date. It reads the orders it is given and nothing else: no clock, no I/O,
no shared state, so concurrent calls only need their own order lists.
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from functools import cached_property
from typing import Iterable, Optional, Union

from gigaeats.app.core.date_labels import format_day_label, format_full_date
from gigaeats.app.core.exceptions import ServiceError
from gigaeats.app.models.order import OrderRecord, OrderStatus
from gigaeats.app.services.order_stats import GroupStats, compute_group_stats


class AnchorField(str, Enum):
    """Which order timestamp decides the day an order belongs to."""

    CREATED_AT = "created_at"
    DELIVERED_AT = "delivered_at"


# Attribute read from the order for each anchor
ANCHOR_ATTRIBUTES = {
    AnchorField.CREATED_AT: "created_at",
    AnchorField.DELIVERED_AT: "actual_delivery_time",
}

# Statuses whose orders must carry the anchor timestamp (None: every status).
# Orders in other statuses may lack it; they have no day and are left out.
ANCHOR_REQUIRED_STATUSES = {
    AnchorField.CREATED_AT: None,
    AnchorField.DELIVERED_AT: frozenset({OrderStatus.DELIVERED}),
}


class MissingTimestampPolicy(str, Enum):
    SKIP = "skip"
    RAISE = "raise"


class OrderHistoryError(ServiceError):
    """Base exception for order history errors."""


class MissingTimestampError(OrderHistoryError):
    def __init__(self, order_id: str, anchor: AnchorField):
        self.order_id = order_id
        self.anchor = anchor
        super().__init__(f"Order {order_id} has no {anchor.value} timestamp", 422)


class InvalidFilterError(OrderHistoryError):
    def __init__(self, message: str):
        super().__init__(message, 422)


def anchor_timestamp(order: OrderRecord, anchor: AnchorField) -> Optional[datetime]:
    return getattr(order, ANCHOR_ATTRIBUTES[anchor])


def day_key(order: OrderRecord, anchor: AnchorField = AnchorField.CREATED_AT) -> Optional[date]:
    """Calendar day of the order's anchor timestamp, or None when it is missing."""
    timestamp = anchor_timestamp(order, anchor)
    if timestamp is None:
        return None
    return timestamp.date()


def requires_anchor(order: OrderRecord, anchor: AnchorField) -> bool:
    """Whether a missing anchor timestamp on this order is a data defect."""
    required = ANCHOR_REQUIRED_STATUSES[anchor]
    return required is None or OrderStatus(order.status) in required


@dataclass(frozen=True)
class DayGroup:
    day: date
    label: str
    orders: tuple

    @property
    def date_key(self) -> str:
        return self.day.isoformat()

    @property
    def full_date(self) -> str:
        return format_full_date(self.day)

    @property
    def total_orders(self) -> int:
        return len(self.orders)

    @cached_property
    def stats(self) -> GroupStats:
        return compute_group_stats(self.orders)


def build_day_groups(
    orders: Iterable[OrderRecord],
    reference_date: date,
    anchor: Union[AnchorField, str] = AnchorField.CREATED_AT,
    missing_policy: Union[MissingTimestampPolicy, str] = MissingTimestampPolicy.SKIP,
) -> list[DayGroup]:
    """
    Partition orders into day groups, most recent day first.

    Orders keep their input order inside a group. An order without the
    anchor timestamp is left out when its status does not need one (a
    cancelled order has no delivery day). Otherwise it is dropped under
    SKIP and raises MissingTimestampError under RAISE.
    """
    anchor = AnchorField(anchor)
    missing_policy = MissingTimestampPolicy(missing_policy)

    buckets: dict[date, list[OrderRecord]] = {}
    for order in orders:
        key = day_key(order, anchor)
        if key is None:
            if missing_policy is MissingTimestampPolicy.RAISE and requires_anchor(order, anchor):
                raise MissingTimestampError(order.id, anchor)
            continue
        buckets.setdefault(key, []).append(order)

    return [
        DayGroup(
            day=day,
            label=format_day_label(day, reference_date),
            orders=tuple(buckets[day]),
        )
        for day in sorted(buckets, reverse=True)
    ]


def count_by_date(groups: Iterable[DayGroup]) -> dict[str, int]:
    """Map each group's YYYY-MM-DD key to its number of orders."""
    return {group.date_key: group.total_orders for group in groups}
