"""
Order history service: loads a role's orders for a date filter and turns
them into day groups and summaries.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gigaeats.app.core.constants import HISTORY_MAX_LIMIT
from gigaeats.app.core.logging import get_logger, timed_operation
from gigaeats.app.core.metrics import (
    order_history_aggregation_seconds,
    order_history_groups_built_total,
    order_history_orders_skipped_total,
)
from gigaeats.app.models.order import Order, OrderRecord, OrderStatus
from gigaeats.app.services.date_filters import DateRangeFilter, HistoryStatusFilter
from gigaeats.app.services.order_history import (
    ANCHOR_REQUIRED_STATUSES,
    AnchorField,
    DayGroup,
    InvalidFilterError,
    MissingTimestampPolicy,
    build_day_groups,
    count_by_date,
    day_key,
    requires_anchor,
)
from gigaeats.app.services.order_stats import RollupSummary, summarize

logger = get_logger(__name__)


class HistoryRole(str, Enum):
    VENDOR = "vendor"
    CUSTOMER = "customer"
    SALES_AGENT = "sales_agent"
    DRIVER = "driver"

    @property
    def anchor(self) -> AnchorField:
        return ROLE_ANCHORS[self]


# Vendors, customers and agents see orders on the day they were placed;
# drivers see them on the day they delivered them.
ROLE_ANCHORS = {
    HistoryRole.VENDOR: AnchorField.CREATED_AT,
    HistoryRole.CUSTOMER: AnchorField.CREATED_AT,
    HistoryRole.SALES_AGENT: AnchorField.CREATED_AT,
    HistoryRole.DRIVER: AnchorField.DELIVERED_AT,
}

# Statuses a role's history is limited to; empty means no constraint.
# Drivers only see finished jobs.
ROLE_STATUSES = {
    HistoryRole.VENDOR: frozenset(),
    HistoryRole.CUSTOMER: frozenset(),
    HistoryRole.SALES_AGENT: frozenset(),
    HistoryRole.DRIVER: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
}

ROLE_OWNER_COLUMNS = {
    HistoryRole.VENDOR: Order.vendor_id,
    HistoryRole.CUSTOMER: Order.customer_id,
    HistoryRole.SALES_AGENT: Order.sales_agent_id,
    HistoryRole.DRIVER: Order.assigned_driver_id,
}

ANCHOR_COLUMNS = {
    AnchorField.CREATED_AT: Order.created_at,
    AnchorField.DELIVERED_AT: Order.actual_delivery_time,
}


def allowed_statuses(role: HistoryRole, status_filter: HistoryStatusFilter) -> Optional[frozenset]:
    """
    Statuses a query may return: the role's own limit intersected with the
    caller's status filter. None means any status; an empty set means none.
    """
    role_statuses = ROLE_STATUSES[role]
    filter_statuses = status_filter.statuses
    if role_statuses and filter_statuses:
        return role_statuses & filter_statuses
    return role_statuses or filter_statuses or None


@dataclass(frozen=True)
class HistoryPage:
    groups: list
    summary: RollupSummary
    has_more: bool


class OrderHistoryService:
    """Service class for order history reads."""

    def __init__(
        self,
        session: AsyncSession,
        missing_policy: Union[MissingTimestampPolicy, str] = MissingTimestampPolicy.SKIP,
        max_limit: int = HISTORY_MAX_LIMIT,
    ):
        self.session = session
        self.missing_policy = MissingTimestampPolicy(missing_policy)
        self.max_limit = max_limit

    def _check_filter(self, role: HistoryRole, owner_id: str, date_filter: DateRangeFilter, today: date) -> None:
        result = date_filter.validate(today)
        if not result.is_valid:
            raise InvalidFilterError("; ".join(result.errors))
        if date_filter.limit > self.max_limit:
            raise InvalidFilterError(f"Limit cannot exceed {self.max_limit}")
        for warning in result.warnings:
            logger.warning("Order history filter warning", role=role.value, owner_id=owner_id, warning=warning)

    async def fetch_orders(
        self,
        role: HistoryRole,
        owner_id: str,
        date_filter: DateRangeFilter,
        today: date,
    ) -> list[OrderRecord]:
        """
        One page of a role's orders, newest anchor first.

        Raises:
            InvalidFilterError: If the filter fails validation or asks for too many rows
        """
        self._check_filter(role, owner_id, date_filter, today)

        statuses = allowed_statuses(role, date_filter.status_filter)
        if statuses is not None and not statuses:
            return []

        anchor_column = ANCHOR_COLUMNS[role.anchor]
        conditions = [ROLE_OWNER_COLUMNS[role] == owner_id]
        if date_filter.start_date is not None:
            conditions.append(anchor_column >= date_filter.start_date)
        if date_filter.end_date is not None:
            conditions.append(anchor_column < date_filter.end_date)
        if statuses:
            conditions.append(Order.status.in_(sorted(s.value for s in statuses)))
        required = ANCHOR_REQUIRED_STATUSES[role.anchor]
        if required is not None:
            # Rows that may lack the anchor only count once they have it
            conditions.append(or_(
                anchor_column.is_not(None),
                Order.status.in_(sorted(s.value for s in required)),
            ))

        stmt = (
            select(Order)
            .where(*conditions)
            .order_by(anchor_column.desc().nulls_last(), Order.id)
            .offset(date_filter.offset)
            .limit(date_filter.limit)
        )
        result = await self.session.execute(stmt)
        return [OrderRecord.from_model(order) for order in result.scalars().all()]

    def _group(self, role: HistoryRole, orders: list[OrderRecord], today: date) -> list[DayGroup]:
        anchor = role.anchor
        groups = build_day_groups(orders, today, anchor, self.missing_policy)

        skipped = sum(
            1 for order in orders
            if day_key(order, anchor) is None and requires_anchor(order, anchor)
        )
        if skipped:
            order_history_orders_skipped_total.labels(anchor=anchor.value).inc(skipped)
            logger.info("Orders without anchor timestamp left out", role=role.value, anchor=anchor.value, skipped=skipped)
        order_history_groups_built_total.labels(anchor=anchor.value).inc(len(groups))
        return groups

    async def history_page(
        self,
        role: HistoryRole,
        owner_id: str,
        date_filter: DateRangeFilter,
        today: date,
    ) -> HistoryPage:
        """Day groups and their rollup for one page of history."""
        with order_history_aggregation_seconds.labels(role=role.value, operation="history_page").time(), \
                timed_operation(logger, "history_page", role=role.value, owner_id=owner_id) as extra:
            orders = await self.fetch_orders(role, owner_id, date_filter, today)
            groups = self._group(role, orders, today)
            summary = summarize(groups)
            extra.update(orders=len(orders), groups=len(groups))

        return HistoryPage(
            groups=groups,
            summary=summary,
            has_more=len(orders) == date_filter.limit,
        )

    async def grouped_history(
        self,
        role: HistoryRole,
        owner_id: str,
        date_filter: DateRangeFilter,
        today: date,
    ) -> list[DayGroup]:
        page = await self.history_page(role, owner_id, date_filter, today)
        return page.groups

    async def summary(
        self,
        role: HistoryRole,
        owner_id: str,
        date_filter: DateRangeFilter,
        today: date,
    ) -> RollupSummary:
        page = await self.history_page(role, owner_id, date_filter, today)
        return page.summary

    async def count_by_date(
        self,
        role: HistoryRole,
        owner_id: str,
        date_filter: DateRangeFilter,
        today: date,
    ) -> dict[str, int]:
        groups = await self.grouped_history(role, owner_id, date_filter, today)
        return count_by_date(groups)
