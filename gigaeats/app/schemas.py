from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from gigaeats.app.models.order import OrderStatus
from gigaeats.app.services.date_filters import HistoryStatusFilter, QuickDateFilter


# --- Orders ---
class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_number: str
    status: OrderStatus
    total_amount: Decimal
    commission_amount: Optional[Decimal] = None
    created_at: datetime
    actual_delivery_time: Optional[datetime] = None
    vendor_id: Optional[str] = None
    customer_id: Optional[str] = None
    sales_agent_id: Optional[str] = None
    assigned_driver_id: Optional[str] = None


# --- Statistics ---
class GroupStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_orders: int
    pending_orders: int
    confirmed_orders: int
    preparing_orders: int
    ready_orders: int
    out_for_delivery_orders: int
    delivered_orders: int
    cancelled_orders: int
    active_orders: int
    completed_orders: int
    total_revenue: Decimal
    total_commission: Decimal
    net_earnings: Decimal
    average_order_value: Decimal
    completion_rate: float
    cancellation_rate: float


class RollupSummaryResponse(GroupStatsResponse):
    days_count: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    average_orders_per_day: float
    average_revenue_per_day: Decimal


class DayGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    date_key: str
    label: str
    full_date: str
    orders: List[OrderResponse]
    stats: GroupStatsResponse


# --- Filters ---
class DateFilterResponse(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int
    offset: int
    status_filter: HistoryStatusFilter
    description: str


class OrderHistoryResponse(BaseModel):
    groups: List[DayGroupResponse]
    summary: RollupSummaryResponse
    has_more: bool
    filter: DateFilterResponse


class CustomFilterBody(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status_filter: HistoryStatusFilter = HistoryStatusFilter.ALL

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date cannot be after end_date")
        return self


class FilterPreferencesBody(BaseModel):
    quick_filter: Optional[QuickDateFilter] = None
    custom_filter: Optional[CustomFilterBody] = None


class FilterPreferencesResponse(BaseModel):
    quick_filter: Optional[QuickDateFilter] = None
    custom_filter: Optional[DateFilterResponse] = None
