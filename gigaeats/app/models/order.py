import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from sqlalchemy import DateTime, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from gigaeats.app.core.base import Base


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return STATUS_DISPLAY_NAMES[self]

    @property
    def is_active(self) -> bool:
        return self not in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


STATUS_DISPLAY_NAMES = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.PREPARING: "Preparing",
    OrderStatus.READY: "Ready",
    OrderStatus.OUT_FOR_DELIVERY: "Out for Delivery",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}


def _new_id() -> str:
    return str(uuid.uuid4())


class Order(Base):
    __tablename__ = 'orders'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    order_number: Mapped[str] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(50), default=OrderStatus.PENDING.value)
    vendor_id: Mapped[str] = mapped_column(String(36))
    customer_id: Mapped[str] = mapped_column(String(36))
    sales_agent_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    assigned_driver_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    commission_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    actual_delivery_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index('ix_orders_status', 'status'),
        # One index per history consumer, on the column its history is anchored to
        Index('ix_orders_vendor_created', 'vendor_id', 'created_at'),
        Index('ix_orders_customer_created', 'customer_id', 'created_at'),
        Index('ix_orders_agent_created', 'sales_agent_id', 'created_at'),
        Index('ix_orders_driver_delivered', 'assigned_driver_id', 'actual_delivery_time'),
    )


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _parse_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    # str() first so floats don't bring their binary noise along
    return Decimal(str(value))


@dataclass(frozen=True)
class OrderRecord:
    """
    Read-only snapshot of an order, as seen by the history aggregation.

    Wire format is snake_case only; money travels as strings.
    """

    id: str
    order_number: str
    status: OrderStatus
    total_amount: Decimal
    created_at: datetime
    commission_amount: Optional[Decimal] = None
    actual_delivery_time: Optional[datetime] = None
    vendor_id: Optional[str] = None
    customer_id: Optional[str] = None
    sales_agent_id: Optional[str] = None
    assigned_driver_id: Optional[str] = None

    @classmethod
    def from_model(cls, order: Order) -> "OrderRecord":
        return cls(
            id=order.id,
            order_number=order.order_number,
            status=OrderStatus(order.status),
            total_amount=_parse_decimal(order.total_amount),
            created_at=order.created_at,
            commission_amount=_parse_decimal(order.commission_amount),
            actual_delivery_time=order.actual_delivery_time,
            vendor_id=order.vendor_id,
            customer_id=order.customer_id,
            sales_agent_id=order.sales_agent_id,
            assigned_driver_id=order.assigned_driver_id,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "OrderRecord":
        """Build from the canonical wire dict. Raises KeyError/ValueError on malformed input."""
        return cls(
            id=str(data["id"]),
            order_number=str(data.get("order_number") or data["id"]),
            status=OrderStatus(data["status"]),
            total_amount=_parse_decimal(data["total_amount"]),
            created_at=_parse_datetime(data["created_at"]),
            commission_amount=_parse_decimal(data.get("commission_amount")),
            actual_delivery_time=_parse_datetime(data.get("actual_delivery_time")),
            vendor_id=data.get("vendor_id"),
            customer_id=data.get("customer_id"),
            sales_agent_id=data.get("sales_agent_id"),
            assigned_driver_id=data.get("assigned_driver_id"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_number": self.order_number,
            "status": self.status.value,
            "total_amount": str(self.total_amount),
            "commission_amount": str(self.commission_amount) if self.commission_amount is not None else None,
            "created_at": self.created_at.isoformat(),
            "actual_delivery_time": self.actual_delivery_time.isoformat() if self.actual_delivery_time else None,
            "vendor_id": self.vendor_id,
            "customer_id": self.customer_id,
            "sales_agent_id": self.sales_agent_id,
            "assigned_driver_id": self.assigned_driver_id,
        }
