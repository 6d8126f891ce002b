"""
Tests for the OrderRecord snapshot and its wire format (models.order).
"""
from datetime import datetime
from decimal import Decimal

import pytest

from gigaeats.app.models.order import Order, OrderRecord, OrderStatus


def _wire(**overrides) -> dict:
    data = {
        "id": "o-1",
        "order_number": "GE-0001",
        "status": "delivered",
        "total_amount": "50.00",
        "commission_amount": "5.00",
        "created_at": "2026-10-18T09:15:00",
        "actual_delivery_time": "2026-10-18T10:05:00",
        "vendor_id": "v1",
        "customer_id": "c1",
        "sales_agent_id": None,
        "assigned_driver_id": "d1",
    }
    data.update(overrides)
    return data


def test_from_dict_parses_money_and_timestamps():
    record = OrderRecord.from_dict(_wire())

    assert record.status is OrderStatus.DELIVERED
    assert record.total_amount == Decimal("50.00")
    assert record.commission_amount == Decimal("5.00")
    assert record.created_at == datetime(2026, 10, 18, 9, 15)
    assert record.actual_delivery_time == datetime(2026, 10, 18, 10, 5)
    assert record.assigned_driver_id == "d1"


def test_from_dict_float_money_has_no_binary_noise():
    record = OrderRecord.from_dict(_wire(total_amount=0.1))
    assert record.total_amount == Decimal("0.1")


def test_from_dict_optional_fields():
    record = OrderRecord.from_dict(_wire(commission_amount=None, actual_delivery_time=None))

    assert record.commission_amount is None
    assert record.actual_delivery_time is None


def test_from_dict_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        OrderRecord.from_dict(_wire(status="lost"))


def test_from_dict_ignores_camel_case_keys():
    data = _wire()
    data.pop("actual_delivery_time")
    data["actualDeliveryTime"] = "2026-10-18T10:05:00"

    assert OrderRecord.from_dict(data).actual_delivery_time is None


def test_to_dict_matches_wire_format():
    assert OrderRecord.from_dict(_wire()).to_dict() == _wire()


def test_from_model():
    order = Order(
        id="o-2",
        order_number="GE-0002",
        status="out_for_delivery",
        vendor_id="v1",
        customer_id="c1",
        total_amount=Decimal("12.30"),
        created_at=datetime(2026, 10, 17, 20, 0),
    )
    record = OrderRecord.from_model(order)

    assert record.status is OrderStatus.OUT_FOR_DELIVERY
    assert record.status.is_active
    assert record.total_amount == Decimal("12.30")
    assert record.commission_amount is None
    assert record.sales_agent_id is None


def test_status_display_names():
    assert OrderStatus.OUT_FOR_DELIVERY.display_name == "Out for Delivery"
    assert all(status.display_name for status in OrderStatus)
