"""
Utility functions for consistent order type and lifecycle comparison.
OrderType may come back from the database as the enum or as its raw string.
"""
from enum import Enum
from typing import Union

from waiterboard.models.waiter_record import OrderType


class OrderState(str, Enum):
    PENDING = "pending"
    PRINTED = "printed"
    READY = "ready"
    COMPLETED = "completed"
    MOVED_TO_MAIL = "moved_to_mail"
    MAILED = "mailed"


ORDER_TYPE_LABELS = {
    OrderType.WAITER.value: "WAITER",
    OrderType.ACUTE.value: "ACUTE",
    OrderType.URGENT_MAIL.value: "URGENT MAIL",
}


def normalize_order_type(order_type: Union[str, OrderType, None]) -> str:
    """
    Normalize an order type to a lowercase string.

    Returns an empty string for None.
    """
    if order_type is None:
        return ""

    if isinstance(order_type, OrderType):
        return order_type.value

    if hasattr(order_type, 'value'):
        return str(order_type.value).lower()

    return str(order_type).lower().replace('ordertype.', '')


def order_type_label(order_type: Union[str, OrderType, None]) -> str:
    normalized = normalize_order_type(order_type)
    return ORDER_TYPE_LABELS.get(normalized, normalized.upper())


def order_state(record) -> OrderState:
    """
    Collapse the lifecycle flags of a record into a single state.
    Later stages win: mailed > moved_to_mail > completed > ready > printed.
    """
    if record.mailed:
        return OrderState.MAILED
    if record.moved_to_mail:
        return OrderState.MOVED_TO_MAIL
    if record.completed:
        return OrderState.COMPLETED
    if record.ready:
        return OrderState.READY
    if record.printed:
        return OrderState.PRINTED
    return OrderState.PENDING
