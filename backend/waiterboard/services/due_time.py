"""
Due time and countdown arithmetic for orders.
All functions are pure; callers pass `now` explicitly.
"""
import math
from datetime import datetime, timedelta
from typing import NamedTuple, Union

from waiterboard.models.waiter_record import OrderType
from waiterboard.schemas.settings import BoardSettings
from waiterboard.utils.status_utils import normalize_order_type

URGENT_THRESHOLD_SECONDS = 5 * 60


class TimeRemaining(NamedTuple):
    total_seconds: float
    minutes: int
    seconds: int
    is_overdue: bool


def due_minutes_for(order_type: Union[str, OrderType], settings: BoardSettings) -> int:
    normalized = normalize_order_type(order_type)
    if normalized == OrderType.WAITER.value:
        return settings.waiter_due_minutes
    if normalized == OrderType.ACUTE.value:
        return settings.acute_due_minutes
    if normalized == OrderType.URGENT_MAIL.value:
        return settings.urgent_due_minutes
    raise ValueError(f"Unknown order type: {order_type}")


def calculate_due_time(order_type: Union[str, OrderType], settings: BoardSettings, now: datetime) -> datetime:
    return now + timedelta(minutes=due_minutes_for(order_type, settings))


def time_remaining(due_time: datetime, now: datetime) -> TimeRemaining:
    """
    Signed time until `due_time`. Minutes and seconds describe the absolute
    difference, so an order 75 minutes late reports minutes=75.
    """
    total = (due_time - now).total_seconds()
    abs_total = abs(total)
    return TimeRemaining(
        total_seconds=total,
        minutes=int(abs_total // 60),
        seconds=int(abs_total % 60),
        is_overdue=total < 0,
    )


def format_time_remaining(due_time: datetime, now: datetime) -> str:
    remaining = time_remaining(due_time, now)
    if remaining.is_overdue:
        return f"Overdue by {remaining.minutes}m"
    if remaining.total_seconds < 60:
        return f"{remaining.seconds}s"
    return f"{remaining.minutes}m {remaining.seconds}s"


def is_urgent(due_time: datetime, now: datetime) -> bool:
    remaining = time_remaining(due_time, now)
    return remaining.is_overdue or remaining.total_seconds < URGENT_THRESHOLD_SECONDS


def elapsed_minutes(since: datetime, now: datetime) -> int:
    return math.floor((now - since).total_seconds() / 60)


def mask_name(first_name: str, last_name: str) -> str:
    """
    Mask a patient name for the public board: "Jo** Smi**".
    First names keep two characters, last names three; shorter names are left as is.
    """
    masked_first = first_name[:2] + "*" * (len(first_name) - 2) if len(first_name) > 2 else first_name
    masked_last = last_name[:3] + "*" * (len(last_name) - 3) if len(last_name) > 3 else last_name
    return f"{masked_first} {masked_last}"
