from datetime import datetime
from typing import List
from pydantic import BaseModel

from waiterboard.schemas.waiter_record import WaiterRecordRead


class ProductionBoardEntry(WaiterRecordRead):
    """An open order with its countdown state at the time of the request."""
    order_type_label: str
    state: str
    time_remaining_seconds: int
    countdown: str
    is_overdue: bool
    is_urgent: bool
    elapsed_minutes: int


class PatientBoardEntry(BaseModel):
    """Public view of a ready order. Carries no identifiers beyond the masked name."""
    id: int
    display_name: str
    num_prescriptions: int
    ready_at: datetime
    minutes_since_ready: int


class PatientBoardResponse(BaseModel):
    pharmacy_name: str
    message: str
    display_font_size: str
    refresh_rate: int
    dark_mode: bool
    sound_notifications: bool
    generated_at: datetime
    records: List[PatientBoardEntry]
