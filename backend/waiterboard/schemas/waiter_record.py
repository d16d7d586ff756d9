from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from waiterboard.models.waiter_record import OrderType


class WaiterRecordCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    mrn: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    dob: str = Field(..., description="Date of birth, YYYY-MM-DD.")
    num_prescriptions: int = Field(1, ge=1)
    comments: str = ""
    initials: str = Field(..., min_length=1, max_length=8)
    order_type: OrderType = OrderType.WAITER

    @field_validator('dob')
    @classmethod
    def validate_dob(cls, v):
        date.fromisoformat(v)
        return v

    @field_validator('comments', mode='before')
    @classmethod
    def default_comments(cls, v):
        return v or ""


class WaiterRecordUpdate(BaseModel):
    """Partial update; fields left out (or null) are not touched."""
    comments: Optional[str] = None
    initials: Optional[str] = Field(None, min_length=1, max_length=8)
    printed: Optional[bool] = None
    ready: Optional[bool] = None
    completed: Optional[bool] = None
    moved_to_mail: Optional[bool] = None
    mailed: Optional[bool] = None

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class DueTimeExtension(BaseModel):
    minutes: int = Field(..., gt=0, le=24 * 60)
    initials: Optional[str] = Field(None, min_length=1, max_length=8)


class BulkUpdateRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)
    printed: Optional[bool] = None
    ready: Optional[bool] = None
    completed: Optional[bool] = None
    moved_to_mail: Optional[bool] = None
    mailed: Optional[bool] = None
    initials: Optional[str] = Field(None, min_length=1, max_length=8)

    def to_update(self) -> WaiterRecordUpdate:
        return WaiterRecordUpdate(**self.model_dump(exclude={"ids"}, exclude_unset=True))


class WaiterRecordRead(BaseModel):
    id: int
    mrn: str
    first_name: str
    last_name: str
    dob: str
    num_prescriptions: int
    comments: str
    initials: str
    order_type: OrderType
    due_time: datetime
    created_at: datetime
    printed: bool
    ready: bool
    ready_at: Optional[datetime] = None
    completed: bool
    completed_at: Optional[datetime] = None
    moved_to_mail: bool
    moved_to_mail_at: Optional[datetime] = None
    mailed: bool
    mailed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BulkUpdateResult(BaseModel):
    updated: List[WaiterRecordRead]
    not_found: List[int]
