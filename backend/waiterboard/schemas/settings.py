from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"

FontSize = Literal["small", "medium", "large", "extra-large"]


class BoardSettings(BaseModel):
    """Typed view of the key/value settings store, with the shipped defaults."""

    # Due time offsets per order type
    waiter_due_minutes: int = Field(30, gt=0, description="Minutes until a waiter order is due.")
    acute_due_minutes: int = Field(60, gt=0, description="Minutes until an acute order is due.")
    urgent_due_minutes: int = Field(60, gt=0, description="Minutes until an urgent mail order is due.")

    # How long a ready waiter order stays on the patient board
    auto_clear_minutes: int = Field(45, gt=0)

    pharmacy_name: str = "Community Pharmacy"
    display_name: str = "Pharmacy Waiter Board"
    waiter_color: str = Field("#22c55e", pattern=HEX_COLOR_PATTERN)
    acute_color: str = Field("#3b82f6", pattern=HEX_COLOR_PATTERN)
    urgent_color: str = Field("#a855f7", pattern=HEX_COLOR_PATTERN)
    patient_board_message: str = "Your order is ready - Please see the pharmacist"
    patient_board_refresh_rate: int = Field(10, gt=0, description="Patient board polling interval in seconds.")
    display_font_size: FontSize = "large"
    dark_mode: bool = False
    sound_notifications: bool = False


class BoardSettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    waiter_due_minutes: Optional[int] = Field(None, gt=0)
    acute_due_minutes: Optional[int] = Field(None, gt=0)
    urgent_due_minutes: Optional[int] = Field(None, gt=0)
    auto_clear_minutes: Optional[int] = Field(None, gt=0)
    pharmacy_name: Optional[str] = None
    display_name: Optional[str] = None
    waiter_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    acute_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    urgent_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    patient_board_message: Optional[str] = None
    patient_board_refresh_rate: Optional[int] = Field(None, gt=0)
    display_font_size: Optional[FontSize] = None
    dark_mode: Optional[bool] = None
    sound_notifications: Optional[bool] = None
