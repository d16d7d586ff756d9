from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PatientCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    mrn: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    dob: str = Field(..., description="Date of birth, YYYY-MM-DD.")

    @field_validator('dob')
    @classmethod
    def validate_dob(cls, v):
        date.fromisoformat(v)
        return v


class PatientRead(BaseModel):
    id: int
    mrn: str
    first_name: str
    last_name: str
    dob: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PatientSearchResult(BaseModel):
    found: bool
    patient: Optional[PatientRead] = None
