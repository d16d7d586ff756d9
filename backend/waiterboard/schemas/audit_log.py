from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict


class AuditLogRead(BaseModel):
    id: int
    entity_type: str
    record_id: Optional[int] = None
    action: str
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    staff_initials: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
