from enum import Enum

from sqlalchemy import Column, DateTime, Index, Integer, JSON, String

from waiterboard.models.base import Base
from waiterboard.utils.time_utils import utcnow


class AuditEntityType(str, Enum):
    RECORD = "record"
    SETTINGS = "settings"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    EXTEND = "extend"
    AUTO_CLEAR = "auto_clear"
    IMPORT = "import"
    RESET = "reset"


class AuditLog(Base):
    """
    Append-only before/after snapshots of every mutation.
    """

    __tablename__ = "audit_log"

    __table_args__ = (
        Index('ix_audit_log_record_timestamp', 'record_id', 'timestamp'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String, nullable=False, default=AuditEntityType.RECORD.value)
    record_id = Column(Integer, nullable=True)
    action = Column(String, nullable=False)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    staff_initials = Column(String, nullable=True)
    timestamp = Column(DateTime, default=utcnow, index=True)
