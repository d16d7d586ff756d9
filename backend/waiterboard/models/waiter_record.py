from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLAlchemyEnum,
    Index,
    Integer,
    String,
    Text,
)

from waiterboard.models.base import Base
from waiterboard.utils.time_utils import utcnow


class OrderType(str, Enum):
    WAITER = "waiter"
    ACUTE = "acute"
    URGENT_MAIL = "urgent_mail"


# Lifecycle flags and the timestamp column each one stamps when set.
LIFECYCLE_FLAGS = {
    "printed": None,
    "ready": "ready_at",
    "completed": "completed_at",
    "moved_to_mail": "moved_to_mail_at",
    "mailed": "mailed_at",
}


class WaiterRecord(Base):
    """
    A prescription order tracked from entry through production to pickup or mail.
    """

    __tablename__ = "waiter_records"

    # Board queries filter on these
    __table_args__ = (
        Index('ix_waiter_records_completed_ready', 'completed', 'ready'),
        Index('ix_waiter_records_due_time', 'due_time'),
        Index('ix_waiter_records_ready_at', 'ready_at'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    mrn = Column(String, nullable=False, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    dob = Column(String, nullable=False)

    num_prescriptions = Column(Integer, nullable=False, default=1)
    comments = Column(Text, nullable=False, default="")
    initials = Column(String, nullable=False)
    order_type = Column(
        SQLAlchemyEnum(OrderType, name="order_type_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=OrderType.WAITER,
    )

    due_time = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    printed = Column(Boolean, nullable=False, default=False)
    ready = Column(Boolean, nullable=False, default=False)
    ready_at = Column(DateTime, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    moved_to_mail = Column(Boolean, nullable=False, default=False)
    moved_to_mail_at = Column(DateTime, nullable=True)
    mailed = Column(Boolean, nullable=False, default=False)
    mailed_at = Column(DateTime, nullable=True)

    def to_dict(self):
        """JSON-safe snapshot, used for audit entries."""
        def _iso(value):
            return value.isoformat() if value else None

        return {
            "id": self.id,
            "mrn": self.mrn,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "dob": self.dob,
            "num_prescriptions": self.num_prescriptions,
            "comments": self.comments,
            "initials": self.initials,
            "order_type": self.order_type.value if isinstance(self.order_type, Enum) else self.order_type,
            "due_time": _iso(self.due_time),
            "created_at": _iso(self.created_at),
            "printed": bool(self.printed),
            "ready": bool(self.ready),
            "ready_at": _iso(self.ready_at),
            "completed": bool(self.completed),
            "completed_at": _iso(self.completed_at),
            "moved_to_mail": bool(self.moved_to_mail),
            "moved_to_mail_at": _iso(self.moved_to_mail_at),
            "mailed": bool(self.mailed),
            "mailed_at": _iso(self.mailed_at),
        }
