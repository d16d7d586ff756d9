from .base import Base
from .audit_log import AuditAction, AuditEntityType, AuditLog
from .patient import Patient
from .setting import Setting
from .waiter_record import OrderType, WaiterRecord

__all__ = [
    "Base",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "OrderType",
    "Patient",
    "Setting",
    "WaiterRecord",
]
