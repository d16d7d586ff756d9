from .audit_log import AuditLogRepository
from .patient import PatientRepository
from .setting import SettingRepository
from .waiter_record import WaiterRecordRepository

__all__ = [
    "AuditLogRepository",
    "PatientRepository",
    "SettingRepository",
    "WaiterRecordRepository",
]
