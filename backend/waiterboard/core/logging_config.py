import logging
import logging.handlers
import os
import re
from pathlib import Path

from waiterboard.core.config import settings


class PatientDataFilter(logging.Filter):
    """
    Filter to mask patient identifiers in log records.
    """
    def __init__(self, name=""):
        super().__init__(name)
        self.patterns = [
            (r'(mrn=)[\'"]?([^\'"\s,)]+)[\'"]?', r'\1***MASKED***'),
            (r'(dob=)[\'"]?([^\'"\s,)]+)[\'"]?', r'\1***MASKED***'),
            (r'(first_name=)[\'"]?([^\'"\s,)]+)[\'"]?', r'\1***MASKED***'),
            (r'(last_name=)[\'"]?([^\'"\s,)]+)[\'"]?', r'\1***MASKED***'),
        ]

    def filter(self, record):
        if not isinstance(record.msg, str):
            return True

        msg = record.msg
        for pattern, replacement in self.patterns:
            msg = re.sub(pattern, replacement, msg, flags=re.IGNORECASE)

        record.msg = msg
        return True


def setup_logging():
    """
    Configures the logging for the application.
    Writes logs to stdout and to a rotating file at LOG_FILE_PATH.
    """
    log_file = Path(settings.LOG_FILE_PATH)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    patient_filter = PatientDataFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(patient_filter)

    # Rotates at 10MB, keeps 5 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=10 * 1024 * 1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    file_handler.addFilter(patient_filter)

    root_logger = logging.getLogger()
    log_level = os.environ.get("LOG_LEVEL", settings.LOG_LEVEL).upper()
    root_logger.setLevel(log_level)

    # Avoid duplicate handlers if called more than once
    root_logger.handlers = []

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    return log_file
