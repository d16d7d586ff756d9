import logging
import logging.handlers

import pytest

from waiterboard.core import logging_config
from waiterboard.core.logging_config import PatientDataFilter, setup_logging


def _make_record(msg):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, None, None)


class TestPatientDataFilter:
    def test_masks_identifiers(self):
        record = _make_record("Lookup mrn=MRN-10001 dob='1985-03-15' last_name=Anderson")
        assert PatientDataFilter().filter(record) is True
        assert "MRN-10001" not in record.msg
        assert "1985-03-15" not in record.msg
        assert "Anderson" not in record.msg
        assert record.msg.count("***MASKED***") == 3

    def test_case_insensitive(self):
        record = _make_record("FIRST_NAME=James")
        PatientDataFilter().filter(record)
        assert "James" not in record.msg

    def test_leaves_other_messages_alone(self):
        record = _make_record("Created waiter record 12, due 2026-10-19T12:00:00")
        PatientDataFilter().filter(record)
        assert record.msg == "Created waiter record 12, due 2026-10-19T12:00:00"

    def test_non_string_messages_pass_through(self):
        record = _make_record({"mrn": "MRN-1"})
        assert PatientDataFilter().filter(record) is True
        assert record.msg == {"mrn": "MRN-1"}


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(level)


def test_setup_logging_writes_rotating_file(tmp_path, monkeypatch, restore_root_logger):
    log_path = tmp_path / "logs" / "board.log"
    monkeypatch.setattr(logging_config.settings, "LOG_FILE_PATH", str(log_path))
    monkeypatch.setattr(logging_config.settings, "LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    assert setup_logging() == log_path

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    file_handlers = [h for h in root_logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 10 * 1024 * 1024
    assert file_handlers[0].backupCount == 5

    logging.getLogger("waiterboard.test").info("Registered patient mrn=MRN-55")
    file_handlers[0].flush()
    content = log_path.read_text()
    assert "Registered patient mrn=***MASKED***" in content
    assert "MRN-55" not in content


def test_setup_logging_is_idempotent(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.setattr(logging_config.settings, "LOG_FILE_PATH", str(tmp_path / "app.log"))

    setup_logging()
    setup_logging()

    assert len(logging.getLogger().handlers) == 2
