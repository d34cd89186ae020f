"""Tests for diagnostics — structured logging, log dir validation, faulthandler."""

import json
import logging
import os
import sys
import time
from unittest.mock import patch

import pytest

from diagnostics import (
    JSONFormatter,
    _cleanup_old_logs,
    _validate_log_dir,
    init_diagnostics,
    setup_structured_logging,
)

pytestmark = pytest.mark.smoke


def test_json_formatter_fields():
    record = logging.LogRecord(
        "shift.manager", logging.INFO, __file__, 1, "type -> %s", ("SKEW",), None
    )
    entry = json.loads(JSONFormatter().format(record))
    assert entry["level"] == "INFO"
    assert entry["logger"] == "shift.manager"
    assert entry["message"] == "type -> SKEW"
    assert "timestamp" in entry
    assert "exception" not in entry


def test_json_formatter_lifts_shift_context():
    record = logging.LogRecord(
        "engine.container", logging.ERROR, __file__, 1, "failed", (), None
    )
    record.effect_id = "fx.row_shift"
    record.shift_type = "LINEAR"
    record.frame_index = 12
    entry = json.loads(JSONFormatter().format(record))
    assert entry["effect_id"] == "fx.row_shift"
    assert entry["shift_type"] == "LINEAR"
    assert entry["frame_index"] == 12


def test_json_formatter_includes_exception():
    try:
        raise ZeroDivisionError("linear coefficient is zero")
    except ZeroDivisionError:
        record = logging.LogRecord(
            "engine.container", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )
    entry = json.loads(JSONFormatter().format(record))
    assert entry["exception"]["type"] == "ZeroDivisionError"
    assert "linear coefficient is zero" in entry["exception"]["traceback"]


def test_log_dir_outside_app_dir_rejected(app_home):
    assert _validate_log_dir("/tmp/evil/logs") == str(app_home / "logs")


def test_log_dir_inside_app_dir_accepted(app_home):
    custom = app_home / "custom-logs"
    assert _validate_log_dir(str(custom)) == os.path.realpath(custom)


def test_empty_log_dir_uses_default(app_home):
    assert _validate_log_dir("") == str(app_home / "logs")


def test_structured_logging_writes_json(app_home, isolated_root_logger):
    log_dir = setup_structured_logging(str(app_home / "logs"))
    logging.getLogger("shift.manager").warning("hello %d", 7)
    for handler in isolated_root_logger.handlers:
        handler.flush()

    lines = (app_home / "logs" / "rowshift.log").read_text().splitlines()
    assert log_dir == os.path.realpath(app_home / "logs")
    assert json.loads(lines[-1])["message"] == "hello 7"


def test_log_level_from_env(app_home, isolated_root_logger, monkeypatch):
    monkeypatch.setenv("APP_LOG_LEVEL", "debug")
    setup_structured_logging(str(app_home / "logs"))
    assert isolated_root_logger.level == logging.DEBUG


def test_old_logs_cleaned_up(tmp_path):
    stale = tmp_path / "rowshift.log.3"
    fresh = tmp_path / "rowshift.log"
    stale.write_text("{}")
    fresh.write_text("{}")
    old = time.time() - 30 * 86400
    os.utime(stale, (old, old))

    _cleanup_old_logs(str(tmp_path))

    assert not stale.exists()
    assert fresh.exists()


def test_init_diagnostics_enables_faulthandler(app_home, isolated_root_logger):
    with patch("diagnostics.faulthandler.enable") as mock_enable:
        log_dir = init_diagnostics(str(app_home / "logs"))
    mock_enable.assert_called_once()
    assert os.path.exists(os.path.join(log_dir, "rowshift_fault.log"))
