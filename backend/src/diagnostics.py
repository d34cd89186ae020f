"""Diagnostics — JSON logs carrying shift/effect context, plus faulthandler.

Records may carry ``effect_id``, ``shift_type`` and ``frame_index`` through
``extra=``; the formatter lifts them into top-level keys so a log line can
be matched to the transform that produced it.

Environment:
    APP_LOG_DIR    log directory, must live under ~/.rowshift
    APP_LOG_LEVEL  root log level (default INFO)
"""

import datetime
import faulthandler
import json
import logging
import logging.handlers
import os
import sys
import time
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR = "~/.rowshift"
LOG_NAME = "rowshift.log"
FAULT_LOG_NAME = "rowshift_fault.log"

CONTEXT_FIELDS = ("effect_id", "shift_type", "frame_index")

MAX_LOG_AGE_DAYS = 7
MAX_LOG_BYTES = 10_000_000
LOG_BACKUPS = 7


def _validate_log_dir(env_dir: str) -> str:
    """Resolve the log directory, falling back to the default outside APP_DIR."""
    app_dir = os.path.realpath(os.path.expanduser(APP_DIR))
    default = os.path.join(os.path.expanduser(APP_DIR), "logs")
    if not env_dir:
        return default
    resolved = os.path.realpath(env_dir)
    if os.path.commonpath([resolved, app_dir]) != app_dir:
        logger.warning("APP_LOG_DIR outside %s, using default", APP_DIR)
        return default
    return resolved


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with shift context lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.datetime.fromtimestamp(
            record.created, tz=datetime.timezone.utc
        )
        entry = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def _cleanup_old_logs(log_dir: str):
    cutoff = time.time() - MAX_LOG_AGE_DAYS * 86400
    stale = [
        f for f in Path(log_dir).glob(f"{LOG_NAME}*") if f.stat().st_mtime < cutoff
    ]
    for f in stale:
        f.unlink(missing_ok=True)
    if stale:
        logger.debug("Removed %d stale log files", len(stale))


def setup_structured_logging(log_dir: str | None = None) -> str:
    """Attach a rotating JSON handler to the root logger; returns the log dir."""
    resolved_dir = _validate_log_dir(log_dir or os.environ.get("APP_LOG_DIR", ""))
    os.makedirs(resolved_dir, mode=0o700, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        os.path.join(resolved_dir, LOG_NAME),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
    )
    handler.setFormatter(JSONFormatter())

    level_name = os.environ.get("APP_LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.addHandler(handler)

    try:
        _cleanup_old_logs(resolved_dir)
    except OSError as e:
        logger.warning("Log cleanup failed: %s", e)
    return resolved_dir


def setup_faulthandler(log_dir: str):
    """Send interpreter crash tracebacks to their own file (rotation-safe)."""
    fault_path = os.path.join(log_dir, FAULT_LOG_NAME)
    try:
        fault_file = open(fault_path, "a", buffering=1)  # noqa: SIM115
        os.chmod(fault_path, 0o600)
    except OSError as e:
        print(f"WARNING: Could not enable faulthandler: {e}", file=sys.stderr)
        return
    faulthandler.enable(file=fault_file, all_threads=True)


def init_diagnostics(log_dir: str | None = None) -> str:
    resolved_dir = setup_structured_logging(log_dir)
    setup_faulthandler(resolved_dir)
    logger.info("Diagnostics initialized: logging=%s", resolved_dir)
    return resolved_dir
