"""Security audit trail.

Each event is one JSON line, appended to ``AUDIT_LOG_FILE`` and emitted on the
``audit`` logger. Two kinds of events land here:

* access-policy denials from ``core.rbac``: a forbidden action is logged under
  the action key (``item.delete``, ``user.manage``), and a read of another
  company's row under ``<entity>.cross_tenant``; both carry ``status="denied"``;
* administrative changes from the company service (``company.update``,
  ``user.create``, ``user.assign_department``).

Item history is not kept here; that is the ActivityLog table.
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any

from assetdesk.core.config import settings

_logger = logging.getLogger("audit")


def log_audit_event(action: str, user_id: int | None = None, status: str = "success", **metadata: Any) -> None:
    """Record an audit event.

    Parameters:
        action: A machine-readable action key (e.g. 'user.create', 'item.delete').
        user_id: The acting user's ID (if available).
        status: 'success' | 'failure' | 'denied'.
        **metadata: Additional context fields (ids, reasons, etc.).
    """
    event = {
        "ts": int(time.time()),
        "action": action,
        "user_id": user_id,
        "status": status,
        **metadata,
    }
    line = json.dumps(event, separators=(",", ":"), default=str)
    path = settings.AUDIT_LOG_FILE
    # Append to file (best effort)
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        _logger.debug("Failed to write audit event to file: %s", event)
    # Emit via logger for aggregation
    _logger.info(line)


def log_denied(action: str, user_id: int | None = None, reason: str | None = None, **extra: Any) -> None:
    """Record a refused access-policy check; ``reason`` is the message shown to the caller."""
    log_audit_event(action, user_id=user_id, status="denied", reason=reason, **extra)
