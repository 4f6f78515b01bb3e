from __future__ import annotations

import logging
from typing import Protocol

from .model import AuditEvent

logger = logging.getLogger(__name__)


class AuditRepository(Protocol):
    def record(self, event: AuditEvent) -> None:
        raise NotImplementedError


def record_quietly(audit: AuditRepository, event: AuditEvent) -> None:
    """Record an audit event without letting a failure abort the action."""

    try:
        audit.record(event)
    except Exception:
        logger.warning("audit write failed action=%s entity=%s:%s", event.action, event.entity_type, event.entity_id, exc_info=True)
