"""Audit events for authorization decisions and the sinks that receive them.

A sink is any callable taking an :class:`AuditEvent`. Sinks are invoked through
:func:`emit`, which keeps a failing sink from affecting the decision.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Tuple

from loguru import logger
from pydantic import BaseModel, Field


class Decision(str, Enum):
    """Outcome of an authorization check."""

    ALLOW = "allow"
    DENY = "deny"


class AuditEvent(BaseModel):
    target: str
    permission: str
    roles: Tuple[str, ...] = ()
    decision: Decision
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOW

    def format(self) -> str:
        if self.allowed:
            return (
                f"granting access to {self.target} from permission "
                f"{self.permission} via role [{' '.join(self.roles)}]"
            )
        return f"denied access to {self.target} due to missing permission {self.permission}"


AuditSink = Callable[[AuditEvent], None]


class LoguruAuditSink:
    """Writes one line per decision: allow at INFO, deny at WARNING."""

    def __call__(self, event: AuditEvent) -> None:
        if event.allowed:
            logger.info(event.format())
        else:
            logger.warning(event.format())


class NullAuditSink:
    def __call__(self, event: AuditEvent) -> None:
        return None


class MemoryAuditSink:
    """Keeps events in memory, mostly useful in tests."""

    def __init__(self):
        self.events: List[AuditEvent] = []

    def __call__(self, event: AuditEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()


def emit(sink: AuditSink, event: AuditEvent) -> None:
    try:
        sink(event)
    except Exception as e:
        logger.exception(f"Audit sink failed for {event.target}: {e}")
