# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Audit service for recording change events.

Events are inserted into ``audit_logs`` in the caller's unit of work, so an
event exists exactly when the change it describes was committed.
"""

import logging
from enum import Enum
from typing import Any

from pydantic_core import to_jsonable_python
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models.audit import AuditLog

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    """Kinds of audited changes."""

    CREATED = "created"
    UPDATED = "updated"
    PAYMENT_RECORDED = "payment_recorded"
    LOGIN_TOGGLED = "login_toggled"


class AuditService:
    """Appends audit events.

    Attributes:
        db: Async database session of the enclosing unit of work.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def record(
        self,
        entity_type: str,
        entity_id: str,
        action: AuditAction,
        actor_id: str | None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Add an audit event to the session.

        Args:
            entity_type: Table-level name of the entity, e.g. ``enrollment``.
            entity_id: ID of the changed row.
            action: What happened.
            actor_id: ID of the user who made the change.
            changes: Changed fields. Decimals and dates are stored as strings.

        Returns:
            The pending AuditLog row.
        """
        event = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action.value,
            actor_id=actor_id,
            changes=to_jsonable_python(changes or {}),
        )
        self.db.add(event)
        logger.debug("Audit event: %s %s %s", entity_type, entity_id, action.value)
        return event

    async def history(self, entity_type: str, entity_id: str) -> list[AuditLog]:
        """Get the events of one entity, oldest first."""
        result = await self.db.execute(
            select(AuditLog)
            .where(
                AuditLog.entity_type == entity_type,
                AuditLog.entity_id == entity_id,
            )
            .order_by(AuditLog.created_at, AuditLog.id)
        )
        return list(result.scalars().all())
