"""
Get Audit Events Use Case

Retrieves authentication audit events with pagination.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork


class GetAuditEventsUseCase:
    """
    Use case for retrieving audit events.

    Business Rules:
    - Caller must be an administrator (enforced by the API layer)
    - Optionally scoped to one account
    - Results ordered by newest first
    - Supports cursor-based pagination
    - Each event includes action, username, actor, timestamp, metadata
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: Optional[UUID] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Execute get audit events use case.

        Args:
            user_id: Only events about this account (optional)
            limit: Maximum number of events to return
            cursor: Pagination cursor (optional)

        Returns:
            Result with events list and next_cursor
        """
        async with self.uow:
            events, next_cursor = await self.uow.audit_events.get_paginated(
                user_id=user_id, limit=limit, cursor=cursor
            )

            usernames: Dict[UUID, Optional[str]] = {}
            events_list = []
            for event in events:
                if event.user_id and event.user_id not in usernames:
                    user = await self.uow.users.get_by_id(event.user_id)
                    usernames[event.user_id] = user.username if user else None

                events_list.append(
                    {
                        "action": event.action,
                        "username": usernames.get(event.user_id),
                        "actor_id": str(event.actor_id) if event.actor_id else None,
                        "timestamp": event.created_at.isoformat() + "Z",
                        "metadata": event.event_metadata or {},
                    }
                )

            return Return.ok({"events": events_list, "next_cursor": next_cursor})
