"""
Append-only audit trail for booking changes.

Bookings are created once and then only change status, so the trail is
short: one CREATE row, an UPDATE row per status change, and a DELETE row
if staff remove it. Entries are never modified or deleted.

There is no user authentication in the booking flow. Each entry records
an actor label instead ("client" for wizard submissions, "staff" for
back-office status changes, "system" otherwise).
"""

from enum import Enum
from uuid import UUID, uuid4
from typing import Any

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from utils.dates import now_utc


class AuditAction(Enum):
    """Type of change made to an entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Field-level diff between two entity states.

    Returns {field: {"old": ..., "new": ...}} for changed fields,
    ignoring updated_at unless exclude_fields says otherwise.
    """
    exclude = exclude_fields if exclude_fields is not None else {"updated_at"}
    return {
        key: {"old": old.get(key), "new": new.get(key)}
        for key in sorted(set(old) | set(new))
        if key not in exclude and old.get(key) != new.get(key)
    }


class AuditLogger:
    """
    Writes and reads audit_log rows.

    Pass model_dump(mode="json") output so UUIDs, dates and enums are
    JSON-serializable:

        audit.log_change(
            entity_type="booking",
            entity_id=booking.id,
            action=AuditAction.CREATE,
            changes={"created": {"booking_reference": booking.booking_reference}},
            actor="client",
        )
    """

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def log_change(
        self,
        entity_type: str,
        entity_id: UUID,
        action: AuditAction,
        changes: dict[str, Any],
        actor: str = "system"
    ) -> None:
        """
        Record one change.

        Changes format by action:
        - CREATE: {"created": {summary of entity}}
        - UPDATE: {"field": {"old": old_val, "new": new_val}, ...}
        - DELETE: {"deleted": {full entity data at deletion}}
        """
        self.postgres.execute(
            """
            INSERT INTO audit_log (id, actor, entity_type, entity_id, action, changes, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            (
                uuid4(),
                actor,
                entity_type,
                entity_id,
                action.value,
                Json(changes),
                now_utc()
            )
        )

    def get_entity_history(self, entity_type: str, entity_id: UUID) -> list[dict[str, Any]]:
        """Audit entries for one entity, newest first."""
        return self.postgres.execute(
            """
            SELECT id, actor, entity_type, entity_id, action, changes, created_at
            FROM audit_log
            WHERE entity_type = %s AND entity_id = %s
            ORDER BY created_at DESC
            """,
            (entity_type, entity_id)
        )
