from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docintake.database.connection import get_connection
from docintake.database.repositories.base import BaseActivityRepository
from docintake.processor.models import Activity


class ActivityRepository(BaseActivityRepository):
    """Database operations for the activities table."""

    def append(self, activity: Activity) -> Activity:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    INSERT INTO activities (owner_id, type, description, metadata)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id, created_at
                    """,
                    (
                        activity.owner_id,
                        activity.type,
                        activity.description,
                        Jsonb(activity.metadata),
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT ... RETURNING produced no row")
        activity.id = row["id"]
        activity.created_at = row["created_at"]
        return activity

    def list_by_owner(self, owner_id: str) -> list[Activity]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, owner_id, type, description, metadata, created_at
                    FROM activities
                    WHERE owner_id = %s
                    ORDER BY id
                    """,
                    (owner_id,),
                )
                rows = cur.fetchall()

        return [
            Activity(
                id=row["id"],
                owner_id=row["owner_id"],
                type=row["type"],
                description=row["description"],
                metadata=row["metadata"] or {},
                created_at=row["created_at"],
            )
            for row in rows
        ]
