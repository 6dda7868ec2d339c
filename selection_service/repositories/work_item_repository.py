# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Routine instances (point-valued work items) data access.
Two range reads feed the fairness strategies: unassigned work scheduled in
a date window, and completed work since a cutoff.
"""

from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from selection_service.core.timeutil import (
    ensure_utc,
    from_db_timestamp,
    start_of_day,
    to_db_timestamp,
)
from selection_service.models.domain import WorkItem


class WorkItemRepository:
    """In-memory routine instance storage."""

    def __init__(self) -> None:
        self._store: dict[str, WorkItem] = {}

    # ── Read ──

    def list_unassigned_in_range(self, stable_id: str, start: date, end: date) -> list[WorkItem]:
        """Unassigned items whose UTC scheduled date is within [start, end]."""
        return [
            item for item in self._store.values()
            if item.stable_id == stable_id
            and item.assignment_type == "unassigned"
            and start <= ensure_utc(item.scheduled_date).date() <= end
        ]

    def list_completed_since(self, stable_id: str, cutoff: datetime) -> list[WorkItem]:
        cutoff = ensure_utc(cutoff)
        return [
            item for item in self._store.values()
            if item.stable_id == stable_id
            and item.status == "completed"
            and item.completed_at is not None
            and ensure_utc(item.completed_at) >= cutoff
        ]

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    def save(self, item: WorkItem) -> None:
        self._store[item.id] = item

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.clear()


ITEM_COLS = (
    "id, stable_id, scheduled_date, points_value, points_awarded, "
    "assignment_type, status, completed_by, completed_at"
)


def _item_from_row(row: Any) -> WorkItem:
    return WorkItem(
        id=row["id"],
        stable_id=row["stable_id"],
        scheduled_date=from_db_timestamp(row["scheduled_date"]),
        points_value=row["points_value"] or 0,
        points_awarded=row["points_awarded"],
        assignment_type=row["assignment_type"],
        status=row["status"],
        completed_by=row["completed_by"],
        completed_at=from_db_timestamp(row["completed_at"]),
    )


class SqlWorkItemRepository:
    """Routine instance storage backed by SQLAlchemy."""

    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ──

    def list_unassigned_in_range(self, stable_id: str, start: date, end: date) -> list[WorkItem]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"""
                    SELECT {ITEM_COLS} FROM routine_instances
                    WHERE stable_id = :sid
                      AND assignment_type = 'unassigned'
                      AND scheduled_date >= :start
                      AND scheduled_date < :end_exclusive
                """),
                {
                    "sid": stable_id,
                    "start": to_db_timestamp(start_of_day(start)),
                    "end_exclusive": to_db_timestamp(start_of_day(end + timedelta(days=1))),
                },
            ).mappings().fetchall()
        return [_item_from_row(r) for r in rows]

    def list_completed_since(self, stable_id: str, cutoff: datetime) -> list[WorkItem]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"""
                    SELECT {ITEM_COLS} FROM routine_instances
                    WHERE stable_id = :sid
                      AND status = 'completed'
                      AND completed_at >= :cutoff
                """),
                {"sid": stable_id, "cutoff": to_db_timestamp(cutoff)},
            ).mappings().fetchall()
        return [_item_from_row(r) for r in rows]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM routine_instances")).scalar() or 0

    # ── Write ──

    def save(self, item: WorkItem) -> None:
        params = item.model_dump()
        params["scheduled_date"] = to_db_timestamp(item.scheduled_date)
        params["completed_at"] = to_db_timestamp(item.completed_at)
        with self._engine.begin() as conn:
            conn.execute(text("DELETE FROM routine_instances WHERE id = :id"), {"id": item.id})
            conn.execute(
                text(f"INSERT INTO routine_instances ({ITEM_COLS}) VALUES "
                     "(:id, :stable_id, :scheduled_date, :points_value, :points_awarded, "
                     ":assignment_type, :status, :completed_by, :completed_at)"),
                params,
            )
