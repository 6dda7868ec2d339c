# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Selection entries (the per-process selections sub-ledger).
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from selection_service.core.timeutil import ensure_utc, from_db_timestamp, to_db_timestamp
from selection_service.models.domain import SelectionEntry


class SelectionRepository:
    """In-memory selection entry storage."""

    def __init__(self) -> None:
        self._entries: list[SelectionEntry] = []

    def list_for_process(self, process_id: str) -> list[SelectionEntry]:
        entries = [e for e in self._entries if e.process_id == process_id]
        return sorted(entries, key=lambda e: ensure_utc(e.selected_at))

    def record(self, entry: SelectionEntry) -> None:
        self._entries.append(entry)

    def count(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


ENTRY_COLS = (
    "id, process_id, selected_by, selected_by_name, routine_instance_id, "
    "points_value, selected_at"
)


def _entry_from_row(row: Any) -> SelectionEntry:
    return SelectionEntry(
        id=row["id"],
        process_id=row["process_id"],
        selected_by=row["selected_by"],
        selected_by_name=row["selected_by_name"] or "",
        routine_instance_id=row["routine_instance_id"],
        points_value=row["points_value"] or 0,
        selected_at=from_db_timestamp(row["selected_at"]),
    )


class SqlSelectionRepository:
    """Selection entry storage backed by SQLAlchemy."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def list_for_process(self, process_id: str) -> list[SelectionEntry]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {ENTRY_COLS} FROM selection_entries "
                     "WHERE process_id = :pid ORDER BY selected_at"),
                {"pid": process_id},
            ).mappings().fetchall()
        return [_entry_from_row(r) for r in rows]

    def record(self, entry: SelectionEntry) -> None:
        params = entry.model_dump()
        params["selected_at"] = to_db_timestamp(entry.selected_at)
        with self._engine.begin() as conn:
            conn.execute(
                text(f"INSERT INTO selection_entries ({ENTRY_COLS}) VALUES "
                     "(:id, :process_id, :selected_by, :selected_by_name, "
                     ":routine_instance_id, :points_value, :selected_at)"),
                params,
            )

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM selection_entries")).scalar() or 0
