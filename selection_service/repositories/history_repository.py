# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Rotation history data access.
Append-only log of completed selection processes; records are never
updated or deleted. Only the newest record per stable is ever read back.
"""

import json
import uuid
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from selection_service.core.timeutil import ensure_utc, from_db_timestamp, to_db_timestamp
from selection_service.models.domain import HistoryTurn, RotationHistoryRecord


class HistoryRepository:
    """In-memory rotation history (append-only)."""

    def __init__(self) -> None:
        self._records: list[RotationHistoryRecord] = []

    # ── Read ──

    def get_last_completed(self, stable_id: str) -> Optional[RotationHistoryRecord]:
        """Newest record for the stable by completed_at; later appends win ties."""
        latest: Optional[RotationHistoryRecord] = None
        for record in self._records:
            if record.stable_id != stable_id:
                continue
            if latest is None or ensure_utc(record.completed_at) >= ensure_utc(latest.completed_at):
                latest = record
        return latest

    def count(self) -> int:
        return len(self._records)

    # ── Write ──

    def append(self, data: dict[str, Any]) -> RotationHistoryRecord:
        """Store a new immutable record and return it with its generated id."""
        record = RotationHistoryRecord(id=str(uuid.uuid4()), **data)
        self._records.append(record)
        return record

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._records.clear()


HISTORY_COLS = (
    "id, process_id, process_name, organization_id, stable_id, algorithm, "
    "final_turn_order, completed_at"
)


def _record_from_row(row: Any) -> RotationHistoryRecord:
    return RotationHistoryRecord(
        id=row["id"],
        process_id=row["process_id"],
        process_name=row["process_name"],
        organization_id=row["organization_id"],
        stable_id=row["stable_id"],
        algorithm=row["algorithm"],
        final_turn_order=[HistoryTurn(**t) for t in json.loads(row["final_turn_order"])],
        completed_at=from_db_timestamp(row["completed_at"]),
    )


class SqlHistoryRepository:
    """Rotation history backed by SQLAlchemy."""

    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ──

    def get_last_completed(self, stable_id: str) -> Optional[RotationHistoryRecord]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"""
                    SELECT {HISTORY_COLS} FROM selection_process_history
                    WHERE stable_id = :sid
                    ORDER BY completed_at DESC, seq DESC
                    LIMIT 1
                """),
                {"sid": stable_id},
            ).mappings().fetchone()
        return _record_from_row(row) if row else None

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(
                text("SELECT COUNT(*) FROM selection_process_history")
            ).scalar() or 0

    # ── Write ──

    def append(self, data: dict[str, Any]) -> RotationHistoryRecord:
        record = RotationHistoryRecord(id=str(uuid.uuid4()), **data)
        params = record.model_dump()
        params["final_turn_order"] = json.dumps(
            [t.model_dump() for t in record.final_turn_order]
        )
        params["completed_at"] = to_db_timestamp(record.completed_at)
        with self._engine.begin() as conn:
            # seq orders records that share a completed_at by insertion
            conn.execute(
                text(f"INSERT INTO selection_process_history ({HISTORY_COLS}, seq) "
                     "SELECT :id, :process_id, :process_name, :organization_id, :stable_id, "
                     ":algorithm, :final_turn_order, :completed_at, COALESCE(MAX(seq), 0) + 1 "
                     "FROM selection_process_history"),
                params,
            )
        return record
