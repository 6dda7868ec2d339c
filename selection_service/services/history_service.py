# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Rotation history, the memory the fairness algorithms read.
Reads the newest completed record for a stable and archives completed
processes together with the points each member picked.
"""

from datetime import datetime
from typing import Optional

from selection_service.core.logging import get_logger
from selection_service.core.timeutil import utc_now
from selection_service.metrics.prometheus import HISTORY_RECORDS_SAVED
from selection_service.models.domain import (
    MANUAL,
    CompletedProcess,
    HistoryTurn,
    RotationHistoryRecord,
)
from selection_service.repositories.history_repository import HistoryRepository
from selection_service.repositories.selection_repository import SelectionRepository
from selection_service.services.notification_client import NotificationClient

logger = get_logger(__name__)


class HistoryService:
    """Business logic for reading and appending rotation history."""

    def __init__(
        self,
        history_repo: HistoryRepository,
        selection_repo: SelectionRepository,
        notification_client: Optional[NotificationClient] = None,
        notify_on_completion: bool = False,
    ) -> None:
        self._history = history_repo
        self._selections = selection_repo
        self._notifications = notification_client
        self._notify_on_completion = notify_on_completion

    # ── Queries ──

    def get_last_completed_history(self, stable_id: str) -> Optional[RotationHistoryRecord]:
        """Newest record for the stable, or None before the first rotation."""
        return self._history.get_last_completed(stable_id)

    # ── Commands ──

    def save_completed_history(
        self,
        process: CompletedProcess,
        completed_at: Optional[datetime] = None,
    ) -> str:
        """Append a history record for *process* and return its id."""
        points_by_user: dict[str, float] = {}
        for entry in self._selections.list_for_process(process.id):
            points_by_user[entry.selected_by] = (
                points_by_user.get(entry.selected_by, 0) + (entry.points_value or 0)
            )

        final_turn_order = [
            HistoryTurn(
                user_id=turn.user_id,
                user_name=turn.user_name,
                order=turn.order,
                selections_count=turn.selections_count,
                total_points_picked=points_by_user.get(turn.user_id, 0),
            )
            for turn in process.turns
        ]
        algorithm = process.algorithm or MANUAL

        record = self._history.append({
            "process_id": process.id,
            "process_name": process.name,
            "organization_id": process.organization_id,
            "stable_id": process.stable_id,
            "algorithm": algorithm,
            "final_turn_order": final_turn_order,
            "completed_at": completed_at or utc_now(),
        })

        HISTORY_RECORDS_SAVED.labels(algorithm=algorithm).inc()
        logger.info(
            "History saved: stable=%s, process=%s, turns=%d, id=%s",
            process.stable_id, process.id, len(final_turn_order), record.id,
        )

        if self._notify_on_completion and self._notifications is not None:
            self._notify_members(process)
        return record.id

    # ── Internal ──

    def _notify_members(self, process: CompletedProcess) -> None:
        message = f"Everyone has now picked their routines in '{process.name}'."
        for turn in process.turns:
            if not turn.user_email:
                continue
            self._notifications.send(
                recipient=turn.user_email,
                message=message,
                reference_id=process.id,
            )
