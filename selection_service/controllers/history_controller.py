# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Rotation history endpoints.
Maps HistoryService results onto HTTP responses.
"""

from fastapi import APIRouter, Depends, HTTPException

from selection_service.core.dependencies import get_history_service
from selection_service.core.timeutil import ensure_utc
from selection_service.models.domain import CompletedProcess, ProcessTurn
from selection_service.schemas.selection import (
    HistoryRecordResponse,
    SaveHistoryRequest,
    SaveHistoryResponse,
)
from selection_service.services.history_service import HistoryService

router = APIRouter(prefix="/api/v1", tags=["History"])


@router.get(
    "/stables/{stable_id}/selection-history/latest",
    response_model=HistoryRecordResponse,
)
def get_latest_history(
    stable_id: str,
    service: HistoryService = Depends(get_history_service),
):
    """The most recently completed selection process for a stable."""
    record = service.get_last_completed_history(stable_id)
    if record is None:
        raise HTTPException(
            status_code=404,
            detail=f"No completed selection history for stable '{stable_id}'",
        )
    data = record.model_dump()
    data["completed_at"] = ensure_utc(record.completed_at).isoformat()
    return data


@router.post("/selection-history", status_code=201, response_model=SaveHistoryResponse)
def save_history(
    payload: SaveHistoryRequest,
    service: HistoryService = Depends(get_history_service),
):
    """Archive a completed selection process as rotation history."""
    process = CompletedProcess(
        id=payload.process_id,
        name=payload.process_name,
        organization_id=payload.organization_id,
        stable_id=payload.stable_id,
        algorithm=payload.algorithm,
        turns=[ProcessTurn(**t.model_dump()) for t in payload.turns],
    )
    history_id = service.save_completed_history(process)
    return {"id": history_id, "process_id": process.id, "stable_id": process.stable_id}
