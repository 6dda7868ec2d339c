# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP request and response bodies for the selection API.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from selection_service.models.domain import (
    ALGORITHM_PATTERN,
    HistoryTurn,
    Member,
    ProcessTurn,
)


# ── Turn Order Schemas ──

class ComputeTurnOrderRequest(BaseModel):
    stable_id: str = Field(..., min_length=1, max_length=255)
    organization_id: str = Field(..., min_length=1, max_length=255)
    algorithm: Optional[str] = Field(
        default=None,
        pattern=ALGORITHM_PATTERN,
        description="manual | quota_based | points_balance | fair_rotation",
    )
    member_ids: list[str] = Field(..., min_length=1, description="Participating user IDs")
    selection_start_date: date
    selection_end_date: date

    @model_validator(mode="after")
    def check_date_range(self):
        if self.selection_end_date < self.selection_start_date:
            raise ValueError("selection_end_date must not be before selection_start_date")
        return self


class TurnOrderMetadata(BaseModel):
    quota_per_member: Optional[float] = None
    total_available_points: Optional[float] = None
    previous_process_id: Optional[str] = None
    previous_process_name: Optional[str] = None
    member_points_map: Optional[dict[str, float]] = None


class ComputeTurnOrderResponse(BaseModel):
    turns: list[Member]
    algorithm: str
    metadata: TurnOrderMetadata
    draft_turns: list[ProcessTurn]


# ── Member Validation Schemas ──

class ValidateMembersRequest(BaseModel):
    member_ids: list[str] = Field(..., min_length=1)


class ValidateMembersResponse(BaseModel):
    stable_id: str
    valid: bool
    invalid_user_ids: list[str]


# ── History Schemas ──

class CompletedTurnPayload(BaseModel):
    user_id: str = Field(..., min_length=1)
    user_name: str = Field(..., min_length=1)
    user_email: str = ""
    order: int = Field(..., ge=1, description="1-based position in the queue")
    status: str = "completed"
    selections_count: int = Field(default=0, ge=0)


class SaveHistoryRequest(BaseModel):
    process_id: str = Field(..., min_length=1)
    process_name: str = Field(..., min_length=1, max_length=255)
    organization_id: str = Field(..., min_length=1)
    stable_id: str = Field(..., min_length=1)
    algorithm: Optional[str] = Field(default=None, pattern=ALGORITHM_PATTERN)
    turns: list[CompletedTurnPayload] = Field(..., min_length=1)


class SaveHistoryResponse(BaseModel):
    id: str
    process_id: str
    stable_id: str


class HistoryRecordResponse(BaseModel):
    id: str
    process_id: str
    process_name: str
    organization_id: str
    stable_id: str
    algorithm: str
    final_turn_order: list[HistoryTurn]
    completed_at: str
