# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Turn-order computation and member validation endpoints.
Request parsing and status mapping only; ordering lives in TurnOrderService.
"""

from fastapi import APIRouter, Depends, HTTPException

from selection_service.core.dependencies import get_member_resolver, get_turn_order_service
from selection_service.schemas.selection import (
    ComputeTurnOrderRequest,
    ComputeTurnOrderResponse,
    ValidateMembersRequest,
    ValidateMembersResponse,
)
from selection_service.services.member_resolver import MemberResolver
from selection_service.services.turn_order_service import (
    TurnOrderService,
    create_turns_from_member_order,
)

router = APIRouter(prefix="/api/v1", tags=["Selection"])


@router.post(
    "/selection-processes/compute-order",
    response_model=ComputeTurnOrderResponse,
    response_model_exclude_none=True,
)
def compute_order(
    payload: ComputeTurnOrderRequest,
    service: TurnOrderService = Depends(get_turn_order_service),
):
    """Preview the turn order for a new selection process."""
    try:
        result = service.compute_turn_order(
            stable_id=payload.stable_id,
            organization_id=payload.organization_id,
            algorithm=payload.algorithm,
            member_ids=payload.member_ids,
            selection_start_date=payload.selection_start_date,
            selection_end_date=payload.selection_end_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "turns": result.turns,
        "algorithm": result.algorithm,
        "metadata": result.metadata,
        "draft_turns": create_turns_from_member_order(result.turns),
    }


@router.post("/stables/{stable_id}/members/validate", response_model=ValidateMembersResponse)
def validate_members(
    stable_id: str,
    payload: ValidateMembersRequest,
    resolver: MemberResolver = Depends(get_member_resolver),
):
    """Check that every member ID belongs to the stable."""
    valid, invalid_ids = resolver.validate_members(stable_id, payload.member_ids)
    return {"stable_id": stable_id, "valid": valid, "invalid_user_ids": invalid_ids}
