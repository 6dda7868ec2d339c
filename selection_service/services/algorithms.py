# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Turn-order strategies. Pure functions without I/O.

Every function takes already-resolved members plus the data the orchestrator
read for it, and returns a TurnOrderResult whose turns are a permutation of
the given members. Alphabetical ordering always goes through the injected
Collator.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from selection_service.models.domain import (
    FAIR_ROTATION,
    MANUAL,
    POINTS_BALANCE,
    QUOTA_BASED,
    Member,
    RotationHistoryRecord,
    TurnOrderResult,
    WorkItem,
)
from selection_service.services.collation import Collator


# ── Shared helpers ──

def alphabetical(members: Iterable[Member], collator: Collator) -> list[Member]:
    return collator.sorted(members, name=lambda m: m.user_name)


def order_from_previous(
    previous_ids: list[str],
    members: list[Member],
    collator: Collator,
) -> list[Member]:
    """
    Members in *previous_ids* order; IDs no longer present are dropped and
    members absent from *previous_ids* are appended alphabetically.
    """
    remaining = {m.user_id: m for m in members}
    ordered: list[Member] = []
    for user_id in previous_ids:
        member = remaining.pop(user_id, None)
        if member is not None:
            ordered.append(member)
    ordered.extend(alphabetical(remaining.values(), collator))
    return ordered


def previous_process_metadata(history: Optional[RotationHistoryRecord]) -> dict[str, Any]:
    if history is None:
        return {}
    return {
        "previous_process_id": history.process_id,
        "previous_process_name": history.process_name,
    }


def compute_quota(total_points: float, member_count: int) -> float:
    """Fair share per member, half-up to one decimal; 0 without members."""
    if member_count <= 0:
        return 0.0
    share = Decimal(str(total_points)) / Decimal(member_count)
    return float(share.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


# ── Algorithm 1: Quota-Based Draft Pick ──

def quota_based_order(
    members: list[Member],
    available_items: Iterable[WorkItem],
    history: Optional[RotationHistoryRecord],
    collator: Collator,
) -> TurnOrderResult:
    """Whoever picked last time picks first: previous order reversed."""
    total_available_points = sum(item.points_value or 0 for item in available_items)
    quota_per_member = compute_quota(total_available_points, len(members))

    if history is not None:
        reversed_ids = list(reversed(history.ordered_user_ids()))
        turns = order_from_previous(reversed_ids, members, collator)
    else:
        turns = alphabetical(members, collator)

    metadata: dict[str, Any] = {
        "quota_per_member": quota_per_member,
        "total_available_points": total_available_points,
    }
    metadata.update(previous_process_metadata(history))
    return TurnOrderResult(turns=turns, algorithm=QUOTA_BASED, metadata=metadata)


# ── Algorithm 2: Points Balance ──

def awarded_points(item: WorkItem) -> float:
    if item.points_awarded is not None:
        return item.points_awarded
    return item.points_value or 0


def points_balance_order(
    members: list[Member],
    completed_items: Iterable[WorkItem],
    collator: Collator,
) -> TurnOrderResult:
    """Lowest recent contribution goes first; ties alphabetical."""
    member_ids = {m.user_id for m in members}
    earned: dict[str, float] = {}
    for item in completed_items:
        if item.completed_by in member_ids:
            earned[item.completed_by] = earned.get(item.completed_by, 0) + awarded_points(item)

    # Built from the member list, so every member has an entry
    points_map = {m.user_id: earned.get(m.user_id, 0) for m in members}

    turns = sorted(
        members,
        key=lambda m: (points_map[m.user_id], collator.key(m.user_name)),
    )
    return TurnOrderResult(
        turns=turns,
        algorithm=POINTS_BALANCE,
        metadata={"member_points_map": points_map},
    )


# ── Algorithm 3: Fair Rotation (Round-Robin) ──

def fair_rotation_order(
    members: list[Member],
    history: Optional[RotationHistoryRecord],
    collator: Collator,
) -> TurnOrderResult:
    """Second becomes first, first goes to the back."""
    if history is not None:
        previous_ids = history.ordered_user_ids()
        rotated_ids = previous_ids[1:] + previous_ids[:1]
        turns = order_from_previous(rotated_ids, members, collator)
    else:
        turns = alphabetical(members, collator)

    return TurnOrderResult(
        turns=turns,
        algorithm=FAIR_ROTATION,
        metadata=previous_process_metadata(history),
    )


# ── Manual ──

def manual_order(members: list[Member]) -> TurnOrderResult:
    return TurnOrderResult(turns=list(members), algorithm=MANUAL, metadata={})
