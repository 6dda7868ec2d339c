# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models shared by repositories and services.

Every datetime held by these models is timezone-aware UTC; repositories
normalize stored values before building them.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

# ── Algorithms ──

MANUAL = "manual"
QUOTA_BASED = "quota_based"
POINTS_BALANCE = "points_balance"
FAIR_ROTATION = "fair_rotation"

SELECTION_ALGORITHMS: tuple[str, ...] = (
    MANUAL, QUOTA_BASED, POINTS_BALANCE, FAIR_ROTATION,
)
ALGORITHM_PATTERN = "^(" + "|".join(SELECTION_ALGORITHMS) + ")$"


# ── Members ──

class Member(BaseModel):
    """A resolved, display-ready stable member."""
    user_id: str
    user_name: str
    user_email: str = ""


class MembershipRecord(BaseModel):
    """Organization membership as held by the directory."""
    user_id: str
    organization_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    user_email: Optional[str] = None
    status: str = "active"
    stable_access: str = "all"
    assigned_stable_ids: list[str] = Field(default_factory=list)


class UserProfile(BaseModel):
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class StableRecord(BaseModel):
    id: str
    organization_id: Optional[str] = None
    owner_id: Optional[str] = None
    memory_horizon_days: Optional[int] = None


# ── Work items / ledgers ──

class WorkItem(BaseModel):
    """A schedulable, point-valued routine instance."""
    id: str
    stable_id: str
    scheduled_date: datetime
    points_value: float = 0
    points_awarded: Optional[float] = None
    assignment_type: str = "unassigned"
    status: str = "scheduled"
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None


class SelectionEntry(BaseModel):
    """One routine picked by a member during a selection process."""
    id: str
    process_id: str
    selected_by: str
    selected_by_name: str = ""
    routine_instance_id: Optional[str] = None
    points_value: float = 0
    selected_at: datetime


# ── Processes & history ──

class ProcessTurn(BaseModel):
    user_id: str
    user_name: str
    user_email: str = ""
    order: int
    status: str = "pending"
    selections_count: int = 0


class CompletedProcess(BaseModel):
    """The slice of a completed selection process the history writer needs."""
    id: str
    name: str
    organization_id: str
    stable_id: str
    algorithm: Optional[str] = None
    turns: list[ProcessTurn]


class HistoryTurn(BaseModel):
    user_id: str
    user_name: str
    order: int
    selections_count: int = 0
    total_points_picked: float = 0


class RotationHistoryRecord(BaseModel):
    """Archived final turn order of a completed selection process."""
    id: str
    process_id: str
    process_name: str
    organization_id: str
    stable_id: str
    algorithm: str
    final_turn_order: list[HistoryTurn]
    completed_at: datetime

    def ordered_user_ids(self) -> list[str]:
        """User IDs of the final turn order, sorted by their 1-based order."""
        return [t.user_id for t in sorted(self.final_turn_order, key=lambda t: t.order)]


# ── Engine output ──

class TurnOrderResult(BaseModel):
    turns: list[Member]
    algorithm: str
    metadata: dict[str, Any] = Field(default_factory=dict)
