# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Demo data so the service is usable immediately after startup.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from selection_service.core.logging import get_logger
from selection_service.models.domain import (
    MembershipRecord,
    StableRecord,
    UserProfile,
    WorkItem,
)
from selection_service.repositories.directory_repository import DirectoryRepository
from selection_service.repositories.work_item_repository import WorkItemRepository

logger = get_logger(__name__)

DEMO_ORGANIZATION_ID = "org-demo"
DEMO_STABLE_ID = "stable-demo"
DEMO_OWNER_ID = "u-owner"

DEMO_MEMBERS: list[dict[str, str]] = [
    {"user_id": "u-anna", "first_name": "Anna", "last_name": "Berg", "user_email": "anna@example.com"},
    {"user_id": "u-asa", "first_name": "Åsa", "last_name": "Lind", "user_email": "asa@example.com"},
    {"user_id": "u-orjan", "first_name": "Örjan", "last_name": "Ek", "user_email": "orjan@example.com"},
    {"user_id": "u-zlatan", "first_name": "Zlatan", "last_name": "Nyberg", "user_email": "zlatan@example.com"},
    {"user_id": "u-arla", "first_name": "Ärla", "last_name": "Holm", "user_email": "arla@example.com"},
]


def seed_demo_data(
    directory: DirectoryRepository,
    work_items: WorkItemRepository,
    now: Optional[datetime] = None,
) -> None:
    """One stable, five members, an owner, and a month of routines."""
    now = now or datetime.now(timezone.utc)
    today = now.replace(hour=7, minute=0, second=0, microsecond=0)

    directory.save_stable(StableRecord(
        id=DEMO_STABLE_ID,
        organization_id=DEMO_ORGANIZATION_ID,
        owner_id=DEMO_OWNER_ID,
        memory_horizon_days=90,
    ))
    directory.save_user(UserProfile(
        user_id=DEMO_OWNER_ID, first_name="Karin", last_name="Stallström",
        email="karin@example.com",
    ))
    for member in DEMO_MEMBERS:
        directory.save_membership(MembershipRecord(organization_id=DEMO_ORGANIZATION_ID, **member))

    for day in range(28):
        for slot, points in (("morning", 2), ("evening", 1)):
            work_items.save(WorkItem(
                id=f"demo-{day:02d}-{slot}",
                stable_id=DEMO_STABLE_ID,
                scheduled_date=today + timedelta(days=day + 1),
                points_value=points,
            ))

    # Some finished work so points_balance has history to weigh
    for index, member in enumerate(DEMO_MEMBERS):
        for n in range(index):
            completed_at = today - timedelta(days=n + 1)
            work_items.save(WorkItem(
                id=f"demo-done-{member['user_id']}-{n}",
                stable_id=DEMO_STABLE_ID,
                scheduled_date=completed_at,
                points_value=2,
                assignment_type="assigned",
                status="completed",
                completed_by=member["user_id"],
                completed_at=completed_at,
            ))

    logger.info(
        "Seeded demo stable=%s with %d members", DEMO_STABLE_ID, len(DEMO_MEMBERS),
    )
