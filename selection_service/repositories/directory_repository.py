# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Directory data access for stables, user profiles and memberships.
Read side is consumed by member resolution and validation; missing
documents come back as None, never as errors.
Access rules live in MemberResolver.
"""

import json
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from selection_service.models.domain import MembershipRecord, StableRecord, UserProfile


class DirectoryRepository:
    """In-memory directory storage."""

    def __init__(self) -> None:
        self._stables: dict[str, StableRecord] = {}
        self._users: dict[str, UserProfile] = {}
        self._memberships: dict[tuple[str, str], MembershipRecord] = {}

    # ── Read ──

    def get_stable(self, stable_id: str) -> Optional[StableRecord]:
        return self._stables.get(stable_id)

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        return self._users.get(user_id)

    def get_membership(self, user_id: str, organization_id: str) -> Optional[MembershipRecord]:
        return self._memberships.get((user_id, organization_id))

    def list_memberships(self, organization_id: str) -> list[MembershipRecord]:
        return [
            m for (_, org_id), m in self._memberships.items()
            if org_id == organization_id
        ]

    def count(self) -> int:
        return len(self._memberships)

    # ── Write ──

    def save_stable(self, stable: StableRecord) -> None:
        self._stables[stable.id] = stable

    def save_user(self, user: UserProfile) -> None:
        self._users[user.user_id] = user

    def save_membership(self, membership: MembershipRecord) -> None:
        self._memberships[(membership.user_id, membership.organization_id)] = membership

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._stables.clear()
        self._users.clear()
        self._memberships.clear()


def _membership_from_row(row: Any) -> MembershipRecord:
    return MembershipRecord(
        user_id=row["user_id"],
        organization_id=row["organization_id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        user_email=row["user_email"],
        status=row["status"],
        stable_access=row["stable_access"],
        assigned_stable_ids=json.loads(row["assigned_stable_ids"] or "[]"),
    )


MEMBERSHIP_COLS = (
    "user_id, organization_id, first_name, last_name, user_email, "
    "status, stable_access, assigned_stable_ids"
)


class SqlDirectoryRepository:
    """Directory storage backed by SQLAlchemy."""

    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ──

    def get_stable(self, stable_id: str) -> Optional[StableRecord]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT id, organization_id, owner_id, memory_horizon_days "
                     "FROM stables WHERE id = :id"),
                {"id": stable_id},
            ).mappings().fetchone()
        return StableRecord(**row) if row else None

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT user_id, first_name, last_name, email FROM users WHERE user_id = :uid"),
                {"uid": user_id},
            ).mappings().fetchone()
        return UserProfile(**row) if row else None

    def get_membership(self, user_id: str, organization_id: str) -> Optional[MembershipRecord]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {MEMBERSHIP_COLS} FROM organization_members "
                     "WHERE user_id = :uid AND organization_id = :oid"),
                {"uid": user_id, "oid": organization_id},
            ).mappings().fetchone()
        return _membership_from_row(row) if row else None

    def list_memberships(self, organization_id: str) -> list[MembershipRecord]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {MEMBERSHIP_COLS} FROM organization_members "
                     "WHERE organization_id = :oid ORDER BY user_id"),
                {"oid": organization_id},
            ).mappings().fetchall()
        return [_membership_from_row(r) for r in rows]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM organization_members")).scalar() or 0

    # ── Write ──

    def save_stable(self, stable: StableRecord) -> None:
        with self._engine.begin() as conn:
            conn.execute(text("DELETE FROM stables WHERE id = :id"), {"id": stable.id})
            conn.execute(
                text("INSERT INTO stables (id, organization_id, owner_id, memory_horizon_days) "
                     "VALUES (:id, :organization_id, :owner_id, :memory_horizon_days)"),
                stable.model_dump(),
            )

    def save_user(self, user: UserProfile) -> None:
        with self._engine.begin() as conn:
            conn.execute(text("DELETE FROM users WHERE user_id = :user_id"), {"user_id": user.user_id})
            conn.execute(
                text("INSERT INTO users (user_id, first_name, last_name, email) "
                     "VALUES (:user_id, :first_name, :last_name, :email)"),
                user.model_dump(),
            )

    def save_membership(self, membership: MembershipRecord) -> None:
        params = membership.model_dump()
        params["assigned_stable_ids"] = json.dumps(membership.assigned_stable_ids)
        with self._engine.begin() as conn:
            conn.execute(
                text("DELETE FROM organization_members "
                     "WHERE user_id = :user_id AND organization_id = :organization_id"),
                {"user_id": membership.user_id, "organization_id": membership.organization_id},
            )
            conn.execute(
                text(f"INSERT INTO organization_members ({MEMBERSHIP_COLS}) VALUES "
                     "(:user_id, :organization_id, :first_name, :last_name, :user_email, "
                     ":status, :stable_access, :assigned_stable_ids)"),
                params,
            )
