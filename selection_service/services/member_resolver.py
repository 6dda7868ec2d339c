# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member resolution and stable-membership validation.
Turns raw user IDs into display-ready members without ever dropping one.
"""

from typing import Optional

from selection_service.core.logging import get_logger
from selection_service.models.domain import Member, MembershipRecord, StableRecord
from selection_service.repositories.directory_repository import DirectoryRepository

logger = get_logger(__name__)


def display_name(
    user_id: str,
    first_name: Optional[str],
    last_name: Optional[str],
    email: Optional[str],
) -> str:
    """'first last' trimmed, else email, else the raw ID."""
    name = f"{first_name or ''} {last_name or ''}".strip()
    return name or email or user_id


def has_stable_access(membership: MembershipRecord, stable_id: str) -> bool:
    if membership.status != "active":
        return False
    if membership.stable_access == "all":
        return True
    if membership.stable_access == "specific":
        return stable_id in membership.assigned_stable_ids
    return False


class MemberResolver:
    """Reads the directory to resolve and validate stable members."""

    def __init__(self, directory: DirectoryRepository) -> None:
        self._directory = directory

    def resolve_members(
        self,
        stable_id: str,
        organization_id: str,
        member_ids: list[str],
    ) -> list[Member]:
        """
        Resolve each ID through its organization membership, then through the
        stable owner's profile. Unknown IDs are kept with the ID as name.
        """
        stable = self._directory.get_stable(stable_id)
        owner_id = stable.owner_id if stable else None

        members: list[Member] = []
        unresolved = 0
        for user_id in member_ids:
            member = self._resolve_one(user_id, organization_id, owner_id)
            if member is None:
                unresolved += 1
                member = Member(user_id=user_id, user_name=user_id, user_email="")
            members.append(member)

        if unresolved:
            logger.info(
                "Resolved members: stable=%s, total=%d, without directory data=%d",
                stable_id, len(member_ids), unresolved,
            )
        return members

    def _resolve_one(
        self,
        user_id: str,
        organization_id: str,
        owner_id: Optional[str],
    ) -> Optional[Member]:
        membership = self._directory.get_membership(user_id, organization_id)
        if membership is not None:
            return Member(
                user_id=user_id,
                user_name=display_name(
                    user_id, membership.first_name, membership.last_name, membership.user_email,
                ),
                user_email=membership.user_email or "",
            )

        if owner_id and user_id == owner_id:
            profile = self._directory.get_user(owner_id)
            if profile is not None:
                return Member(
                    user_id=user_id,
                    user_name=display_name(
                        user_id, profile.first_name, profile.last_name, profile.email,
                    ),
                    user_email=profile.email or "",
                )
        return None

    def validate_members(
        self,
        stable_id: str,
        member_ids: list[str],
    ) -> tuple[bool, list[str]]:
        """
        Check that every ID may take part in a selection at this stable.
        Returns (valid, invalid_ids); an unknown stable invalidates all IDs.
        """
        stable: Optional[StableRecord] = self._directory.get_stable(stable_id)
        if stable is None or not stable.organization_id:
            return False, list(member_ids)

        valid_ids = {
            m.user_id
            for m in self._directory.list_memberships(stable.organization_id)
            if has_stable_access(m, stable_id)
        }
        if stable.owner_id:
            valid_ids.add(stable.owner_id)

        invalid_ids = [uid for uid in member_ids if uid not in valid_ids]
        if invalid_ids:
            logger.info(
                "Member validation failed: stable=%s, invalid=%d",
                stable_id, len(invalid_ids),
            )
        return not invalid_ids, invalid_ids
