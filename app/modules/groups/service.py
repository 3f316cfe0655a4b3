from datetime import datetime, timezone
from app.core.errors import CannotRemoveSelf, NotAdmin, NotMember
from app.modules.groups.repository import GroupRepository
from app.modules.groups.schemas import (
    GroupCreate, MemberAdd, Group, Membership, ROLE_ADMIN, ROLE_MEMBER
)
from typing import List
import uuid
import logging

logger = logging.getLogger(__name__)


class GroupService:
    """Membership authority: the only place that answers "may user U act on group G".

    Roles are always re-read from the store at call time; group ids or roles
    carried in a token are never trusted for authorization.
    """

    def __init__(self, repo: GroupRepository):
        self.repo = repo

    def create_group(self, group_data: GroupCreate, creator_id: str) -> Group:
        """Create a group and add the creator as its first admin"""
        group_data.validate_fields()

        now = datetime.now(timezone.utc)
        group = Group(
            id=str(uuid.uuid4()),
            name=group_data.name,
            created_by=creator_id,
            created_at=now,
        )
        self.repo.create(group)

        membership = Membership(
            user_id=creator_id,
            group_id=group.id,
            role=ROLE_ADMIN,
            joined_at=now,
        )
        try:
            self.repo.add_member(membership)
        except Exception:
            # Roll back group creation (best effort), surface the membership error
            try:
                self.repo.delete(group.id)
            except Exception as cleanup_error:
                logger.warning(f"Failed to roll back group {group.id}: {cleanup_error}")
            raise

        logger.info(f"Created group {group.id} by {creator_id}")
        return group

    def get_group(self, group_id: str, requesting_user_id: str) -> Group:
        """Get a group (requester must be a member)"""
        self.repo.get_membership(group_id, requesting_user_id)
        return self.repo.get_by_id(group_id)

    def list_by_user(self, user_id: str) -> List[Group]:
        return self.repo.list_by_user_id(user_id)

    def list_members(self, group_id: str, requesting_user_id: str) -> List[Membership]:
        self.repo.get_membership(group_id, requesting_user_id)
        return self.repo.list_members(group_id)

    def get_user_group_ids(self, user_id: str) -> List[str]:
        return self.repo.get_user_group_ids(user_id)

    def get_membership(self, group_id: str, user_id: str) -> Membership:
        """Raises NotMember when the user has no role in the group"""
        return self.repo.get_membership(group_id, user_id)

    def is_member(self, group_id: str, user_id: str) -> bool:
        """A missing membership row is False; any other lookup failure propagates"""
        try:
            self.repo.get_membership(group_id, user_id)
        except NotMember:
            return False
        return True

    def _require_admin(self, group_id: str, user_id: str) -> Membership:
        try:
            membership = self.repo.get_membership(group_id, user_id)
        except NotMember:
            raise NotAdmin()
        if not membership.is_admin:
            raise NotAdmin()
        return membership

    def add_member(self, group_id: str, member_data: MemberAdd, requesting_user_id: str) -> Membership:
        """Add a user to the group (requester must be admin)"""
        member_data.validate_fields()
        self._require_admin(group_id, requesting_user_id)

        membership = Membership(
            user_id=member_data.user_id,
            group_id=group_id,
            role=member_data.role or ROLE_MEMBER,
            joined_at=datetime.now(timezone.utc),
        )
        self.repo.add_member(membership)
        logger.info(f"Added {membership.user_id} to group {group_id} as {membership.role}")
        return membership

    def remove_member(self, group_id: str, user_id: str, requesting_user_id: str) -> None:
        """Remove a user from the group (requester must be admin, and not the target)"""
        # No ownership transfer exists, so an admin can never leave through this path
        if user_id == requesting_user_id:
            raise CannotRemoveSelf()
        self._require_admin(group_id, requesting_user_id)

        self.repo.remove_member(group_id, user_id)
        logger.info(f"Removed {user_id} from group {group_id}")

    def delete_group(self, group_id: str, requesting_user_id: str) -> None:
        """Delete a group (requester must be admin)"""
        self._require_admin(group_id, requesting_user_id)
        self.repo.delete(group_id)
        logger.info(f"Deleted group {group_id}")
