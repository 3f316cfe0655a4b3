from abc import ABC, abstractmethod
from postgrest.exceptions import APIError
from supabase import Client
from app.core.errors import (
    AlreadyMember, GroupNotFound, MemberNotFound, NotMember, StoreError, UserNotFound
)
from app.database.supabase_client import is_foreign_key_violation, is_unique_violation
from app.modules.groups.models import GROUPS_TABLE, MEMBERSHIPS_TABLE
from app.modules.groups.schemas import Group, Membership
from typing import List
import logging

logger = logging.getLogger(__name__)


class GroupRepository(ABC):
    """Metadata store operations for groups and their memberships."""

    @abstractmethod
    def create(self, group: Group) -> None:
        pass

    @abstractmethod
    def get_by_id(self, group_id: str) -> Group:
        """Raises GroupNotFound on miss."""

    @abstractmethod
    def delete(self, group_id: str) -> None:
        """Delete the group and its memberships. Raises GroupNotFound on miss."""

    @abstractmethod
    def list_by_user_id(self, user_id: str) -> List[Group]:
        """Groups the user belongs to, newest first."""

    @abstractmethod
    def add_member(self, membership: Membership) -> None:
        """Raises AlreadyMember when (user_id, group_id) already exists."""

    @abstractmethod
    def remove_member(self, group_id: str, user_id: str) -> None:
        """Raises MemberNotFound when there is no such row."""

    @abstractmethod
    def get_membership(self, group_id: str, user_id: str) -> Membership:
        """Raises NotMember on miss."""

    @abstractmethod
    def list_members(self, group_id: str) -> List[Membership]:
        """Memberships of a group, oldest first."""

    @abstractmethod
    def get_user_group_ids(self, user_id: str) -> List[str]:
        pass


class SupabaseGroupRepository(GroupRepository):
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, group: Group) -> None:
        try:
            self.supabase.table(GROUPS_TABLE).insert(group.model_dump(mode="json")).execute()
        except APIError as e:
            logger.error(f"Failed to insert group {group.id}: {e}")
            raise StoreError(str(e))

    def get_by_id(self, group_id: str) -> Group:
        try:
            result = self.supabase.table(GROUPS_TABLE)\
                .select("*")\
                .eq("id", group_id)\
                .maybe_single()\
                .execute()
        except APIError as e:
            logger.error(f"Failed to load group {group_id}: {e}")
            raise StoreError(str(e))
        if result is None or not result.data:
            raise GroupNotFound()
        return Group(**result.data)

    def delete(self, group_id: str) -> None:
        try:
            # user_groups rows go with the on delete cascade
            result = self.supabase.table(GROUPS_TABLE)\
                .delete()\
                .eq("id", group_id)\
                .execute()
        except APIError as e:
            logger.error(f"Failed to delete group {group_id}: {e}")
            raise StoreError(str(e))
        if not result.data:
            raise GroupNotFound()

    def list_by_user_id(self, user_id: str) -> List[Group]:
        try:
            result = self.supabase.table(MEMBERSHIPS_TABLE)\
                .select("group_id, groups(*)")\
                .eq("user_id", user_id)\
                .execute()
        except APIError as e:
            logger.error(f"Failed to list groups for user {user_id}: {e}")
            raise StoreError(str(e))
        groups = [Group(**item["groups"]) for item in result.data or [] if item.get("groups")]
        groups.sort(key=lambda g: g.created_at, reverse=True)
        return groups

    def add_member(self, membership: Membership) -> None:
        try:
            self.supabase.table(MEMBERSHIPS_TABLE).insert(membership.model_dump(mode="json")).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise AlreadyMember()
            if is_foreign_key_violation(e):
                raise UserNotFound()
            logger.error(f"Failed to add member {membership.user_id} to group {membership.group_id}: {e}")
            raise StoreError(str(e))

    def remove_member(self, group_id: str, user_id: str) -> None:
        try:
            result = self.supabase.table(MEMBERSHIPS_TABLE)\
                .delete()\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
        except APIError as e:
            logger.error(f"Failed to remove member {user_id} from group {group_id}: {e}")
            raise StoreError(str(e))
        if not result.data:
            raise MemberNotFound()

    def get_membership(self, group_id: str, user_id: str) -> Membership:
        try:
            result = self.supabase.table(MEMBERSHIPS_TABLE)\
                .select("*")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
        except APIError as e:
            logger.error(f"Failed to load membership of {user_id} in group {group_id}: {e}")
            raise StoreError(str(e))
        if result is None or not result.data:
            raise NotMember()
        return Membership(**result.data)

    def list_members(self, group_id: str) -> List[Membership]:
        try:
            result = self.supabase.table(MEMBERSHIPS_TABLE)\
                .select("*")\
                .eq("group_id", group_id)\
                .order("joined_at")\
                .execute()
        except APIError as e:
            logger.error(f"Failed to list members of group {group_id}: {e}")
            raise StoreError(str(e))
        return [Membership(**member) for member in result.data or []]

    def get_user_group_ids(self, user_id: str) -> List[str]:
        try:
            result = self.supabase.table(MEMBERSHIPS_TABLE)\
                .select("group_id")\
                .eq("user_id", user_id)\
                .execute()
        except APIError as e:
            logger.error(f"Failed to list group ids for user {user_id}: {e}")
            raise StoreError(str(e))
        return [m["group_id"] for m in result.data or []]
