from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user, get_group_service
from app.core.errors import InvalidGroupId, InvalidUserId
from app.core.ids import require_uuid
from app.modules.groups.schemas import GroupCreate, Group, MemberAdd, Membership
from app.modules.groups.service import GroupService
from typing import List, Dict

router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=Group, status_code=201)
def create_group(
    group_data: GroupCreate,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group; the creator becomes its admin"""
    return service.create_group(group_data, current_user["id"])


@router.get("", response_model=List[Group])
def list_groups(
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """List groups the user is a member of"""
    return service.list_by_user(current_user["id"])


@router.get("/{group_id}", response_model=Group)
def get_group(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Get group by ID (only if user is a member)"""
    require_uuid(group_id, InvalidGroupId)
    return service.get_group(group_id, current_user["id"])


@router.delete("/{group_id}", status_code=204)
def delete_group(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Delete group (requires group admin)"""
    require_uuid(group_id, InvalidGroupId)
    service.delete_group(group_id, current_user["id"])
    return None


@router.get("/{group_id}/members", response_model=List[Membership])
def list_members(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """List all members of a group (only if user is a member)"""
    require_uuid(group_id, InvalidGroupId)
    return service.list_members(group_id, current_user["id"])


@router.post("/{group_id}/members", response_model=Membership, status_code=201)
def add_member(
    group_id: str,
    member_data: MemberAdd,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Add a member to the group (requires group admin)"""
    require_uuid(group_id, InvalidGroupId)
    return service.add_member(group_id, member_data, current_user["id"])


@router.delete("/{group_id}/members/{user_id}", status_code=204)
def remove_member(
    group_id: str,
    user_id: str,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Remove a member from the group (requires group admin)"""
    require_uuid(group_id, InvalidGroupId)
    require_uuid(user_id, InvalidUserId)
    service.remove_member(group_id, user_id, current_user["id"])
    return None
