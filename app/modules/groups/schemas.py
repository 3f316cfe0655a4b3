from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.core.errors import InvalidRole, InvalidUserId, NameRequired, UserIdRequired
from app.core.ids import require_uuid

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
VALID_ROLES = (ROLE_ADMIN, ROLE_MEMBER)


class GroupCreate(BaseModel):
    name: str = ""

    def validate_fields(self) -> None:
        if not self.name or not self.name.strip():
            raise NameRequired()


class MemberAdd(BaseModel):
    user_id: str = ""
    role: Optional[str] = None  # admin, member; empty means member

    def validate_fields(self) -> None:
        if not self.user_id:
            raise UserIdRequired()
        require_uuid(self.user_id, InvalidUserId)
        if self.role and self.role not in VALID_ROLES:
            raise InvalidRole()


class Group(BaseModel):
    id: str
    name: str
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class Membership(BaseModel):
    user_id: str
    group_id: str
    role: str
    joined_at: datetime

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
