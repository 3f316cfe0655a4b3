from pydantic import BaseModel
from typing import List
from datetime import datetime
from enum import Enum

from app.modules.users.schemas import UserResponse


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: datetime  # access token expiry


class TokenClaims(BaseModel):
    user_id: str
    email: str
    group_ids: List[str] = []
    type: TokenType
    issuer: str
    issued_at: datetime
    expires_at: datetime


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""


class RefreshRequest(BaseModel):
    refresh_token: str = ""


class ChangePasswordRequest(BaseModel):
    current_password: str = ""
    new_password: str = ""


class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: datetime
