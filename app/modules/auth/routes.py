from fastapi import APIRouter, Depends
from app.core.dependencies import (
    get_current_user, get_group_service, get_token_service, get_user_service
)
from app.core.errors import InvalidPassword, InvalidToken, UserNotFound
from app.modules.auth.schemas import (
    AuthResponse, ChangePasswordRequest, LoginRequest, RefreshRequest, RegisterRequest
)
from app.modules.auth.token_service import TokenService
from app.modules.groups.service import GroupService
from app.modules.users.schemas import CreateUserInput, User, UserResponse
from app.modules.users.service import UserService
from typing import Dict, List

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, token_service: TokenService, group_ids: List[str]) -> AuthResponse:
    tokens = token_service.issue(user.id, user.email, group_ids)
    return AuthResponse(
        user=UserResponse.model_validate(user, from_attributes=True),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_at=tokens.expires_at,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    register_data: RegisterRequest,
    service: UserService = Depends(get_user_service),
    token_service: TokenService = Depends(get_token_service),
):
    """Register a new user and return a token pair"""
    user = service.register(CreateUserInput(email=register_data.email, password=register_data.password))
    # A new user belongs to no groups yet
    return _auth_response(user, token_service, [])


@router.post("/login", response_model=AuthResponse)
def login(
    login_data: LoginRequest,
    service: UserService = Depends(get_user_service),
    group_service: GroupService = Depends(get_group_service),
    token_service: TokenService = Depends(get_token_service),
):
    """Login and get a token pair"""
    if not login_data.email or not login_data.password:
        raise InvalidPassword("Email and password are required")
    try:
        user = service.authenticate(login_data.email, login_data.password)
    except (UserNotFound, InvalidPassword):
        raise InvalidPassword("Invalid email or password")
    return _auth_response(user, token_service, group_service.get_user_group_ids(user.id))


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    refresh_data: RefreshRequest,
    service: UserService = Depends(get_user_service),
    group_service: GroupService = Depends(get_group_service),
    token_service: TokenService = Depends(get_token_service),
):
    """Exchange a refresh token for a new token pair"""
    claims = token_service.validate_refresh(refresh_data.refresh_token)
    # The user must still exist
    try:
        user = service.get_by_id(claims.user_id)
    except UserNotFound:
        raise InvalidToken("User not found")
    return _auth_response(user, token_service, group_service.get_user_group_ids(user.id))


@router.get("/me", response_model=UserResponse)
def me(
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Get the current authenticated user"""
    return service.get_by_id(current_user["id"])


@router.put("/password", response_model=UserResponse)
def change_password(
    password_data: ChangePasswordRequest,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Change the current user's password"""
    return service.change_password(
        current_user["id"], password_data.current_password, password_data.new_password
    )
