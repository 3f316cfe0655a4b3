"""
Core dependencies for service wiring and route protection
"""

from datetime import timedelta
from functools import lru_cache
from typing import Dict, Any, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from app.config import settings
from app.core.errors import InvalidToken
from app.database.supabase_client import get_supabase
from app.modules.auth.token_service import TokenService
from app.modules.files.repository import SupabaseFileRepository
from app.modules.files.service import FileService
from app.modules.files.storage import BlobStorage, get_blob_storage
from app.modules.groups.repository import SupabaseGroupRepository
from app.modules.groups.service import GroupService
from app.modules.users.repository import SupabaseUserRepository
from app.modules.users.service import UserService

# auto_error=False so a missing header goes through the 401 domain error path
security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        access_ttl=timedelta(seconds=settings.jwt_access_token_ttl_seconds),
        refresh_ttl=timedelta(seconds=settings.jwt_refresh_token_ttl_seconds),
        issuer=settings.jwt_issuer,
    )


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(SupabaseUserRepository(supabase))


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(SupabaseGroupRepository(supabase))


def get_file_service(
    supabase: Client = Depends(get_supabase),
    storage: BlobStorage = Depends(get_blob_storage),
    group_service: GroupService = Depends(get_group_service),
) -> FileService:
    return FileService(
        SupabaseFileRepository(supabase),
        storage,
        group_service,
        max_file_size=settings.max_upload_bytes,
        url_ttl_seconds=settings.presigned_url_ttl_seconds,
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    token_service: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Validate the bearer access token and return the caller's identity"""
    if credentials is None or not credentials.credentials:
        raise InvalidToken("Authorization header required")
    claims = token_service.validate_access(credentials.credentials)
    return {
        "id": claims.user_id,
        "email": claims.email,
        "group_ids": claims.group_ids,
    }
