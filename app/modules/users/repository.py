from abc import ABC, abstractmethod
from postgrest.exceptions import APIError
from supabase import Client
from app.core.errors import EmailExists, StoreError, UserNotFound
from app.database.supabase_client import is_unique_violation
from app.modules.users.models import USERS_TABLE
from app.modules.users.schemas import User
import logging

logger = logging.getLogger(__name__)


class UserRepository(ABC):
    """Metadata store operations for identities."""

    @abstractmethod
    def create(self, user: User) -> None:
        """Insert a user. Raises EmailExists on a duplicate email."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> User:
        """Raises UserNotFound on miss."""

    @abstractmethod
    def get_by_email(self, email: str) -> User:
        """Raises UserNotFound on miss."""

    @abstractmethod
    def update(self, user: User) -> None:
        """Persist email / password_hash / updated_at. Raises UserNotFound or EmailExists."""

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Raises UserNotFound on miss."""


class SupabaseUserRepository(UserRepository):
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, user: User) -> None:
        try:
            self.supabase.table(USERS_TABLE).insert(user.model_dump(mode="json")).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise EmailExists()
            logger.error(f"Failed to insert user {user.id}: {e}")
            raise StoreError(str(e))

    def get_by_id(self, user_id: str) -> User:
        return self._get_one("id", user_id)

    def get_by_email(self, email: str) -> User:
        return self._get_one("email", email)

    def _get_one(self, column: str, value: str) -> User:
        try:
            result = self.supabase.table(USERS_TABLE)\
                .select("*")\
                .eq(column, value)\
                .maybe_single()\
                .execute()
        except APIError as e:
            logger.error(f"Failed to load user by {column}: {e}")
            raise StoreError(str(e))
        if result is None or not result.data:
            raise UserNotFound()
        return User(**result.data)

    def update(self, user: User) -> None:
        try:
            result = self.supabase.table(USERS_TABLE)\
                .update({
                    "email": user.email,
                    "password_hash": user.password_hash,
                    "updated_at": user.updated_at.isoformat(),
                })\
                .eq("id", user.id)\
                .execute()
        except APIError as e:
            if is_unique_violation(e):
                raise EmailExists()
            logger.error(f"Failed to update user {user.id}: {e}")
            raise StoreError(str(e))
        if not result.data:
            raise UserNotFound()

    def delete(self, user_id: str) -> None:
        try:
            result = self.supabase.table(USERS_TABLE)\
                .delete()\
                .eq("id", user_id)\
                .execute()
        except APIError as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise StoreError(str(e))
        if not result.data:
            raise UserNotFound()
