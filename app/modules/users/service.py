from datetime import datetime, timezone
from app.core.errors import (
    EmailRequired, InvalidPassword, PasswordRequired, PasswordTooShort
)
from app.modules.users.credentials import PasswordHasher
from app.modules.users.repository import UserRepository
from app.modules.users.schemas import CreateUserInput, User, MIN_PASSWORD_LENGTH
import uuid
import logging

logger = logging.getLogger(__name__)


def _validate_password(password: str) -> None:
    if not password:
        raise PasswordRequired()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordTooShort()


class UserService:
    def __init__(self, repo: UserRepository, hasher: PasswordHasher = None):
        self.repo = repo
        self.hasher = hasher or PasswordHasher()

    def register(self, user_data: CreateUserInput) -> User:
        """Create a new identity with a hashed password"""
        if not user_data.email:
            raise EmailRequired()
        _validate_password(user_data.password)

        now = datetime.now(timezone.utc)
        user = User(
            id=str(uuid.uuid4()),
            email=user_data.email,
            password_hash=self.hasher.hash(user_data.password),
            created_at=now,
            updated_at=now,
        )
        self.repo.create(user)
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Verify credentials. Raises UserNotFound for an unknown email, InvalidPassword otherwise"""
        user = self.repo.get_by_email(email)
        if not self.hasher.verify(password, user.password_hash):
            raise InvalidPassword()
        return user

    def get_by_id(self, user_id: str) -> User:
        return self.repo.get_by_id(user_id)

    def get_by_email(self, email: str) -> User:
        return self.repo.get_by_email(email)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> User:
        """Replace the stored hash after verifying the current password"""
        user = self.repo.get_by_id(user_id)
        if not self.hasher.verify(current_password, user.password_hash):
            raise InvalidPassword()
        _validate_password(new_password)

        updated = user.model_copy(update={
            "password_hash": self.hasher.hash(new_password),
            "updated_at": datetime.now(timezone.utc),
        })
        self.repo.update(updated)
        logger.info(f"Changed password for user {user_id}")
        return updated

    def delete_user(self, user_id: str) -> None:
        self.repo.delete(user_id)
        logger.info(f"Deleted user {user_id}")
