"""
Shared pytest fixtures: services wired over in-memory repositories and storage.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import (
    get_file_service, get_group_service, get_token_service, get_user_service
)
from app.main import app
from app.modules.auth.token_service import TokenService
from app.modules.files.service import FileService
from app.modules.groups.schemas import GroupCreate
from app.modules.groups.service import GroupService
from app.modules.users.credentials import PasswordHasher
from app.modules.users.schemas import CreateUserInput
from app.modules.users.service import UserService
from tests.fakes import (
    InMemoryBlobStorage, InMemoryFileRepository, InMemoryGroupRepository, InMemoryUserRepository
)

TEST_SECRET = "test-secret-" + "x" * 32
TEST_PASSWORD = "correct horse battery"


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(
        secret=TEST_SECRET,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
        issuer="fileshare-test",
    )


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def group_repo(user_repo) -> InMemoryGroupRepository:
    return InMemoryGroupRepository(users=user_repo)


@pytest.fixture
def file_repo() -> InMemoryFileRepository:
    return InMemoryFileRepository()


@pytest.fixture
def blob_storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture
def user_service(user_repo) -> UserService:
    # Cheap hash rounds keep the suite fast
    return UserService(user_repo, PasswordHasher(method="pbkdf2:sha256:1000"))


@pytest.fixture
def group_service(group_repo) -> GroupService:
    return GroupService(group_repo)


@pytest.fixture
def file_service(file_repo, blob_storage, group_service) -> FileService:
    return FileService(file_repo, blob_storage, group_service, max_file_size=1024, url_ttl_seconds=300)


@pytest.fixture
def make_user(user_service):
    """Register a user and return it"""
    counter = {"n": 0}

    def _make(email: str = None, password: str = TEST_PASSWORD):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        return user_service.register(CreateUserInput(email=email, password=password))

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com")


@pytest.fixture
def group(group_service, alice):
    """A group administered by alice"""
    return group_service.create_group(GroupCreate(name="Engineering"), alice.id)


@pytest.fixture
def client(token_service, user_service, group_service, file_service):
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_group_service] = lambda: group_service
    app.dependency_overrides[get_file_service] = lambda: file_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(token_service):
    def _headers(user, group_ids=None):
        tokens = token_service.issue(user.id, user.email, group_ids or [])
        return {"Authorization": f"Bearer {tokens.access_token}"}

    return _headers
