"""Identifier checks applied before an ID reaches the metadata store."""

from typing import Type
import uuid

from app.core.errors import DomainError


def require_uuid(value: str, error: Type[DomainError]) -> str:
    """Return value unchanged if it parses as a UUID, otherwise raise error"""
    try:
        uuid.UUID(str(value))
    except ValueError:
        raise error()
    return value
