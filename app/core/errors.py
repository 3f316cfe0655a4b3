"""
Domain errors shared by every module.

Each error carries exactly one ErrorKind; the HTTP layer renders a status from
the kind and never inspects the message.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    INVALID_INPUT = "invalid_input"
    UNAUTHENTICATED = "unauthenticated"
    UPSTREAM_FAILURE = "upstream_failure"


class DomainError(Exception):
    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE
    default_message = "internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND
    default_message = "not found"


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT
    default_message = "already exists"


class ForbiddenError(DomainError):
    kind = ErrorKind.FORBIDDEN
    default_message = "forbidden"


class InvalidInputError(DomainError):
    kind = ErrorKind.INVALID_INPUT
    default_message = "invalid input"


class UnauthenticatedError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "authentication required"


class UpstreamError(DomainError):
    kind = ErrorKind.UPSTREAM_FAILURE
    default_message = "upstream failure"


# Users

class UserNotFound(NotFoundError):
    default_message = "user not found"


class EmailExists(ConflictError):
    default_message = "email already exists"


class EmailRequired(InvalidInputError):
    default_message = "email is required"


class PasswordRequired(InvalidInputError):
    default_message = "password is required"


class PasswordTooShort(InvalidInputError):
    default_message = "password must be at least 8 characters"


class InvalidPassword(UnauthenticatedError):
    default_message = "invalid password"


# Tokens

class InvalidToken(UnauthenticatedError):
    default_message = "invalid token"


class TokenKindMismatch(InvalidToken):
    default_message = "invalid token: unexpected token type"


class ExpiredToken(UnauthenticatedError):
    default_message = "token has expired"


# Groups

class GroupNotFound(NotFoundError):
    default_message = "group not found"


class NameRequired(InvalidInputError):
    default_message = "name is required"


class UserIdRequired(InvalidInputError):
    default_message = "user ID is required"


class InvalidRole(InvalidInputError):
    default_message = "invalid role"


class InvalidGroupId(InvalidInputError):
    default_message = "invalid group ID"


class InvalidUserId(InvalidInputError):
    default_message = "invalid user ID"


class NotMember(ForbiddenError):
    default_message = "user is not a member of this group"


class MemberNotFound(NotMember):
    """Raised when the target of a removal has no membership row."""

    kind = ErrorKind.NOT_FOUND


class AlreadyMember(ConflictError):
    default_message = "user is already a member of this group"


class CannotRemoveSelf(ForbiddenError):
    default_message = "cannot remove yourself from the group"


class NotAdmin(ForbiddenError):
    default_message = "user is not an admin of this group"


# Files

class FileNotFound(NotFoundError):
    default_message = "file not found"


class GroupIdRequired(InvalidInputError):
    default_message = "group ID is required"


class UploadedByRequired(InvalidInputError):
    default_message = "uploaded by is required"


class InvalidFileId(InvalidInputError):
    default_message = "invalid file ID"


class FileTooLarge(InvalidInputError):
    default_message = "file exceeds maximum size"


class UploadFailed(UpstreamError):
    default_message = "failed to upload file"


class DownloadFailed(UpstreamError):
    default_message = "failed to download file"


# Stores

class StoreError(UpstreamError):
    default_message = "metadata store request failed"
