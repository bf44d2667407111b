"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never depend on Flask or
HTTP. The translation to HTTP responses (RFC 7807) happens in
``plantbook/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(
    exc: IntegrityError,
    constraint_name: str,
    *,
    columns: Sequence[str] | None = None,
) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Database constraint name (e.g. ``'uq_likes_post_user'``). PostgreSQL
        and MySQL include it in the driver message.
    columns : Sequence[str] | None
        Qualified columns of the constraint (e.g. ``["likes.post_id",
        "likes.user_id"]``). SQLite reports ``UNIQUE constraint failed:
        likes.post_id, likes.user_id`` instead of the name.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    if columns:
        return ", ".join(c.lower() for c in columns) in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Unmapped subclasses translate to ``400 Bad Request``.
    """


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity (or a relation such as a Like) is absent.

    :param entity: Entity name (e.g., "Post").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Like").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthenticationError(ServiceError):
    """
    Missing, malformed, expired, revoked or otherwise unusable credentials.

    Every cause shares one message per flow so callers cannot tell an
    unknown account from a disabled one or a revoked token.
    """

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Authenticated, but not allowed to act on the resource (e.g. not its owner)."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class AccountDisabledError(ServiceError):
    """Correct password for a deactivated account (login only)."""

    def __init__(self, message: str = "Account is deactivated") -> None:
        super().__init__(message)


class ValidationFailedError(ServiceError):
    """Input rejected by a business rule (empty or oversize text, weak password)."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class BlobRejectedError(ValidationFailedError):
    """The blob store refused an upload (MIME type or size)."""
