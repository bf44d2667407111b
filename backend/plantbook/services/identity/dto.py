"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for profile updates.

    :param display_name: Optional new public name.
    :type display_name: str | None
    """

    display_name: str | None = None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for changing a user's password.

    :param current_password: Current password.
    :type current_password: str
    :param new_password: New password (raw).
    :type new_password: str
    """

    current_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class UploadIn:
    """
    Uploaded file handed over by the delivery layer.

    :param stream: Readable binary stream.
    :type stream: typing.BinaryIO
    :param filename: Client-supplied filename (informational only).
    :type filename: str | None
    :param mimetype: Declared content type.
    :type mimetype: str | None
    """

    stream: object
    filename: str | None
    mimetype: str | None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Output DTO for the authenticated user's own profile.

    :param id: User identifier.
    :type id: int
    :param email: Login email.
    :type email: str
    :param display_name: Public name.
    :type display_name: str
    :param avatar_url: Avatar URL, if any.
    :type avatar_url: str | None
    :param has_password: False for accounts created via an identity provider.
    :type has_password: bool
    :param created_at: Registration time.
    :type created_at: datetime
    """

    id: int
    email: str
    display_name: str
    avatar_url: str | None
    has_password: bool
    created_at: datetime


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Output DTO with the fields anyone may see.

    :param id: User identifier.
    :type id: int
    :param display_name: Public name.
    :type display_name: str
    :param avatar_url: Avatar URL, if any.
    :type avatar_url: str | None
    :param created_at: Registration time.
    :type created_at: datetime
    """

    id: int
    display_name: str
    avatar_url: str | None
    created_at: datetime
