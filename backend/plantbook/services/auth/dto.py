# plantbook/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from plantbook.services.identity.dto import UserOut
from plantbook.services.tokens.dto import TokenPairOut, TokenPayload

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: Login email (normalized by the model).
    :type email: str
    :param password: Raw password (hashed by the model).
    :type password: str
    :param display_name: Public name.
    :type display_name: str
    """

    email: str
    password: str
    display_name: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthOut:
    """
    Result of a successful sign-in or registration.

    :param user: Profile of the signed-in user.
    :type user: UserOut
    :param tokens: Freshly issued token pair.
    :type tokens: TokenPairOut
    """

    user: UserOut
    tokens: TokenPairOut


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Caller identity resolved from a valid access token.

    :param user_id: Authenticated user id.
    :type user_id: int
    :param email: Current email of the user.
    :type email: str
    :param display_name: Current public name.
    :type display_name: str
    :param payload: Verified access-token claims.
    :type payload: TokenPayload
    """

    user_id: int
    email: str
    display_name: str
    payload: TokenPayload


@dataclass(frozen=True, slots=True)
class AuthResult:
    """
    Explicit outcome of authenticating a request: exactly one field is set.

    :param identity: Resolved caller on success.
    :type identity: Identity | None
    :param error: Reason for rejection otherwise.
    :type error: Exception | None
    """

    identity: Identity | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.identity is not None
