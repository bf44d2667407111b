from __future__ import annotations

import logging

from plantbook.services._shared.base import BaseService, ServiceContext
from plantbook.services._shared.errors import AuthenticationError
from plantbook.services.auth.dto import AuthResult, Identity
from plantbook.services.tokens.service import TokenService

log = logging.getLogger(__name__)

MISSING_TOKEN = "Missing bearer token"
INVALID_TOKEN = "Invalid or expired access token"


def extract_bearer(header: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header, else None."""
    if not header:
        return None
    parts = header.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        return None
    return parts[1].strip()


class AuthGate(BaseService):
    """
    Resolve the caller of a request from its ``Authorization`` header.

    The result is returned, never stored on global request state. Every
    failure after the header is parsed (bad signature, expiry, unknown or
    deactivated user) yields the same error so the response leaks nothing.
    """

    def __init__(self, *, tokens: TokenService, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.tokens = tokens

    def authenticate(self, authorization: str | None) -> AuthResult:
        token = extract_bearer(authorization)
        if token is None:
            return AuthResult(error=AuthenticationError(MISSING_TOKEN))

        try:
            payload = self.tokens.verify_access(token)
        except AuthenticationError as exc:
            log.debug("auth.gate.rejected", extra={"status": 401}, exc_info=exc)
            return AuthResult(error=AuthenticationError(INVALID_TOKEN))

        with self.ro_uow() as uow:
            user = uow.users.get_active(payload.user_id)
            if user is None:
                log.info("auth.gate.inactive_or_unknown", extra={"user_id": payload.user_id})
                return AuthResult(error=AuthenticationError(INVALID_TOKEN))
            identity = Identity(
                user_id=user.id,
                email=user.email,
                display_name=user.display_name,
                payload=payload,
            )
        return AuthResult(identity=identity)
