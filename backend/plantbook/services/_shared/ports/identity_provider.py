from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from plantbook.services._shared.errors import AuthenticationError


@dataclass(frozen=True, slots=True)
class ExternalIdentity:
    """
    Identity asserted by an external provider after a successful exchange.

    :param email: Verified email address.
    :type email: str
    :param display_name: Name reported by the provider.
    :type display_name: str
    :param avatar_url: Profile picture URL, if any.
    :type avatar_url: str | None
    """

    email: str
    display_name: str
    avatar_url: str | None = None


class IdentityProvider(Protocol):
    """Port for OAuth-style sign-in: exchange a one-time code for an identity."""

    name: str

    def exchange(self, code: str) -> ExternalIdentity:
        """:raises AuthenticationError: if the provider rejects the code."""


class StaticIdentityProvider(IdentityProvider):
    """Provider backed by a fixed ``code -> identity`` table (tests, local dev)."""

    def __init__(self, name: str, identities: dict[str, ExternalIdentity]) -> None:
        self.name = name
        self._identities = dict(identities)

    def exchange(self, code: str) -> ExternalIdentity:
        identity = self._identities.get(code)
        if identity is None:
            raise AuthenticationError("Identity provider rejected the sign-in")
        return identity
