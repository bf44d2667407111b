from .dto import AuthTokenConfig, SessionOut, TokenPairOut, TokenPayload
from .service import TokenService

__all__ = ["TokenService", "AuthTokenConfig", "TokenPairOut", "TokenPayload", "SessionOut"]
