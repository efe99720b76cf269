"""
Access-token verification for Supabase-issued sessions.

Supabase signs user access tokens with the project's HS256 JWT secret and the
``authenticated`` audience. The back-office only consumes them: issuance
belongs to the auth provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from jose import JWTError, jwt

from domain.exceptions import AuthenticationRequiredError
from domain.models.user import AuthSession, UserRole


@dataclass(frozen=True)
class JWTConfig:
    """Configuration for access-token validation."""

    algorithm: str = "HS256"
    audience: str = "authenticated"


class JWTHandler:
    """Decodes bearer tokens into an :class:`AuthSession`."""

    def __init__(self, secret: str, config: Optional[JWTConfig] = None) -> None:
        self._secret = secret
        self._config = config or JWTConfig()

    def decode_token(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a JWT.

        Raises ``jose.JWTError`` when the token is invalid, expired, or has
        an unexpected audience.
        """
        claims: dict[str, Any] = jwt.decode(
            token,
            self._secret,
            algorithms=[self._config.algorithm],
            audience=self._config.audience,
            options={"require_exp": True, "require_sub": True},
        )
        return claims

    def verify_token(self, token: str) -> bool:
        """Return *True* when the token is structurally valid and not expired."""
        try:
            self.decode_token(token)
            return True
        except JWTError:
            return False

    def session_from_token(self, token: str) -> AuthSession:
        """Build the caller's session; the role comes from ``app_metadata``."""
        try:
            claims = self.decode_token(token)
        except JWTError as exc:
            raise AuthenticationRequiredError(f"Invalid access token: {exc}") from exc

        app_meta = claims.get("app_metadata") or {}
        user_meta = claims.get("user_metadata") or {}
        role = UserRole.parse(app_meta.get("role") or user_meta.get("role"))
        return AuthSession(
            user_id=str(claims["sub"]),
            access_token=token,
            email=claims.get("email", ""),
            role=role,
        )
