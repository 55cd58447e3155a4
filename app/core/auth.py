"""Bearer token issuance and validation (HS256 JWT)."""

from __future__ import annotations

import hmac
import logging
import secrets
import time

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from app.core.config import Settings

logger = logging.getLogger("auth")


class AuthenticationError(Exception):
    pass


class TokenService:
    def __init__(self) -> None:
        self.secret_key = ""
        self.algorithm = ""
        self.expire_seconds = 0
        self.username = ""
        self.password = ""
        self.initialized = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        self.secret_key = settings.JWT_SECRET_KEY
        if not self.secret_key:
            logger.warning("JWT_SECRET_KEY missing - using a random key, tokens will not survive a restart")
            self.secret_key = secrets.token_urlsafe(32)

        self.algorithm = settings.JWT_ALGORITHM
        self.expire_seconds = settings.JWT_EXPIRE_MINUTES * 60
        self.username = settings.AUTH_USERNAME
        self.password = settings.AUTH_PASSWORD
        self.initialized = True

    async def close(self) -> None:
        self.secret_key = ""
        self.username = ""
        self.password = ""
        self.initialized = False

    def check_credentials(self, username: str, password: str) -> bool:
        if not self.initialized:
            return False
        username_ok = hmac.compare_digest(username.encode(), self.username.encode())
        password_ok = hmac.compare_digest(password.encode(), self.password.encode())
        return username_ok and password_ok

    def issue_token(self, username: str) -> str:
        if not self.initialized:
            raise AuthenticationError("TokenService not initialized")

        now = int(time.time())
        claims = {"sub": username, "iat": now, "exp": now + self.expire_seconds}
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def validate_token(self, token: str) -> str:
        """Return the token subject or raise AuthenticationError."""
        if not self.initialized:
            raise AuthenticationError("TokenService not initialized")

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as e:
            raise AuthenticationError("Token is expired") from e
        except (JWTClaimsError, JWTError) as e:
            raise AuthenticationError("Invalid authentication credentials") from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthenticationError("Token has no subject")
        return subject


token_service = TokenService()
