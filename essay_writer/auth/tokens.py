"""Signed, time-limited identity tokens."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt

from essay_writer.errors import AuthenticationError, ConfigError

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(days=7)


class TokenAuthority:
    """Issues and verifies JWTs carrying a userId claim."""

    def __init__(self, secret: str, ttl: timedelta = DEFAULT_TTL):
        if not secret:
            raise ConfigError("JWT secret is not defined")
        self._secret = secret
        self.ttl = ttl

    def issue_token(self, user_id: str, ttl: Optional[timedelta] = None) -> str:
        """Sign a token identifying user_id, valid for ttl (default: authority TTL)."""
        if not user_id or not str(user_id).strip():
            raise ValueError("user_id is required")
        now = datetime.now(timezone.utc)
        claims = {
            "userId": str(user_id).strip(),
            "iat": now,
            "exp": now + (ttl or self.ttl),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify_token(self, token: Optional[str]) -> str:
        """
        Return the user id carried by a valid token.

        Raises:
            AuthenticationError: If the token is missing, expired, tampered or lacks a userId
        """
        if not token or not token.strip():
            raise AuthenticationError()
        try:
            claims = jwt.decode(token.strip(), self._secret, algorithms=[ALGORITHM])
        except JWTError:
            raise AuthenticationError()

        user_id = claims.get("userId")
        if not isinstance(user_id, str) or not user_id:
            raise AuthenticationError()
        return user_id
