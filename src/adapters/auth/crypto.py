"""
Password hashing and signed bearer tokens.

Tokens are HS256 JWTs whose subject is the user id. The signing key comes
from SITE_SECRET_KEY; without it a fixed development key is used and the
ops check at startup warns about it.
"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

DEV_SECRET_KEY = "dev-secret-unsafe"
ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


class JWTAuthAdapter:
    """AuthPort over signed JWT bearer tokens and argon2 password hashes."""

    def __init__(self, secret_key: str | None = None, algorithm: str = ALGORITHM) -> None:
        self.secret_key = secret_key or os.environ.get("SITE_SECRET_KEY", DEV_SECRET_KEY)
        self.algorithm = algorithm

    def hash_password(self, password: str) -> str:
        result: str = pwd_context.hash(password)
        return result

    def verify_password(self, plain: str, hashed: str) -> bool:
        result: bool = pwd_context.verify(plain, hashed)
        return result

    def encode(
        self, claims: dict[str, Any], ttl: timedelta, now: datetime | None = None
    ) -> str:
        """Sign claims with an expiry; now is injectable to mint expired tokens."""
        issued = now if now is not None else datetime.now(UTC)
        token: str = jwt.encode(
            {**claims, "exp": issued + ttl}, self.secret_key, algorithm=self.algorithm
        )
        return token

    def decode(self, token: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        return cast(dict[str, Any], payload)

    def create_token(self, user_id: UUID, ttl_minutes: int, now: datetime | None = None) -> str:
        return self.encode({"sub": str(user_id)}, timedelta(minutes=ttl_minutes), now)

    def validate_token(self, token: str) -> UUID | None:
        payload = self.decode(token)
        if not payload or not isinstance(payload.get("sub"), str):
            return None
        try:
            return UUID(payload["sub"])
        except ValueError:
            return None
