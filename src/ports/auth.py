from typing import Protocol
from uuid import UUID


class AuthPort(Protocol):
    def hash_password(self, password: str) -> str: ...

    def verify_password(self, plain: str, hashed: str) -> bool: ...

    def create_token(self, user_id: UUID, ttl_minutes: int) -> str: ...

    def validate_token(self, token: str) -> UUID | None:
        # Returns user_id or None if invalid/expired
        ...
