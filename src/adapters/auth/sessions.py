"""Resolve a bearer token to the signed-in actor."""

import logging

from src.domain.entities import SessionContext, User
from src.ports.auth import AuthPort
from src.ports.repo import UserRepoPort

logger = logging.getLogger(__name__)


def session_for(user: User) -> SessionContext:
    return SessionContext(user_id=user.id, email=user.email, roles=frozenset(user.roles))


class TokenSessionProvider:
    def __init__(self, auth: AuthPort, users: UserRepoPort):
        self.auth = auth
        self.users = users

    def resolve(self, token: str | None) -> SessionContext | None:
        """None for a missing, invalid or expired token, or an inactive user."""
        if not token:
            return None
        user_id = self.auth.validate_token(token)
        if user_id is None:
            return None
        user = self.users.get_by_id(user_id)
        if user is None or user.status != "active":
            logger.info("Token for unknown or inactive user %s", user_id)
            return None
        return session_for(user)
