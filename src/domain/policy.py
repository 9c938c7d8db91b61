from collections.abc import Iterable

from src.domain.entities import SessionContext
from src.rules.models import Rules


class PolicyEngine:
    def __init__(self, rules: Rules):
        self.rules = rules

    def check_permission(self, session: SessionContext | None, action: str) -> bool:
        """
        Check whether the actor may perform the action.

        Order of precedence:
        1. Public Permissions (Global)
        2. Role-Based Access Control (RBAC)
        """
        if action in self.rules.rbac.public_permissions:
            return True

        if session is None:
            return False

        return self._roles_allow(session.roles, action)

    def _roles_allow(self, roles: Iterable[str], action: str) -> bool:
        for role in roles:
            allowed_actions = self.rules.rbac.roles.get(role, [])
            if "*" in allowed_actions or action in allowed_actions:
                return True

            # Scoped wildcards ("listing:*" matches "listing:create")
            if ":" in action:
                scope = action.split(":")[0]
                if f"{scope}:*" in allowed_actions:
                    return True

        return False

    def can_edit_listing(self, session: SessionContext | None, owner_id: object) -> bool:
        """Owners edit their own listings; "*" roles edit any."""
        if session is None:
            return False
        if self._roles_allow(session.roles, "listing:edit_any"):
            return True
        return session.user_id == owner_id and self._roles_allow(
            session.roles, "listing:edit_own"
        )
