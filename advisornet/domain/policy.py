from collections.abc import Sequence

from advisornet.domain.entities import Profile, RoleType, User
from advisornet.rules.models import Rules


class PolicyEngine:
    def __init__(self, rules: Rules):
        self.rules = rules

    def check_permission(
        self,
        user: User | None,
        user_roles: Sequence[str],
        action: str,
    ) -> bool:
        """
        Check if the user/role is allowed to perform the action.

        Order of precedence:
        1. Public Permissions (Global)
        2. Role-Based Access Control (RBAC)
        """
        if action in self.rules.rbac.public_permissions:
            return True

        if not user or user.status != "active":
            return False

        for role in user_roles:
            allowed_actions = self.rules.rbac.roles.get(role, [])
            if "*" in allowed_actions:
                return True
            if action in allowed_actions:
                return True

            # Scoped wildcards (e.g. "connections:*" matches "connections:send")
            if ":" in action:
                scope = action.split(":")[0]
                if f"{scope}:*" in allowed_actions:
                    return True

        return False

    def has_role(self, user: User | None, role: RoleType) -> bool:
        if not user:
            return False
        return role in user.roles

    def is_admin(self, user: User | None) -> bool:
        return self.has_role(user, "admin")

    # --- Admin ---

    def can_manage_invites(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "invites:manage")

    def can_moderate_profiles(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "profiles:approve")

    # --- Members ---

    def can_browse_directory(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "directory:browse")

    def can_view_profiles(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "profiles:view")

    def can_edit_own_profile(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "profiles:edit_own")

    def can_connect(self, user: User) -> bool:
        """Send, answer and remove connection requests."""
        return self.check_permission(user, user.roles, "connections:send")

    def can_view_connections(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "connections:view")

    def can_publish(self, user: User) -> bool:
        """Create, edit and delete one's own publications."""
        return self.check_permission(user, user.roles, "publications:write")

    def can_view_publications(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "publications:view")

    # --- Anonymous ---

    def can_register(self) -> bool:
        """Invite validation and sign-up; closed when not public."""
        return self.check_permission(None, [], "register:submit")


def is_approved(profile: Profile | None) -> bool:
    """The approval gate: only approved profiles reach member features."""
    return profile is not None and profile.approval_status == "approved"
