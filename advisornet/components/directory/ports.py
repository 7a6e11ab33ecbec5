from typing import Protocol

from advisornet.domain.entities import ApprovalStatus, Profile, UserType


class ProfileRepoPort(Protocol):
    def list_by_type(
        self, user_type: UserType, approval_status: ApprovalStatus = "approved"
    ) -> list[Profile]:
        """Profiles of one type and status, ordered by full_name."""
        ...
