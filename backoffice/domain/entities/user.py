"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

from ..constants import (
    ROLE_CUSTOMER_SUCCESS,
    ROLE_SYSTEM_ADMIN,
    UserStatus,
)
from .role import Role


@dataclass
class User:
    """Core attributes describing an application user."""

    id: str | None
    email: str
    full_name: str
    customer_id: str | None
    role: Role | None
    status: str = UserStatus.ACTIVE.value
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None and self.status == UserStatus.ACTIVE.value

    def has_role(self, system_role: str) -> bool:
        """Return ``True`` when the user's system role matches ``system_role``."""

        if self.role is None or self.role.system_role is None:
            return False
        return self.role.system_role.lower() == system_role.lower()

    def is_system_admin(self) -> bool:
        return self.has_role(ROLE_SYSTEM_ADMIN)

    def is_customer_success(self) -> bool:
        return self.has_role(ROLE_CUSTOMER_SUCCESS)

    def is_admin(self) -> bool:
        """Return ``True`` for users allowed into the administration views."""

        return self.is_system_admin() or self.is_customer_success()
