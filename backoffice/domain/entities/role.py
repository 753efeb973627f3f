"""Domain entity representing a role."""

from dataclasses import dataclass


@dataclass
class Role:
    """Named set of permissions; ``system_role`` drives platform-level checks."""

    id: str | None
    name: str
    system_role: str | None = None
