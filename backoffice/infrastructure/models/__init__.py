"""ORM models used by the application infrastructure."""

from ._ids import new_id
from .customer import CustomerModel
from .notification import NotificationModel
from .notification_template import NotificationTemplateModel
from .role import RoleModel
from .user import UserModel

__all__ = [
    "CustomerModel",
    "NotificationModel",
    "NotificationTemplateModel",
    "RoleModel",
    "UserModel",
    "new_id",
]
