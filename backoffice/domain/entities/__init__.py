"""Domain entities exposed by the application."""

from .customer import Customer
from .notification import Notification
from .page import Page
from .role import Role
from .template import UNSET, NotificationTemplate, TemplateChanges
from .user import User

__all__ = [
    "Customer",
    "Notification",
    "NotificationTemplate",
    "Page",
    "Role",
    "TemplateChanges",
    "UNSET",
    "User",
]
