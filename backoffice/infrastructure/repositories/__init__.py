"""Repository implementations for infrastructure layer."""

from .customer_repository import CustomerRepository
from .notification_repository import NotificationRepository
from .template_repository import TemplateRepository
from .user_repository import UserRepository

__all__ = [
    "CustomerRepository",
    "NotificationRepository",
    "TemplateRepository",
    "UserRepository",
]
