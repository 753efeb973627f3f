from .notification import (
    MessageResponse,
    NotificationCreate,
    NotificationMarkReadRequest,
    NotificationPage,
    NotificationRead,
    PaginationMeta,
    UnreadCountRead,
)
from .template import (
    TemplateCreate,
    TemplatePage,
    TemplateRead,
    TemplateSendRequest,
    TemplateUpdate,
)

__all__ = [
    "MessageResponse",
    "NotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationPage",
    "NotificationRead",
    "PaginationMeta",
    "TemplateCreate",
    "TemplatePage",
    "TemplateRead",
    "TemplateSendRequest",
    "TemplateUpdate",
    "UnreadCountRead",
]
