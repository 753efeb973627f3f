"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from backoffice.infrastructure.database import Base
from backoffice.utils import utcnow

from ._ids import new_id


class NotificationModel(Base):
    """Database representation for user notifications.

    ``read_at`` is NULL while the notification is unread.
    """

    __tablename__ = "notification"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("customer.id"), nullable=True, index=True)
    sender_id = Column(String(36), nullable=True)
    template_id = Column(String(36), nullable=True)
    types = Column("type", String(100), nullable=False)
    title = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    channel = Column(String(50), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)
    read_at = Column(DateTime(timezone=True), nullable=True, index=True)
    generated_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("UserModel", lazy="joined", foreign_keys=[user_id])
    customer = relationship("CustomerModel", lazy="joined")


__all__ = ["NotificationModel"]
