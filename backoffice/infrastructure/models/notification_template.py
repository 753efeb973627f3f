"""SQLAlchemy model for notification templates."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from backoffice.infrastructure.database import Base
from backoffice.utils import utcnow

from ._ids import new_id


class NotificationTemplateModel(Base):
    """Database representation of a notification template.

    A NULL ``customer_id`` marks a global template shared by every tenant.
    """

    __tablename__ = "notification_template"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    comment = Column(Text, nullable=True)
    types = Column("type", String(100), nullable=False)
    channel = Column(String(50), nullable=False)
    customer_id = Column(String(36), ForeignKey("customer.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    customer = relationship("CustomerModel", lazy="joined")


__all__ = ["NotificationTemplateModel"]
