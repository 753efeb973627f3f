"""SQLAlchemy model for the user table."""

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from backoffice.domain.constants import UserStatus
from backoffice.infrastructure.database import Base
from backoffice.utils import utcnow

from ._ids import new_id


class UserModel(Base):
    """Database representation of a tenant member or platform operator."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(120), nullable=False)
    customer_id = Column(String(36), ForeignKey("customer.id"), nullable=True, index=True)
    role_id = Column(String(36), ForeignKey("role.id"), nullable=True)
    status = Column(String(20), nullable=False, default=UserStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    role = relationship("RoleModel", lazy="joined")
    customer = relationship("CustomerModel", lazy="joined")


__all__ = ["UserModel"]
