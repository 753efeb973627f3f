"""SQLAlchemy model for the customer (tenant) table."""

from sqlalchemy import Column, DateTime, String

from backoffice.infrastructure.database import Base
from backoffice.utils import utcnow

from ._ids import new_id


class CustomerModel(Base):
    """Database representation of a tenant."""

    __tablename__ = "customer"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(120), nullable=False)
    owner_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ["CustomerModel"]
