"""SQLAlchemy model for roles."""

from sqlalchemy import Column, String

from backoffice.infrastructure.database import Base

from ._ids import new_id


class RoleModel(Base):
    __tablename__ = "role"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    system_role = Column(String(50), nullable=True, index=True)


__all__ = ["RoleModel"]
