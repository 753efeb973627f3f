"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from backoffice.domain.entities import Role, User
from backoffice.infrastructure.models import RoleModel, UserModel
from backoffice.utils import ensure_utc, utcnow

from ._session import commit


class UserRepository:
    """Provide the user lookups needed by the notification workflows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        model = self._get_model(id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self._get_model(email=email)
        return self._to_entity(model) if model else None

    def list_ids_by_customer(self, customer_id: str) -> list[str]:
        """Return the ids of every non-deleted user of ``customer_id``."""

        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.customer_id == customer_id)
            .filter(UserModel.deleted_at.is_(None))
            .order_by(UserModel.created_at.asc(), UserModel.id.asc())
        )
        return [user_id for (user_id,) in query.all()]

    def get_map_by_ids(self, user_ids: Sequence[str]) -> dict[str, User]:
        if not user_ids:
            return {}
        query = (
            self.session.query(UserModel)
            .filter(UserModel.id.in_(set(user_ids)))
            .filter(UserModel.deleted_at.is_(None))
        )
        return {model.id: self._to_entity(model) for model in query.all()}

    def create(self, user: User) -> User:
        model = UserModel(
            email=user.email,
            full_name=user.full_name,
            customer_id=user.customer_id,
            status=user.status,
        )
        if user.id:
            model.id = user.id
        if user.role is not None:
            model.role = self._get_or_create_role(user.role)
        self.session.add(model)
        commit(self.session, action="create user")
        self.session.refresh(model)
        return self._to_entity(model)

    def soft_delete(self, user_id: str) -> None:
        model = self._get_model(id=user_id)
        if model is None:
            return
        model.deleted_at = utcnow()
        commit(self.session, action="delete user")

    def _get_or_create_role(self, role: Role) -> RoleModel:
        model = None
        if role.id:
            model = self.session.get(RoleModel, role.id)
        if model is None and role.system_role:
            model = (
                self.session.query(RoleModel)
                .filter(RoleModel.system_role == role.system_role)
                .first()
            )
        if model is None:
            model = RoleModel(name=role.name, system_role=role.system_role)
            self.session.add(model)
        return model

    def _get_model(self, include_deleted: bool = False, **filters) -> UserModel | None:
        query = self.session.query(UserModel)
        if not include_deleted:
            query = query.filter(UserModel.deleted_at.is_(None))
        return query.filter_by(**filters).first()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        role = None
        if model.role is not None:
            role = Role(id=model.role.id, name=model.role.name, system_role=model.role.system_role)
        return User(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            customer_id=model.customer_id,
            role=role,
            status=model.status,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
            deleted_at=ensure_utc(model.deleted_at),
        )


__all__ = ["UserRepository"]
