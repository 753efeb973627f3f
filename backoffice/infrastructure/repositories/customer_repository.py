"""Persistence helpers for tenants."""

from __future__ import annotations

from sqlalchemy.orm import Session

from backoffice.domain.entities import Customer
from backoffice.infrastructure.models import CustomerModel
from backoffice.utils import ensure_utc

from ._session import commit


class CustomerRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, customer_id: str) -> Customer | None:
        model = (
            self.session.query(CustomerModel)
            .filter(CustomerModel.id == customer_id)
            .filter(CustomerModel.deleted_at.is_(None))
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, customer: Customer) -> Customer:
        model = CustomerModel(name=customer.name, owner_id=customer.owner_id)
        if customer.id:
            model.id = customer.id
        self.session.add(model)
        commit(self.session, action="create customer")
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: CustomerModel) -> Customer:
        return Customer(
            id=model.id,
            name=model.name,
            owner_id=model.owner_id,
            created_at=ensure_utc(model.created_at),
            deleted_at=ensure_utc(model.deleted_at),
        )


__all__ = ["CustomerRepository"]
