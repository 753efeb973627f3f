"""Shared fixtures for the back office test-suite."""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from uuid import uuid4

import pytest

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

from backoffice.domain.constants import ROLE_STANDARD_USER, NotificationType, UserStatus
from backoffice.domain.entities import Customer, Notification, Role, User
from backoffice.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from backoffice.infrastructure.repositories import (
    CustomerRepository,
    NotificationRepository,
    UserRepository,
)
from backoffice.utils import utcnow


class RecordingPublisher:
    """Realtime publisher that keeps every published event in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict]] = []

    def publish(self, channel: str, event: str, payload) -> None:
        self.events.append((channel, event, payload))

    def payloads(self, channel: str, event: str | None = None) -> list:
        return [
            payload
            for published_channel, published_event, payload in self.events
            if published_channel == channel and (event is None or published_event == event)
        ]


class ExplodingPublisher:
    def publish(self, channel: str, event: str, payload) -> None:
        raise RuntimeError("realtime backend unavailable")


class InlineTasks:
    """Background task scheduler running tasks in the calling thread.

    With ``defer=True`` tasks are queued until :meth:`run_pending` is called,
    the way ``BackgroundTasks`` holds them until the response is sent.
    """

    def __init__(self, *, defer: bool = False) -> None:
        self.defer = defer
        self.pending: list = []
        self.scheduled = 0

    def add_task(self, job, *args, **kwargs) -> None:
        self.scheduled += 1
        if self.defer:
            self.pending.append((job, args, kwargs))
        else:
            job(*args, **kwargs)

    def run_pending(self) -> None:
        pending, self.pending = self.pending, []
        for job, args, kwargs in pending:
            job(*args, **kwargs)


class Seeder:
    """Create customers, users and notifications directly through the repositories."""

    def __init__(self, session) -> None:
        self.session = session

    def customer(self, name: str = "Acme") -> Customer:
        return CustomerRepository(self.session).create(Customer(id=None, name=name))

    def user(
        self,
        customer: Customer | None = None,
        *,
        email: str | None = None,
        role: str = ROLE_STANDARD_USER,
        status: str = UserStatus.ACTIVE.value,
        deleted: bool = False,
    ) -> User:
        email = email or f"user-{uuid4().hex[:8]}@example.com"
        repository = UserRepository(self.session)
        user = repository.create(
            User(
                id=None,
                email=email,
                full_name=email.split("@")[0].title(),
                customer_id=customer.id if customer else None,
                role=Role(id=None, name=role.replace("_", " ").title(), system_role=role),
                status=status,
            )
        )
        if deleted:
            repository.soft_delete(user.id)
        return user

    def notification(
        self,
        user: User,
        *,
        read: bool = False,
        types=(NotificationType.IN_APP.value,),
        channel: str | None = "info",
        title: str = "Hello",
        message: str = "<p>Welcome</p>",
        created_at: datetime | None = None,
        generated_by: str | None = None,
        sender_id: str | None = None,
    ) -> Notification:
        now = utcnow()
        return NotificationRepository(self.session).create(
            Notification(
                id=None,
                user_id=user.id,
                title=title,
                message=message,
                types=frozenset(types),
                channel=channel,
                customer_id=user.customer_id,
                sender_id=sender_id,
                generated_by=generated_by,
                created_at=created_at or now,
                read_at=now - timedelta(minutes=5) if read else None,
            )
        )


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'backoffice.db'}")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def tasks() -> InlineTasks:
    return InlineTasks()


@pytest.fixture()
def seed(session) -> Seeder:
    return Seeder(session)
