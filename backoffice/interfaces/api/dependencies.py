"""FastAPI dependency utilities."""

from collections.abc import Callable

from fastapi import BackgroundTasks, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backoffice.application.use_cases.notifications import (
    NotificationDispatcher,
    ReadStateTracker,
)
from backoffice.config import get_settings
from backoffice.domain.entities import User
from backoffice.infrastructure.database import get_db, get_session_factory
from backoffice.infrastructure.notifications import (
    ChannelConnectionManager,
    RealtimePublisher,
    channel_manager,
    realtime_publisher,
)
from backoffice.infrastructure.repositories import UserRepository
from backoffice.infrastructure.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise _unauthorized()

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the bearer token."""

    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    return resolve_current_user(credentials.credentials, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the user is a system administrator or customer success member."""

    if not current_user.is_admin():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return current_user


def require_system_admin(current_user: User = Depends(get_current_active_user)) -> User:
    if not current_user.is_system_admin():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return current_user


def resolve_tenant_scope(user: User) -> str | None:
    """Return the customer an administrator is confined to.

    System administrators see every customer (``None``); customer success
    members only their own, and are rejected when they have none.
    """

    if user.is_system_admin():
        return None
    if not user.customer_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Customer success user must belong to a customer",
        )
    return user.customer_id


def get_realtime_publisher() -> RealtimePublisher:
    return realtime_publisher


def get_channel_manager() -> ChannelConnectionManager:
    return channel_manager


def get_notification_dispatcher(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> NotificationDispatcher:
    """Build a dispatcher whose realtime delivery runs after the response."""

    return NotificationDispatcher(
        db,
        publisher=publisher,
        schedule=background_tasks.add_task,
        session_factory=session_factory,
        delay=get_settings().post_commit_delay_seconds,
    )


def get_read_state_tracker(
    db: Session = Depends(get_db),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
) -> ReadStateTracker:
    return ReadStateTracker(db, publisher=publisher)
