"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from backoffice.application.use_cases.notifications import (
    AdminNotificationFilters,
    NotificationDispatcher,
    NotificationFilters,
    NotificationRequest,
    ReadStateTracker,
    get_notification as get_notification_uc,
    list_admin_notifications as list_admin_notifications_uc,
    list_notifications as list_notifications_uc,
)
from backoffice.domain.constants import (
    UNREAD_COUNT_EVENT,
    main_notifications_channel,
    unread_notifications_channel,
)
from backoffice.domain.entities import Notification, Page, User
from backoffice.domain.exceptions import ApplicationError
from backoffice.infrastructure.database import get_db, get_session_factory
from backoffice.infrastructure.notifications import ChannelConnectionManager, RealtimePublisher
from backoffice.infrastructure.repositories import CustomerRepository, UserRepository
from backoffice.interfaces.api.dependencies import (
    get_channel_manager,
    get_current_active_user,
    get_notification_dispatcher,
    get_read_state_tracker,
    get_realtime_publisher,
    require_admin,
    require_system_admin,
    resolve_current_user,
    resolve_tenant_scope,
)
from backoffice.interfaces.api.routes_helpers import page_meta, to_http_exception
from backoffice.interfaces.api.schemas import (
    MessageResponse,
    NotificationCreate,
    NotificationMarkReadRequest,
    NotificationPage,
    NotificationRead,
    UnreadCountRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

API_GENERATED_BY = "user (notifications api)"


def _notification_to_read_model(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id,
        user_id=notification.user_id,
        customer_id=notification.customer_id,
        sender_id=notification.sender_id,
        template_id=notification.template_id,
        type=sorted(notification.types),
        title=notification.title,
        message=notification.message,
        channel=notification.channel,
        metadata=notification.metadata,
        generated_by=notification.generated_by,
        is_read=notification.is_read,
        created_at=notification.created_at,
        read_at=notification.read_at,
        user_email=notification.user_email,
        user_full_name=notification.user_full_name,
        customer_name=notification.customer_name,
    )


def _page_to_read_model(page: Page[Notification]) -> NotificationPage:
    return NotificationPage(
        data=[_notification_to_read_model(item) for item in page.items],
        meta=page_meta(page),
    )


@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(require_system_admin),
) -> NotificationRead:
    """Create a notification for one user or for every user of a customer."""

    if not payload.user_id and not payload.customer_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Notification must be associated with a user or customer",
        )
    if payload.customer_id and CustomerRepository(db).get(payload.customer_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Customer not found")
    if payload.user_id:
        recipient = UserRepository(db).get(payload.user_id)
        if recipient is None or recipient.customer_id != payload.customer_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User not linked to the customer",
            )
        if not recipient.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is not active")

    try:
        notification = dispatcher.create(
            NotificationRequest(
                title=payload.title,
                message=payload.message,
                types=payload.type,
                channel=payload.channel.value if payload.channel else None,
                user_id=payload.user_id,
                customer_id=payload.customer_id,
                sender_id=current_user.id,
                template_id=payload.template_id,
                metadata=payload.metadata,
                generated_by=API_GENERATED_BY,
            )
        )
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return _notification_to_read_model(notification)


@router.get("", response_model=NotificationPage)
def list_notifications(
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1),
    type: str | None = None,
    is_read: bool | None = None,
    channel: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPage:
    """Return the authenticated user's notifications, newest first."""

    result = list_notifications_uc(
        db,
        current_user.id,
        NotificationFilters(
            page=page, per_page=per_page, type=type, is_read=is_read, channel=channel
        ),
    )
    return _page_to_read_model(result)


@router.get("/all", response_model=NotificationPage)
def list_all_notifications(
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1),
    user_id: list[str] | None = Query(None),
    customer_id: list[str] | None = Query(None),
    sender_id: list[str] | None = Query(None),
    type: list[str] | None = Query(None),
    is_read: bool | None = None,
    channel: list[str] | None = Query(None),
    search: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> NotificationPage:
    """Return notifications of every user; customer success sees its own customer only."""

    tenant = resolve_tenant_scope(current_user)
    if tenant is not None:
        if customer_id and (len(customer_id) > 1 or customer_id[0] != tenant):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to access notifications for this customer",
            )
        customer_id = [tenant]

    result = list_admin_notifications_uc(
        db,
        AdminNotificationFilters(
            page=page,
            per_page=per_page,
            user_ids=user_id,
            customer_ids=customer_id,
            sender_ids=sender_id,
            types=type,
            is_read=is_read,
            channels=channel,
            search=search,
        ),
    )
    return _page_to_read_model(result)


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    tracker: ReadStateTracker = Depends(get_read_state_tracker),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountRead:
    return UnreadCountRead(count=tracker.unread_count(current_user.id))


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    try:
        notification = get_notification_uc(db, current_user.id, notification_id)
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return _notification_to_read_model(notification)


@router.patch("/read-all", response_model=MessageResponse)
def mark_all_as_read(
    tracker: ReadStateTracker = Depends(get_read_state_tracker),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    try:
        tracker.mark_all(current_user.id)
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="All notifications marked as read")


@router.patch("/{notification_id}", response_model=NotificationRead)
def mark_as_read(
    notification_id: str,
    tracker: ReadStateTracker = Depends(get_read_state_tracker),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    try:
        notification = tracker.mark_one(current_user.id, notification_id)
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return _notification_to_read_model(notification)


@router.patch("", response_model=MessageResponse)
def mark_many_as_read(
    payload: NotificationMarkReadRequest,
    tracker: ReadStateTracker = Depends(get_read_state_tracker),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    try:
        tracker.mark_many(current_user.id, payload.unique_ids())
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Notifications marked as read")


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    publisher: RealtimePublisher = Depends(get_realtime_publisher),
    manager: ChannelConnectionManager = Depends(get_channel_manager),
) -> None:
    """Stream new notifications and unread counts to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    session = session_factory()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        count = ReadStateTracker(session, publisher=publisher).unread_count(user.id)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    finally:
        session.close()

    unread_channel = unread_notifications_channel(user.id)
    await manager.connect(websocket, main_notifications_channel(user.id), unread_channel)
    try:
        await websocket.send_json(
            {"channel": unread_channel, "event": UNREAD_COUNT_EVENT, "payload": {"count": count}}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = session_factory()
                    try:
                        ReadStateTracker(ack_session, publisher=publisher).mark_many(
                            user.id, [str(item) for item in ids]
                        )
                    except ApplicationError:
                        logger.exception("Failed to acknowledge notifications for %s", user.id)
                    finally:
                        ack_session.close()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
