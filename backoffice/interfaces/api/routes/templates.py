"""Routes to manage notification templates and send them."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backoffice.application.use_cases.notifications import NotificationDispatcher
from backoffice.application.use_cases.templates import (
    create_template as create_template_uc,
    delete_template as delete_template_uc,
    get_template as get_template_uc,
    list_templates as list_templates_uc,
    send_template as send_template_uc,
    update_template as update_template_uc,
)
from backoffice.domain.entities import NotificationTemplate, User
from backoffice.domain.exceptions import ApplicationError
from backoffice.infrastructure.database import get_db
from backoffice.infrastructure.repositories import UserRepository
from backoffice.interfaces.api.dependencies import (
    get_notification_dispatcher,
    require_admin,
    resolve_tenant_scope,
)
from backoffice.interfaces.api.routes_helpers import page_meta, to_http_exception
from backoffice.interfaces.api.schemas import (
    MessageResponse,
    TemplateCreate,
    TemplatePage,
    TemplateRead,
    TemplateSendRequest,
    TemplateUpdate,
)

router = APIRouter(prefix="/templates", tags=["templates"])


def _template_to_read_model(template: NotificationTemplate) -> TemplateRead:
    return TemplateRead(
        id=template.id,
        title=template.title,
        message=template.message,
        comment=template.comment,
        type=sorted(template.types),
        channel=template.channel,
        customer_id=template.customer_id,
        customer_name=template.customer_name,
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _ensure_owned(db: Session, template_id: str, tenant: str | None) -> None:
    """Customer success members may read global templates but not modify them."""

    if tenant is None:
        return
    template = get_template_uc(db, template_id, customer_id=tenant)
    if template.customer_id != tenant:
        raise _forbidden("Not authorized to modify this notification template")


@router.get("", response_model=TemplatePage)
def list_templates(
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1),
    customer_id: str | None = None,
    type: list[str] | None = Query(None),
    channel: list[str] | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> TemplatePage:
    """Return templates visible to the caller, newest first."""

    tenant = resolve_tenant_scope(current_user)
    if tenant is not None:
        if customer_id and customer_id != tenant:
            raise _forbidden("Not authorized to access templates of this customer")
        customer_id = tenant

    result = list_templates_uc(
        db,
        page=page,
        per_page=per_page,
        customer_id=customer_id,
        types=type,
        channels=channel,
    )
    return TemplatePage(
        data=[_template_to_read_model(item) for item in result.items],
        meta=page_meta(result),
    )


@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: TemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> TemplateRead:
    tenant = resolve_tenant_scope(current_user)
    customer_id = payload.customer_id
    if tenant is not None:
        if customer_id and customer_id != tenant:
            raise _forbidden("Not authorized to create templates for this customer")
        customer_id = tenant

    try:
        template = create_template_uc(
            db,
            title=payload.title,
            message=payload.message,
            types=payload.type,
            channel=payload.channel,
            comment=payload.comment,
            customer_id=customer_id,
        )
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return _template_to_read_model(template)


@router.get("/{template_id}", response_model=TemplateRead)
def get_template(
    template_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> TemplateRead:
    try:
        template = get_template_uc(db, template_id, customer_id=resolve_tenant_scope(current_user))
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return _template_to_read_model(template)


@router.patch("/{template_id}", response_model=TemplateRead)
def update_template(
    template_id: str,
    payload: TemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> TemplateRead:
    tenant = resolve_tenant_scope(current_user)
    try:
        _ensure_owned(db, template_id, tenant)
        template = update_template_uc(db, template_id, payload.to_changes(), customer_id=tenant)
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return _template_to_read_model(template)


@router.delete("/{template_id}", response_model=TemplateRead)
def delete_template(
    template_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> TemplateRead:
    tenant = resolve_tenant_scope(current_user)
    try:
        _ensure_owned(db, template_id, tenant)
        template = delete_template_uc(db, template_id, customer_id=tenant)
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return _template_to_read_model(template)


@router.post("/send/{template_id}", response_model=MessageResponse)
def send_template(
    template_id: str,
    payload: TemplateSendRequest,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    """Send the template to a whole customer or to the listed users."""

    if not payload.user_ids and not payload.customer_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Notification must be associated with users or a customer",
        )

    tenant = resolve_tenant_scope(current_user)
    if tenant is not None and payload.customer_id and payload.customer_id != tenant:
        raise _forbidden("Cannot send notifications for a different customer")

    if not payload.customer_id:
        users = UserRepository(db).get_map_by_ids(payload.user_ids)
        if not users:
            raise _forbidden("No users found for the provided user IDs")
        if any(not user.is_active for user in users.values()):
            raise _forbidden("One or more users are not active")
        if tenant is not None and any(user.customer_id != tenant for user in users.values()):
            raise _forbidden("Cannot send notifications to users of a different customer")

    try:
        message = send_template_uc(
            db,
            template_id,
            dispatcher=dispatcher,
            user_ids=payload.user_ids,
            customer_id=payload.customer_id,
            requester_customer_id=tenant,
            sender_id=current_user.id,
        )
    except ApplicationError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message=message)
