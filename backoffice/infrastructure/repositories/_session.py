"""Transaction helpers shared by the repositories."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.domain.exceptions import TransientInfraError

logger = logging.getLogger(__name__)


def commit(session: Session, *, action: str) -> None:
    """Commit ``session``; roll back and raise :class:`TransientInfraError` on failure."""

    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Database error while trying to %s: %s", action, exc)
        raise TransientInfraError(f"Failed to {action}") from exc
