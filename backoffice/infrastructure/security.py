"""Helpers for issuing and verifying JWT access tokens."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from backoffice.config import get_settings


def create_access_token(subject: str, expires_delta: timedelta | None = None, **claims) -> str:
    """Return a signed token whose ``sub`` claim is ``subject``."""

    settings = get_settings()
    expire = datetime.now(tz=timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {**claims, "sub": subject, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.access_token_algorithm)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.access_token_algorithm])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
