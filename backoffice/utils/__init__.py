"""Utility helpers for reusable functionality."""

from .datetime import ensure_utc, utcnow
from .html import EDITOR_POLICY, NOTIFICATION_POLICY, HtmlSanitizer, SanitizerPolicy

__all__ = [
    "ensure_utc",
    "utcnow",
    "EDITOR_POLICY",
    "NOTIFICATION_POLICY",
    "HtmlSanitizer",
    "SanitizerPolicy",
]
