"""HTML sanitization policies for user supplied rich text."""

from __future__ import annotations

from dataclasses import dataclass, field

import nh3

_SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto"})


@dataclass(frozen=True)
class SanitizerPolicy:
    """Allow-list describing which markup survives sanitization."""

    name: str
    tags: frozenset[str]
    attributes: dict[str, frozenset[str]] = field(default_factory=dict)
    url_schemes: frozenset[str] = _SAFE_URL_SCHEMES


NOTIFICATION_POLICY = SanitizerPolicy(
    name="notification",
    tags=frozenset(
        {
            "p", "br", "strong", "em", "u", "ol", "ul", "li",
            "h1", "h2", "h3", "h4", "a", "span", "div",
        }
    ),
    attributes={
        "a": frozenset({"href", "target"}),
        "span": frozenset({"style"}),
        "div": frozenset({"style"}),
        "*": frozenset({"class"}),
    },
)

_HEADING_ATTRIBUTES = frozenset({"id", "class", "style"})

EDITOR_POLICY = SanitizerPolicy(
    name="editor",
    tags=NOTIFICATION_POLICY.tags
    | frozenset({"h5", "h6", "img", "video", "code", "pre", "blockquote", "sub", "sup"}),
    attributes={
        "a": frozenset({"href", "target", "class", "style"}),
        "img": frozenset({"src", "alt", "width", "height", "style", "class"}),
        "video": frozenset({"src", "controls", "width", "style", "class"}),
        "span": frozenset({"style", "class"}),
        "div": frozenset({"style", "class"}),
        "code": frozenset({"class"}),
        "pre": frozenset({"class"}),
        "blockquote": frozenset({"class", "style"}),
        **{f"h{level}": _HEADING_ATTRIBUTES for level in range(1, 7)},
        "*": frozenset({"class"}),
    },
)


class HtmlSanitizer:
    """Strip script execution vectors from HTML while keeping safe formatting.

    Content of ``<script>`` and ``<style>`` elements is dropped entirely, event
    handler attributes are never allowed and links are restricted to
    ``http``, ``https`` and ``mailto`` URLs.
    """

    def __init__(self, policy: SanitizerPolicy = NOTIFICATION_POLICY) -> None:
        self.policy = policy

    def sanitize(self, raw_html: str | None) -> str:
        if not raw_html:
            return ""
        return nh3.clean(
            raw_html,
            tags=set(self.policy.tags),
            attributes={tag: set(names) for tag, names in self.policy.attributes.items()},
            url_schemes=set(self.policy.url_schemes),
        )


__all__ = [
    "EDITOR_POLICY",
    "NOTIFICATION_POLICY",
    "HtmlSanitizer",
    "SanitizerPolicy",
]
