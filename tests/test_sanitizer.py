"""Tests for HTML sanitization of notification and template bodies."""

import pytest

from backoffice.utils import EDITOR_POLICY, HtmlSanitizer


@pytest.fixture()
def sanitizer():
    return HtmlSanitizer()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("<script>evil()</script>hello", "hello"),
        ("<style>p { color: red }</style>ok", "ok"),
        ('<p onclick="steal()">hi</p>', "<p>hi</p>"),
        (
            "<p><strong>Bold</strong> and <em>italic</em></p>",
            "<p><strong>Bold</strong> and <em>italic</em></p>",
        ),
        ("", ""),
        (None, ""),
    ],
)
def test_notification_policy(sanitizer, raw, expected):
    assert sanitizer.sanitize(raw) == expected


def test_javascript_links_are_neutralised(sanitizer):
    cleaned = sanitizer.sanitize(
        '<a href="javascript:alert(1)">x</a><a href="https://example.com">y</a>'
    )

    assert "javascript" not in cleaned
    assert 'href="https://example.com"' in cleaned


def test_images_need_the_editor_policy(sanitizer):
    raw = '<img src="https://example.com/a.png" alt="a" onerror="alert(1)">'

    assert "<img" not in sanitizer.sanitize(raw)

    cleaned = HtmlSanitizer(EDITOR_POLICY).sanitize(raw)
    assert "<img" in cleaned
    assert 'src="https://example.com/a.png"' in cleaned
    assert "onerror" not in cleaned
