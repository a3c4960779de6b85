"""Allow-list sanitization applied to every rendered document.

Rendered HTML is only trusted after it has passed through :func:`sanitize`:
anything outside the allow-lists below is stripped, executable containers are
removed together with their content, and URLs are limited to web and mail
protocols. Disallowed markup is routine input from authors, so it is dropped
silently rather than reported.

Example
-------
>>> from zendocs.sanitizer import sanitize
>>> sanitize('<p onclick="x()">Hi<script>alert(1)</script></p>')
'<p>Hi</p>'
"""

from __future__ import annotations

import re

import bleach
from bs4 import BeautifulSoup

ALLOWED_TAGS = frozenset(
    {
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "p",
        "br",
        "hr",
        "span",
        "div",
        "strong",
        "em",
        "b",
        "i",
        "del",
        "code",
        "ul",
        "ol",
        "li",
        "a",
        "img",
        "pre",
        "blockquote",
        "button",
    }
)
ALLOWED_ATTRIBUTES = ["href", "src", "alt", "title", "id", "class", "target"]
ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})
DROPPED_ELEMENTS = (
    "script",
    "style",
    "template",
    "iframe",
    "object",
    "embed",
    "noscript",
)
DROPPED_ELEMENT_PATTERN = re.compile(
    r"<\s*(?:" + "|".join(DROPPED_ELEMENTS) + r")\b", re.IGNORECASE
)


def _drop_executable_elements(html: str) -> str:
    """Remove script-like elements together with everything inside them."""
    if not DROPPED_ELEMENT_PATTERN.search(html):
        return html
    soup = BeautifulSoup(html, "html.parser")
    for element in soup.find_all(DROPPED_ELEMENTS):
        element.decompose()
    return str(soup)


def sanitize(html: str) -> str:
    """Return ``html`` reduced to the allowed tags, attributes and protocols.

    Parameters
    ----------
    html : str
        Arbitrary, possibly hostile, HTML.

    Returns
    -------
    str
        HTML containing only allow-listed markup. Disallowed tags are stripped
        and their text kept; ``script``-like elements lose their content too.
        Sanitizing the result again returns it unchanged.
    """
    if not html:
        return ""
    return bleach.clean(
        _drop_executable_elements(html),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )


__all__ = [
    "ALLOWED_ATTRIBUTES",
    "ALLOWED_PROTOCOLS",
    "ALLOWED_TAGS",
    "sanitize",
]
