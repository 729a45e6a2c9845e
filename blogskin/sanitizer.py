"""HTML and CSS sanitization for rendered custom skins.

Everything the template interpreter produces passes through here before it is
handed to a browser. The interpreter itself is not safe; these two functions
are the trust boundary, and both are total: they never raise.

``sanitize_html`` is an allow-list built on bleach. ``sanitize_css`` is a
denylist over a handful of known script vectors. It is not a CSS parser and
does not catch indirection tricks such as smuggling ``url(javascript:...)``
through custom properties.
"""

import logging
import re
from typing import Callable

import bleach

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset([
    "div", "span", "p", "a", "img",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "br", "hr",
    "strong", "em", "b", "i", "u",
    "header", "footer", "nav", "main", "aside", "article", "section",
    "figure", "figcaption", "blockquote", "pre", "code",
    "table", "thead", "tbody", "tr", "th", "td",
    "button", "svg", "path",
])

FORM_TAGS = frozenset(["input", "form", "label", "select", "option", "textarea"])

# Compared lowercased; the parser may report SVG names like viewBox either way
ALLOWED_ATTRIBUTES = frozenset([
    "class", "id", "href", "src", "alt", "title", "style",
    "data-post-id", "data-blog-id", "data-category-id",
    "target", "rel", "width", "height", "loading",
    "viewbox", "fill", "stroke", "stroke-width",
    "stroke-linecap", "stroke-linejoin", "d",
])

FORM_ATTRIBUTES = frozenset(["type", "name", "value", "placeholder"])

# Elements whose content is dropped together with the element
_RAW_TEXT_RE = re.compile(
    r"<(script|style|iframe|object|embed|noscript|template|title)\b[^>]*>.*?(?:</\1\s*>|\Z)",
    re.IGNORECASE | re.DOTALL,
)

BLOCKED_MARKER = "/* blocked */"

_DANGEROUS_CSS_PATTERNS = (
    re.compile(r"expression\s*\(", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"behavior\s*:", re.IGNORECASE),
    re.compile(r"@import\s+url\s*\(", re.IGNORECASE),
    re.compile(r"binding\s*:", re.IGNORECASE),
)


def sanitize_css(css: str) -> str:
    """Neutralize known script vectors in a CSS block.

    Args:
        css: Author-supplied CSS

    Returns:
        CSS with every dangerous pattern replaced by ``/* blocked */``
    """
    if not isinstance(css, str):
        return ""

    sanitized = css
    for pattern in _DANGEROUS_CSS_PATTERNS:
        sanitized = pattern.sub(BLOCKED_MARKER, sanitized)
    return sanitized


class InlineStylePolicy:
    """Decides what happens to ``style="..."`` attribute values.

    bleach hands every kept style attribute to ``sanitize_css``. By default
    values pass through untouched so authored skins keep their inline styles;
    with ``filter_styles`` they get the same denylist as the CSS block.
    """

    def __init__(self, filter_styles: bool = False) -> None:
        self.filter_styles = filter_styles

    def sanitize_css(self, style: str) -> str:
        if self.filter_styles:
            return sanitize_css(style)
        return style


def _strip_raw_text_elements(html: str) -> str:
    previous = None
    while previous != html:
        previous = html
        html = _RAW_TEXT_RE.sub("", html)
    return html


def _attribute_filter(allow_forms: bool) -> Callable[[str, str, str], bool]:
    allowed = ALLOWED_ATTRIBUTES | FORM_ATTRIBUTES if allow_forms else ALLOWED_ATTRIBUTES

    def is_allowed(tag: str, name: str, value: str) -> bool:
        lowered = name.lower()
        return lowered in allowed or lowered.startswith("data-")

    return is_allowed


def sanitize_html(html: str, allow_forms: bool = False, filter_inline_styles: bool = False) -> str:
    """Reduce rendered markup to the allow-listed tags and attributes.

    Disallowed elements are unwrapped (their text is kept) except raw-text
    containers such as ``<script>``, which are removed with their content.
    Comments are removed. The result is stable under repeated sanitization.

    Args:
        html: Rendered template output
        allow_forms: Also allow form controls (the editor preview needs them)
        filter_inline_styles: Apply the CSS denylist to ``style`` attributes

    Returns:
        Markup safe to inject into the page, or ``""`` if sanitization
        could not be performed
    """
    if not isinstance(html, str) or not html:
        return ""

    tags = ALLOWED_TAGS | FORM_TAGS if allow_forms else ALLOWED_TAGS

    try:
        return bleach.clean(
            _strip_raw_text_elements(html),
            tags=tags,
            attributes=_attribute_filter(allow_forms),
            css_sanitizer=InlineStylePolicy(filter_inline_styles),
            strip=True,
            strip_comments=True,
        )
    except Exception as e:
        # Never hand unsanitized markup to the caller
        logger.warning("HTML sanitization failed, dropping fragment: %s", e)
        return ""
