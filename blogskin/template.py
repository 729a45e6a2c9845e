"""Template interpreter for custom skins.

Blog owners write their skins in a small mustache-like language:

    {{name}}                         interpolate a field (HTML-escaped)
    {{#if name}} ... {{/if}}         render the body when the field is truthy
    {{#each posts}} ... {{/each}}    render the body once per item
    {{#posts}} ... {{/posts}}        section form of the same loop
    {{> post_item}}                  include a partial

Templates are end-user content evaluated on every page view, so rendering is
total: unknown names render as nothing, malformed or unterminated directives
are emitted as literal text, and runaway nesting is cut off. The output is not
safe HTML; it must go through :mod:`blogskin.sanitizer` before reaching a
browser.
"""

import html
import logging
import re
from collections import ChainMap
from functools import lru_cache
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

from pydantic import BaseModel

from .models.context import TemplateContext

logger = logging.getLogger(__name__)

MAX_DEPTH = 32
MAX_PARTIAL_DEPTH = 8

# Fields that already hold HTML and are interpolated verbatim
RAW_FIELDS = frozenset(["post_content"])

_TAG_RE = re.compile(r"\{\{([^{}]*)\}\}")
_IF_RE = re.compile(r"#if\s+(\w+)")
_EACH_RE = re.compile(r"#each\s+(\w+)")
_SECTION_RE = re.compile(r"#(\w+)")
_CLOSE_RE = re.compile(r"/(\w+)")
_PARTIAL_RE = re.compile(r">\s*(\w+)")
_VARIABLE_RE = re.compile(r"\w+")

_RESERVED = frozenset(["if", "each"])


class Text(NamedTuple):
    text: str


class Variable(NamedTuple):
    name: str


class Partial(NamedTuple):
    name: str


class Block(NamedTuple):
    kind: str  # "if", "each" or "section"
    name: str
    children: Tuple[Any, ...]


Node = Union[Text, Variable, Partial, Block]


class _Frame:
    """An open block waiting for its close tag during parsing."""

    def __init__(self, kind: str, name: str, raw: str) -> None:
        self.kind = kind
        self.name = name
        self.raw = raw
        self.children: List[Node] = []


def _classify_open(token: str) -> Optional[Tuple[str, str]]:
    match = _IF_RE.fullmatch(token)
    if match:
        return "if", match.group(1)
    match = _EACH_RE.fullmatch(token)
    if match:
        return "each", match.group(1)
    match = _SECTION_RE.fullmatch(token)
    if match and match.group(1) not in _RESERVED:
        return "section", match.group(1)
    return None


def _classify_close(token: str) -> Optional[Tuple[str, str]]:
    match = _CLOSE_RE.fullmatch(token)
    if not match:
        return None
    name = match.group(1)
    if name in _RESERVED:
        return name, ""
    return "section", name


def _closes(frame: _Frame, kind: str, name: str) -> bool:
    if frame.kind != kind:
        return False
    return kind != "section" or frame.name == name


def _unwind(frame: _Frame, parent: List[Node]) -> None:
    """Emit an unterminated block as its literal open tag plus body."""
    logger.debug("Unterminated directive %r rendered as text", frame.raw)
    parent.append(Text(frame.raw))
    parent.extend(frame.children)


def parse(template: str) -> Tuple[Node, ...]:
    """Parse a template into a tree of nodes.

    Close tags are matched against the innermost open block of the same
    directive type, so nested blocks pair up correctly. Anything that cannot
    be paired becomes literal text.
    """
    root: List[Node] = []
    stack: List[_Frame] = []

    def current() -> List[Node]:
        return stack[-1].children if stack else root

    pos = 0
    for match in _TAG_RE.finditer(template):
        if match.start() > pos:
            current().append(Text(template[pos:match.start()]))
        pos = match.end()

        raw = match.group(0)
        token = match.group(1).strip()

        opened = _classify_open(token)
        if opened:
            stack.append(_Frame(opened[0], opened[1], raw))
            continue

        closed = _classify_close(token)
        if closed:
            kind, name = closed
            index = next(
                (i for i in range(len(stack) - 1, -1, -1) if _closes(stack[i], kind, name)),
                None,
            )
            if index is None:
                current().append(Text(raw))
                continue
            while len(stack) - 1 > index:
                frame = stack.pop()
                _unwind(frame, current())
            frame = stack.pop()
            current().append(Block(frame.kind, frame.name, tuple(frame.children)))
            continue

        partial = _PARTIAL_RE.fullmatch(token)
        if partial:
            current().append(Partial(partial.group(1)))
            continue

        if _VARIABLE_RE.fullmatch(token):
            current().append(Variable(token))
            continue

        current().append(Text(raw))

    if pos < len(template):
        current().append(Text(template[pos:]))

    while stack:
        frame = stack.pop()
        _unwind(frame, current())

    return tuple(root)


_parse_cached = lru_cache(maxsize=256)(parse)


def is_truthy(value: Any) -> bool:
    """Template truthiness: ``False``, ``0``, ``""``, ``None`` and empty collections are falsy."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) > 0
    return True


def format_value(name: str, value: Any) -> str:
    """Turn a looked-up value into the text that replaces ``{{name}}``."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict, Mapping)):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)

    text = str(value)
    if name in RAW_FIELDS:
        return text
    return html.escape(text, quote=True)


def item_partial_name(collection: str) -> str:
    """Name of the partial that renders one item of a collection.

    ``posts`` -> ``post_item``, ``categories`` -> ``category_item``.
    """
    if collection.endswith("ies"):
        singular = collection[:-3] + "y"
    elif collection.endswith("s"):
        singular = collection[:-1]
    else:
        singular = collection
    return f"{singular}_item"


def _to_scope(context: Any) -> Mapping[str, Any]:
    if context is None:
        return {}
    if isinstance(context, TemplateContext):
        return context.to_scope()
    if isinstance(context, BaseModel):
        return context.model_dump()
    if isinstance(context, Mapping):
        return context
    return {}


def _is_blank(nodes: Tuple[Node, ...]) -> bool:
    return all(isinstance(node, Text) and not node.text.strip() for node in nodes)


class TemplateRenderer:
    """Evaluates skin templates against a rendering context."""

    def __init__(self, max_depth: int = MAX_DEPTH, max_partial_depth: int = MAX_PARTIAL_DEPTH) -> None:
        """Initialize the renderer.

        Args:
            max_depth: Deepest block/partial nesting evaluated; deeper nodes render empty
            max_partial_depth: Deepest chain of partial inclusions
        """
        self.max_depth = max_depth
        self.max_partial_depth = max_partial_depth

    def render(
        self,
        template: str,
        context: Union[TemplateContext, Mapping[str, Any], None] = None,
        partials: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Render a template.

        Args:
            template: Author-written template source
            context: Rendering context (a TemplateContext or a plain mapping)
            partials: Named partial templates available to ``{{> name}}``

        Returns:
            Rendered text; never raises
        """
        if not isinstance(template, str) or not template:
            return ""

        try:
            nodes = _parse_cached(template)
            return self._render_nodes(nodes, _to_scope(context), partials or {}, 0, 0)
        except Exception as e:
            logger.warning("Template rendering failed, emitting nothing: %s", e)
            return ""

    def _render_nodes(
        self,
        nodes: Tuple[Node, ...],
        scope: Mapping[str, Any],
        partials: Mapping[str, str],
        depth: int,
        partial_depth: int,
    ) -> str:
        out: List[str] = []
        for node in nodes:
            if isinstance(node, Text):
                out.append(node.text)
            elif isinstance(node, Variable):
                out.append(format_value(node.name, scope.get(node.name)))
            elif isinstance(node, Partial):
                out.append(self._render_partial(node.name, scope, partials, depth, partial_depth))
            else:
                out.append(self._render_block(node, scope, partials, depth, partial_depth))
        return "".join(out)

    def _render_partial(
        self,
        name: str,
        scope: Mapping[str, Any],
        partials: Mapping[str, str],
        depth: int,
        partial_depth: int,
    ) -> str:
        source = partials.get(name)
        if not source or not isinstance(source, str):
            return f'<!-- partial "{html.escape(name)}" not found -->'

        if depth >= self.max_depth or partial_depth >= self.max_partial_depth:
            logger.debug("Partial %r skipped: nesting limit reached", name)
            return ""

        return self._render_nodes(_parse_cached(source), scope, partials, depth + 1, partial_depth + 1)

    def _render_block(
        self,
        block: Block,
        scope: Mapping[str, Any],
        partials: Mapping[str, str],
        depth: int,
        partial_depth: int,
    ) -> str:
        if depth >= self.max_depth:
            logger.debug("Block %r skipped: nesting limit reached", block.name)
            return ""

        value = scope.get(block.name)

        if block.kind == "if":
            if not is_truthy(value):
                return ""
            return self._render_nodes(block.children, scope, partials, depth + 1, partial_depth)

        # "each" and "section" both iterate; anything but a non-empty list renders nothing
        if not isinstance(value, (list, tuple)) or not value:
            return ""

        body = block.children
        if _is_blank(body):
            # Lists that only declare a wrapper borrow the item layout from a partial
            source = partials.get(item_partial_name(block.name))
            if not source or not isinstance(source, str):
                return ""
            if partial_depth >= self.max_partial_depth:
                return ""
            body = _parse_cached(source)
            partial_depth += 1

        out: List[str] = []
        for item in value:
            child_scope = ChainMap(_to_scope(item), scope)
            out.append(self._render_nodes(body, child_scope, partials, depth + 1, partial_depth))
        return "".join(out)


_default_renderer = TemplateRenderer()


def render(
    template: str,
    context: Union[TemplateContext, Mapping[str, Any], None] = None,
    partials: Optional[Mapping[str, str]] = None,
) -> str:
    """Render a template with the default nesting limits."""
    return _default_renderer.render(template, context, partials)


def render_custom_skin_page(
    templates: Mapping[str, str],
    context: Union[TemplateContext, Mapping[str, Any], None],
    page_type: str = "list",
    renderer: Optional[TemplateRenderer] = None,
) -> Dict[str, str]:
    """Render every slot of a custom skin for one page.

    ``html_post_item`` is only available as the ``post_item`` partial. The
    result is unsanitized.

    Args:
        templates: Slot name to template source
        context: Rendering context
        page_type: ``"list"`` renders html_post_list, ``"detail"`` html_post_detail
        renderer: Renderer to use; defaults to one with standard limits

    Returns:
        Rendered ``head``, ``header``, ``content``, ``sidebar``, ``footer`` and
        the raw ``css``
    """
    renderer = renderer or _default_renderer
    partials = {"post_item": templates.get("html_post_item") or ""}
    content_slot = "html_post_detail" if page_type == "detail" else "html_post_list"

    # Flatten once; every slot sees the same scope
    scope = _to_scope(context)

    def slot(name: str) -> str:
        return renderer.render(templates.get(name) or "", scope, partials)

    return {
        "head": slot("html_head"),
        "header": slot("html_header"),
        "content": slot(content_slot),
        "sidebar": slot("html_sidebar"),
        "footer": slot("html_footer"),
        "css": templates.get("custom_css") or "",
    }
