"""Effective skin resolution.

A blog's appearance can come from three places at once: its base skin, its
per-blog overrides, and its fully custom skin. This module decides which one
is authoritative for a render pass and how their settings compose. Precedence
is an ordered list of rules; the first rule that applies produces the result:

1. ``custom-skin``: an active (or previewed) custom skin renders its own
   templates.
2. ``skin-application``: defaults, overlaid by the base skin, overlaid by the
   blog's overrides.
3. ``defaults``: nothing applied; the hard-coded defaults.

Resolution performs no I/O and never raises.
"""

import logging
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Tuple, Union

from .config import Settings
from .defaults import (
    CSS_VARIABLE_KEYS,
    DEFAULT_LAYOUT_CONFIG,
    LAYOUT_OPTIONS,
    POST_LIST_STYLES,
    default_css_variables,
    default_layout_config,
)
from .models.context import Blog, TemplateContext
from .models.effective import TemplatedSkin, VariablesSkin
from .models.skin import BlogSkinApplication, CustomSkin, LayoutConfig, Skin
from .sanitizer import sanitize_css, sanitize_html
from .template import TemplateRenderer, render_custom_skin_page
from .theme import code_palette

logger = logging.getLogger(__name__)

PAGE_TYPES = ("list", "detail")


class ResolveInput(NamedTuple):
    """Everything a precedence rule may look at."""

    blog: Blog
    base_skin: Optional[Skin]
    application: Optional[BlogSkinApplication]
    custom_skin: Optional[CustomSkin]
    preview_mode: bool
    page_type: str
    context: Optional[Union[TemplateContext, Mapping[str, Any]]]


class Rule(NamedTuple):
    name: str
    applies: Callable[[ResolveInput], bool]
    build: Callable[["SkinResolver", ResolveInput], Union[TemplatedSkin, VariablesSkin]]


def _layout_value_valid(key: str, value: Any) -> bool:
    if key == "layout":
        return value in LAYOUT_OPTIONS
    if key == "postListStyle":
        return value in POST_LIST_STYLES
    if key == "showThumbnails":
        return isinstance(value, bool)
    return False


def merge_css_variables(*layers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Overlay variable maps on the defaults, later layers winning.

    Only the recognized keys are considered, and only for values a layer
    actually sets; empty strings count as unset. The result is total.
    """
    merged = default_css_variables()
    for layer in layers:
        if not layer:
            continue
        for key in CSS_VARIABLE_KEYS:
            value = layer.get(key)
            if isinstance(value, str) and value.strip():
                merged[key] = value
    return merged


def merge_layout_config(*layers: Optional[Mapping[str, Any]]) -> LayoutConfig:
    """Overlay layout options on the defaults, one option at a time.

    Invalid values are ignored so the option falls back to the layer below.
    """
    merged = default_layout_config()
    for layer in layers:
        if not layer:
            continue
        for key in DEFAULT_LAYOUT_CONFIG:
            if key not in layer:
                continue
            value = layer[key]
            if _layout_value_valid(key, value):
                merged[key] = value
            else:
                logger.debug("Ignoring invalid layout value %s=%r", key, value)
    return LayoutConfig(**merged)


def with_code_palette(css_variables: Dict[str, str]) -> Dict[str, str]:
    """Append the code-highlight variables derived from ``--blog-bg``."""
    result = dict(css_variables)
    result.update(code_palette(result["--blog-bg"]))
    return result


def _custom_skin_applies(inp: ResolveInput) -> bool:
    return inp.custom_skin is not None and (inp.custom_skin.is_active or inp.preview_mode)


def _application_applies(inp: ResolveInput) -> bool:
    return inp.application is not None


def _always(inp: ResolveInput) -> bool:
    return True


class SkinResolver:
    """Decides which skin source wins and produces the effective skin."""

    def __init__(
        self,
        renderer: Optional[TemplateRenderer] = None,
        allow_forms: bool = False,
        filter_inline_styles: bool = False,
    ) -> None:
        """Initialize the resolver.

        Args:
            renderer: Template renderer for custom skins
            allow_forms: Let sanitized fragments keep form controls
            filter_inline_styles: Apply the CSS denylist to inline styles
        """
        self.renderer = renderer or TemplateRenderer()
        self.allow_forms = allow_forms
        self.filter_inline_styles = filter_inline_styles

    @classmethod
    def from_settings(cls, settings: Settings) -> "SkinResolver":
        """Build a resolver from configured nesting limits and sanitizer flags."""
        return cls(
            renderer=TemplateRenderer(settings.max_depth, settings.max_partial_depth),
            allow_forms=settings.allow_forms,
            filter_inline_styles=settings.filter_inline_styles,
        )

    def resolve(
        self,
        blog: Blog,
        base_skin: Optional[Skin] = None,
        application: Optional[BlogSkinApplication] = None,
        custom_skin: Optional[CustomSkin] = None,
        preview_mode: bool = False,
        page_type: str = "list",
        context: Optional[Union[TemplateContext, Mapping[str, Any]]] = None,
    ) -> Union[TemplatedSkin, VariablesSkin]:
        """Resolve the effective skin for one render pass.

        Args:
            blog: Blog being rendered
            base_skin: Skin referenced by the blog's application, if fetched
                separately; the application's embedded skin is used otherwise
            application: The blog's skin application and overrides
            custom_skin: The blog's custom skin
            preview_mode: Show the custom skin even when it is not active
            page_type: ``"list"`` or ``"detail"``; selects the content template
            context: Rendering context; a blog-only context is built when omitted

        Returns:
            A TemplatedSkin or a VariablesSkin
        """
        if application is not None and application.blog_id != blog.id:
            logger.warning(
                "Ignoring skin application for blog %s while rendering blog %s",
                application.blog_id, blog.id,
            )
            application = None

        if custom_skin is not None and custom_skin.blog_id != blog.id:
            logger.warning(
                "Ignoring custom skin for blog %s while rendering blog %s",
                custom_skin.blog_id, blog.id,
            )
            custom_skin = None

        if base_skin is None and application is not None:
            base_skin = application.skin

        if page_type not in PAGE_TYPES:
            logger.debug("Unknown page type %r, rendering as list", page_type)
            page_type = "list"

        inp = ResolveInput(blog, base_skin, application, custom_skin, preview_mode, page_type, context)

        for rule in PRECEDENCE:
            if rule.applies(inp):
                logger.debug("Blog %s resolved by rule %s", blog.id, rule.name)
                return rule.build(self, inp)

        # The last rule always applies
        return self._build_defaults(inp)

    def _variables(self, inp: ResolveInput) -> Dict[str, str]:
        skin_variables = inp.base_skin.css_variables if inp.base_skin else None
        overrides = inp.application.custom_css_variables if inp.application else None
        return merge_css_variables(skin_variables, overrides)

    def _build_templated(self, inp: ResolveInput) -> TemplatedSkin:
        custom_skin = inp.custom_skin
        context = inp.context if inp.context is not None else TemplateContext.from_blog(inp.blog)

        rendered = render_custom_skin_page(
            custom_skin.templates(), context, inp.page_type, renderer=self.renderer,
        )

        def clean(fragment: str) -> str:
            return sanitize_html(
                fragment,
                allow_forms=self.allow_forms,
                filter_inline_styles=self.filter_inline_styles,
            )

        # Variables stay available for regions that fall back to default components
        if inp.application is not None:
            css_variables = self._variables(inp)
        else:
            css_variables = default_css_variables()

        return TemplatedSkin(
            header=clean(rendered["header"]),
            content=clean(rendered["content"]),
            sidebar=clean(rendered["sidebar"]),
            footer=clean(rendered["footer"]),
            css=sanitize_css(rendered["css"]),
            use_default_header=custom_skin.use_default_header,
            use_default_sidebar=custom_skin.use_default_sidebar,
            use_default_footer=custom_skin.use_default_footer,
            css_variables=with_code_palette(css_variables),
        )

    def _build_variables(self, inp: ResolveInput) -> VariablesSkin:
        css_variables = self._variables(inp)
        skin_layout = inp.base_skin.layout_config if inp.base_skin else None
        layout = merge_layout_config(skin_layout, inp.application.custom_layout_config)
        return VariablesSkin(css_variables=with_code_palette(css_variables), layout_config=layout)

    def _build_defaults(self, inp: ResolveInput) -> VariablesSkin:
        return VariablesSkin(
            css_variables=with_code_palette(default_css_variables()),
            layout_config=LayoutConfig(**default_layout_config()),
        )


PRECEDENCE: Tuple[Rule, ...] = (
    Rule("custom-skin", _custom_skin_applies, SkinResolver._build_templated),
    Rule("skin-application", _application_applies, SkinResolver._build_variables),
    Rule("defaults", _always, SkinResolver._build_defaults),
)


_default_resolver = SkinResolver()


def resolve_effective_skin(
    blog: Blog,
    base_skin: Optional[Skin] = None,
    application: Optional[BlogSkinApplication] = None,
    custom_skin: Optional[CustomSkin] = None,
    preview_mode: bool = False,
    page_type: str = "list",
    context: Optional[Union[TemplateContext, Mapping[str, Any]]] = None,
) -> Union[TemplatedSkin, VariablesSkin]:
    """Resolve the effective skin with the default resolver settings."""
    return _default_resolver.resolve(
        blog,
        base_skin=base_skin,
        application=application,
        custom_skin=custom_skin,
        preview_mode=preview_mode,
        page_type=page_type,
        context=context,
    )
