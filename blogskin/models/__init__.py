"""Data models for blogskin.

This package contains Pydantic models for the rendering context, the three
skin configuration sources and the resolved effective skin.
"""

from .context import Blog, PostItem, CategoryItem, TemplateContext, format_date
from .skin import LayoutConfig, Skin, BlogSkinApplication, CustomSkin, PublishedSkin
from .effective import TemplatedSkin, VariablesSkin, EffectiveSkin


__all__ = [
    # Rendering context
    "Blog",
    "PostItem",
    "CategoryItem",
    "TemplateContext",
    "format_date",

    # Skin sources
    "LayoutConfig",
    "Skin",
    "BlogSkinApplication",
    "CustomSkin",
    "PublishedSkin",

    # Resolution result
    "TemplatedSkin",
    "VariablesSkin",
    "EffectiveSkin",
]
