"""Skin configuration records.

Three independent sources compete for a blog's look: a base Skin (system or a
private clone of a published skin), the blog's BlogSkinApplication overrides,
and the blog's fully custom CustomSkin. PublishedSkin is the shareable,
immutable export of a CustomSkin.
"""

from datetime import datetime
from typing import Dict, Any, Optional

from pydantic import BaseModel, Field
from typing_extensions import Literal

from ..defaults import DEFAULT_TEMPLATES


class LayoutConfig(BaseModel):
    """Fully resolved page structure options."""

    layout: Literal["sidebar-right", "sidebar-left", "no-sidebar"] = "sidebar-right"
    post_list_style: Literal["cards", "list"] = Field("cards", alias="postListStyle")
    show_thumbnails: bool = Field(True, alias="showThumbnails")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class Skin(BaseModel):
    """A named bundle of CSS variables and layout options."""

    id: str
    name: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_system: bool = False
    css_variables: Dict[str, str] = {}
    # Partial layout options; validated key by key when merged
    layout_config: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class BlogSkinApplication(BaseModel):
    """A blog's choice of base skin plus its per-blog overrides."""

    id: Optional[str] = None
    blog_id: str
    skin_id: Optional[str] = None
    custom_css_variables: Optional[Dict[str, str]] = None
    custom_layout_config: Optional[Dict[str, Any]] = None
    updated_at: Optional[datetime] = None
    # Joined base skin, when the backend embeds it
    skin: Optional[Skin] = None


class CustomSkin(BaseModel):
    """A blog's author-written HTML/CSS templates."""

    id: Optional[str] = None
    blog_id: str
    html_head: str = ""
    html_header: str = ""
    html_post_list: str = ""
    html_post_item: str = ""
    html_post_detail: str = ""
    html_sidebar: str = ""
    html_footer: str = ""
    custom_css: str = ""
    is_active: bool = False
    use_default_header: bool = False
    use_default_sidebar: bool = False
    use_default_footer: bool = False
    source_published_skin_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def with_defaults(cls, blog_id: str) -> "CustomSkin":
        """Create the inactive starter skin an owner first sees in the editor."""
        return cls(blog_id=blog_id, is_active=False, **DEFAULT_TEMPLATES)

    def templates(self) -> Dict[str, str]:
        """Return the eight template slots keyed by slot name."""
        return {
            "html_head": self.html_head,
            "html_header": self.html_header,
            "html_post_list": self.html_post_list,
            "html_post_item": self.html_post_item,
            "html_post_detail": self.html_post_detail,
            "html_sidebar": self.html_sidebar,
            "html_footer": self.html_footer,
            "custom_css": self.custom_css,
        }


class PublishedSkin(BaseModel):
    """Immutable, shareable snapshot of a custom skin."""

    id: str
    source_blog_id: Optional[str] = None
    creator_id: str
    name: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    html_head: str = ""
    html_header: str = ""
    html_post_list: str = ""
    html_post_item: str = ""
    html_post_detail: str = ""
    html_sidebar: str = ""
    html_footer: str = ""
    custom_css: str = ""
    use_default_header: bool = False
    use_default_sidebar: bool = False
    use_default_footer: bool = False
    is_public: bool = True
    download_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        """Pydantic configuration."""
        frozen = True
