"""Rendering context models.

TemplateContext is the data contract between callers and the template
interpreter. It is a closed record: constructing one with an unknown field is
an error, while templates looking up an unknown name simply get nothing.
"""

from datetime import datetime, date
from typing import List, Optional, Dict, Any, Mapping, Sequence, Union

from pydantic import BaseModel, Field


def format_date(value: Union[str, datetime, date, None]) -> str:
    """Format a timestamp the way templates display dates (``YYYY.MM.DD``).

    Unparseable input is returned unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return f"{value.year}.{value.month:02d}.{value.day:02d}"


class Blog(BaseModel):
    """Blog record as returned by the blog service."""

    id: str
    name: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: Optional[datetime] = None


class PostItem(BaseModel):
    """A post as exposed inside a posts loop."""

    post_id: str
    post_title: str
    post_excerpt: str = ""
    post_date: str = ""
    thumbnail_url: Optional[str] = None
    view_count: int = 0
    like_count: int = 0
    blog_id: str

    class Config:
        """Pydantic configuration."""
        extra = "forbid"

    @classmethod
    def from_post(cls, post: Mapping[str, Any]) -> "PostItem":
        """Build a loop item from a raw post record."""
        return cls(
            post_id=str(post["id"]),
            post_title=post.get("title") or "",
            post_excerpt=post.get("excerpt") or "",
            post_date=format_date(post.get("created_at")),
            thumbnail_url=post.get("thumbnail_url") or None,
            view_count=post.get("view_count") or 0,
            like_count=post.get("like_count") or 0,
            blog_id=str(post["blog_id"]),
        )


class CategoryItem(BaseModel):
    """A category as exposed inside a categories loop."""

    category_id: str
    category_name: str
    blog_id: str

    class Config:
        """Pydantic configuration."""
        extra = "forbid"


class TemplateContext(BaseModel):
    """Data exposed to custom skin templates during rendering."""

    # Blog
    blog_id: Optional[str] = None
    blog_name: Optional[str] = None
    blog_description: Optional[str] = None
    profile_image: Optional[str] = None
    post_count: int = 0
    subscriber_count: int = 0
    visitor_count: int = 0
    current_year: int = Field(default_factory=lambda: datetime.now().year)
    created_date: Optional[str] = None

    # Post detail pages
    post_id: Optional[str] = None
    post_title: Optional[str] = None
    post_content: Optional[str] = None
    post_excerpt: Optional[str] = None
    post_date: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category_name: Optional[str] = None
    view_count: Optional[int] = None
    like_count: Optional[int] = None

    # Collections
    posts: List[PostItem] = []
    categories: List[CategoryItem] = []

    # Conditions
    no_posts: bool = False

    class Config:
        """Pydantic configuration."""
        extra = "forbid"

    @classmethod
    def build(
        cls,
        blog: Blog,
        post_count: int = 0,
        subscriber_count: int = 0,
        visitor_count: int = 0,
        posts: Optional[Sequence[Mapping[str, Any]]] = None,
        post: Optional[Mapping[str, Any]] = None,
        categories: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> "TemplateContext":
        """Assemble a context from raw blog, post and category records.

        Args:
            blog: Blog being rendered
            post_count: Total number of posts on the blog
            subscriber_count: Number of subscribers
            visitor_count: Number of visitors
            posts: Raw post records for list pages, in display order
            post: Raw post record for detail pages
            categories: Raw category records (``id``, ``name``)

        Returns:
            Populated template context
        """
        posts = posts or []
        categories = categories or []

        data: Dict[str, Any] = {
            "blog_id": blog.id,
            "blog_name": blog.name,
            "blog_description": blog.description or "",
            "profile_image": blog.thumbnail_url or "",
            "post_count": post_count,
            "subscriber_count": subscriber_count,
            "visitor_count": visitor_count,
            "created_date": format_date(blog.created_at) if blog.created_at else "",
            "no_posts": len(posts) == 0,
            "posts": [PostItem.from_post(p) for p in posts],
            "categories": [
                CategoryItem(category_id=str(c["id"]), category_name=c["name"], blog_id=blog.id)
                for c in categories
            ],
        }

        if post is not None:
            category = post.get("category") or {}
            data.update(
                post_id=str(post["id"]),
                post_title=post.get("title") or "",
                post_content=post.get("content") or "",
                post_excerpt=post.get("excerpt") or "",
                post_date=format_date(post.get("created_at")),
                thumbnail_url=post.get("thumbnail_url") or "",
                category_name=category.get("name") or "",
                view_count=post.get("view_count") or 0,
                like_count=post.get("like_count") or 0,
            )

        return cls(**data)

    @classmethod
    def from_blog(cls, blog: Blog) -> "TemplateContext":
        """Minimal context carrying only the blog's own fields."""
        return cls.build(blog)

    def to_scope(self) -> Dict[str, Any]:
        """Flatten into the plain mapping the interpreter looks names up in."""
        return self.model_dump()
