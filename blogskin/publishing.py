"""Sharing custom skins between blogs.

A blog owner publishes a snapshot of their custom skin; other owners apply
that snapshot to their own blog. These helpers only build the records; saving
them is the caller's concern.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from .defaults import default_css_variables, default_layout_config
from .exceptions import ValidationError
from .models import BlogSkinApplication, CustomSkin, PublishedSkin, Skin

# Fields copied verbatim between custom skins and published snapshots
SHARED_FIELDS = (
    "html_head",
    "html_header",
    "html_post_list",
    "html_post_item",
    "html_post_detail",
    "html_sidebar",
    "html_footer",
    "custom_css",
    "use_default_header",
    "use_default_sidebar",
    "use_default_footer",
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def snapshot_custom_skin(
    custom_skin: CustomSkin,
    name: str,
    creator_id: str,
    is_public: bool = True,
    description: Optional[str] = None,
    thumbnail_url: Optional[str] = None,
) -> PublishedSkin:
    """Publish a custom skin as an immutable snapshot.

    Later edits to the custom skin do not affect the snapshot.

    Raises:
        ValidationError: If the name is blank
    """
    if not name or not name.strip():
        raise ValidationError("Published skin name cannot be empty")

    return PublishedSkin(
        id=str(uuid.uuid4()),
        source_blog_id=custom_skin.blog_id,
        creator_id=creator_id,
        name=name.strip(),
        description=description or None,
        thumbnail_url=thumbnail_url or None,
        is_public=is_public,
        created_at=_now(),
        **{field: getattr(custom_skin, field) for field in SHARED_FIELDS},
    )


def apply_published_skin(
    published: PublishedSkin,
    blog_id: str,
    existing: Optional[CustomSkin] = None,
) -> CustomSkin:
    """Install a published skin as a blog's active custom skin.

    The blog's existing custom skin, if any, keeps its identity and creation
    time but all template slots and flags are replaced.
    """
    if existing is not None and existing.blog_id != blog_id:
        raise ValidationError(
            "Existing custom skin belongs to another blog",
            details={"blog_id": blog_id, "existing_blog_id": existing.blog_id},
        )

    fields = {field: getattr(published, field) for field in SHARED_FIELDS}
    fields.update(is_active=True, source_published_skin_id=published.id, updated_at=_now())

    if existing is not None:
        return existing.model_copy(update=fields)

    return CustomSkin(blog_id=blog_id, created_at=_now(), **fields)


def clone_published_skin(
    published: PublishedSkin,
    blog_id: str,
    skin_id: Optional[str] = None,
) -> Tuple[Skin, BlogSkinApplication]:
    """Create a private base skin named after a published skin, applied to a blog.

    The clone starts from the default variables and layout so the owner can
    tune it through overrides without touching the snapshot.
    """
    skin = Skin(
        id=skin_id or str(uuid.uuid4()),
        name=published.name,
        description=published.description,
        thumbnail_url=published.thumbnail_url,
        is_system=False,
        css_variables=default_css_variables(),
        layout_config=default_layout_config(),
        created_at=_now(),
    )
    application = BlogSkinApplication(blog_id=blog_id, skin_id=skin.id, updated_at=_now(), skin=skin)
    return skin, application
