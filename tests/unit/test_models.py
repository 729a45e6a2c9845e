"""Unit tests for the models package."""

from datetime import datetime, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from blogskin.defaults import DEFAULT_TEMPLATES, TEMPLATE_SLOTS
from blogskin.models import (
    Blog,
    CustomSkin,
    EffectiveSkin,
    LayoutConfig,
    PostItem,
    PublishedSkin,
    TemplateContext,
    TemplatedSkin,
    VariablesSkin,
    format_date,
)


class TestFormatDate:
    """Test cases for format_date."""

    @pytest.mark.parametrize("value,expected", [
        ("2024-03-05T10:00:00Z", "2024.03.05"),
        ("2024-12-31T23:59:59+00:00", "2024.12.31"),
        ("2024-01-02", "2024.01.02"),
        (datetime(2023, 7, 9, tzinfo=timezone.utc), "2023.07.09"),
        (None, ""),
        ("yesterday", "yesterday"),
    ])
    def test_format_date(self, value, expected):
        assert format_date(value) == expected


class TestTemplateContext:
    """Test cases for TemplateContext."""

    @pytest.fixture
    def blog(self):
        return Blog(
            id="b1",
            name="My Blog",
            description=None,
            thumbnail_url="https://cdn.example.com/me.png",
            created_at=datetime(2022, 5, 1, tzinfo=timezone.utc),
        )

    def test_unknown_field_rejected(self):
        """Test that the context is a closed record."""
        with pytest.raises(ValidationError):
            TemplateContext(blog_name="x", favourite_color="blue")

    def test_defaults(self):
        context = TemplateContext()
        assert context.posts == []
        assert context.no_posts is False
        assert context.current_year == datetime.now().year

    def test_from_blog(self, blog):
        """Test the blog-only context."""
        context = TemplateContext.from_blog(blog)

        assert context.blog_id == "b1"
        assert context.blog_name == "My Blog"
        assert context.blog_description == ""
        assert context.profile_image == "https://cdn.example.com/me.png"
        assert context.created_date == "2022.05.01"
        assert context.no_posts is True
        assert context.post_title is None

    def test_build_list_page(self, blog):
        """Test building a context from raw post and category records."""
        context = TemplateContext.build(
            blog,
            post_count=2,
            subscriber_count=5,
            posts=[
                {"id": 7, "title": "Hello", "excerpt": "Hi", "created_at": "2024-03-05T10:00:00Z",
                 "view_count": 3, "like_count": None, "blog_id": "b1"},
            ],
            categories=[{"id": 1, "name": "Travel"}],
        )

        assert context.no_posts is False
        assert context.posts == [PostItem(
            post_id="7", post_title="Hello", post_excerpt="Hi", post_date="2024.03.05",
            view_count=3, like_count=0, blog_id="b1",
        )]
        assert context.categories[0].category_name == "Travel"
        assert context.categories[0].blog_id == "b1"
        assert context.subscriber_count == 5

    def test_build_detail_page(self, blog):
        """Test that a post record fills the detail fields."""
        context = TemplateContext.build(
            blog,
            post={
                "id": "p1",
                "title": "Deep Dive",
                "content": "<p>Body</p>",
                "created_at": "2024-01-02T00:00:00Z",
                "category": {"name": "Tech"},
            },
        )

        assert context.post_id == "p1"
        assert context.post_content == "<p>Body</p>"
        assert context.post_date == "2024.01.02"
        assert context.category_name == "Tech"
        assert context.view_count == 0

    def test_to_scope(self, blog):
        scope = TemplateContext.from_blog(blog).to_scope()
        assert scope["blog_name"] == "My Blog"
        assert isinstance(scope["posts"], list)


class TestSkinModels:
    """Test cases for skin records."""

    def test_layout_config_aliases(self):
        """Test that layout options accept and emit camelCase names."""
        layout = LayoutConfig(postListStyle="list", showThumbnails=False)
        assert layout.post_list_style == "list"
        assert layout.model_dump(by_alias=True) == {
            "layout": "sidebar-right",
            "postListStyle": "list",
            "showThumbnails": False,
        }

    def test_layout_config_rejects_unknown_layout(self):
        with pytest.raises(ValidationError):
            LayoutConfig(layout="three-column")

    def test_custom_skin_with_defaults(self):
        """Test the starter skin created for a new editor session."""
        skin = CustomSkin.with_defaults("b1")

        assert skin.blog_id == "b1"
        assert skin.is_active is False
        assert skin.templates() == DEFAULT_TEMPLATES
        assert tuple(skin.templates()) == TEMPLATE_SLOTS

    def test_published_skin_is_frozen(self):
        published = PublishedSkin(id="p1", creator_id="u1", name="Dusk")
        with pytest.raises(ValidationError):
            published.name = "Dawn"


class TestEffectiveSkin:
    """Test cases for the tagged effective skin union."""

    def test_discriminates_templated(self):
        skin = TypeAdapter(EffectiveSkin).validate_python({"mode": "templated", "header": "<h1>x</h1>"})
        assert isinstance(skin, TemplatedSkin)

    def test_discriminates_variables(self):
        skin = TypeAdapter(EffectiveSkin).validate_python({
            "mode": "variables",
            "css_variables": {"--blog-bg": "#fff"},
            "layout_config": {"layout": "no-sidebar"},
        })
        assert isinstance(skin, VariablesSkin)
        assert skin.layout_config.layout == "no-sidebar"

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(EffectiveSkin).validate_python({"mode": "hybrid"})
