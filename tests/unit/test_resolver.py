"""Unit tests for resolver.py module.

Tests precedence between custom skins, skin applications and defaults, the
variable and layout merges, and the sanitization of templated output.
"""

import logging

import pytest

from blogskin.config import Settings
from blogskin.defaults import CSS_VARIABLE_KEYS, DEFAULT_CSS_VARIABLES
from blogskin.models import (
    Blog,
    BlogSkinApplication,
    CustomSkin,
    LayoutConfig,
    Skin,
    TemplateContext,
    TemplatedSkin,
    VariablesSkin,
)
from blogskin.resolver import (
    PRECEDENCE,
    SkinResolver,
    merge_css_variables,
    merge_layout_config,
    resolve_effective_skin,
    with_code_palette,
)
from blogskin.theme import DARK_CODE_PALETTE, LIGHT_CODE_PALETTE


@pytest.fixture
def blog():
    """Blog being rendered."""
    return Blog(id="blog-1", name="My Blog", description="Notes")


@pytest.fixture
def base_skin():
    """A base skin with a couple of variables and a layout."""
    return Skin(
        id="skin-1",
        name="Minimal",
        is_system=True,
        css_variables={"--blog-bg": "#111111", "--blog-fg": "#eeeeee"},
        layout_config={"layout": "no-sidebar"},
    )


@pytest.fixture
def application(base_skin):
    """Skin application embedding the base skin."""
    return BlogSkinApplication(
        id="app-1",
        blog_id="blog-1",
        skin_id=base_skin.id,
        custom_css_variables={"--blog-bg": "#222222"},
        custom_layout_config={"postListStyle": "list"},
        skin=base_skin,
    )


@pytest.fixture
def custom_skin():
    """Active custom skin for the blog."""
    return CustomSkin(
        id="custom-1",
        blog_id="blog-1",
        html_header="<script>alert(1)</script><header>{{blog_name}}</header>",
        html_post_list="<main>LIST</main>",
        html_post_detail="<main>DETAIL</main>",
        html_sidebar="<aside>{{blog_description}}</aside>",
        html_footer="<footer>bye</footer>",
        custom_css="a { background: url(javascript:alert(1)) }",
        is_active=True,
        use_default_sidebar=True,
    )


class TestMergeCssVariables:
    """Test cases for merge_css_variables."""

    def test_no_layers_gives_defaults(self):
        assert merge_css_variables() == DEFAULT_CSS_VARIABLES

    def test_override_beats_skin_beats_default(self):
        """Test the three tiers of precedence for one key."""
        merged = merge_css_variables({"--blog-bg": "#111111"}, {"--blog-bg": "#222222"})
        assert merged["--blog-bg"] == "#222222"

        merged = merge_css_variables({"--blog-bg": "#111111"}, {})
        assert merged["--blog-bg"] == "#111111"

        merged = merge_css_variables(None, None)
        assert merged["--blog-bg"] == "#ffffff"

    def test_empty_string_counts_as_unset(self):
        """Test that blank values fall through to the layer below."""
        merged = merge_css_variables({"--blog-fg": "#333333"}, {"--blog-fg": "", "--blog-bg": "   "})
        assert merged["--blog-fg"] == "#333333"
        assert merged["--blog-bg"] == "#ffffff"

    def test_unknown_keys_ignored(self):
        """Test that only recognized variables are merged."""
        merged = merge_css_variables({"--evil": "url(x)", "color": "red"})
        assert set(merged) == set(CSS_VARIABLE_KEYS)

    def test_non_string_values_ignored(self):
        merged = merge_css_variables({"--blog-border-radius": 12})
        assert merged["--blog-border-radius"] == "12px"

    def test_result_is_total(self):
        """Test that every recognized key has a non-empty value."""
        merged = merge_css_variables({"--blog-accent": "#ff0000"})
        assert len(merged) == 16
        assert all(merged[key] for key in CSS_VARIABLE_KEYS)


class TestMergeLayoutConfig:
    """Test cases for merge_layout_config."""

    def test_defaults(self):
        layout = merge_layout_config()
        assert layout == LayoutConfig(layout="sidebar-right", postListStyle="cards", showThumbnails=True)

    def test_keys_merge_independently(self):
        """Test that each option is overlaid on its own."""
        layout = merge_layout_config({"layout": "no-sidebar"}, {"postListStyle": "list"})
        assert layout.layout == "no-sidebar"
        assert layout.post_list_style == "list"
        assert layout.show_thumbnails is True

    def test_override_wins(self):
        layout = merge_layout_config({"layout": "no-sidebar"}, {"layout": "sidebar-left"})
        assert layout.layout == "sidebar-left"

    def test_invalid_value_falls_back(self):
        """Test that an invalid override keeps the lower layer's value."""
        layout = merge_layout_config(
            {"layout": "no-sidebar", "showThumbnails": False},
            {"layout": "bogus", "showThumbnails": "yes"},
        )
        assert layout.layout == "no-sidebar"
        assert layout.show_thumbnails is False

    def test_unknown_keys_ignored(self):
        layout = merge_layout_config({"columns": 3})
        assert layout.model_dump(by_alias=True) == {
            "layout": "sidebar-right",
            "postListStyle": "cards",
            "showThumbnails": True,
        }


class TestCodePaletteVariables:
    """Test cases for with_code_palette."""

    def test_light_background(self):
        variables = with_code_palette(merge_css_variables())
        assert variables["--blog-code-fg"] == LIGHT_CODE_PALETTE["--blog-code-fg"]
        assert len(variables) == 24

    def test_dark_background(self):
        variables = with_code_palette(merge_css_variables({"--blog-bg": "#0d1117"}))
        for key, value in DARK_CODE_PALETTE.items():
            assert variables[key] == value

    def test_input_not_mutated(self):
        variables = merge_css_variables()
        with_code_palette(variables)
        assert "--blog-code-fg" not in variables


class TestPrecedence:
    """Test cases for choosing the authoritative skin source."""

    def test_rule_order(self):
        assert [rule.name for rule in PRECEDENCE] == ["custom-skin", "skin-application", "defaults"]

    def test_nothing_applied_gives_defaults(self, blog):
        """Test resolution with no application and no custom skin."""
        result = resolve_effective_skin(blog)

        assert isinstance(result, VariablesSkin)
        assert result.mode == "variables"
        assert result.css_variables["--blog-bg"] == "#ffffff"
        assert result.layout_config == LayoutConfig()
        assert len(result.css_variables) == 24

    def test_base_skin_without_application_is_ignored(self, blog, base_skin):
        """Test that a base skin alone does not apply."""
        result = resolve_effective_skin(blog, base_skin=base_skin)
        assert result.css_variables["--blog-bg"] == "#ffffff"

    def test_application_merges_three_tiers(self, blog, application):
        """Test variables and layout from defaults, base skin and overrides."""
        result = resolve_effective_skin(blog, application=application)

        assert isinstance(result, VariablesSkin)
        assert result.css_variables["--blog-bg"] == "#222222"
        assert result.css_variables["--blog-fg"] == "#eeeeee"
        assert result.css_variables["--blog-accent"] == "#000000"
        assert result.layout_config.layout == "no-sidebar"
        assert result.layout_config.post_list_style == "list"
        assert result.layout_config.show_thumbnails is True

    def test_dark_skin_gets_dark_code_palette(self, blog, application):
        result = resolve_effective_skin(blog, application=application)
        assert result.css_variables["--blog-code-keyword"] == DARK_CODE_PALETTE["--blog-code-keyword"]

    def test_explicit_base_skin_wins_over_embedded(self, blog, application):
        """Test that a separately fetched base skin is used."""
        other = Skin(id="skin-2", name="Other", css_variables={"--blog-fg": "#123456"})
        result = resolve_effective_skin(blog, base_skin=other, application=application)
        assert result.css_variables["--blog-fg"] == "#123456"

    def test_application_without_skin(self, blog):
        """Test overrides applied directly on top of the defaults."""
        application = BlogSkinApplication(blog_id="blog-1", custom_css_variables={"--blog-accent": "#ff0000"})
        result = resolve_effective_skin(blog, application=application)
        assert result.css_variables["--blog-accent"] == "#ff0000"
        assert result.css_variables["--blog-bg"] == "#ffffff"

    def test_active_custom_skin_wins(self, blog, application, custom_skin):
        """Test that an active custom skin beats the application."""
        result = resolve_effective_skin(blog, application=application, custom_skin=custom_skin)
        assert isinstance(result, TemplatedSkin)
        assert result.mode == "templated"

    def test_inactive_custom_skin_ignored(self, blog, application, custom_skin):
        """Test that an inactive custom skin does not apply outside preview."""
        inactive = custom_skin.model_copy(update={"is_active": False})
        result = resolve_effective_skin(blog, application=application, custom_skin=inactive)
        assert isinstance(result, VariablesSkin)

    def test_inactive_custom_skin_in_preview(self, blog, custom_skin):
        """Test that preview mode shows an inactive custom skin."""
        inactive = custom_skin.model_copy(update={"is_active": False})
        result = resolve_effective_skin(blog, custom_skin=inactive, preview_mode=True)
        assert isinstance(result, TemplatedSkin)

    def test_foreign_application_ignored(self, blog, application, caplog):
        """Test that another blog's application is not applied."""
        foreign = application.model_copy(update={"blog_id": "blog-2"})
        with caplog.at_level(logging.WARNING, logger="blogskin.resolver"):
            result = resolve_effective_skin(blog, application=foreign)

        assert result.css_variables["--blog-bg"] == "#ffffff"
        assert "blog-2" in caplog.text

    def test_foreign_custom_skin_ignored(self, blog, custom_skin):
        foreign = custom_skin.model_copy(update={"blog_id": "blog-2"})
        assert isinstance(resolve_effective_skin(blog, custom_skin=foreign), VariablesSkin)


class TestTemplatedSkin:
    """Test cases for the templated result."""

    def test_fragments_rendered_and_sanitized(self, blog, custom_skin):
        """Test that templates are rendered with blog data and cleaned."""
        result = resolve_effective_skin(blog, custom_skin=custom_skin)

        assert result.header == "<header>My Blog</header>"
        assert result.sidebar == "<aside>Notes</aside>"
        assert result.footer == "<footer>bye</footer>"
        assert "javascript" not in result.css
        assert "/* blocked */" in result.css

    def test_list_and_detail_content(self, blog, custom_skin):
        """Test that page type selects the content template."""
        assert resolve_effective_skin(blog, custom_skin=custom_skin).content == "<main>LIST</main>"
        detail = resolve_effective_skin(blog, custom_skin=custom_skin, page_type="detail")
        assert detail.content == "<main>DETAIL</main>"

    def test_unknown_page_type_renders_list(self, blog, custom_skin):
        result = resolve_effective_skin(blog, custom_skin=custom_skin, page_type="archive")
        assert result.content == "<main>LIST</main>"

    def test_flags_passed_through(self, blog, custom_skin):
        result = resolve_effective_skin(blog, custom_skin=custom_skin)
        assert result.use_default_sidebar is True
        assert result.use_default_header is False
        assert result.use_default_footer is False

    def test_explicit_context(self, blog):
        """Test rendering the post list against a supplied context."""
        custom_skin = CustomSkin(
            blog_id="blog-1",
            html_post_list="<ul>{{#each posts}}{{/each}}</ul>",
            html_post_item="<li>{{post_title}}</li>",
            is_active=True,
        )
        context = TemplateContext.build(
            blog,
            posts=[
                {"id": 1, "title": "First", "blog_id": "blog-1"},
                {"id": 2, "title": "Second", "blog_id": "blog-1"},
            ],
        )
        result = resolve_effective_skin(blog, custom_skin=custom_skin, context=context)
        assert result.content == "<ul><li>First</li><li>Second</li></ul>"

    def test_css_variables_without_application(self, blog, custom_skin):
        result = resolve_effective_skin(blog, custom_skin=custom_skin)
        assert result.css_variables["--blog-bg"] == "#ffffff"
        assert result.css_variables["--blog-code-fg"] == LIGHT_CODE_PALETTE["--blog-code-fg"]

    def test_css_variables_with_application(self, blog, application, custom_skin):
        """Test that the merged variables stay available for default regions."""
        result = resolve_effective_skin(blog, application=application, custom_skin=custom_skin)
        assert result.css_variables["--blog-bg"] == "#222222"

    def test_forms_follow_resolver_settings(self, blog):
        """Test that the sanitizer flags come from the resolver."""
        custom_skin = CustomSkin(
            blog_id="blog-1",
            html_header='<form><input name="q"></form>',
            is_active=True,
        )
        strict = resolve_effective_skin(blog, custom_skin=custom_skin)
        assert "<input" not in strict.header

        lenient = SkinResolver.from_settings(Settings(allow_forms=True)).resolve(blog, custom_skin=custom_skin)
        assert "<input" in lenient.header

    def test_resolution_is_deterministic(self, blog, application, custom_skin):
        """Test that the same inputs give the same result."""
        context = TemplateContext.from_blog(blog)
        first = resolve_effective_skin(blog, application=application, custom_skin=custom_skin, context=context)
        second = resolve_effective_skin(blog, application=application, custom_skin=custom_skin, context=context)
        assert first == second
