"""Hard-coded defaults for skins.

Holds the 16 recognized CSS variables with their fallback values, the default
layout configuration, and the starter templates a custom skin is created with
the first time a blog owner opens the editor.
"""

from typing import Dict, Any, List

# Recognized CSS variables, in display order, with their fallback values.
DEFAULT_CSS_VARIABLES: Dict[str, str] = {
    "--blog-bg": "#ffffff",
    "--blog-fg": "#000000",
    "--blog-accent": "#000000",
    "--blog-muted": "rgba(0,0,0,0.6)",
    "--blog-border": "#e5e5e5",
    "--blog-card-bg": "#fafafa",
    "--blog-dark-bg": "#000000",
    "--blog-dark-fg": "#ffffff",
    "--blog-dark-accent": "#ffffff",
    "--blog-dark-muted": "rgba(255,255,255,0.6)",
    "--blog-dark-border": "#262626",
    "--blog-dark-card-bg": "#171717",
    "--blog-font-sans": "GMarketSans, sans-serif",
    "--blog-font-mono": "monospace",
    "--blog-content-width": "680px",
    "--blog-border-radius": "12px",
}

CSS_VARIABLE_KEYS = tuple(DEFAULT_CSS_VARIABLES)

LAYOUT_OPTIONS = ("sidebar-right", "sidebar-left", "no-sidebar")
POST_LIST_STYLES = ("cards", "list")

DEFAULT_LAYOUT_CONFIG: Dict[str, Any] = {
    "layout": "sidebar-right",
    "postListStyle": "cards",
    "showThumbnails": True,
}

# Slots of a custom skin. html_post_item is only ever used as a partial.
TEMPLATE_SLOTS = (
    "html_head",
    "html_header",
    "html_post_list",
    "html_post_item",
    "html_post_detail",
    "html_sidebar",
    "html_footer",
    "custom_css",
)

DEFAULT_TEMPLATES: Dict[str, str] = {
    "html_head": "<!-- Add web fonts, meta tags and the like here -->",
    "html_header": """<header class="blog-header">
  <div class="header-inner">
    <div class="header-left">
      <a href="/" class="logo">Snuggle</a>
      <span class="divider">/</span>
      <a href="/blog/{{blog_id}}" class="blog-name">{{blog_name}}</a>
    </div>
    <nav class="header-nav">
      <a href="/" class="nav-link">Home</a>
      <a href="/feed" class="nav-link">Feed</a>
      <a href="/skins" class="nav-link">Skins</a>
      <a href="/forum" class="nav-link">Forum</a>
    </nav>
  </div>
</header>""",
    "html_post_list": """<div class="post-list">
  <div class="post-list-header">
    <h2 class="section-title">Posts</h2>
    <span class="post-count">{{post_count}}</span>
  </div>
  <div class="posts-container">
    {{#posts}}
    {{> post_item}}
    {{/posts}}
  </div>
  {{#if no_posts}}
  <div class="empty-state">
    <p>No posts yet</p>
  </div>
  {{/if}}
</div>""",
    "html_post_item": """<article class="post-item">
  <a href="/post/{{post_id}}" class="post-link">
    <div class="post-content">
      <h3 class="post-title">{{post_title}}</h3>
      <p class="post-excerpt">{{post_excerpt}}</p>
      <div class="post-meta">
        <span class="post-date">{{post_date}}</span>
        <span class="meta-divider">&middot;</span>
        <span class="post-views">{{view_count}} views</span>
        <span class="meta-divider">&middot;</span>
        <span class="post-likes">{{like_count}} likes</span>
      </div>
    </div>
    {{#if thumbnail_url}}
    <div class="post-thumbnail">
      <img src="{{thumbnail_url}}" alt="{{post_title}}">
    </div>
    {{/if}}
  </a>
</article>""",
    "html_post_detail": """<article class="post-detail">
  <header class="post-header">
    {{#if category_name}}
    <span class="post-category">{{category_name}}</span>
    {{/if}}
    <h1 class="post-title">{{post_title}}</h1>
    <div class="post-meta">
      <span class="post-date">{{post_date}}</span>
      <span class="meta-divider">&middot;</span>
      <span class="post-views">{{view_count}} views</span>
      <span class="meta-divider">&middot;</span>
      <span class="post-likes">{{like_count}} likes</span>
    </div>
  </header>
  {{#if thumbnail_url}}
  <div class="post-thumbnail">
    <img src="{{thumbnail_url}}" alt="{{post_title}}">
  </div>
  {{/if}}
  <div class="post-body">
    {{post_content}}
  </div>
</article>""",
    "html_sidebar": """<aside class="blog-sidebar">
  <div class="profile-card">
    <div class="profile-image-wrap">
      {{#if profile_image}}
      <img src="{{profile_image}}" alt="{{blog_name}}" class="profile-image">
      {{/if}}
    </div>
    <h1 class="profile-name">{{blog_name}}</h1>
    <button class="subscribe-btn">Subscribe</button>
    {{#if blog_description}}
    <p class="profile-desc">{{blog_description}}</p>
    {{/if}}
    <div class="profile-stats">
      <div class="stat-item">
        <span class="stat-value">{{post_count}}</span>
        <span class="stat-label">Posts</span>
      </div>
      <div class="stat-item">
        <span class="stat-value">{{subscriber_count}}</span>
        <span class="stat-label">Subscribers</span>
      </div>
      <div class="stat-item">
        <span class="stat-value">{{visitor_count}}</span>
        <span class="stat-label">Visitors</span>
      </div>
    </div>
  </div>
  <div class="info-card">
    <h3 class="info-title">About</h3>
    <div class="info-row">
      <span class="info-label">Since</span>
      <span class="info-value">{{created_date}}</span>
    </div>
  </div>
</aside>""",
    "html_footer": """<footer class="blog-footer">
  <p>&copy; {{current_year}} {{blog_name}}. Powered by Snuggle.</p>
</footer>""",
    "custom_css": """/* Page */
.custom-skin-wrapper {
  background-color: var(--blog-bg, #ffffff);
  color: var(--blog-fg, #000000);
  font-family: var(--blog-font-sans);
}

/* Header */
.blog-header {
  border-bottom: 1px solid var(--blog-border, #e5e5e5);
  background-color: var(--blog-bg, #ffffff);
}

.blog-header .header-inner {
  max-width: 1280px;
  margin: 0 auto;
  padding: 0 1.5rem;
  height: 64px;
  display: flex;
  align-items: center;
  justify-content: space-between;
}

.blog-header .nav-link {
  color: var(--blog-muted, rgba(0,0,0,0.6));
}

/* Posts */
.post-item {
  padding: 1.5rem 0;
  border-bottom: 1px solid var(--blog-border, #e5e5e5);
}

.post-item .post-title {
  color: var(--blog-fg, #000000);
}

.post-item .post-meta,
.post-detail .post-meta {
  color: var(--blog-muted, rgba(0,0,0,0.6));
  font-size: 0.875rem;
}

.post-thumbnail img {
  border-radius: var(--blog-border-radius, 12px);
}

.post-detail {
  max-width: var(--blog-content-width, 680px);
}

/* Sidebar */
.profile-card,
.info-card {
  background-color: var(--blog-card-bg, #fafafa);
  border: 1px solid var(--blog-border, #e5e5e5);
  border-radius: var(--blog-border-radius, 12px);
  padding: 1.5rem;
}

.subscribe-btn {
  background-color: var(--blog-accent, #000000);
  color: var(--blog-bg, #ffffff);
  border-radius: 9999px;
}

/* Footer */
.blog-footer {
  border-top: 1px solid var(--blog-border, #e5e5e5);
  color: var(--blog-muted, rgba(0,0,0,0.6));
  text-align: center;
  padding: 2rem 0;
}
""",
}

# Variables available to template authors, grouped for the editor's help panel.
TEMPLATE_VARIABLES: Dict[str, List[Dict[str, str]]] = {
    "blog": [
        {"name": "blog_id", "description": "Blog ID"},
        {"name": "blog_name", "description": "Blog name"},
        {"name": "blog_description", "description": "Blog description"},
        {"name": "profile_image", "description": "Profile image URL"},
        {"name": "post_count", "description": "Total number of posts"},
        {"name": "subscriber_count", "description": "Number of subscribers"},
        {"name": "visitor_count", "description": "Number of visitors"},
        {"name": "current_year", "description": "Current year"},
        {"name": "created_date", "description": "Blog creation date"},
    ],
    "post": [
        {"name": "post_id", "description": "Post ID"},
        {"name": "post_title", "description": "Post title"},
        {"name": "post_content", "description": "Post body (HTML, not escaped)"},
        {"name": "post_excerpt", "description": "Post excerpt"},
        {"name": "post_date", "description": "Publication date"},
        {"name": "thumbnail_url", "description": "Thumbnail image URL"},
        {"name": "category_name", "description": "Category name"},
        {"name": "view_count", "description": "View count"},
        {"name": "like_count", "description": "Like count"},
    ],
    "loop": [
        {"name": "{{#each posts}}...{{/each}}", "description": "Repeat for each post"},
        {"name": "{{#posts}}...{{/posts}}", "description": "Repeat for each post (section form)"},
        {"name": "{{#each categories}}...{{/each}}", "description": "Repeat for each category"},
        {"name": "{{#if condition}}...{{/if}}", "description": "Conditional block"},
        {"name": "{{> post_item}}", "description": "Insert the post item template"},
    ],
}


def default_css_variables() -> Dict[str, str]:
    """Return a fresh copy of the fallback CSS variables."""
    return dict(DEFAULT_CSS_VARIABLES)


def default_layout_config() -> Dict[str, Any]:
    """Return a fresh copy of the default layout configuration."""
    return dict(DEFAULT_LAYOUT_CONFIG)


def default_templates() -> Dict[str, str]:
    """Return a fresh copy of the starter custom skin templates."""
    return dict(DEFAULT_TEMPLATES)
